"""Cart package: models, storage, events and manager facade."""
from .models import (
    Cart,
    CartError,
    CartErrorKind,
    CartResult,
    LineItem,
    OptionSnapshot,
    StorageUnavailable,
    configuration_key,
)
from .events import CartEvents
from .storage import CartStore
from .service import CartManager, EditOptions, get_cart_manager

__all__ = [
    "Cart",
    "CartError",
    "CartErrorKind",
    "CartEvents",
    "CartManager",
    "CartResult",
    "CartStore",
    "EditOptions",
    "LineItem",
    "OptionSnapshot",
    "StorageUnavailable",
    "configuration_key",
    "get_cart_manager",
]
