"""Cart engine: pricing, identity-based merge and quantity lifecycle."""
import asyncio
import weakref
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from core import errors
from core.logging import cart_log_context, get_logger, sanitize_id_for_logging
from core.services.models import Size, Topping
from core.services.money import to_float
from .catalog import Catalog
from .events import CartEvents
from .models import (
    Cart,
    CartErrorKind,
    CartResult,
    LineItem,
    OptionSnapshot,
    configuration_key,
    unique_ids,
)
from .storage import CartStore

logger = get_logger(__name__)


@dataclass
class EditOptions:
    """Current selection of a line item plus the choices the catalog offers for it."""
    item: LineItem
    sizes: List[Size]
    toppings: List[Topping]


class CartManager:
    """
    Manages per-user shopping carts.

    Every mutating call is one load -> modify -> save cycle, serialised per
    user. Domain failures come back as CartResult values; only storage
    failures raise (StorageUnavailable).
    """

    def __init__(
        self,
        store: Optional[CartStore] = None,
        catalog: Optional[Catalog] = None,
        events: Optional[CartEvents] = None,
    ):
        self._store = store
        self._catalog = catalog
        self.events = events or CartEvents()
        # Held only while a cycle is running or waiting, then collected
        self._locks = weakref.WeakValueDictionary()

    @property
    def store(self) -> CartStore:
        if self._store is None:
            self._store = CartStore()
        return self._store

    @property
    def catalog(self) -> Catalog:
        """Catalog lookups (Supabase by default, lazy)."""
        if self._catalog is None:
            from core.services.database import get_database
            self._catalog = get_database().catalog
        return self._catalog

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(str(user_id))
        if lock is None:
            lock = asyncio.Lock()
            self._locks[str(user_id)] = lock
        return lock

    async def _notify(self, user_id: str) -> None:
        await self.events.emit(str(user_id))

    async def _resolve_options(
        self,
        size_id: Optional[str],
        topping_ids: Optional[Sequence[str]],
    ) -> OptionSnapshot:
        """Price a size/topping selection against the catalog."""
        size = await self.catalog.get_size(size_id) if size_id else None
        if size_id and size is None:
            logger.warning(f"Unknown size {sanitize_id_for_logging(size_id)}, pricing without size")

        requested = unique_ids(topping_ids or [])
        found = {t.id: t for t in await self.catalog.get_toppings(requested)} if requested else {}
        # Keep the caller's order; unknown ids are dropped
        toppings = [found[tid] for tid in requested if tid in found]

        return OptionSnapshot.from_catalog(size, toppings)

    # ==================== READS ====================

    async def load_cart(self, user_id: Optional[str]) -> Cart:
        """Stored cart for user_id; an empty cart for anonymous callers."""
        if not user_id:
            return Cart(user_id="", items=[])
        return await self.store.load(user_id)

    async def get_cart(self, user_id: Optional[str]) -> List[LineItem]:
        """Ordered line items of the user's cart."""
        cart = await self.load_cart(user_id)
        return cart.items

    async def compute_total(self, user_id: Optional[str]) -> Decimal:
        """Sum of line totals, 0 for an empty cart."""
        cart = await self.load_cart(user_id)
        return cart.total

    async def compute_item_count(self, user_id: Optional[str]) -> int:
        """Sum of quantities, 0 for an empty cart."""
        cart = await self.load_cart(user_id)
        return cart.item_count

    async def get_cart_summary(self, user_id: Optional[str]) -> dict:
        """Get cart summary for API responses."""
        cart = await self.load_cart(user_id)

        if cart.is_empty:
            return {
                "is_empty": True,
                "item_count": 0,
                "items": [],
                "total": 0.0,
            }

        return {
            "is_empty": False,
            "item_count": cart.item_count,
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "product_image": item.product_image,
                    "size_id": item.options.size_id,
                    "size_name": item.options.size_name,
                    "topping_ids": list(item.options.topping_ids),
                    "topping_names": list(item.options.topping_names),
                    "quantity": item.quantity,
                    "unit_price": to_float(item.unit_price),
                    "line_total": to_float(item.line_total),
                }
                for item in cart.items
            ],
            "total": to_float(cart.total),
        }

    async def get_edit_options(self, user_id: Optional[str], item_id: str) -> Optional[EditOptions]:
        """Sizes and toppings that an existing item may be switched to."""
        cart = await self.load_cart(user_id)
        item = cart.find(item_id)
        if item is None:
            return None

        product = await self.catalog.get_product(item.product_id)
        category_id = product.category_id if product else None

        sizes = await self.catalog.list_sizes()
        toppings = await self.catalog.list_toppings(category_id)
        return EditOptions(item=item, sizes=sizes, toppings=toppings)

    # ==================== MUTATIONS ====================

    async def add_item(
        self,
        user_id: Optional[str],
        product_id: str,
        size_id: Optional[str] = None,
        topping_ids: Optional[Sequence[str]] = None,
        quantity: int = 1,
    ) -> CartResult:
        """
        Add a configured product to the cart.

        A configuration-identical item (same product, same size, same set of
        toppings) absorbs the quantity instead of creating a second line;
        its price snapshot is left as it was.
        """
        if not user_id:
            return CartResult.failure(CartErrorKind.UNAUTHENTICATED, errors.ERROR_UNAUTHENTICATED)

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError("quantity must be a positive integer")

        product = await self.catalog.get_product(product_id) if product_id else None
        if product is None:
            logger.info(f"Add to cart rejected, unknown product {sanitize_id_for_logging(product_id)}")
            return CartResult.failure(CartErrorKind.PRODUCT_NOT_FOUND, errors.ERROR_PRODUCT_NOT_FOUND)

        options = await self._resolve_options(size_id, topping_ids)
        key = configuration_key(product.id, options.size_id, options.topping_ids)

        async with self._lock_for(user_id):
            cart = await self.store.load(user_id)

            item = cart.find_configuration(key)
            if item is not None:
                item.quantity += quantity
                logger.info(f"Merged {quantity} into existing item [{cart_log_context(user_id, item.id)}]")
            else:
                item = LineItem(
                    product_id=product.id,
                    product_name=product.name,
                    product_image=product.image,
                    base_price=product.price,
                    quantity=quantity,
                    options=options,
                )
                cart.items.append(item)
                logger.info(f"Added item [{cart_log_context(user_id, item.id)}]")

            await self.store.save(user_id, cart)

        await self._notify(user_id)
        return CartResult.success(errors.MESSAGE_ITEM_ADDED, item=item, cart=cart)

    async def update_quantity(self, user_id: Optional[str], item_id: str, delta: int) -> CartResult:
        """Change an item's quantity by delta; at zero or below the item is removed."""
        if not user_id:
            return CartResult.failure(CartErrorKind.UNAUTHENTICATED, errors.ERROR_UNAUTHENTICATED)

        if isinstance(delta, bool) or not isinstance(delta, int):
            raise ValueError("delta must be an integer")

        async with self._lock_for(user_id):
            cart = await self.store.load(user_id)
            item = cart.find(item_id)
            if item is None:
                return CartResult.failure(CartErrorKind.ITEM_NOT_FOUND, errors.ERROR_ITEM_NOT_FOUND)

            new_quantity = item.quantity + delta
            if new_quantity <= 0:
                cart.remove(item_id)
                message = errors.MESSAGE_ITEM_REMOVED
                logger.info(f"Removed item at zero quantity [{cart_log_context(user_id, item_id)}]")
            else:
                item.quantity = new_quantity
                message = errors.MESSAGE_QUANTITY_UPDATED

            await self.store.save(user_id, cart)

        await self._notify(user_id)
        return CartResult.success(message, item=item, cart=cart)

    async def remove_item(self, user_id: Optional[str], item_id: str) -> CartResult:
        """Remove an item. Removing an absent item still succeeds."""
        if not user_id:
            return CartResult.failure(CartErrorKind.UNAUTHENTICATED, errors.ERROR_UNAUTHENTICATED)

        async with self._lock_for(user_id):
            cart = await self.store.load(user_id)
            if cart.remove(item_id):
                logger.info(f"Removed item [{cart_log_context(user_id, item_id)}]")
            await self.store.save(user_id, cart)

        await self._notify(user_id)
        return CartResult.success(errors.MESSAGE_ITEM_REMOVED, cart=cart)

    async def edit_configuration(
        self,
        user_id: Optional[str],
        item_id: str,
        size_id: Optional[str] = None,
        topping_ids: Optional[Sequence[str]] = None,
    ) -> CartResult:
        """
        Re-select size and toppings of an existing item.

        Option prices are looked up again; the base price captured when the
        item was first added is kept, as is the quantity. The item is not
        merged into an identical one if the edit produces a duplicate.
        """
        if not user_id:
            return CartResult.failure(CartErrorKind.UNAUTHENTICATED, errors.ERROR_UNAUTHENTICATED)

        async with self._lock_for(user_id):
            cart = await self.store.load(user_id)
            item = cart.find(item_id)
            if item is None:
                return CartResult.failure(CartErrorKind.ITEM_NOT_FOUND, errors.ERROR_ITEM_NOT_FOUND)

            options = await self._resolve_options(size_id, topping_ids)
            updated = item.reconfigure(options)
            cart.replace_item(updated)

            await self.store.save(user_id, cart)

        logger.info(f"Edited item [{cart_log_context(user_id, item_id)}]")
        await self._notify(user_id)
        return CartResult.success(errors.MESSAGE_ITEM_EDITED, item=updated, cart=cart)

    async def clear(self, user_id: Optional[str]) -> CartResult:
        """Empty the cart (after checkout)."""
        if not user_id:
            return CartResult.failure(CartErrorKind.UNAUTHENTICATED, errors.ERROR_UNAUTHENTICATED)

        cart = Cart(user_id=str(user_id), items=[])
        async with self._lock_for(user_id):
            await self.store.save(user_id, cart)

        logger.info(f"Cleared cart [{cart_log_context(user_id)}]")
        await self._notify(user_id)
        return CartResult.success(errors.MESSAGE_CART_CLEARED, cart=cart)


# Singleton instance
_cart_manager: Optional[CartManager] = None


def get_cart_manager() -> CartManager:
    """Get CartManager singleton."""
    global _cart_manager
    if _cart_manager is None:
        _cart_manager = CartManager()
    return _cart_manager
