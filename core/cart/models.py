"""Cart models with Decimal-based snapshot pricing."""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from core.services.money import to_decimal, add, multiply, parse_money, total


class CartErrorKind(str, Enum):
    """Failure kinds reported in a CartResult."""
    UNAUTHENTICATED = "unauthenticated"
    PRODUCT_NOT_FOUND = "product_not_found"
    ITEM_NOT_FOUND = "item_not_found"


class CartError(Exception):
    """Base class for cart exceptions."""


class StorageUnavailable(CartError):
    """The cart store could not be read or written."""


def unique_ids(ids: Iterable[str]) -> List[str]:
    """Drop duplicate ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))


ConfigurationKey = Tuple[str, Optional[str], FrozenSet[str]]


def configuration_key(
    product_id: str,
    size_id: Optional[str],
    topping_ids: Iterable[str],
) -> ConfigurationKey:
    """
    Identity of a purchasable configuration.

    Topping order never matters, so they are compared as a set.
    """
    return (product_id, size_id or None, frozenset(topping_ids))


@dataclass(frozen=True)
class OptionSnapshot:
    """Size and topping selection captured from the catalog at add/edit time."""
    size_id: Optional[str] = None
    size_name: Optional[str] = None
    size_price_add: Decimal = Decimal("0")
    topping_ids: Tuple[str, ...] = ()
    topping_names: Tuple[str, ...] = ()
    topping_price_total: Decimal = Decimal("0")

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "size_price_add", to_decimal(self.size_price_add))
        object.__setattr__(self, "topping_price_total", to_decimal(self.topping_price_total))
        object.__setattr__(self, "topping_ids", tuple(self.topping_ids))
        object.__setattr__(self, "topping_names", tuple(self.topping_names))

    @property
    def price_add(self) -> Decimal:
        """Amount the options add to the base price of one unit."""
        return add(self.size_price_add, self.topping_price_total)

    @classmethod
    def from_catalog(cls, size, toppings: Sequence) -> "OptionSnapshot":
        """Build a snapshot from catalog Size (or None) and resolved Topping rows."""
        return cls(
            size_id=size.id if size else None,
            size_name=size.name if size else None,
            size_price_add=size.price_add if size else Decimal("0"),
            topping_ids=tuple(t.id for t in toppings),
            topping_names=tuple(t.name for t in toppings),
            topping_price_total=total(t.price for t in toppings),
        )


def new_item_id() -> str:
    return f"ci{uuid.uuid4().hex}"


@dataclass
class LineItem:
    """One configured, quantified entry in a cart."""
    product_id: str
    product_name: str
    base_price: Decimal
    quantity: int
    options: OptionSnapshot = field(default_factory=OptionSnapshot)
    product_image: Optional[str] = None
    id: str = ""
    added_at: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = new_item_id()
        if not self.added_at:
            self.added_at = datetime.now(timezone.utc).isoformat()
        self.base_price = to_decimal(self.base_price)

    @property
    def size_id(self) -> Optional[str]:
        return self.options.size_id

    @property
    def topping_ids(self) -> Tuple[str, ...]:
        return self.options.topping_ids

    @property
    def unit_price(self) -> Decimal:
        """Base price plus size and topping prices, all from the snapshot."""
        return add(self.base_price, self.options.price_add)

    @property
    def line_total(self) -> Decimal:
        return multiply(self.unit_price, self.quantity)

    @property
    def configuration(self) -> ConfigurationKey:
        return configuration_key(self.product_id, self.size_id, self.topping_ids)

    def reconfigure(self, options: OptionSnapshot) -> "LineItem":
        """Return a copy with new options; id, base price and quantity are kept."""
        return replace(self, options=options)

    def to_dict(self) -> dict:
        """Convert to dictionary for Redis storage."""
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "product_image": self.product_image,
            "size_id": self.options.size_id,
            "size_name": self.options.size_name,
            "size_price_add": str(self.options.size_price_add),
            "topping_ids": list(self.options.topping_ids),
            "topping_names": list(self.options.topping_names),
            "topping_price_total": str(self.options.topping_price_total),
            "base_price": str(self.base_price),
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "line_total": str(self.line_total),
            "added_at": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """
        Create from a stored dictionary.

        Derived prices are recomputed, not trusted. Raises KeyError or
        ValueError for a record that cannot be a live item.
        """
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"invalid quantity: {quantity!r}")

        topping_ids = data.get("topping_ids") or []
        topping_names = data.get("topping_names") or []
        if not isinstance(topping_ids, list) or not isinstance(topping_names, list):
            raise ValueError("topping_ids and topping_names must be lists")

        options = OptionSnapshot(
            size_id=data.get("size_id"),
            size_name=data.get("size_name"),
            size_price_add=parse_money(data.get("size_price_add", 0)),
            topping_ids=tuple(topping_ids),
            topping_names=tuple(topping_names),
            topping_price_total=parse_money(data.get("topping_price_total", 0)),
        )
        return cls(
            id=data["id"],
            product_id=data["product_id"],
            product_name=data["product_name"],
            product_image=data.get("product_image"),
            base_price=parse_money(data["base_price"]),
            quantity=quantity,
            options=options,
            added_at=data.get("added_at", ""),
        )


@dataclass
class Cart:
    """Ordered line items belonging to one user."""
    user_id: str
    items: List[LineItem] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return total(item.line_total for item in self.items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, item_id: str) -> Optional[LineItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def find_configuration(self, key: ConfigurationKey) -> Optional[LineItem]:
        """Find the item with the given configuration identity, if any."""
        return next((item for item in self.items if item.configuration == key), None)

    def replace_item(self, item: LineItem) -> None:
        """Swap in an updated copy of an item, keeping its position."""
        self.items = [item if existing.id == item.id else existing for existing in self.items]

    def remove(self, item_id: str) -> bool:
        """Remove an item by id. Returns False if it was not there."""
        before = len(self.items)
        self.items = [item for item in self.items if item.id != item_id]
        return len(self.items) != before

    def to_list(self) -> list:
        """Convert items to the stored JSON list."""
        return [item.to_dict() for item in self.items]


@dataclass
class CartResult:
    """Outcome of a cart operation; failures are values, not exceptions."""
    ok: bool
    message: str
    error: Optional[CartErrorKind] = None
    item: Optional[LineItem] = None
    cart: Optional[Cart] = None

    @classmethod
    def success(cls, message: str, item: Optional[LineItem] = None, cart: Optional[Cart] = None) -> "CartResult":
        return cls(ok=True, message=message, item=item, cart=cart)

    @classmethod
    def failure(cls, error: CartErrorKind, message: str) -> "CartResult":
        return cls(ok=False, message=message, error=error)
