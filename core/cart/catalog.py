"""Catalog interface the cart engine prices against."""
from typing import List, Optional, Protocol, Sequence

from core.services.models import Product, Size, Topping


class Catalog(Protocol):
    """Read-only product, size and topping lookups.

    Implemented by CatalogRepository (Supabase).
    """

    async def get_product(self, product_id: str) -> Optional[Product]:
        ...

    async def get_size(self, size_id: str) -> Optional[Size]:
        ...

    async def get_toppings(self, topping_ids: Sequence[str]) -> List[Topping]:
        ...

    async def list_sizes(self) -> List[Size]:
        ...

    async def list_toppings(self, category_id: Optional[str] = None) -> List[Topping]:
        ...
