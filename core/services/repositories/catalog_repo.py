"""Catalog Repository - read-only product, size and topping lookups."""
from typing import List, Optional, Sequence

from .base import BaseRepository
from core.services.models import Product, Size, Topping


class CatalogRepository(BaseRepository):
    """Catalog database operations."""

    async def get_product(self, product_id: str) -> Optional[Product]:
        """Get product by ID."""
        result = await self.client.table("products").select("*").eq("id", product_id).execute()
        return Product(**result.data[0]) if result.data else None

    async def get_size(self, size_id: str) -> Optional[Size]:
        """Get size variant by ID."""
        result = await self.client.table("sizes").select("*").eq("id", size_id).execute()
        return Size(**result.data[0]) if result.data else None

    async def get_toppings(self, topping_ids: Sequence[str]) -> List[Topping]:
        """Get toppings by IDs. Unknown IDs are simply missing from the result."""
        if not topping_ids:
            return []
        result = await self.client.table("toppings").select("*").in_("id", list(topping_ids)).execute()
        return [Topping(**row) for row in result.data or []]

    async def list_sizes(self) -> List[Size]:
        """List every size variant, cheapest first."""
        result = await self.client.table("sizes").select("*").order("price_add").execute()
        return [Size(**row) for row in result.data or []]

    async def list_toppings(self, category_id: Optional[str] = None) -> List[Topping]:
        """List toppings that can be added to products of the given category."""
        result = await self.client.table("toppings").select("*").order("name").execute()
        toppings = [Topping(**row) for row in result.data or []]
        return [t for t in toppings if t.applies_to(category_id)]
