"""Catalog Models - Pydantic models for catalog rows."""
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, field_validator

from core.services.money import to_decimal as _to_decimal


class Product(BaseModel):
    """Product model."""
    id: str
    name: str
    price: Decimal
    image: Optional[str] = None  # URL, data URI or emoji
    category_id: Optional[str] = None
    status: str = "active"

    class Config:
        extra = "ignore"  # Ignore unknown fields from DB

    @field_validator("price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)


class Size(BaseModel):
    """Size variant; price_add is added on top of the product price."""
    id: str
    name: str
    price_add: Decimal = Decimal("0")

    class Config:
        extra = "ignore"

    @field_validator("price_add", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)


class Topping(BaseModel):
    """Add-on option. Empty category_ids means it fits every category."""
    id: str
    name: str
    price: Decimal = Decimal("0")
    category_ids: List[str] = []

    class Config:
        extra = "ignore"

    @field_validator("price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("category_ids", mode="before")
    @classmethod
    def default_categories(cls, v):
        return v or []

    def applies_to(self, category_id: Optional[str]) -> bool:
        """Check whether the topping can be added to a product of this category."""
        if not self.category_ids:
            return True
        return category_id in self.category_ids
