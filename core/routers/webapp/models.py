"""
WebApp API Pydantic Models

Request bodies for the cart endpoints.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    product_id: str
    size_id: Optional[str] = None
    topping_ids: List[str] = []
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(BaseModel):
    item_id: str
    delta: int  # negative to decrease; reaching 0 removes the item


class EditCartItemRequest(BaseModel):
    size_id: Optional[str] = None
    topping_ids: List[str] = []
