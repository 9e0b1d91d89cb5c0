"""Product Domain Entity

Stock snapshot of a product as read from the upstream inventory backend.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class StockLevel(str, Enum):
    """Shelf stock classification"""
    REORDER = "reorder"  # At or below the reorder level
    LOW = "low"          # At or below the low-stock level
    OK = "ok"


class Product(BaseModel):
    """
    Product - Point-in-time stock snapshot

    Domain Rules:
    - stock_quantity is the persisted stock; carts never decrement it
    - Prices are integer cents
    - selling_price should exceed buying_price (enforced at data entry)
    """

    product_id: int = Field(..., description="Product identifier")
    name: str = Field(default="", description="Product display name")
    stock_quantity: int = Field(..., ge=0, description="Persisted stock on hand")
    selling_price: int = Field(..., ge=0, description="Selling price per unit (cents)")
    buying_price: int = Field(default=0, ge=0, description="Cost per unit (cents)")
    category: Optional[str] = Field(default=None, description="Product category")

    class Config:
        frozen = True
