"""
kassa/schemas/product.py

Pydantic models for the product catalog.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from kassa.utils import constants
from kassa.utils.validation_utils import round_money


class ProductBase(BaseModel):
    name: str = Field(..., description="Product name, at least 2 characters")
    price: float = Field(..., description="Unit price in rupiah")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError(constants.MSG_PRODUCT_NAME_TOO_SHORT)
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if v < 0:
            raise ValueError(constants.MSG_PRODUCT_PRICE_NEGATIVE)
        return round_money(v)


class ProductCreate(ProductBase):
    """Request schema for adding a product."""


class ProductUpdate(ProductBase):
    """Request schema for editing a product. Both fields are replaced."""


class Product(BaseModel):
    """Product as returned by the API."""

    id: str
    name: str
    price: float
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
