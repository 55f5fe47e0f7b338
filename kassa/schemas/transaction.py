"""
kassa/schemas/transaction.py

Pydantic models for sales transactions and their payments.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from kassa.utils import constants
from kassa.utils.time_utils import local_to_utc_naive
from kassa.utils.validation_utils import round_money


PaymentMethod = Literal["Tunai", "QR", "Transfer"]


class Payment(BaseModel):
    """One part of a (possibly split) payment."""

    method: PaymentMethod = Field(..., description="Tunai, QR or Transfer")
    amount: float = Field(..., description="Amount paid with this method")

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: float) -> float:
        if v < 0:
            raise ValueError(constants.MSG_PAYMENT_AMOUNT_NEGATIVE)
        return round_money(v)


def _check_quantity(v: int) -> int:
    if v < 1:
        raise ValueError(constants.MSG_QUANTITY_MIN)
    return v


class TransactionCreate(BaseModel):
    """
    Sale of a catalog product.

    Name and price are copied from the product when the sale is recorded;
    the payments must add up to price * quantity.
    """

    product_id: str = Field(..., description="Catalog product being sold")
    quantity: int = Field(default=1, description="Units sold, at least 1")
    payments: List[Payment] = Field(..., description="One or more payments")

    @field_validator("product_id")
    @classmethod
    def validate_product_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError(constants.MSG_PRODUCT_REQUIRED)
        return v

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        return _check_quantity(v)

    @field_validator("payments")
    @classmethod
    def validate_payments(cls, v: List[Payment]) -> List[Payment]:
        if not v:
            raise ValueError(constants.MSG_PAYMENT_REQUIRED)
        return v


class TransactionUpdate(TransactionCreate):
    """Edit form: product, quantity and payments are all replaced."""


class QuickTransactionCreate(BaseModel):
    """
    Dashboard quick-entry form: a free-typed product paid with one method.
    """

    product_name: str = Field(..., description="Product name, at least 2 characters")
    quantity: int = Field(default=1, description="Units sold, at least 1")
    price: float = Field(..., description="Unit price")
    payment_method: PaymentMethod = Field(default="Tunai", description="How the full amount was paid")

    @field_validator("product_name")
    @classmethod
    def validate_product_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError(constants.MSG_PRODUCT_NAME_TOO_SHORT)
        return v

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        return _check_quantity(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if v < 0:
            raise ValueError(constants.MSG_PRICE_NEGATIVE)
        return round_money(v)


class Transaction(BaseModel):
    """Transaction as returned by the API."""

    id: str
    user_id: str
    product_id: Optional[str] = None
    product_name: str
    quantity: int
    price: float
    total: float
    payments: List[Payment] = []
    timestamp: datetime


class TransactionFilter(BaseModel):
    """
    Date filter shared by transaction listing, summaries and reports.

    `today` wins over `start`/`end` and means the current calendar day
    in the report timezone. Bounds without an offset are read in the
    report timezone too; both are kept as naive UTC.
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    today: bool = False

    @field_validator("start", "end")
    @classmethod
    def normalize_bound(cls, v: Optional[datetime]) -> Optional[datetime]:
        return local_to_utc_naive(v) if v else v

    @model_validator(mode="after")
    def check_range(self) -> "TransactionFilter":
        if self.start and self.end and self.end <= self.start:
            raise ValueError(constants.MSG_INVALID_DATE_RANGE)
        return self


class SalesSummary(BaseModel):
    """Totals shown on the dashboard cards."""

    total_sales: float = 0
    tunai: float = 0
    qr: float = 0
    transfer: float = 0
    transaction_count: int = 0
