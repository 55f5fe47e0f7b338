"""
kassa/services/transaction_service.py

Purpose: Sales transactions

- Record sales of catalog products with split payments
- Quick entries typed on the dashboard
- Edit, delete and clear history
- Date filtering (today / explicit range) and summaries
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING

from kassa.core.exceptions import ResourceNotFoundError, ValidationError
from kassa.core.logging import get_logger, LogContext
from kassa.schemas.product import Product
from kassa.schemas.transaction import (
    Payment,
    QuickTransactionCreate,
    SalesSummary,
    Transaction,
    TransactionCreate,
    TransactionFilter,
    TransactionUpdate,
)
from kassa.services.product_service import ProductService
from kassa.services.report_service import summarize_sales
from kassa.utils import constants
from kassa.utils.time_utils import to_utc_naive, today_range
from kassa.utils.validation_utils import payments_match_total, remaining_amount, round_money

logger = get_logger(__name__)


def to_transaction(doc: Dict[str, Any]) -> Transaction:
    return Transaction(
        id=doc["_id"],
        user_id=doc["user_id"],
        product_id=doc.get("product_id"),
        product_name=doc["product_name"],
        quantity=doc["quantity"],
        price=doc["price"],
        total=doc["total"],
        payments=doc.get("payments") or [],
        timestamp=doc["timestamp"],
    )


def price_sale(product: Product, quantity: int, payments: Sequence[Payment]) -> Dict[str, Any]:
    """
    Snapshots product name and price into sale fields.

    Raises:
        ValidationError: If there is no payment, or the payments do not add
            up to price * quantity
    """
    if not payments:
        raise ValidationError(constants.MSG_PAYMENT_REQUIRED)

    total = round_money(product.price * quantity)
    if not payments_match_total(payments, total):
        raise ValidationError(
            constants.MSG_PAYMENT_MISMATCH,
            details={"total_due": total, "remaining": remaining_amount(total, payments)},
        )

    return {
        "product_id": product.id,
        "product_name": product.name,
        "quantity": quantity,
        "price": product.price,
        "total": total,
        "payments": [payment.model_dump() for payment in payments],
    }


def price_quick_sale(data: QuickTransactionCreate) -> Dict[str, Any]:
    """
    Quick entries are paid in full with a single method.
    """
    total = round_money(data.price * data.quantity)
    return {
        "product_id": None,
        "product_name": data.product_name,
        "quantity": data.quantity,
        "price": data.price,
        "total": total,
        "payments": [{"method": data.payment_method, "amount": total}],
    }


def build_query(user_id: str, flt: Optional[TransactionFilter] = None, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    MongoDB filter for a user's transactions within the requested dates.
    """
    query: Dict[str, Any] = {"user_id": user_id}
    if flt is None:
        return query

    if flt.today:
        start, end = today_range(now)
    else:
        start = to_utc_naive(flt.start) if flt.start else None
        end = to_utc_naive(flt.end) if flt.end else None

    timestamp: Dict[str, Any] = {}
    if start:
        timestamp["$gte"] = start
    if end:
        timestamp["$lt"] = end
    if timestamp:
        query["timestamp"] = timestamp
    return query


class TransactionService:
    """Service for recording and reviewing sales."""

    def __init__(self, collection: AsyncIOMotorCollection, products: ProductService):
        self.collection = collection
        self.products = products

    async def list_transactions(self, user_id: str, flt: Optional[TransactionFilter] = None) -> List[Transaction]:
        """Newest first."""
        cursor = self.collection.find(build_query(user_id, flt)).sort("timestamp", DESCENDING)
        return [to_transaction(doc) async for doc in cursor]

    async def get_transaction(self, user_id: str, transaction_id: str) -> Transaction:
        doc = await self.collection.find_one({"_id": transaction_id, "user_id": user_id})
        if not doc:
            raise ResourceNotFoundError(constants.MSG_TRANSACTION_NOT_FOUND)
        return to_transaction(doc)

    async def summary(self, user_id: str, flt: Optional[TransactionFilter] = None) -> SalesSummary:
        return summarize_sales(await self.list_transactions(user_id, flt))

    async def create_transaction(self, user_id: str, data: TransactionCreate) -> Transaction:
        product = await self.products.get_product(user_id, data.product_id)
        doc = {
            "_id": str(uuid.uuid4()),
            "user_id": user_id,
            **price_sale(product, data.quantity, data.payments),
            "timestamp": datetime.utcnow(),
        }
        return await self._insert(doc)

    async def create_quick_transaction(self, user_id: str, data: QuickTransactionCreate) -> Transaction:
        doc = {
            "_id": str(uuid.uuid4()),
            "user_id": user_id,
            **price_quick_sale(data),
            "timestamp": datetime.utcnow(),
        }
        return await self._insert(doc)

    async def _insert(self, doc: Dict[str, Any]) -> Transaction:
        with LogContext(user_id=doc["user_id"], transaction_id=doc["_id"]):
            await self.collection.insert_one(doc)
            logger.info(f"Transaction recorded: {doc['quantity']}x {doc['product_name']} = {doc['total']}")
        return to_transaction(doc)

    async def update_transaction(self, user_id: str, transaction_id: str, data: TransactionUpdate) -> Transaction:
        """
        Replaces product, quantity and payments. The original timestamp is kept.
        """
        with LogContext(user_id=user_id, transaction_id=transaction_id):
            await self.get_transaction(user_id, transaction_id)
            product = await self.products.get_product(user_id, data.product_id)

            doc = await self.collection.find_one_and_update(
                {"_id": transaction_id, "user_id": user_id},
                {"$set": price_sale(product, data.quantity, data.payments)},
                return_document=True,
            )
            if not doc:
                raise ResourceNotFoundError(constants.MSG_TRANSACTION_NOT_FOUND)

            logger.info("Transaction updated")
            return to_transaction(doc)

    async def delete_transaction(self, user_id: str, transaction_id: str) -> None:
        with LogContext(user_id=user_id, transaction_id=transaction_id):
            result = await self.collection.delete_one({"_id": transaction_id, "user_id": user_id})
            if result.deleted_count == 0:
                raise ResourceNotFoundError(constants.MSG_TRANSACTION_NOT_FOUND)
            logger.info("Transaction deleted")

    async def clear_transactions(self, user_id: str) -> int:
        """Deletes the user's whole history. Returns the number removed."""
        with LogContext(user_id=user_id):
            result = await self.collection.delete_many({"user_id": user_id})
            logger.info(f"Transaction history cleared ({result.deleted_count} removed)")
            return result.deleted_count
