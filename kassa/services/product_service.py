"""
kassa/services/product_service.py

Purpose: Product catalog per user

- List, create, update and delete products
- All queries are scoped by user_id
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING

from kassa.core.exceptions import ResourceNotFoundError
from kassa.core.logging import get_logger, LogContext
from kassa.schemas.product import Product, ProductCreate, ProductUpdate
from kassa.utils import constants

logger = get_logger(__name__)


def to_product(doc: Dict[str, Any]) -> Product:
    return Product(
        id=doc["_id"],
        name=doc["name"],
        price=doc["price"],
        user_id=doc["user_id"],
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


class ProductService:
    """Service for a user's product catalog."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def list_products(self, user_id: str) -> List[Product]:
        cursor = self.collection.find({"user_id": user_id}).sort("name", ASCENDING)
        return [to_product(doc) async for doc in cursor]

    async def get_product(self, user_id: str, product_id: str) -> Product:
        """
        Raises:
            ResourceNotFoundError: If the product does not exist or belongs to someone else
        """
        doc = await self.collection.find_one({"_id": product_id, "user_id": user_id})
        if not doc:
            raise ResourceNotFoundError(constants.MSG_PRODUCT_NOT_FOUND)
        return to_product(doc)

    async def create_product(self, user_id: str, data: ProductCreate) -> Product:
        now = datetime.utcnow()
        doc = {
            "_id": str(uuid.uuid4()),
            "user_id": user_id,
            "name": data.name,
            "price": data.price,
            "created_at": now,
            "updated_at": now,
        }
        with LogContext(user_id=user_id, product_id=doc["_id"]):
            await self.collection.insert_one(doc)
            logger.info(f"Product created: {data.name}")
        return to_product(doc)

    async def update_product(self, user_id: str, product_id: str, data: ProductUpdate) -> Product:
        with LogContext(user_id=user_id, product_id=product_id):
            doc = await self.collection.find_one_and_update(
                {"_id": product_id, "user_id": user_id},
                {"$set": {"name": data.name, "price": data.price, "updated_at": datetime.utcnow()}},
                return_document=True,
            )
            if not doc:
                raise ResourceNotFoundError(constants.MSG_PRODUCT_NOT_FOUND)
            logger.info("Product updated")
            return to_product(doc)

    async def delete_product(self, user_id: str, product_id: str) -> None:
        """
        Past transactions keep their copied name and price.
        """
        with LogContext(user_id=user_id, product_id=product_id):
            result = await self.collection.delete_one({"_id": product_id, "user_id": user_id})
            if result.deleted_count == 0:
                raise ResourceNotFoundError(constants.MSG_PRODUCT_NOT_FOUND)
            logger.info("Product deleted")
