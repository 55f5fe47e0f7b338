"""
kassa/db/mongo.py

Purpose: MongoDB client lifecycle for the POS backend

- One Motor client per process, opened in the FastAPI lifespan
- Collections: users, products, transactions, chats, chat_messages
- GridFS bucket name for profile pictures
- Startup retries with exponential backoff, ping-based health check
"""

import asyncio
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from kassa.core.config import settings
from kassa.core.logging import get_logger

logger = get_logger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None

AVATAR_BUCKET = "avatars"

CONNECT_ATTEMPTS = 3
CONNECT_BACKOFF_SECONDS = 2


def _open_client() -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        settings.MONGODB_URL,
        maxPoolSize=50,
        minPoolSize=5,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=10000,
        retryWrites=True,
        retryReads=True,
        tz_aware=False,
    )


async def connect_to_mongo():
    """
    Opens the shared client and pings the server.

    Raises:
        ConnectionError: When every attempt fails
    """
    global _client, _database

    if _client is not None:
        logger.warning("connect_to_mongo called twice, keeping the existing client")
        return

    delay = CONNECT_BACKOFF_SECONDS
    for attempt in range(1, CONNECT_ATTEMPTS + 1):
        client = _open_client()
        try:
            logger.info(f"Connecting to MongoDB ({attempt}/{CONNECT_ATTEMPTS})")
            await client.admin.command("ping")
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            client.close()
            logger.error(f"MongoDB unreachable ({attempt}/{CONNECT_ATTEMPTS}): {e}")
            if attempt == CONNECT_ATTEMPTS:
                logger.critical("Giving up on MongoDB")
                raise ConnectionError("Could not establish MongoDB connection") from e
            logger.info(f"Next attempt in {delay}s")
            await asyncio.sleep(delay)
            delay *= 2
            continue

        _client = client
        _database = client[settings.MONGODB_DB_NAME]
        logger.info(f"Connected to MongoDB database '{settings.MONGODB_DB_NAME}'")
        return


async def close_mongo_connection():
    global _client, _database

    if _client is None:
        return
    _client.close()
    _client = None
    _database = None
    logger.info("MongoDB connection closed")


async def check_database_health() -> bool:
    """True when the server answers a ping."""
    if _client is None:
        logger.error("Health check before connect_to_mongo")
        return False
    try:
        await _client.admin.command("ping")
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
    return True


def get_database() -> AsyncIOMotorDatabase:
    """
    Raises:
        RuntimeError: Before connect_to_mongo has succeeded
    """
    if _database is None:
        raise RuntimeError("MongoDB is not connected; connect_to_mongo() runs in the app lifespan")
    return _database


def get_users_collection():
    """
    Users collection.

    Fields:
    - _id: str (uuid4)
    - email: str (unique, lower-case)
    - username: str
    - password_hash: str (bcrypt)
    - role: "user" | "superadmin"
    - photo_id: ObjectId | None (GridFS file in the avatars bucket)
    - created_at / updated_at: datetime
    """
    return get_database()["users"]


def get_products_collection():
    """
    Products collection.

    Fields: _id, user_id, name, price, created_at, updated_at
    """
    return get_database()["products"]


def get_transactions_collection():
    """
    Transactions collection.

    Fields:
    - _id, user_id
    - product_id: str | None (None for quick entries typed on the dashboard)
    - product_name, quantity, price, total
    - payments: list[{"method": "Tunai" | "QR" | "Transfer", "amount": float}]
    - timestamp: datetime
    """
    return get_database()["transactions"]


def get_chats_collection():
    """
    Chats collection, one document per pair of users.

    Fields: _id (chat id), participant_ids, last_message {text, sender_id, timestamp}
    """
    return get_database()["chats"]


def get_chat_messages_collection():
    """
    Chat messages collection.

    Fields: _id, chat_id, sender_id, text, timestamp
    """
    return get_database()["chat_messages"]
