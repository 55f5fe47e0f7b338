"""
Database initialization script

Creates indexes and, when SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD are set,
a superadmin account:

    python scripts/init_db.py
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables before settings are read
load_dotenv()

from kassa.core.exceptions import ConflictError
from kassa.db.indexes import create_indexes
from kassa.db.mongo import close_mongo_connection, connect_to_mongo, get_database
from kassa.schemas.user import RegisterRequest
from kassa.services.user_service import UserService
from kassa.utils import constants

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


async def seed_superadmin(email: str, password: str):
    """Creates the account if needed and makes sure it is a superadmin."""
    db = get_database()
    users = UserService(db)

    try:
        user = await users.register(RegisterRequest(email=email, password=password, username="admin"))
        logger.info(f"Superadmin account created: {user['email']}")
    except ConflictError:
        logger.info(f"Account {email} already exists")

    result = await db.users.update_one(
        {"email": email.strip().lower()},
        {"$set": {"role": constants.ROLE_SUPERADMIN}},
    )
    if result.modified_count:
        logger.info(f"{email} promoted to superadmin")


async def main():
    """Main initialization"""
    logger.info("=" * 60)
    logger.info("  Kassa Kilat Database Setup")
    logger.info("=" * 60)

    await connect_to_mongo()
    try:
        await create_indexes()

        db = get_database()
        for name in ("users", "products", "transactions", "chats", "chat_messages"):
            indexes = await db[name].index_information()
            count = await db[name].count_documents({})
            logger.info(f"  {name}: {count} documents, indexes={sorted(indexes)}")

        email = os.getenv("SEED_ADMIN_EMAIL")
        password = os.getenv("SEED_ADMIN_PASSWORD")
        if email and password:
            await seed_superadmin(email, password)
        else:
            logger.info("SEED_ADMIN_EMAIL/SEED_ADMIN_PASSWORD not set, skipping superadmin seed")

        logger.info("Database initialization complete")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main())
