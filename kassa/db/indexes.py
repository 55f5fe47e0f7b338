"""
kassa/db/indexes.py

Purpose: Database index management

- Creates unique and performance indexes
- Ensures fast per-user lookups and data integrity
"""

from pymongo import ASCENDING, DESCENDING

from kassa.db.mongo import (
    get_users_collection,
    get_products_collection,
    get_transactions_collection,
    get_chats_collection,
    get_chat_messages_collection,
)
from kassa.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        products = get_products_collection()
        transactions = get_transactions_collection()
        chats = get_chats_collection()
        messages = get_chat_messages_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        await users.create_index("email", unique=True, name="email_unique")
        logger.debug("Created unique index on users.email")

        await users.create_index("username", name="username_idx")
        logger.debug("Created index on users.username")

        # ==============================================
        # PRODUCTS COLLECTION INDEXES
        # ==============================================

        # Catalog is always listed per user, ordered by name
        await products.create_index(
            [("user_id", ASCENDING), ("name", ASCENDING)],
            name="user_products_idx"
        )
        logger.debug("Created compound index on products.user_id + name")

        # ==============================================
        # TRANSACTIONS COLLECTION INDEXES
        # ==============================================

        await transactions.create_index(
            [("user_id", ASCENDING), ("timestamp", DESCENDING)],
            name="user_transactions_idx"
        )
        logger.debug("Created compound index on transactions.user_id + timestamp")

        await transactions.create_index("product_id", name="transaction_product_idx")
        logger.debug("Created index on transactions.product_id")

        # ==============================================
        # CHAT COLLECTION INDEXES
        # ==============================================

        await chats.create_index("participant_ids", name="chat_participants_idx")
        logger.debug("Created multikey index on chats.participant_ids")

        await messages.create_index(
            [("chat_id", ASCENDING), ("timestamp", ASCENDING)],
            name="chat_messages_idx"
        )
        logger.debug("Created compound index on chat_messages.chat_id + timestamp")

        logger.info("All database indexes created successfully")

        user_indexes = await users.index_information()
        product_indexes = await products.index_information()
        transaction_indexes = await transactions.index_information()
        message_indexes = await messages.index_information()

        logger.info(
            f"Index summary: Users={len(user_indexes)}, "
            f"Products={len(product_indexes)}, "
            f"Transactions={len(transaction_indexes)}, "
            f"ChatMessages={len(message_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise
