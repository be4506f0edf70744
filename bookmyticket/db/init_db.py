import logging

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from bookmyticket.core.config import settings
from bookmyticket.db.store import BOOKINGS, CREDENTIALS, MOVIES, USERS, DocumentStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def init_store(store: DocumentStore) -> None:
    """Create the indexes the catalog and booking queries rely on."""
    from bookmyticket.db.mongo import MongoDocumentStore

    if not isinstance(store, MongoDocumentStore):
        logger.info("Using %s store, nothing to initialize.", settings.STORE_BACKEND)
        return

    try:
        await store.db[MOVIES].create_index([("createdAt", DESCENDING)])
        await store.db[MOVIES].create_index([("genre", ASCENDING)])
        await store.db[BOOKINGS].create_index([("userId", ASCENDING), ("status", ASCENDING)])
        await store.db[BOOKINGS].create_index([("createdAt", DESCENDING)])
        await store.db[USERS].create_index([("createdAt", DESCENDING)])
        await store.db[CREDENTIALS].create_index([("email", ASCENDING)], unique=True)
        logger.info("Indexes ensured on database %s.", settings.MONGODB_DB)
    except PyMongoError as e:
        logger.error(f"Error creating indexes: {e}")
        # Proceeding anyway, queries still work without them
