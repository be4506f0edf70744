from fastapi import Request

from bookmyticket.core.config import settings
from bookmyticket.db.store import DocumentStore


def create_store() -> DocumentStore:
    """Build the store selected by STORE_BACKEND."""
    if settings.STORE_BACKEND == "memory":
        from bookmyticket.db.memory import MemoryDocumentStore

        return MemoryDocumentStore()
    if settings.STORE_BACKEND == "mongo":
        from bookmyticket.db.mongo import MongoDocumentStore

        return MongoDocumentStore(settings.MONGODB_URL, settings.MONGODB_DB)
    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store
