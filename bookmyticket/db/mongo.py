import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from bookmyticket.db.store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentNotFound,
    DocumentStore,
    Filter,
    StoreError,
)

logger = logging.getLogger(__name__)

_OPERATORS = {
    "==": "$eq",
    "!=": "$ne",
    "<": "$lt",
    "<=": "$lte",
    ">": "$gt",
    ">=": "$gte",
    "in": "$in",
    "array-contains": "$eq",  # equality on an array field matches any element
    "array-contains-any": "$in",
}


def _resolve(data: Dict[str, Any]) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {k: (now if v is SERVER_TIMESTAMP else v) for k, v in data.items() if k != "_id"}


def build_mongo_filter(filters: Sequence[Filter], order_by: Optional[str] = None) -> Dict[str, Any]:
    """Translate store filters into a Mongo query document."""
    query: Dict[str, Dict[str, Any]] = {}
    for f in filters:
        clause = query.setdefault(f.field, {})
        clause[_OPERATORS[f.op]] = list(f.value) if f.op in ("in", "array-contains-any") else f.value
        if f.op == "!=":
            clause["$exists"] = True
    if order_by:
        query.setdefault(order_by, {})["$exists"] = True
    return query


def id_filter(doc_id: str) -> Dict[str, Any]:
    """Match a string id, or the ObjectId it spells for documents inserted outside the app."""
    if ObjectId.is_valid(doc_id):
        return {"_id": {"$in": [doc_id, ObjectId(doc_id)]}}
    return {"_id": doc_id}


def _to_document(raw: Dict[str, Any]) -> Document:
    doc_id = str(raw.pop("_id"))
    return Document(id=doc_id, data=raw)


class MongoDocumentStore(DocumentStore):
    def __init__(self, url: str, database: str):
        self.client = AsyncIOMotorClient(url, tz_aware=True)
        self.db = self.client[database]

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        try:
            raw = await self.db[collection].find_one(id_filter(doc_id))
        except PyMongoError as e:
            raise StoreError(f"Error reading {collection}/{doc_id}: {e}") from e
        return _to_document(raw) if raw else None

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        cursor = self.db[collection].find(build_mongo_filter(filters, order_by))
        if order_by:
            cursor = cursor.sort(order_by, DESCENDING if descending else ASCENDING)
        if limit is not None:
            cursor = cursor.limit(limit)
        try:
            rows = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StoreError(f"Error querying {collection}: {e}") from e
        return [_to_document(raw) for raw in rows]

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        await self.set(collection, doc_id, data)
        return doc_id

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        try:
            await self.db[collection].replace_one({"_id": doc_id}, _resolve(data), upsert=True)
        except PyMongoError as e:
            raise StoreError(f"Error writing {collection}/{doc_id}: {e}") from e

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        try:
            result = await self.db[collection].update_one(id_filter(doc_id), {"$set": _resolve(data)})
        except PyMongoError as e:
            raise StoreError(f"Error updating {collection}/{doc_id}: {e}") from e
        if not result.matched_count:
            raise DocumentNotFound(collection, doc_id)

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            await self.db[collection].delete_one(id_filter(doc_id))
        except PyMongoError as e:
            raise StoreError(f"Error deleting {collection}/{doc_id}: {e}") from e

    async def close(self) -> None:
        self.client.close()
        logger.info("Closed MongoDB client.")
