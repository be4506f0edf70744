import asyncio
import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from bookmyticket.db.store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentNotFound,
    DocumentStore,
    Filter,
)


def _resolve(data: Dict[str, Any]) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {k: (now if v is SERVER_TIMESTAMP else copy.deepcopy(v)) for k, v in data.items()}


def _matches(data: Dict[str, Any], f: Filter) -> bool:
    if f.field not in data:
        return False
    value = data[f.field]
    try:
        if f.op == "==":
            return value == f.value
        if f.op == "!=":
            return value != f.value
        if f.op == "<":
            return value < f.value
        if f.op == "<=":
            return value <= f.value
        if f.op == ">":
            return value > f.value
        if f.op == ">=":
            return value >= f.value
        if f.op == "in":
            return value in f.value
        if f.op == "array-contains":
            return isinstance(value, list) and f.value in value
        if f.op == "array-contains-any":
            return isinstance(value, list) and any(v in value for v in f.value)
    except TypeError:
        # Mismatched types never match, as in a real document store
        return False
    return False


def _order_key(value: Any):
    # Mixed types order by type first, as in a real document store
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (2, value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (3, repr(value))


class MemoryDocumentStore(DocumentStore):
    """In-process store. Every read and write copies, so callers never share state with it."""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for collection, docs in (initial or {}).items():
            for doc_id, data in docs.items():
                self._collections.setdefault(collection, {})[doc_id] = _resolve(data)

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        await asyncio.sleep(0)
        data = self._collections.get(collection, {}).get(doc_id)
        if data is None:
            return None
        return Document(id=doc_id, data=copy.deepcopy(data))

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        await asyncio.sleep(0)
        rows = [
            (doc_id, data)
            for doc_id, data in self._collections.get(collection, {}).items()
            if all(_matches(data, f) for f in filters)
        ]
        if order_by:
            # Documents missing the ordering field are excluded, like Firestore/Mongo indexes
            rows = [r for r in rows if r[1].get(order_by) is not None]
            rows.sort(key=lambda r: _order_key(r[1][order_by]), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return [Document(id=doc_id, data=copy.deepcopy(data)) for doc_id, data in rows]

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        await asyncio.sleep(0)
        doc_id = uuid.uuid4().hex
        self._collections.setdefault(collection, {})[doc_id] = _resolve(data)
        return doc_id

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        await asyncio.sleep(0)
        self._collections.setdefault(collection, {})[doc_id] = _resolve(data)

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        await asyncio.sleep(0)
        existing = self._collections.get(collection, {}).get(doc_id)
        if existing is None:
            raise DocumentNotFound(collection, doc_id)
        existing.update(_resolve(data))

    async def delete(self, collection: str, doc_id: str) -> None:
        await asyncio.sleep(0)
        self._collections.get(collection, {}).pop(doc_id, None)
