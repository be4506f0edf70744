"""
Document store client.

Collections hold schema-less documents keyed by an opaque string id.
Backends implement `DocumentStore`; callers only ever see `Document`
instances and `StoreError`.
"""
import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


MOVIES = "movies"
USERS = "users"
BOOKINGS = "bookings"
CREDENTIALS = "credentials"


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# Placeholder resolved by the backend to the current UTC time at write time
SERVER_TIMESTAMP = _ServerTimestamp()


class StoreError(Exception):
    """Raised when the backing store rejects or fails an operation."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} does not exist")
        self.collection = collection
        self.doc_id = doc_id


FILTER_OPS = ("==", "!=", "<", "<=", ">", ">=", "in", "array-contains", "array-contains-any")


@dataclass(frozen=True)
class Filter:
    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter operator: {self.op!r}")


@dataclass
class Document:
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Stored fields plus the id. The id wins over a stored `id` field."""
        out = copy.deepcopy(self.data)
        out["id"] = self.id
        return out


class DocumentStore(ABC):
    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Point read. Returns None when the document does not exist."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """Filtered scan. Without `order_by` the order is backend-defined."""

    @abstractmethod
    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Insert under a generated id and return it."""

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Create or overwrite the document at `doc_id`."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Merge `data` into an existing document. Raises DocumentNotFound."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete if present. Deleting a missing document is not an error."""

    async def close(self) -> None:
        pass
