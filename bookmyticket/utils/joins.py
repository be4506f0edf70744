"""
Fan-out / fan-in for per-record lookups.

Every awaitable runs concurrently and each outcome is kept as a `Result`,
so one failed lookup never aborts its siblings. Callers decide what a
failure means for the record it belongs to.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Generic, Iterable, List, Optional, TypeVar

from bookmyticket.db.store import Document, DocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def found(self) -> bool:
        """Succeeded and produced something."""
        return self.error is None and self.value is not None


async def settle_all(aws: Iterable[Awaitable[T]]) -> List[Result[T]]:
    """Await everything, in input order, tolerating individual failures."""
    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    results: List[Result[T]] = []
    for outcome in outcomes:
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, BaseException):
            results.append(Result(error=outcome))
        else:
            results.append(Result(value=outcome))
    return results


async def _no_reference() -> None:
    return None


def lookup(store: DocumentStore, collection: str, doc_id: Optional[str]) -> Awaitable[Optional[Document]]:
    """Point read for a reference. An empty reference resolves to None without a read."""
    if not doc_id or not isinstance(doc_id, str):
        return _no_reference()
    return store.get(collection, doc_id)


async def lookup_all(store: DocumentStore, collection: str, ids: List[Optional[str]]) -> List[Result[Optional[Document]]]:
    results = await settle_all(lookup(store, collection, doc_id) for doc_id in ids)
    for doc_id, result in zip(ids, results):
        if not result.ok:
            logger.warning("Error fetching %s/%s: %s", collection, doc_id, result.error)
    return results
