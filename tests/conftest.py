import asyncio
from datetime import datetime, timezone

import pytest

from bookmyticket.db.memory import MemoryDocumentStore
from bookmyticket.db.store import StoreError


def run(coro):
    return asyncio.run(coro)


def ts(day: int) -> datetime:
    return datetime(2025, 3, day, 12, 0, tzinfo=timezone.utc)


SEED = {
    "movies": {
        "m1": {"title": "Dune", "genre": ["Sci-Fi", "Adventure"], "ticketPrice": 12.5,
               "rating": "PG-13", "runtime": 155, "releaseYear": 2021,
               "showtimes": ["6:00 PM", "9:00 PM"], "createdAt": ts(1)},
        "m2": {"title": "Arrival", "genre": ["Sci-Fi", "Drama"], "ticketPrice": 10,
               "createdAt": ts(2)},
        "m3": {"title": "Heat", "genre": ["Crime", "Action"], "ticketPrice": 9, "createdAt": ts(3)},
        "m4": {"title": "Interstellar", "genre": ["Sci-Fi"], "ticketPrice": 11, "createdAt": ts(4)},
        "m5": {"title": "Up", "genre": ["Animation", "Adventure"], "ticketPrice": 8, "createdAt": ts(5)},
    },
    "users": {
        "u1": {"name": "Alice", "email": "alice@example.com", "admin": False, "createdAt": ts(1)},
        "u2": {"name": "Root", "email": "root@example.com", "admin": True, "createdAt": ts(2)},
    },
    "bookings": {
        "b1": {"movieId": "m1", "userId": "u1", "date": "2025-03-10", "time": "6:00 PM",
               "seats": ["A1", "A2"], "totalPrice": 25, "status": "confirmed", "createdAt": ts(6)},
        # movie was deleted
        "b2": {"movieId": "gone", "userId": "u1", "date": datetime(2025, 3, 11, 20, 0, tzinfo=timezone.utc),
               "time": "8:00 PM", "seats": "C3", "totalPrice": 12.5, "status": "cancelled",
               "createdAt": ts(7)},
        "b3": {"movieId": "m2", "userId": "u2", "date": "2025-03-12", "time": "7:00 PM",
               "seats": "B1, B2, B3", "totalPrice": 30, "status": "completed", "createdAt": ts(8)},
        # user account was removed
        "b4": {"movieId": "m1", "userId": "ghost", "date": "2025-03-13", "time": "9:00 PM",
               "seats": ["D4"], "totalPrice": 12.5, "status": "confirmed", "createdAt": ts(9)},
    },
}


class FlakyStore(MemoryDocumentStore):
    """Memory store whose point reads fail for chosen ids, and whose queries can be made to fail."""

    def __init__(self, initial=None, failing_ids=(), failing_collections=()):
        super().__init__(initial)
        self.failing_ids = set(failing_ids)
        self.failing_collections = set(failing_collections)
        self.reads = []

    async def get(self, collection, doc_id):
        self.reads.append((collection, doc_id))
        if doc_id in self.failing_ids:
            raise StoreError(f"boom reading {collection}/{doc_id}")
        return await super().get(collection, doc_id)

    async def query(self, collection, *args, **kwargs):
        if collection in self.failing_collections:
            raise StoreError(f"boom querying {collection}")
        return await super().query(collection, *args, **kwargs)


@pytest.fixture
def store():
    return MemoryDocumentStore(SEED)


@pytest.fixture
def flaky_store():
    def factory(**kwargs):
        return FlakyStore(SEED, **kwargs)

    return factory
