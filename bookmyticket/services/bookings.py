"""
Booking aggregation.

Bookings are read, then each one is joined to its movie (and, for admin
views, its user) with one point read per reference. All reads for a batch
run concurrently and the batch completes once every read has settled.
A failed or missing lookup only affects its own record; whether that
record is kept is decided by the inclusion policy.
"""
import asyncio
import enum
import logging
from collections import Counter
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from bookmyticket.core.config import settings
from bookmyticket.db.store import BOOKINGS, MOVIES, SERVER_TIMESTAMP, USERS, Document, DocumentStore, Filter
from bookmyticket.models.booking import Booking, BookingStatus
from bookmyticket.models.movie import Movie
from bookmyticket.models.user import User
from bookmyticket.schemas.booking import BookingView
from bookmyticket.schemas.common import DashboardStats
from bookmyticket.utils.joins import Result, lookup_all
from bookmyticket.utils.normalize import normalize_price, normalize_seats

logger = logging.getLogger(__name__)


class InclusionPolicy(str, enum.Enum):
    # Keep every booking; unresolved references become None
    tolerate_missing = "tolerate_missing"
    # Keep a booking only when every requested reference resolved
    require_embeds = "require_embeds"


class BookingError(ValueError):
    """Raised when a booking request cannot be honoured."""


def admin_policy() -> InclusionPolicy:
    if settings.ADMIN_BOOKINGS_REQUIRE_EMBEDS:
        return InclusionPolicy.require_embeds
    return InclusionPolicy.tolerate_missing


# ---------------------------------------------------------------------------
# Derived view fields
# ---------------------------------------------------------------------------


def format_show_date(show_date: Optional[date]) -> str:
    """'Friday, March 7, 2025' or 'N/A'."""
    if show_date is None:
        return "N/A"
    return f"{show_date:%A}, {show_date:%B} {show_date.day}, {show_date.year}"


def format_status_label(status: str) -> str:
    return status.capitalize() if status else "Unknown"


def _embed(result: Optional[Result[Optional[Document]]], model):
    if result is None or not result.found:
        return None
    parsed = model.parse_documents([result.value])
    return parsed[0] if parsed else None


def build_view(booking: Booking, movie: Optional[Movie] = None, user: Optional[User] = None) -> BookingView:
    return BookingView.model_validate(
        {
            **booking.model_dump(),
            "movie": movie,
            "user": user,
            "formatted_date": format_show_date(booking.show_date),
            "seat_count": len(booking.seats),
            "status_label": format_status_label(booking.status),
        }
    )


# ---------------------------------------------------------------------------
# Join
# ---------------------------------------------------------------------------


async def join_bookings(
    store: DocumentStore,
    bookings: Sequence[Booking],
    with_user: bool = False,
    policy: InclusionPolicy = InclusionPolicy.tolerate_missing,
) -> List[BookingView]:
    """Embed movies (and users) into bookings, preserving input order."""
    if not bookings:
        return []

    movie_ids = [b.movie_id for b in bookings]
    if with_user:
        movie_results, user_results = await asyncio.gather(
            lookup_all(store, MOVIES, movie_ids),
            lookup_all(store, USERS, [b.user_id for b in bookings]),
        )
    else:
        movie_results = await lookup_all(store, MOVIES, movie_ids)
        user_results = [None] * len(bookings)

    views = []
    for booking, movie_result, user_result in zip(bookings, movie_results, user_results):
        movie = _embed(movie_result, Movie)
        user = _embed(user_result, User) if with_user else None

        if policy == InclusionPolicy.require_embeds:
            if movie is None or (with_user and user is None):
                logger.info("Leaving out booking %s: movie or user could not be resolved.", booking.id)
                continue

        views.append(build_view(booking, movie, user))
    return views


def _newest_first(bookings: List[Booking]) -> List[Booking]:
    with_ts = [b for b in bookings if b.created_at is not None]
    without_ts = [b for b in bookings if b.created_at is None]
    return sorted(with_ts, key=lambda b: b.created_at, reverse=True) + without_ts


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


async def list_bookings_for_user(
    store: DocumentStore,
    user_id: str,
    status: Optional[str] = None,
    with_user: bool = False,
    policy: InclusionPolicy = InclusionPolicy.tolerate_missing,
) -> List[BookingView]:
    """
    A user's bookings, newest first, optionally narrowed by status.

    Raises StoreError if the bookings query itself fails; individual
    movie/user lookups never do.
    """
    filters = [Filter("userId", "==", user_id)]
    if status:
        filters.append(Filter("status", "==", status))

    docs = await store.query(BOOKINGS, filters=filters)
    bookings = _newest_first(Booking.parse_documents(docs))
    return await join_bookings(store, bookings, with_user=with_user, policy=policy)


async def list_all_bookings(
    store: DocumentStore,
    order_by_created_desc: bool = True,
    policy: Optional[InclusionPolicy] = None,
) -> List[BookingView]:
    """Every booking joined with its movie and user, for the admin console."""
    if order_by_created_desc:
        docs = await store.query(BOOKINGS, order_by="createdAt", descending=True)
    else:
        docs = await store.query(BOOKINGS)
    bookings = Booking.parse_documents(docs)
    return await join_bookings(store, bookings, with_user=True, policy=policy or admin_policy())


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


def _status_of(doc: Document) -> str:
    value = doc.data.get("status")
    if isinstance(value, str) and value.strip():
        return value.strip().lower()
    return "unknown"


async def compute_statistics(store: DocumentStore) -> DashboardStats:
    """Full scan of the three collections. Nothing is cached between calls."""
    users, movies, bookings = await asyncio.gather(
        store.query(USERS),
        store.query(MOVIES),
        store.query(BOOKINGS),
    )

    total_revenue = sum((normalize_price(doc.data.get("totalPrice")) for doc in bookings), Decimal("0"))
    by_status = Counter(_status_of(doc) for doc in bookings)

    return DashboardStats(
        user_count=len(users),
        movie_count=len(movies),
        booking_count=len(bookings),
        total_revenue=total_revenue,
        bookings_by_status=dict(by_status),
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def create_booking(
    store: DocumentStore,
    user_id: str,
    movie: Movie,
    show_date: date,
    time: str,
    seats,
) -> Booking:
    """
    Insert a confirmed booking priced at seat count x ticket price.

    There is no inventory check: the same seat can be booked twice.
    """
    seat_labels = normalize_seats(seats)
    if not seat_labels:
        raise BookingError("At least one seat is required")
    if movie.showtimes and time not in movie.showtimes:
        raise BookingError(f"'{time}' is not a showtime of {movie.title}")

    total_price = movie.ticket_price * len(seat_labels)
    data = {
        "movieId": movie.id,
        "userId": user_id,
        "date": show_date.isoformat(),
        "time": time,
        "seats": seat_labels,
        "totalPrice": float(total_price),
        "status": BookingStatus.confirmed.value,
        "createdAt": SERVER_TIMESTAMP,
    }
    booking_id = await store.add(BOOKINGS, data)
    logger.info("Booking %s created for user %s (%d seat(s)).", booking_id, user_id, len(seat_labels))

    doc = await store.get(BOOKINGS, booking_id)
    return Booking.from_document(doc) if doc else Booking.model_validate({**data, "id": booking_id, "createdAt": None})


async def update_booking_status(store: DocumentStore, booking_id: str, status: BookingStatus) -> Optional[Booking]:
    """Raises DocumentNotFound for an unknown booking."""
    await store.update(BOOKINGS, booking_id, {"status": status.value})
    logger.info("Booking %s marked %s.", booking_id, status.value)
    doc = await store.get(BOOKINGS, booking_id)
    return Booking.from_document(doc) if doc else None
