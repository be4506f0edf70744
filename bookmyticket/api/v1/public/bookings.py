import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from starlette.concurrency import run_in_threadpool

from bookmyticket.api.deps import get_current_user
from bookmyticket.api.responses import pdf_attachment
from bookmyticket.db.session import get_store
from bookmyticket.db.store import DocumentStore, StoreError
from bookmyticket.models.booking import BookingStatus
from bookmyticket.schemas.booking import BookingCreate, BookingView
from bookmyticket.services import bookings as booking_service
from bookmyticket.services import catalog
from bookmyticket.services.export import render_bookings_pdf
from bookmyticket.services.identity import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------------
# POST /bookings - create a booking
# ---------------------------------------------------------------------------


@router.post("/", response_model=BookingView, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    """
    Book seats for a showing. Total = seat count x the movie's ticket price.
    Seats are not reserved: nothing stops two bookings from claiming the same seat.
    """
    try:
        movie = await catalog.get_movie(store, data.movie_id)
        if not movie:
            raise HTTPException(status_code=404, detail="Movie not found")
        booking = await booking_service.create_booking(
            store, current_user.uid, movie, data.show_date, data.time, data.seats
        )
    except booking_service.BookingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError:
        logger.exception("Error creating booking.")
        raise HTTPException(status_code=500, detail="Error creating booking")
    return booking_service.build_view(booking, movie)


# ---------------------------------------------------------------------------
# GET /bookings - list current user's bookings
# ---------------------------------------------------------------------------


async def _my_bookings(store: DocumentStore, user_id: str, status: Optional[BookingStatus]) -> List[BookingView]:
    try:
        return await booking_service.list_bookings_for_user(
            store, user_id, status.value if status else None
        )
    except StoreError:
        logger.exception("Error fetching bookings.")
        raise HTTPException(status_code=503, detail="Error fetching bookings")


@router.get("/", response_model=List[BookingView])
async def list_my_bookings(
    status: Optional[BookingStatus] = Query(
        None, description="Filter by status: confirmed, cancelled, completed"
    ),
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    """Return the authenticated user's bookings, newest first, each with its movie when it still exists."""
    return await _my_bookings(store, current_user.uid, status)


@router.get("/export")
async def export_my_bookings(
    status: Optional[BookingStatus] = Query(None),
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    """Download the user's bookings as a PDF table."""
    views = await _my_bookings(store, current_user.uid, status)
    content = await run_in_threadpool(render_bookings_pdf, views)
    return pdf_attachment(content)
