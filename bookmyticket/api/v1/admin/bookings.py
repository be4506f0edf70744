import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from bookmyticket.api.deps import get_current_admin_user
from bookmyticket.api.responses import pdf_attachment
from bookmyticket.db.session import get_store
from bookmyticket.db.store import DocumentNotFound, DocumentStore, StoreError
from bookmyticket.models.booking import Booking
from bookmyticket.schemas.booking import BookingStatusUpdate, BookingView
from bookmyticket.services import bookings as booking_service
from bookmyticket.services.export import render_bookings_pdf
from bookmyticket.services.identity import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/bookings", tags=["Admin - Bookings"])


async def _all_bookings(store: DocumentStore) -> List[BookingView]:
    try:
        return await booking_service.list_all_bookings(store, order_by_created_desc=True)
    except StoreError:
        logger.exception("Error fetching bookings.")
        raise HTTPException(status_code=503, detail="Error fetching bookings")


@router.get("/", response_model=List[BookingView])
async def list_all_bookings(
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_admin_user),
):
    """
    Return every booking, newest first, with its movie and user embedded.
    Bookings whose movie or user no longer resolves are left out unless
    ADMIN_BOOKINGS_REQUIRE_EMBEDS is turned off.
    """
    return await _all_bookings(store)


@router.get("/export")
async def export_all_bookings(
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_admin_user),
):
    views = await _all_bookings(store)
    content = await run_in_threadpool(render_bookings_pdf, views, "All Bookings")
    return pdf_attachment(content)


@router.patch("/{booking_id}/status", response_model=Booking)
async def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_admin_user),
):
    try:
        booking = await booking_service.update_booking_status(store, booking_id, data.status)
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Booking not found")
    except StoreError:
        logger.exception("Error updating booking %s.", booking_id)
        raise HTTPException(status_code=500, detail="Error updating booking")
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking
