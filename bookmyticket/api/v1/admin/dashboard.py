import logging

from fastapi import APIRouter, Depends, HTTPException

from bookmyticket.api.deps import get_current_admin_user
from bookmyticket.db.session import get_store
from bookmyticket.db.store import DocumentStore, StoreError
from bookmyticket.schemas.common import DashboardStats
from bookmyticket.services.bookings import compute_statistics
from bookmyticket.services.identity import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/dashboard", tags=["Admin - Dashboard"])


@router.get("/", response_model=DashboardStats)
async def get_dashboard(
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_admin_user),
):
    """
    Totals for the admin dashboard: users, movies, bookings and revenue.

    Every call rescans the three collections, so the numbers are always
    current and a refresh is just another request.
    """
    try:
        return await compute_statistics(store)
    except StoreError:
        logger.exception("Error fetching stats.")
        raise HTTPException(status_code=503, detail="Error fetching stats")
