import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from bookmyticket.api.deps import get_current_admin_user
from bookmyticket.db.session import get_store
from bookmyticket.db.store import DocumentStore, StoreError
from bookmyticket.models.user import User
from bookmyticket.services.identity import Principal
from bookmyticket.services.users import list_users

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["Admin - Users"])


@router.get("/", response_model=List[User])
async def list_all_users(
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_admin_user),
):
    """Every registered user, newest first."""
    try:
        return await list_users(store)
    except StoreError:
        logger.exception("Error fetching users.")
        raise HTTPException(status_code=503, detail="Error fetching users")
