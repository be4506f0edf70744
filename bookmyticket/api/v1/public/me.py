import logging

from fastapi import APIRouter, Depends, HTTPException

from bookmyticket.api.deps import get_current_user
from bookmyticket.db.session import get_store
from bookmyticket.db.store import DocumentNotFound, DocumentStore, StoreError
from bookmyticket.models.user import User
from bookmyticket.schemas.user import UserUpdate
from bookmyticket.services.identity import Principal
from bookmyticket.services.users import get_user, update_user_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/me", tags=["Me"])


@router.get("/", response_model=User)
async def get_me(
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    """Return the authenticated user's profile."""
    try:
        user = await get_user(store, current_user.uid)
    except StoreError:
        logger.exception("Error fetching user %s.", current_user.uid)
        raise HTTPException(status_code=503, detail="Error fetching profile")
    if not user:
        raise HTTPException(status_code=404, detail="Profile not found")
    return user


@router.patch("/", response_model=User)
async def update_me(
    data: UserUpdate,
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_user),
):
    """Update the authenticated user's profile (name, bio, phone, address, profile image)."""
    try:
        user = await update_user_profile(
            store, current_user.uid, data.model_dump(by_alias=True, exclude_unset=True)
        )
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Profile not found")
    except StoreError:
        logger.exception("Error updating user %s.", current_user.uid)
        raise HTTPException(status_code=500, detail="Failed to update profile")
    return user
