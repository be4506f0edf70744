import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from bookmyticket.api.deps import get_current_user, get_identity, get_session
from bookmyticket.db.session import get_store
from bookmyticket.db.store import DocumentStore, StoreError
from bookmyticket.schemas.common import MessageResponse
from bookmyticket.schemas.user import PasswordResetConfirm, PasswordResetRequest, Token, UserCreate
from bookmyticket.services import auth as auth_service
from bookmyticket.services.identity import (
    EmailAlreadyRegistered,
    InvalidCredentials,
    InvalidToken,
    LocalIdentityProvider,
    Principal,
)
from bookmyticket.services.session import SessionContext
from bookmyticket.services.users import get_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _build_token_response(identity: LocalIdentityProvider, store: DocumentStore) -> Token:
    user = await get_user(store, identity.current_principal.uid)
    return Token(
        access_token=identity.issue_token(),
        token_type="bearer",
        user=user,
    )


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    body: UserCreate,
    identity: LocalIdentityProvider = Depends(get_identity),
    store: DocumentStore = Depends(get_store),
):
    try:
        await auth_service.register(identity, store, body.email, body.password, body.name)
        return await _build_token_response(identity, store)
    except EmailAlreadyRegistered:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    except StoreError:
        logger.exception("Error registering %s.", body.email)
        raise HTTPException(status_code=500, detail="Error creating account")


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    identity: LocalIdentityProvider = Depends(get_identity),
    store: DocumentStore = Depends(get_store),
):
    try:
        await auth_service.login(identity, form_data.username, form_data.password)
        return await _build_token_response(identity, store)
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except StoreError:
        logger.exception("Error signing in.")
        raise HTTPException(status_code=503, detail="Error signing in")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: Principal = Depends(get_current_user),
    session: SessionContext = Depends(get_session),
):
    """
    Logout the current user.
    Tokens are stateless JWTs, so the client should discard its token.
    """
    await session.sign_out()
    return MessageResponse(message="Successfully logged out")


@router.post("/password-reset", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED)
async def request_password_reset(
    body: PasswordResetRequest,
    identity: LocalIdentityProvider = Depends(get_identity),
):
    """Always answers the same way, whether or not the address has an account."""
    try:
        await auth_service.request_password_reset(identity, body.email)
    except StoreError:
        logger.exception("Error dispatching password reset.")
        raise HTTPException(status_code=503, detail="Error sending password reset email")
    return MessageResponse(message="If the address is registered, a reset link has been sent")


@router.post("/password-reset/confirm", response_model=MessageResponse)
async def confirm_password_reset(
    body: PasswordResetConfirm,
    identity: LocalIdentityProvider = Depends(get_identity),
):
    try:
        await identity.confirm_password_reset(body.token, body.new_password)
    except InvalidToken as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError:
        logger.exception("Error resetting password.")
        raise HTTPException(status_code=500, detail="Error resetting password")
    return MessageResponse(message="Password updated")
