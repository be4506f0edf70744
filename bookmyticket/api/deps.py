from typing import AsyncIterator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from bookmyticket.core.config import settings
from bookmyticket.db.session import get_store
from bookmyticket.db.store import DocumentStore
from bookmyticket.services.identity import InvalidToken, LocalIdentityProvider, Principal
from bookmyticket.services.session import SessionContext

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False)


def get_identity(store: DocumentStore = Depends(get_store)) -> LocalIdentityProvider:
    return LocalIdentityProvider(store)


async def get_session(
    token: Optional[str] = Depends(oauth2_scheme),
    identity: LocalIdentityProvider = Depends(get_identity),
    store: DocumentStore = Depends(get_store),
) -> AsyncIterator[SessionContext]:
    """Per-request session: anonymous without a bearer token, otherwise restored from it."""
    session = SessionContext(identity, store)
    try:
        await session.start()
        if token:
            try:
                await identity.restore(token)
            except InvalidToken:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Could not validate credentials",
                    headers={"WWW-Authenticate": "Bearer"},
                )
        yield session
    finally:
        session.dispose()


def get_current_user(session: SessionContext = Depends(get_session)) -> Principal:
    if session.current_principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session.current_principal


def get_current_admin_user(
    current_user: Principal = Depends(get_current_user),
    session: SessionContext = Depends(get_session),
) -> Principal:
    if not session.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
