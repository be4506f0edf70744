"""
Identity provider.

A provider instance is one client's view of the auth backend: it holds the
current principal and notifies subscribers whenever it changes.
`LocalIdentityProvider` keeps credentials in the document store, hashes
passwords with bcrypt and issues JWT session tokens.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from bookmyticket.core.security import (
    create_access_token,
    create_password_reset_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from bookmyticket.db.store import CREDENTIALS, SERVER_TIMESTAMP, Document, DocumentNotFound, DocumentStore, Filter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    uid: str
    email: str


Listener = Callable[[Optional[Principal]], Awaitable[None]]
Mailer = Callable[[str, str], Awaitable[None]]


class AuthError(Exception):
    pass


class EmailAlreadyRegistered(AuthError):
    pass


class InvalidCredentials(AuthError):
    pass


class InvalidToken(AuthError):
    pass


async def log_mailer(email: str, token: str) -> None:
    logger.info("Password reset link dispatched to %s.", email)


class IdentityProvider(ABC):
    def __init__(self):
        self._principal: Optional[Principal] = None
        self._listeners: List[Listener] = []

    @property
    def current_principal(self) -> Optional[Principal]:
        return self._principal

    async def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`, call it once with the current state, return an unsubscribe callable."""
        self._listeners.append(listener)
        await listener(self._principal)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _set_principal(self, principal: Optional[Principal]) -> None:
        self._principal = principal
        for listener in list(self._listeners):
            await listener(principal)

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> Principal:
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Principal:
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...

    @abstractmethod
    async def send_password_reset(self, email: str) -> None:
        ...


class LocalIdentityProvider(IdentityProvider):
    def __init__(self, store: DocumentStore, mailer: Optional[Mailer] = None):
        super().__init__()
        self.store = store
        self.mailer = mailer or log_mailer

    async def _find_by_email(self, email: str) -> Optional[Document]:
        docs = await self.store.query(CREDENTIALS, filters=[Filter("email", "==", email)], limit=1)
        return docs[0] if docs else None

    async def sign_up(self, email: str, password: str) -> Principal:
        email = email.strip().lower()
        if await self._find_by_email(email):
            raise EmailAlreadyRegistered("Email already registered")
        uid = await self.store.add(
            CREDENTIALS,
            {"email": email, "passwordHash": get_password_hash(password), "createdAt": SERVER_TIMESTAMP},
        )
        principal = Principal(uid=uid, email=email)
        await self._set_principal(principal)
        return principal

    async def sign_in(self, email: str, password: str) -> Principal:
        email = email.strip().lower()
        doc = await self._find_by_email(email)
        if not doc or not verify_password(password, doc.data.get("passwordHash", "")):
            raise InvalidCredentials("Incorrect email or password")
        principal = Principal(uid=doc.id, email=email)
        await self._set_principal(principal)
        return principal

    async def sign_out(self) -> None:
        await self._set_principal(None)

    async def restore(self, token: str) -> Principal:
        """Re-establish the session carried by a token issued earlier."""
        claims = decode_token(token)
        if claims is None:
            raise InvalidToken("Could not validate credentials")
        principal = Principal(uid=claims["sub"], email=claims.get("email", ""))
        await self._set_principal(principal)
        return principal

    def issue_token(self) -> str:
        if self._principal is None:
            raise AuthError("No signed-in principal")
        return create_access_token(self._principal.uid, self._principal.email)

    async def send_password_reset(self, email: str) -> None:
        email = email.strip().lower()
        doc = await self._find_by_email(email)
        if doc is None:
            # Same outcome as for a known address, so accounts cannot be probed
            logger.info("Password reset requested for unknown address.")
            return
        await self.mailer(email, create_password_reset_token(doc.id))

    async def confirm_password_reset(self, token: str, new_password: str) -> None:
        claims = decode_token(token, token_type="reset")
        if claims is None:
            raise InvalidToken("Invalid or expired reset token")
        try:
            await self.store.update(CREDENTIALS, claims["sub"], {"passwordHash": get_password_hash(new_password)})
        except DocumentNotFound:
            raise InvalidToken("Invalid or expired reset token")
        logger.info("Password reset completed for %s.", claims["sub"])
