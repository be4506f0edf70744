import asyncio
import logging
from typing import Callable, Optional

from bookmyticket.db.store import USERS, DocumentStore
from bookmyticket.services.identity import IdentityProvider, Principal

logger = logging.getLogger(__name__)


async def resolve_is_admin(store: DocumentStore, uid: str) -> bool:
    """True only when users/{uid} exists and its admin field is exactly True. Never raises."""
    try:
        doc = await store.get(USERS, uid)
    except Exception:
        logger.exception("Error fetching user data for %s.", uid)
        return False
    return doc is not None and doc.data.get("admin") is True


class SessionContext:
    """
    Tracks the signed-in principal of one identity provider and whether it is an admin.

    Lifecycle: `start()` subscribes (the provider calls back immediately),
    every later session change re-runs the admin lookup, `dispose()`
    unsubscribes. Results of a lookup that finishes after the context was
    disposed, or after a newer session change, are dropped.
    """

    def __init__(self, identity: IdentityProvider, store: DocumentStore):
        self.identity = identity
        self.store = store
        self.current_principal: Optional[Principal] = None
        self.is_admin = False
        self.loading = True
        self._ready = asyncio.Event()
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._generation = 0
        self._disposed = False

    async def start(self) -> "SessionContext":
        if self._unsubscribe is None and not self._disposed:
            self._unsubscribe = await self.identity.subscribe(self._on_session_change)
        return self

    async def _on_session_change(self, principal: Optional[Principal]) -> None:
        if self._disposed:
            return
        self._generation += 1
        generation = self._generation

        if principal is None or self.current_principal is None or principal.uid != self.current_principal.uid:
            self.is_admin = False
        self.current_principal = principal

        is_admin = False
        if principal is not None:
            is_admin = await resolve_is_admin(self.store, principal.uid)

        if self._disposed or generation != self._generation:
            return
        self.is_admin = is_admin
        if self.loading:
            self.loading = False
            self._ready.set()

    async def wait_until_ready(self) -> None:
        await self._ready.wait()

    async def sign_out(self) -> None:
        """Failures are logged, never raised; a failed sign-out leaves the principal in place."""
        try:
            await self.identity.sign_out()
        except Exception:
            logger.exception("Logout error.")

    def dispose(self) -> None:
        self._disposed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def __aenter__(self) -> "SessionContext":
        return await self.start()

    async def __aexit__(self, *exc) -> None:
        self.dispose()
