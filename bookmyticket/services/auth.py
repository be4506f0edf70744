"""Account workflows on top of the identity provider."""
import logging
from bookmyticket.db.store import SERVER_TIMESTAMP, USERS, DocumentStore
from bookmyticket.services.identity import IdentityProvider, Principal

logger = logging.getLogger(__name__)


async def register(
    identity: IdentityProvider,
    store: DocumentStore,
    email: str,
    password: str,
    name: str,
) -> Principal:
    """Create the account and its `users/{uid}` profile. New users are never admins."""
    principal = await identity.sign_up(email, password)
    profile = {
        "name": name,
        "email": principal.email,
        "admin": False,
        "createdAt": SERVER_TIMESTAMP,
    }
    await store.set(USERS, principal.uid, profile)
    logger.info("Registered user %s.", principal.uid)
    return principal


async def login(identity: IdentityProvider, email: str, password: str) -> Principal:
    return await identity.sign_in(email, password)


async def logout(identity: IdentityProvider) -> None:
    await identity.sign_out()


async def request_password_reset(identity: IdentityProvider, email: str) -> None:
    await identity.send_password_reset(email)
