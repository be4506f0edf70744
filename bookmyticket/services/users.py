from typing import Any, Dict, List, Optional

from bookmyticket.db.store import USERS, DocumentStore
from bookmyticket.models.base import storable
from bookmyticket.models.user import User


async def get_user(store: DocumentStore, uid: str) -> Optional[User]:
    doc = await store.get(USERS, uid)
    if doc is None:
        return None
    users = User.parse_documents([doc])
    return users[0] if users else None


async def update_user_profile(store: DocumentStore, uid: str, fields: Dict[str, Any]) -> Optional[User]:
    """Merge profile fields. The admin flag is never writable from here."""
    fields = {k: v for k, v in fields.items() if k not in ("admin", "email", "createdAt")}
    if fields:
        await store.update(USERS, uid, storable(fields))
    return await get_user(store, uid)


async def list_users(store: DocumentStore) -> List[User]:
    """Newest accounts first."""
    docs = await store.query(USERS, order_by="createdAt", descending=True)
    return User.parse_documents(docs)
