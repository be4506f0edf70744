from datetime import datetime
from typing import Optional

from pydantic import field_validator

from bookmyticket.models.base import StoredRecord, coerce_text, coerce_timestamp


class User(StoredRecord):
    name: str = ""
    email: str = ""
    admin: bool = False
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("name", "email", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else str(v)

    @field_validator("phone", "address", "bio", "profile_image", mode="before")
    @classmethod
    def optional_text(cls, v):
        return coerce_text(v)

    @field_validator("admin", mode="before")
    @classmethod
    def strict_admin(cls, v):
        # Only a stored boolean true grants admin
        return v is True

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_created_at(cls, v):
        return coerce_timestamp(v)
