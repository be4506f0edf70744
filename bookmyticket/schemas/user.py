from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from bookmyticket.models.user import User
from bookmyticket.schemas.common import ApiModel


# Properties to receive via API on registration (POST /auth/register)
class UserCreate(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)


# Properties to receive via API on update (PATCH /me)
class UserUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    bio: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    profile_image: Optional[str] = None


# OAuth2 clients expect snake_case token fields
class Token(BaseModel):
    access_token: str
    token_type: str
    user: Optional[User] = None


class PasswordResetRequest(ApiModel):
    email: EmailStr


class PasswordResetConfirm(ApiModel):
    token: str
    new_password: str = Field(..., min_length=6)
