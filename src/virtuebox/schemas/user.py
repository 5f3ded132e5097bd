"""User and authentication schema definitions."""

from enum import Enum
from typing import Optional

from pydantic import Field

from .base import CamelModel


class Role(str, Enum):
    ADMIN = "ADMIN"
    PARTNER = "PARTNER"


class TokenPayload(CamelModel):
    """Claims carried inside a signed session token."""

    sub: str = Field(description="The user_id of the token holder.")
    email: str
    role: Role
    name: str
    partner_id: Optional[str] = Field(
        default=None,
        description="Partner identifier, present for PARTNER users only.",
    )

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class LoginRequest(CamelModel):
    # Optional so that missing fields produce the login-specific 400 message
    email: Optional[str] = None
    password: Optional[str] = None


class CurrentUser(CamelModel):
    id: str
    name: str
    email: str
    role: Role
    partner_id: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: TokenPayload) -> "CurrentUser":
        return cls(
            id=claims.sub,
            name=claims.name,
            email=claims.email,
            role=claims.role,
            partner_id=claims.partner_id,
        )


class LoginResponse(CamelModel):
    success: bool = True
    message: str = "Login successful"
    user: CurrentUser


class CurrentUserResponse(CamelModel):
    success: bool = True
    user: CurrentUser


class MessageResponse(CamelModel):
    success: bool = True
    message: str
