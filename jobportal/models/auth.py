"""
Authentication models: identity context, token payloads and responses.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from jobportal.domain.value_objects import Actor
from jobportal.models.base import BaseModel


class RoleRef(BaseModel):
    """Role reference carried in the identity context."""

    id: str = Field(..., description="Role ID")
    name: str = Field(..., description="Role name")


class CurrentUser(BaseModel):
    """Resolved caller of an authenticated request."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    name: str = Field(default="", description="Display name")
    role: Optional[RoleRef] = Field(None, description="Assigned role")

    def as_actor(self) -> Actor:
        return Actor(id=self.id, email=self.email)


class TokenData(BaseModel):
    """Decoded access token claims."""

    sub: str = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    name: str = Field(default="", description="Display name")
    role: Optional[RoleRef] = Field(None, description="Assigned role")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    token_type: str = Field("access", description="Token type")


class TokenResponse(BaseModel):
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field("bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration in seconds")


class AuthenticationResult(BaseModel):
    """Outcome of a successful login or refresh."""

    user: CurrentUser
    tokens: TokenResponse


class AccountInfo(BaseModel):
    """Caller profile together with the effective permissions of its role."""

    user: CurrentUser
    permissions: List[Dict[str, Any]] = Field(default_factory=list)


__all__ = [
    "RoleRef",
    "CurrentUser",
    "TokenData",
    "TokenResponse",
    "AuthenticationResult",
    "AccountInfo",
]
