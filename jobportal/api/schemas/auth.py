"""Request bodies for registration and login."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from jobportal.api.schemas.company import CompanyCreate


class LoginRequest(BaseModel):
    username: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=1, description="Password")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., description="Refresh token issued at login")


class RegisterRequest(BaseModel):
    """Self-service registration."""

    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[str] = None
    address: Optional[str] = None


class RecruiterRegisterRequest(RegisterRequest):
    """Registration of an HR user with the company it represents."""

    company: CompanyCreate


__all__ = ["LoginRequest", "RefreshRequest", "RegisterRequest", "RecruiterRegisterRequest"]
