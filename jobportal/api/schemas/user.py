"""User request bodies."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class CompanyRef(BaseModel):
    id: str
    name: str


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[str] = None
    address: Optional[str] = None
    role: str = Field(..., description="Role id")
    company: Optional[CompanyRef] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[str] = None
    address: Optional[str] = None
    role: Optional[str] = None
    company: Optional[CompanyRef] = None


__all__ = ["UserCreate", "UserUpdate", "CompanyRef"]
