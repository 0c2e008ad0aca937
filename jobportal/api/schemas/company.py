"""Company request bodies."""

from typing import Optional

from pydantic import BaseModel, Field


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Company name")
    address: Optional[str] = Field(None, description="Postal address")
    description: Optional[str] = Field(None, description="About the company")
    logo: Optional[str] = Field(None, description="Logo file name or URL")


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None


__all__ = ["CompanyCreate", "CompanyUpdate"]
