"""Resume request bodies."""

from typing import Optional

from pydantic import BaseModel, Field


class ResumeCreate(BaseModel):
    url: str = Field(..., min_length=1, description="Stored resume file")
    companyId: Optional[str] = Field(None, description="Company applied to")


class ResumeUpdate(BaseModel):
    status: str = Field(..., min_length=1, description="New review status")


__all__ = ["ResumeCreate", "ResumeUpdate"]
