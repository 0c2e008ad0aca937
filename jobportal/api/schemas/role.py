"""Role request bodies."""

from typing import List, Optional

from pydantic import BaseModel, Field


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Unique role name")
    description: str = Field("", description="What the role is for")
    isActive: bool = Field(True, description="Inactive roles grant nothing")
    permissions: List[str] = Field(default_factory=list, description="Ordered permission ids")


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    isActive: Optional[bool] = None
    permissions: Optional[List[str]] = None


__all__ = ["RoleCreate", "RoleUpdate"]
