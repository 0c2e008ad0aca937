"""Permission request bodies."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE"}


def _check_method(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    method = value.upper()
    if method not in HTTP_METHODS:
        raise ValueError(f"method must be one of {', '.join(sorted(HTTP_METHODS))}")
    return method


class PermissionCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Human label")
    apiPath: str = Field(..., min_length=1, description="URL template, e.g. /api/v1/roles/:id")
    method: str = Field(..., description="HTTP verb")
    module: str = Field(..., min_length=1, description="Logical grouping")

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: Optional[str]) -> Optional[str]:
        return _check_method(v)


class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    apiPath: Optional[str] = Field(None, min_length=1)
    method: Optional[str] = None
    module: Optional[str] = Field(None, min_length=1)

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: Optional[str]) -> Optional[str]:
        return _check_method(v)


__all__ = ["PermissionCreate", "PermissionUpdate"]
