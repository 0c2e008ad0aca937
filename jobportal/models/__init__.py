"""Persistence tables and shared pydantic models."""

from jobportal.models.auth import CurrentUser, RoleRef
from jobportal.models.document import DocumentTable

__all__ = ["CurrentUser", "RoleRef", "DocumentTable"]
