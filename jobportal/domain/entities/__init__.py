"""Domain entities."""

from jobportal.domain.entities.permission import Permission
from jobportal.domain.entities.role import Role

__all__ = ["Permission", "Role"]
