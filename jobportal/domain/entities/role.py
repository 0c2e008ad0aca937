"""Role aggregate: a named, ordered set of permissions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from jobportal.domain.entities.permission import Permission


@dataclass
class Role:
    """
    Role with its permissions expanded.

    ``permissions`` holds the live (non-deleted) permission records in the
    order the role lists them. The effective set is empty for inactive roles.
    """

    id: str
    name: str
    description: str = ""
    is_active: bool = True
    permissions: List[Permission] = field(default_factory=list)

    @property
    def effective_permissions(self) -> List[Permission]:
        if not self.is_active:
            return []
        return list(self.permissions)
