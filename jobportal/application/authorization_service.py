"""
Authorization gate: maps a request to a permission of the caller's role.

Decisions are never cached; the caller's role is resolved from the store on
every call so role and permission edits apply to the very next request.
"""

from typing import List, Optional

import structlog

from jobportal.application.role_service import RoleResolver
from jobportal.domain.entities.permission import Permission
from jobportal.domain.entities.role import Role
from jobportal.domain.exceptions import ForbiddenError, NotFoundError

logger = structlog.get_logger(__name__)


def path_segments(path: str) -> List[str]:
    """Split a path into segments, ignoring the query string and empty segments."""
    path = path.split("?", 1)[0]
    return [segment for segment in path.split("/") if segment]


def is_parameter(segment: str) -> bool:
    return segment.startswith(":") or (segment.startswith("{") and segment.endswith("}"))


def template_matches(template: str, request_path: str) -> bool:
    """
    Match an apiPath template segment by segment.

    Parameter segments (``:id`` or ``{id}``) match any single non-empty
    segment; all other segments must be equal.
    """
    expected = path_segments(template)
    actual = path_segments(request_path)
    if len(expected) != len(actual):
        return False
    return all(is_parameter(e) or e == a for e, a in zip(expected, actual))


def permission_matches(permission: Permission, request_path: str, request_method: str) -> bool:
    return (
        permission.method.upper() == request_method.upper()
        and template_matches(permission.api_path, request_path)
    )


class AuthorizationGate:
    """Allows a request iff the caller's effective permissions cover it."""

    def __init__(self, resolver: RoleResolver):
        self.resolver = resolver

    @staticmethod
    def authorize(caller_role: Optional[Role], request_path: str, request_method: str) -> bool:
        if caller_role is None:
            return False
        return any(
            permission_matches(permission, request_path, request_method)
            for permission in caller_role.effective_permissions
        )

    async def resolve_role(self, role_id: Optional[str]) -> Optional[Role]:
        if not role_id:
            return None
        try:
            return await self.resolver.resolve(role_id)
        except NotFoundError:
            # A missing or deleted role grants nothing
            logger.warning("Caller role could not be resolved", role_id=role_id)
            return None

    async def ensure_authorized(
        self,
        role_id: Optional[str],
        request_path: str,
        request_method: str,
    ) -> Role:
        """
        Resolve the caller's role and check the request against it.

        Raises:
            ForbiddenError: If no effective permission matches
        """
        role = await self.resolve_role(role_id)
        if not self.authorize(role, request_path, request_method):
            logger.info(
                "Request denied",
                path=request_path,
                method=request_method.upper(),
                role=role.name if role else None,
            )
            raise ForbiddenError(request_path, request_method.upper(), role.name if role else None)
        return role


__all__ = ["AuthorizationGate", "template_matches", "permission_matches", "path_segments"]
