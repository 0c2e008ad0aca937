"""
FastAPI Dependencies
"""

from typing import Annotated, Optional

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobportal.application.auth_service import AuthenticationService
from jobportal.application.authorization_service import AuthorizationGate
from jobportal.domain.exceptions import AuthenticationError, ForbiddenError
from jobportal.infrastructure.providers.service_provider import (
    get_authentication_service as resolve_authentication_service,
    get_authorization_gate as resolve_authorization_gate,
)
from jobportal.models.auth import CurrentUser

logger = structlog.get_logger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_async_auth_service() -> AuthenticationService:
    """Resolve the authentication service from infrastructure providers."""
    return await resolve_authentication_service()


async def get_async_authorization_gate() -> AuthorizationGate:
    """Resolve the authorization gate from infrastructure providers."""
    return await resolve_authorization_gate()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthenticationService = Depends(get_async_auth_service),
) -> CurrentUser:
    """Get current authenticated user"""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await auth_service.current_user(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def authorize_request(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    gate: AuthorizationGate = Depends(get_async_authorization_gate),
) -> CurrentUser:
    """
    Check the request path and method against the caller's role.

    The role is re-resolved from the store on every request.
    """
    role_id = current_user.role.id if current_user.role else None
    try:
        await gate.ensure_authorized(role_id, request.url.path, request.method)
    except ForbiddenError as e:
        logger.warning(
            "Permission denied",
            user_id=current_user.id,
            path=request.url.path,
            method=request.method,
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return current_user


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
AuthorizedUserDep = Annotated[CurrentUser, Depends(authorize_request)]


__all__ = [
    "security",
    "get_async_auth_service",
    "get_async_authorization_gate",
    "get_current_user",
    "authorize_request",
    "CurrentUserDep",
    "AuthorizedUserDep",
]
