"""
API-specific dependencies for application services.

Bridges the API layer with the provider-managed application services and
maps domain exceptions onto HTTP responses.
"""

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException

from jobportal.application.company_service import CompanyService
from jobportal.application.permission_service import PermissionService
from jobportal.application.resume_service import ResumeService
from jobportal.application.role_service import RoleService
from jobportal.application.user_service import UserService
from jobportal.database.error_handling import DatabaseError
from jobportal.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainException,
    NotFoundError,
    ProtectedResourceError,
    ValidationError,
)
from jobportal.infrastructure.providers import service_provider

logger = structlog.get_logger(__name__)


async def get_permission_service() -> PermissionService:
    return await service_provider.get_permission_service()


async def get_role_service() -> RoleService:
    return await service_provider.get_role_service()


async def get_user_service() -> UserService:
    return await service_provider.get_user_service()


async def get_company_service() -> CompanyService:
    return await service_provider.get_company_service()


async def get_resume_service() -> ResumeService:
    return await service_provider.get_resume_service()


# Type aliases for dependency injection
PermissionServiceDep = Annotated[PermissionService, Depends(get_permission_service)]
RoleServiceDep = Annotated[RoleService, Depends(get_role_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
CompanyServiceDep = Annotated[CompanyService, Depends(get_company_service)]
ResumeServiceDep = Annotated[ResumeService, Depends(get_resume_service)]


def map_domain_exception_to_http(exception: Exception) -> HTTPException:
    """Map domain exceptions to appropriate HTTP responses."""

    # Malformed ids are both NotFound and Validation errors; they are client input errors
    if isinstance(exception, ValidationError):
        return HTTPException(status_code=400, detail=str(exception))

    # NotFoundError hierarchy - 404 Not Found
    elif isinstance(exception, NotFoundError):
        return HTTPException(status_code=404, detail=str(exception))

    # AuthorizationError hierarchy - 403 Forbidden
    elif isinstance(exception, AuthorizationError):
        return HTTPException(status_code=403, detail=str(exception))

    # AuthenticationError - 401 Unauthorized
    elif isinstance(exception, AuthenticationError):
        return HTTPException(
            status_code=401,
            detail=str(exception),
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Protected records - 400, aborted before any mutation
    elif isinstance(exception, ProtectedResourceError):
        return HTTPException(status_code=400, detail=str(exception))

    # Store failures - 500 Internal Server Error
    elif isinstance(exception, DatabaseError):
        logger.error("Database error", error=str(exception))
        return HTTPException(status_code=500, detail="Database operation failed")

    # Generic DomainException - 500 Internal Server Error
    elif isinstance(exception, DomainException):
        logger.error("Unhandled domain exception", exception_type=type(exception).__name__, error=str(exception))
        return HTTPException(status_code=500, detail="Domain operation failed")

    else:
        logger.error("Non-domain exception in mapping", exception_type=type(exception).__name__, error=str(exception))
        return HTTPException(status_code=500, detail="Internal server error")


__all__ = [
    "get_permission_service",
    "get_role_service",
    "get_user_service",
    "get_company_service",
    "get_resume_service",
    "PermissionServiceDep",
    "RoleServiceDep",
    "UserServiceDep",
    "CompanyServiceDep",
    "ResumeServiceDep",
    "map_domain_exception_to_http",
]
