"""
API Package

Central package for all API endpoints.

Note: Routers are imported lazily to avoid circular import issues with application services.
"""

from fastapi import APIRouter

from jobportal.core.system_constants import API_PREFIX


def create_api_router() -> APIRouter:
    """
    Create and configure the main API router with all v1 routes.

    Every router except authentication is guarded per endpoint by the
    authorization gate dependency.
    """
    from jobportal.api.v1.auth import router as auth_router
    from jobportal.api.v1.companies import router as companies_router
    from jobportal.api.v1.permissions import router as permissions_router
    from jobportal.api.v1.resumes import router as resumes_router
    from jobportal.api.v1.roles import router as roles_router
    from jobportal.api.v1.users import router as users_router

    api_router = APIRouter()
    for router in (
        auth_router,
        permissions_router,
        roles_router,
        users_router,
        companies_router,
        resumes_router,
    ):
        api_router.include_router(router, prefix=API_PREFIX)

    return api_router


__all__ = ["create_api_router"]
