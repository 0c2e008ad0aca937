"""Application service provider utilities."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, TypeVar

from jobportal.application.auth_service import AuthenticationService
from jobportal.application.authorization_service import AuthorizationGate
from jobportal.application.bootstrap_service import BootstrapService
from jobportal.application.company_service import CompanyService
from jobportal.application.permission_service import PermissionService
from jobportal.application.resume_service import ResumeService
from jobportal.application.role_service import RoleResolver, RoleService
from jobportal.application.user_service import UserService
from jobportal.core.config import get_settings
from jobportal.domain.interfaces import IDocumentStore
from jobportal.infrastructure.providers.store_provider import get_document_store
from jobportal.utils.security import get_password_manager, get_token_manager

T = TypeVar("T")

_services: Dict[str, Any] = {}
_services_lock = asyncio.Lock()


async def _get(name: str, factory: Callable[[IDocumentStore], T]) -> T:
    service = _services.get(name)
    if service is not None:
        return service

    async with _services_lock:
        service = _services.get(name)
        if service is not None:
            return service
        store = await get_document_store()
        service = factory(store)
        _services[name] = service
        return service


def _page_size() -> int:
    return get_settings().DEFAULT_PAGE_SIZE


async def get_permission_service() -> PermissionService:
    return await _get("permissions", lambda store: PermissionService(store, _page_size()))


async def get_role_service() -> RoleService:
    return await _get("roles", lambda store: RoleService(store, _page_size()))


async def get_company_service() -> CompanyService:
    return await _get("companies", lambda store: CompanyService(store, _page_size()))


async def get_resume_service() -> ResumeService:
    return await _get("resumes", lambda store: ResumeService(store, _page_size()))


async def get_user_service() -> UserService:
    company_service = await get_company_service()
    return await _get(
        "users",
        lambda store: UserService(
            store,
            _page_size(),
            password_manager=get_password_manager(),
            company_service=company_service,
        ),
    )


async def get_role_resolver() -> RoleResolver:
    return await _get("role_resolver", RoleResolver)


async def get_authorization_gate() -> AuthorizationGate:
    """Return the authorization gate; it holds no role cache."""
    resolver = await get_role_resolver()
    return await _get("authorization_gate", lambda store: AuthorizationGate(resolver))


async def get_authentication_service() -> AuthenticationService:
    user_service = await get_user_service()
    resolver = await get_role_resolver()
    return await _get(
        "authentication",
        lambda store: AuthenticationService(user_service, resolver, token_manager=get_token_manager()),
    )


async def get_bootstrap_service() -> BootstrapService:
    """Return singleton bootstrap service."""
    return await _get(
        "bootstrap",
        lambda store: BootstrapService(
            store,
            password_manager=get_password_manager(),
            init_password=get_settings().INIT_PASSWORD,
        ),
    )


async def reset_services() -> None:
    """Reset every service singleton."""
    async with _services_lock:
        _services.clear()


__all__ = [
    "get_permission_service",
    "get_role_service",
    "get_company_service",
    "get_resume_service",
    "get_user_service",
    "get_role_resolver",
    "get_authorization_gate",
    "get_authentication_service",
    "get_bootstrap_service",
    "reset_services",
]
