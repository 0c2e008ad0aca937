"""Permission catalog endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, Request, status

from jobportal.api.dependencies import PermissionServiceDep, map_domain_exception_to_http
from jobportal.api.schemas.base import respond
from jobportal.api.schemas.permission import PermissionCreate, PermissionUpdate
from jobportal.core.dependencies import AuthorizedUserDep
from jobportal.domain.exceptions import DomainException

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_permission(body: PermissionCreate, service: PermissionServiceDep, user: AuthorizedUserDep):
    try:
        created = await service.create(body.model_dump(), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_201_CREATED, "Create a new permission", created)


@router.get("")
async def list_permissions(
    request: Request,
    service: PermissionServiceDep,
    user: AuthorizedUserDep,
    current: Optional[int] = Query(None, description="Page number, from 1"),
    pageSize: Optional[int] = Query(None, description="Page size"),
):
    try:
        page = await service.find_all(current, pageSize, request.url.query)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch permissions with paginate", page)


@router.get("/{id}")
async def get_permission(id: str, service: PermissionServiceDep, user: AuthorizedUserDep):
    try:
        permission = await service.find_one(id)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch a permission by id", permission)


@router.patch("/{id}")
async def update_permission(id: str, body: PermissionUpdate, service: PermissionServiceDep, user: AuthorizedUserDep):
    try:
        result = await service.update(id, body.model_dump(exclude_unset=True), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Update a permission", result)


@router.delete("/{id}")
async def delete_permission(id: str, service: PermissionServiceDep, user: AuthorizedUserDep):
    try:
        result = await service.remove(id, user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Delete a permission", result)
