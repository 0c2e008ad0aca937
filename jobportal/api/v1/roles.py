"""Role endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, Request, status

from jobportal.api.dependencies import RoleServiceDep, map_domain_exception_to_http
from jobportal.api.schemas.base import respond
from jobportal.api.schemas.role import RoleCreate, RoleUpdate
from jobportal.core.dependencies import AuthorizedUserDep
from jobportal.domain.exceptions import DomainException

router = APIRouter(prefix="/roles", tags=["roles"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(body: RoleCreate, service: RoleServiceDep, user: AuthorizedUserDep):
    try:
        created = await service.create(body.model_dump(), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_201_CREATED, "Create a new role", created)


@router.get("")
async def list_roles(
    request: Request,
    service: RoleServiceDep,
    user: AuthorizedUserDep,
    current: Optional[int] = Query(None, description="Page number, from 1"),
    pageSize: Optional[int] = Query(None, description="Page size"),
):
    try:
        page = await service.find_all(current, pageSize, request.url.query)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch roles with paginate", page)


@router.get("/{id}")
async def get_role(id: str, service: RoleServiceDep, user: AuthorizedUserDep):
    try:
        role = await service.find_one(id)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch a role by id", role)


@router.patch("/{id}")
async def update_role(id: str, body: RoleUpdate, service: RoleServiceDep, user: AuthorizedUserDep):
    try:
        result = await service.update(id, body.model_dump(exclude_unset=True), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Update a role", result)


@router.delete("/{id}")
async def delete_role(id: str, service: RoleServiceDep, user: AuthorizedUserDep):
    try:
        result = await service.remove(id, user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Delete a role", result)
