"""User administration endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, Request, status

from jobportal.api.dependencies import UserServiceDep, map_domain_exception_to_http
from jobportal.api.schemas.base import respond
from jobportal.api.schemas.user import UserCreate, UserUpdate
from jobportal.core.dependencies import AuthorizedUserDep
from jobportal.domain.exceptions import DomainException

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, service: UserServiceDep, user: AuthorizedUserDep):
    try:
        created = await service.create(body.model_dump(exclude_none=True), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_201_CREATED, "Create a new user", created)


@router.get("")
async def list_users(
    request: Request,
    service: UserServiceDep,
    user: AuthorizedUserDep,
    current: Optional[int] = Query(None, description="Page number, from 1"),
    pageSize: Optional[int] = Query(None, description="Page size"),
):
    """List users; passwords are never included, whatever ``fields`` asks for"""
    try:
        page = await service.find_all(current, pageSize, request.url.query)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch users with paginate", page)


@router.get("/{id}")
async def get_user(id: str, service: UserServiceDep, user: AuthorizedUserDep):
    try:
        found = await service.find_one(id)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch a user by id", found)


@router.patch("/{id}")
async def update_user(id: str, body: UserUpdate, service: UserServiceDep, user: AuthorizedUserDep):
    try:
        result = await service.update(id, body.model_dump(exclude_unset=True), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Update a user", result)


@router.delete("/{id}")
async def delete_user(id: str, service: UserServiceDep, user: AuthorizedUserDep):
    try:
        result = await service.remove(id, user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Delete a user", result)
