"""Company endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, Request, status

from jobportal.api.dependencies import CompanyServiceDep, map_domain_exception_to_http
from jobportal.api.schemas.base import respond
from jobportal.api.schemas.company import CompanyCreate, CompanyUpdate
from jobportal.core.dependencies import AuthorizedUserDep
from jobportal.domain.exceptions import DomainException

router = APIRouter(prefix="/companies", tags=["companies"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_company(body: CompanyCreate, service: CompanyServiceDep, user: AuthorizedUserDep):
    try:
        created = await service.create(body.model_dump(exclude_none=True), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_201_CREATED, "Create a new company", created)


@router.get("")
async def list_companies(
    request: Request,
    service: CompanyServiceDep,
    user: AuthorizedUserDep,
    current: Optional[int] = Query(None, description="Page number, from 1"),
    pageSize: Optional[int] = Query(None, description="Page size"),
):
    try:
        page = await service.find_all(current, pageSize, request.url.query)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch companies with paginate", page)


@router.get("/{id}")
async def get_company(id: str, service: CompanyServiceDep, user: AuthorizedUserDep):
    try:
        company = await service.find_one(id)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch a company by id", company)


@router.patch("/{id}")
async def update_company(id: str, body: CompanyUpdate, service: CompanyServiceDep, user: AuthorizedUserDep):
    try:
        result = await service.update(id, body.model_dump(exclude_unset=True), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Update a company", result)


@router.delete("/{id}")
async def delete_company(id: str, service: CompanyServiceDep, user: AuthorizedUserDep):
    try:
        result = await service.remove(id, user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Delete a company", result)
