"""Resume endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, Request, status

from jobportal.api.dependencies import ResumeServiceDep, map_domain_exception_to_http
from jobportal.api.schemas.base import respond
from jobportal.api.schemas.resume import ResumeCreate, ResumeUpdate
from jobportal.core.dependencies import AuthorizedUserDep
from jobportal.domain.exceptions import DomainException

router = APIRouter(prefix="/resumes", tags=["resumes"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_resume(body: ResumeCreate, service: ResumeServiceDep, user: AuthorizedUserDep):
    """Submit a resume as the current user"""
    try:
        created = await service.create(body.model_dump(exclude_none=True), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_201_CREATED, "Create a new resume", created)


@router.post("/by-user")
async def resumes_by_user(service: ResumeServiceDep, user: AuthorizedUserDep):
    """Resumes submitted by the current user, newest first"""
    resumes = await service.find_by_user(user.as_actor())
    return respond(status.HTTP_200_OK, "Get resumes by user", resumes)


@router.get("")
async def list_resumes(
    request: Request,
    service: ResumeServiceDep,
    user: AuthorizedUserDep,
    current: Optional[int] = Query(None, description="Page number, from 1"),
    pageSize: Optional[int] = Query(None, description="Page size"),
):
    try:
        page = await service.find_all(current, pageSize, request.url.query)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch resumes with paginate", page)


@router.get("/{id}")
async def get_resume(id: str, service: ResumeServiceDep, user: AuthorizedUserDep):
    try:
        resume = await service.find_one(id)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Fetch a resume by id", resume)


@router.patch("/{id}")
async def update_resume_status(id: str, body: ResumeUpdate, service: ResumeServiceDep, user: AuthorizedUserDep):
    """Change the review status; the change is appended to the history"""
    try:
        result = await service.update(id, body.model_dump(), user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Update resume status", result)


@router.delete("/{id}")
async def delete_resume(id: str, service: ResumeServiceDep, user: AuthorizedUserDep):
    try:
        result = await service.remove(id, user.as_actor())
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Delete a resume", result)
