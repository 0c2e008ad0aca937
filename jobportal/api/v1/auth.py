"""
Authentication API Endpoints

Provides registration and session endpoints:
- Self-service and recruiter registration
- Login, refresh-token rotation and logout
- Account lookup for the current user
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status

from jobportal.api.dependencies import UserServiceDep, map_domain_exception_to_http
from jobportal.api.schemas.auth import LoginRequest, RecruiterRegisterRequest, RefreshRequest, RegisterRequest
from jobportal.api.schemas.base import respond
from jobportal.application.auth_service import AuthenticationService
from jobportal.core.config import get_settings
from jobportal.core.dependencies import CurrentUserDep, get_async_auth_service
from jobportal.domain.exceptions import DomainException
from jobportal.models.auth import AuthenticationResult

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

REFRESH_COOKIE = "refresh_token"


def _session_payload(result: AuthenticationResult, response: Response) -> dict:
    settings = get_settings()
    response.set_cookie(
        REFRESH_COOKIE,
        result.tokens.refresh_token,
        httponly=True,
        secure=settings.is_production(),
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
    )
    return {
        **result.tokens.model_dump(),
        "user": result.user.model_dump(),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Register new user")
async def register(body: RegisterRequest, request: Request, user_service: UserServiceDep):
    """Register a new account with the default USER role"""
    try:
        created = await user_service.register(body.model_dump(exclude_none=True))
    except DomainException as e:
        logger.warning(
            "Registration failed",
            error=str(e),
            email=body.email,
            ip_address=request.client.host if request.client else "unknown",
        )
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_201_CREATED, "Register a new user", created)


@router.post("/register/recruiter", status_code=status.HTTP_201_CREATED, summary="Register recruiter")
async def register_recruiter(body: RecruiterRegisterRequest, user_service: UserServiceDep):
    """Register an HR user together with its company"""
    try:
        created = await user_service.register_recruiter(body.model_dump(exclude_none=True))
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_201_CREATED, "Register a new recruiter", created)


@router.post("/login", summary="User login")
async def login(
    credentials: LoginRequest,
    response: Response,
    auth_service: AuthenticationService = Depends(get_async_auth_service),
):
    """Authenticate user and return tokens"""
    try:
        result = await auth_service.login(credentials.username, credentials.password)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "User login", _session_payload(result, response))


@router.post("/refresh", summary="Rotate refresh token")
async def refresh(
    response: Response,
    body: Optional[RefreshRequest] = None,
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    auth_service: AuthenticationService = Depends(get_async_auth_service),
):
    """Exchange a refresh token (body or cookie) for a new token pair"""
    token = body.refresh_token if body else refresh_cookie
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token required")
    try:
        result = await auth_service.refresh(token)
    except DomainException as e:
        raise map_domain_exception_to_http(e)
    return respond(status.HTTP_200_OK, "Get user by refresh token", _session_payload(result, response))


@router.post("/logout", summary="Logout")
async def logout(
    current_user: CurrentUserDep,
    response: Response,
    auth_service: AuthenticationService = Depends(get_async_auth_service),
):
    """Invalidate the stored refresh token"""
    await auth_service.logout(current_user)
    response.delete_cookie(REFRESH_COOKIE)
    return respond(status.HTTP_200_OK, "Logout user", "ok")


@router.get("/account", summary="Current account")
async def account(
    current_user: CurrentUserDep,
    auth_service: AuthenticationService = Depends(get_async_auth_service),
):
    """Return the current user with the permissions of its role"""
    info = await auth_service.account(current_user)
    return respond(status.HTTP_200_OK, "Get user information", info.model_dump())
