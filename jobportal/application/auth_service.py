"""Login, refresh-token rotation, logout and account lookup."""

from typing import Any, Dict, Optional

import structlog

from jobportal.application.role_service import RoleResolver
from jobportal.application.user_service import UserService
from jobportal.domain.exceptions import AuthenticationError, NotFoundError
from jobportal.models.auth import AccountInfo, AuthenticationResult, CurrentUser, RoleRef, TokenResponse
from jobportal.utils.security import TokenManager, get_token_manager

logger = structlog.get_logger(__name__)


def to_current_user(document: Dict[str, Any]) -> CurrentUser:
    """Identity context from a user document whose role is populated."""
    role = document.get("role")
    return CurrentUser(
        id=document["id"],
        email=document.get("email", ""),
        name=document.get("name", ""),
        role=RoleRef(id=role["id"], name=role.get("name", "")) if isinstance(role, dict) else None,
    )


class AuthenticationService:
    """Issues and rotates session tokens for users."""

    def __init__(
        self,
        user_service: UserService,
        role_resolver: RoleResolver,
        token_manager: Optional[TokenManager] = None,
    ):
        self.users = user_service
        self.roles = role_resolver
        self.tokens = token_manager or get_token_manager()

    async def _issue(self, user: CurrentUser) -> AuthenticationResult:
        role = user.role.model_dump() if user.role else None
        access_token = self.tokens.create_access_token(user.id, user.email, user.name, role)
        refresh_token = self.tokens.create_refresh_token(user.id)
        await self.users.update_user_token(refresh_token, user.id)
        return AuthenticationResult(
            user=user,
            tokens=TokenResponse(
                access_token=access_token,
                refresh_token=refresh_token,
                expires_in=self.tokens.access_token_ttl_seconds,
            ),
        )

    async def validate_user(self, username: str, password: str) -> Optional[CurrentUser]:
        document = await self.users.find_one_by_username(username)
        if document is None or not self.users.is_valid_password(password, document.get("password")):
            return None
        return to_current_user(document)

    async def login(self, username: str, password: str) -> AuthenticationResult:
        """
        Authenticate with email and password.

        Raises:
            AuthenticationError: If the credentials do not match a live user
        """
        user = await self.validate_user(username, password)
        if user is None:
            logger.info("Login failed", username=username)
            raise AuthenticationError("Invalid username or password")
        logger.info("User logged in", user_id=user.id)
        return await self._issue(user)

    async def refresh(self, refresh_token: str) -> AuthenticationResult:
        """
        Exchange a refresh token for a new token pair; the old one stops working.

        Raises:
            AuthenticationError: If the token is invalid, expired or already rotated
        """
        payload = self.tokens.verify_token(refresh_token, expected_type="refresh")
        if payload is None:
            raise AuthenticationError("Refresh token is invalid or expired")
        document = await self.users.find_user_by_token(refresh_token)
        if document is None or document["id"] != payload.get("sub"):
            raise AuthenticationError("Refresh token is invalid or expired")
        return await self._issue(to_current_user(document))

    async def logout(self, caller: CurrentUser) -> None:
        await self.users.update_user_token(None, caller.id)
        logger.info("User logged out", user_id=caller.id)

    async def account(self, caller: CurrentUser) -> AccountInfo:
        """The caller with the effective permissions of its current role."""
        permissions = []
        if caller.role is not None:
            try:
                role = await self.roles.resolve(caller.role.id)
                permissions = [p.to_display() for p in role.effective_permissions]
            except NotFoundError:
                logger.warning("Caller role missing", user_id=caller.id, role_id=caller.role.id)
        return AccountInfo(user=caller, permissions=permissions)

    async def current_user(self, access_token: str) -> CurrentUser:
        """
        Identity context for an access token.

        The user is re-read from the store so deleted accounts and role
        changes take effect immediately.

        Raises:
            AuthenticationError: If the token is invalid or the user is gone
        """
        payload = self.tokens.verify_token(access_token, expected_type="access")
        token_data = self.tokens.extract_token_data(payload) if payload else None
        if token_data is None:
            raise AuthenticationError("Invalid or expired token")
        try:
            document = await self.users.find_identity(token_data.sub)
        except NotFoundError:
            document = None
        if document is None:
            raise AuthenticationError("User no longer exists")
        return to_current_user(document)


__all__ = ["AuthenticationService", "to_current_user"]
