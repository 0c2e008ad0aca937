"""
Security tests for AuthenticationService

Covers login, refresh-token rotation, logout, account lookup and the
identity context built for access tokens.
"""

import pytest

from jobportal.application.auth_service import AuthenticationService
from jobportal.application.role_service import RoleResolver
from jobportal.application.user_service import UserService
from jobportal.core.config import get_settings
from jobportal.domain.exceptions import AuthenticationError
from jobportal.utils.security import get_token_manager

INIT_PASSWORD = get_settings().INIT_PASSWORD


@pytest.fixture
def user_service(seeded_store, password_manager):
    return UserService(seeded_store, password_manager=password_manager)


@pytest.fixture
def auth_service(seeded_store, user_service):
    return AuthenticationService(user_service, RoleResolver(seeded_store), token_manager=get_token_manager())


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_issues_tokens(self, auth_service, user_service):
        result = await auth_service.login("admin@gmail.com", INIT_PASSWORD)

        assert result.user.email == "admin@gmail.com"
        assert result.user.role.name == "ADMIN"
        assert result.tokens.token_type == "bearer"
        stored = await user_service.find_one_by_username("admin@gmail.com")
        assert stored["refreshToken"] == result.tokens.refresh_token

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth_service):
        with pytest.raises(AuthenticationError):
            await auth_service.login("admin@gmail.com", "wrong")

    @pytest.mark.asyncio
    async def test_unknown_user(self, auth_service):
        with pytest.raises(AuthenticationError):
            await auth_service.login("nobody@gmail.com", INIT_PASSWORD)


class TestRefresh:

    @pytest.mark.asyncio
    async def test_rotation_invalidates_previous_token(self, auth_service):
        first = await auth_service.login("zoro@gmail.com", INIT_PASSWORD)

        second = await auth_service.refresh(first.tokens.refresh_token)

        assert second.tokens.refresh_token != first.tokens.refresh_token
        with pytest.raises(AuthenticationError):
            await auth_service.refresh(first.tokens.refresh_token)

    @pytest.mark.asyncio
    async def test_access_token_is_not_a_refresh_token(self, auth_service):
        result = await auth_service.login("zoro@gmail.com", INIT_PASSWORD)

        with pytest.raises(AuthenticationError):
            await auth_service.refresh(result.tokens.access_token)

    @pytest.mark.asyncio
    async def test_logout_revokes_refresh_token(self, auth_service):
        result = await auth_service.login("zoro@gmail.com", INIT_PASSWORD)

        await auth_service.logout(result.user)

        with pytest.raises(AuthenticationError):
            await auth_service.refresh(result.tokens.refresh_token)


class TestIdentity:

    @pytest.mark.asyncio
    async def test_current_user_from_access_token(self, auth_service):
        result = await auth_service.login("rauden@gmail.com", INIT_PASSWORD)

        caller = await auth_service.current_user(result.tokens.access_token)

        assert caller.id == result.user.id
        assert caller.role.name == "USER"

    @pytest.mark.asyncio
    async def test_deleted_user_is_rejected(self, auth_service, user_service, admin_actor):
        result = await auth_service.login("zoro@gmail.com", INIT_PASSWORD)
        await user_service.remove(result.user.id, admin_actor)

        with pytest.raises(AuthenticationError):
            await auth_service.current_user(result.tokens.access_token)

    @pytest.mark.asyncio
    async def test_garbage_token(self, auth_service):
        with pytest.raises(AuthenticationError):
            await auth_service.current_user("not-a-jwt")

    @pytest.mark.asyncio
    async def test_account_lists_role_permissions(self, auth_service):
        admin = await auth_service.login("admin@gmail.com", INIT_PASSWORD)
        user = await auth_service.login("rauden@gmail.com", INIT_PASSWORD)

        admin_account = await auth_service.account(admin.user)
        user_account = await auth_service.account(user.user)

        assert len(admin_account.permissions) > 0
        assert user_account.permissions == []
