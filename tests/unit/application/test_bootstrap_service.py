"""Bootstrap service tests."""

import pytest

from jobportal.application.bootstrap_service import BootstrapService
from jobportal.core.system_constants import INIT_PERMISSIONS


@pytest.fixture
def bootstrap_service(store, password_manager):
    return BootstrapService(store, password_manager=password_manager, init_password="123456")


class TestSeeding:
    """First-boot seeding of permissions, roles and users."""

    @pytest.mark.asyncio
    async def test_seeds_empty_store(self, bootstrap_service, store):
        inserted = await bootstrap_service.seed()

        assert inserted == {"permissions": len(INIT_PERMISSIONS), "roles": 2, "users": 3}
        roles = {r["name"]: r for r in await store.find("roles")}
        assert set(roles) == {"ADMIN", "USER"}
        assert len(roles["ADMIN"]["permissions"]) == len(INIT_PERMISSIONS)
        assert roles["USER"]["permissions"] == []

    @pytest.mark.asyncio
    async def test_seeded_users(self, bootstrap_service, store, password_manager):
        await bootstrap_service.seed()

        users = {u["email"]: u for u in await store.find("users")}
        roles = {r["id"]: r["name"] for r in await store.find("roles")}
        assert roles[users["admin@gmail.com"]["role"]] == "ADMIN"
        assert roles[users["zoro@gmail.com"]["role"]] == "ADMIN"
        assert roles[users["rauden@gmail.com"]["role"]] == "USER"
        assert password_manager.verify_password("123456", users["zoro@gmail.com"]["password"])

    @pytest.mark.asyncio
    async def test_second_run_is_noop(self, bootstrap_service, store):
        await bootstrap_service.seed()

        inserted = await bootstrap_service.seed()

        assert inserted == {"permissions": 0, "roles": 0, "users": 0}
        assert await store.count("users") == 3

    @pytest.mark.asyncio
    async def test_any_existing_collection_skips_seeding(self, bootstrap_service, store):
        await store.insert_one("roles", {"name": "HR", "permissions": []})

        inserted = await bootstrap_service.seed()

        assert inserted == {"permissions": 0, "roles": 0, "users": 0}
        assert await store.count("permissions") == 0
