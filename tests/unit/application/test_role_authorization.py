"""
Security tests for roles and the authorization gate

This test suite covers:
- Path template matching: parameters, trailing slashes, query strings
- Permission expansion: role order, revoked (deleted) permissions
- Gate decisions: inactive roles, missing roles, live role edits
- Protection of the ADMIN role
"""

import pytest

from jobportal.application.authorization_service import AuthorizationGate, template_matches
from jobportal.application.permission_service import PermissionService
from jobportal.application.role_service import RoleResolver, RoleService
from jobportal.domain.entities.permission import Permission
from jobportal.domain.entities.role import Role
from jobportal.domain.exceptions import (
    ForbiddenError,
    MalformedIdError,
    ProtectedResourceError,
    RoleNotFoundError,
    ValidationError,
)
from jobportal.domain.value_objects import new_record_id


@pytest.fixture
def role_service(store):
    return RoleService(store)


@pytest.fixture
def permission_service(store):
    return PermissionService(store)


@pytest.fixture
def gate(store):
    return AuthorizationGate(RoleResolver(store))


@pytest.fixture
async def catalog(permission_service, admin_actor):
    """Two permissions on the jobs resource: list and read by id."""
    list_jobs = await permission_service.create(
        {"name": "List jobs", "apiPath": "/api/v1/jobs", "method": "GET", "module": "JOBS"}, admin_actor
    )
    get_job = await permission_service.create(
        {"name": "Get job", "apiPath": "/api/v1/jobs/:id", "method": "GET", "module": "JOBS"}, admin_actor
    )
    return {"list": list_jobs["id"], "get": get_job["id"]}


class TestTemplateMatching:

    @pytest.mark.parametrize(
        "template,path,expected",
        [
            ("/api/v1/jobs", "/api/v1/jobs", True),
            ("/api/v1/jobs", "/api/v1/jobs/", True),
            ("/api/v1/jobs/:id", "/api/v1/jobs/42", True),
            ("/api/v1/jobs/{id}", "/api/v1/jobs/42", True),
            ("/api/v1/jobs/:id", "/api/v1/jobs", False),
            ("/api/v1/jobs/:id", "/api/v1/jobs/42/apply", False),
            ("/api/v1/jobs", "/api/v1/jobs?current=2", True),
            ("/api/v1/jobs", "/api/v1/companies", False),
        ],
    )
    def test_template_matches(self, template, path, expected):
        assert template_matches(template, path) is expected

    def test_authorize_matches_method(self):
        role = Role(
            id="r",
            name="HR",
            permissions=[Permission(id="p", api_path="/api/v1/jobs", method="GET", module="JOBS", name="")],
        )
        assert AuthorizationGate.authorize(role, "/api/v1/jobs", "get") is True
        assert AuthorizationGate.authorize(role, "/api/v1/jobs", "POST") is False

    def test_no_role_denied(self):
        assert AuthorizationGate.authorize(None, "/api/v1/jobs", "GET") is False


class TestRoleResolver:

    @pytest.mark.asyncio
    async def test_expands_in_role_order(self, role_service, catalog, store, admin_actor):
        created = await role_service.create(
            {"name": "HR", "permissions": [catalog["get"], catalog["list"]]}, admin_actor
        )

        role = await RoleResolver(store).resolve(created["id"])

        assert [p.id for p in role.permissions] == [catalog["get"], catalog["list"]]

    @pytest.mark.asyncio
    async def test_deleted_permission_is_revoked(
        self, role_service, permission_service, catalog, store, admin_actor
    ):
        created = await role_service.create(
            {"name": "HR", "permissions": [catalog["get"], catalog["list"]]}, admin_actor
        )
        await permission_service.remove(catalog["get"], admin_actor)

        role = await RoleResolver(store).resolve(created["id"])

        assert [p.id for p in role.permissions] == [catalog["list"]]

    @pytest.mark.asyncio
    async def test_missing_role(self, store):
        with pytest.raises(RoleNotFoundError):
            await RoleResolver(store).resolve(new_record_id())

    @pytest.mark.asyncio
    async def test_malformed_role_id(self, store):
        with pytest.raises(MalformedIdError):
            await RoleResolver(store).resolve("42")


class TestAuthorizationGate:

    @pytest.mark.asyncio
    async def test_granted(self, gate, role_service, catalog, admin_actor):
        created = await role_service.create({"name": "HR", "permissions": [catalog["get"]]}, admin_actor)

        role = await gate.ensure_authorized(created["id"], "/api/v1/jobs/7", "GET")

        assert role.name == "HR"

    @pytest.mark.asyncio
    async def test_denied(self, gate, role_service, catalog, admin_actor):
        created = await role_service.create({"name": "HR", "permissions": [catalog["get"]]}, admin_actor)

        with pytest.raises(ForbiddenError):
            await gate.ensure_authorized(created["id"], "/api/v1/jobs/7", "DELETE")

    @pytest.mark.asyncio
    async def test_inactive_role_grants_nothing(self, gate, role_service, catalog, admin_actor):
        created = await role_service.create(
            {"name": "HR", "isActive": False, "permissions": [catalog["get"]]}, admin_actor
        )

        with pytest.raises(ForbiddenError):
            await gate.ensure_authorized(created["id"], "/api/v1/jobs/7", "GET")

    @pytest.mark.asyncio
    async def test_role_edit_applies_immediately(self, gate, role_service, catalog, admin_actor):
        created = await role_service.create({"name": "HR", "permissions": []}, admin_actor)
        with pytest.raises(ForbiddenError):
            await gate.ensure_authorized(created["id"], "/api/v1/jobs", "GET")

        await role_service.update(created["id"], {"permissions": [catalog["list"]]}, admin_actor)

        await gate.ensure_authorized(created["id"], "/api/v1/jobs", "GET")

    @pytest.mark.asyncio
    async def test_deleted_role_grants_nothing(self, gate, role_service, catalog, admin_actor):
        created = await role_service.create({"name": "HR", "permissions": [catalog["list"]]}, admin_actor)
        await role_service.remove(created["id"], admin_actor)

        with pytest.raises(ForbiddenError):
            await gate.ensure_authorized(created["id"], "/api/v1/jobs", "GET")

    @pytest.mark.asyncio
    async def test_no_role_id(self, gate):
        with pytest.raises(ForbiddenError):
            await gate.ensure_authorized(None, "/api/v1/jobs", "GET")


class TestRoleService:

    @pytest.mark.asyncio
    async def test_find_one_expands_permissions(self, role_service, catalog, admin_actor):
        created = await role_service.create({"name": "HR", "permissions": [catalog["list"]]}, admin_actor)

        role = await role_service.find_one(created["id"])

        assert role["permissions"] == [
            {
                "id": catalog["list"],
                "apiPath": "/api/v1/jobs",
                "name": "List jobs",
                "method": "GET",
                "module": "JOBS",
            }
        ]

    @pytest.mark.asyncio
    async def test_invalid_permission_ids_rejected(self, role_service, admin_actor):
        with pytest.raises(ValidationError):
            await role_service.create({"name": "HR", "permissions": ["nope"]}, admin_actor)

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, role_service, admin_actor):
        await role_service.create({"name": "HR"}, admin_actor)
        with pytest.raises(ValidationError):
            await role_service.create({"name": "HR"}, admin_actor)

    @pytest.mark.asyncio
    async def test_admin_role_is_protected(self, role_service, admin_actor):
        created = await role_service.create({"name": "ADMIN"}, admin_actor)

        with pytest.raises(ProtectedResourceError):
            await role_service.remove(created["id"], admin_actor)
        with pytest.raises(ProtectedResourceError):
            await role_service.update(created["id"], {"name": "ROOT"}, admin_actor)

        await role_service.update(created["id"], {"description": "Everything"}, admin_actor)
