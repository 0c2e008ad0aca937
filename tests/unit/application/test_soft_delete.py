"""
Unit tests for the soft-delete policy and audit stamps
"""

import pytest

from jobportal.application.audit import AuditEnvelope
from jobportal.application.soft_delete import NOT_DELETED, SoftDeletePolicy
from jobportal.domain.exceptions import CompanyNotFoundError, MalformedIdError
from jobportal.domain.value_objects import Actor, new_record_id


@pytest.fixture
def companies(store):
    return SoftDeletePolicy(store, "companies", kind="company", not_found=CompanyNotFoundError)


@pytest.fixture
async def acme(store):
    return await store.insert_one("companies", {"name": "Acme"})


class TestAuditEnvelope:

    def test_create_stamp(self, admin_actor):
        stamped = AuditEnvelope.stamp_create({"name": "Acme"}, admin_actor)
        assert stamped["createdBy"] == {"id": admin_actor.id, "email": admin_actor.email}

    def test_reserved_fields_are_stripped(self, admin_actor):
        stamped = AuditEnvelope.stamp_update(
            {"name": "Acme", "id": "x", "isDeleted": True, "createdBy": {"id": "forged"}},
            admin_actor,
        )
        assert set(stamped) == {"name", "updatedBy"}

    def test_no_actor_no_stamp(self):
        assert AuditEnvelope.stamp_create({"name": "Acme"}, None) == {"name": "Acme"}
        assert AuditEnvelope.stamp_delete(None) == {}


class TestSoftDeletePolicy:

    def test_scope_appends_live_predicate(self):
        assert SoftDeletePolicy.scope([]) == [NOT_DELETED]

    @pytest.mark.asyncio
    async def test_deleted_records_are_hidden(self, companies, acme, store):
        assert await companies.soft_delete(acme["id"]) == 1

        assert await companies.find() == []
        assert await companies.count() == 0
        assert await companies.find_one(acme["id"]) is None
        # Still present in the store
        assert await store.count("companies") == 1

    @pytest.mark.asyncio
    async def test_soft_delete_is_idempotent(self, companies, acme, store):
        await companies.soft_delete(acme["id"])
        first = (await store.find_by_ids("companies", [acme["id"]]))[0]

        assert await companies.soft_delete(acme["id"]) == 0
        second = (await store.find_by_ids("companies", [acme["id"]]))[0]
        assert second["deletedAt"] == first["deletedAt"]

    @pytest.mark.asyncio
    async def test_soft_delete_missing_record(self, companies):
        assert await companies.soft_delete(new_record_id()) == 0

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, companies):
        with pytest.raises(CompanyNotFoundError):
            await companies.get(new_record_id())

    @pytest.mark.asyncio
    async def test_malformed_id(self, companies):
        with pytest.raises(MalformedIdError):
            await companies.get("not-an-id")

    @pytest.mark.asyncio
    async def test_remove_stamps_deleted_by(self, companies, acme, store):
        actor = Actor(id=new_record_id(), email="hr@acme.io")

        assert await companies.remove(acme["id"], actor) == {"deleted": 1}

        stored = (await store.find_by_ids("companies", [acme["id"]]))[0]
        assert stored["isDeleted"] is True
        assert stored["deletedBy"] == {"id": actor.id, "email": "hr@acme.io"}

    @pytest.mark.asyncio
    async def test_remove_already_deleted(self, companies, acme):
        await companies.soft_delete(acme["id"])
        assert await companies.remove(acme["id"], None) == {"deleted": 0}
