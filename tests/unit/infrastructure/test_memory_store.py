"""
Unit tests for the in-memory document store

Tests cover clause evaluation, ordering, paging, isolation of returned
documents and uniqueness among live records.
"""

import pytest

from jobportal.database.error_handling import IntegrityViolationError
from jobportal.domain.query import FilterClause, FilterOperator, SortField, TextPattern
from jobportal.infrastructure.persistence.memory_store import InMemoryDocumentStore, matches_clause


@pytest.fixture
async def people(store):
    await store.insert_many(
        "people",
        [
            {"name": "Luffy", "age": 20, "crew": {"role": "captain"}},
            {"name": "Zoro", "age": 24, "crew": {"role": "swordsman"}},
            {"name": "Nami", "age": 20},
            {"name": "Brook", "age": "unknown"},
        ],
    )
    return store


class TestClauseEvaluation:

    @pytest.mark.parametrize(
        "clause,expected",
        [
            (FilterClause("age", FilterOperator.EQ, 20), True),
            (FilterClause("age", FilterOperator.NE, 20), False),
            (FilterClause("age", FilterOperator.GT, 19), True),
            (FilterClause("age", FilterOperator.LTE, 19), False),
            (FilterClause("age", FilterOperator.IN, [1, 20]), True),
            (FilterClause("crew.role", FilterOperator.EQ, "captain"), True),
            (FilterClause("missing", FilterOperator.EQ, None), True),
            (FilterClause("missing", FilterOperator.NE, True), True),
            (FilterClause("age", FilterOperator.GT, "1"), False),
            (FilterClause("name", FilterOperator.REGEX, TextPattern("LU", anchored=True, case_insensitive=True)), True),
            (FilterClause("name", FilterOperator.REGEX, TextPattern("uf")), True),
            (FilterClause("name", FilterOperator.REGEX, TextPattern("uf", anchored=True)), False),
        ],
    )
    def test_matches_clause(self, clause, expected):
        document = {"name": "Luffy", "age": 20, "crew": {"role": "captain"}}
        assert matches_clause(document, clause) is expected


class TestFind:

    @pytest.mark.asyncio
    async def test_filter_and_count(self, people):
        clauses = [FilterClause("age", FilterOperator.EQ, 20)]

        assert await people.count("people", clauses) == 2
        assert {p["name"] for p in await people.find("people", clauses)} == {"Luffy", "Nami"}

    @pytest.mark.asyncio
    async def test_mixed_types_do_not_compare(self, people):
        found = await people.find("people", [FilterClause("age", FilterOperator.GTE, 0)])
        assert "Brook" not in {p["name"] for p in found}

    @pytest.mark.asyncio
    async def test_multi_field_sort_and_paging(self, people):
        found = await people.find(
            "people",
            [FilterClause("name", FilterOperator.NE, "Brook")],
            sort=[SortField("age"), SortField("name", descending=True)],
            skip=1,
            limit=2,
        )
        assert [p["name"] for p in found] == ["Luffy", "Zoro"]

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, people):
        found = await people.find("people", [FilterClause("name", FilterOperator.EQ, "Luffy")])
        found[0]["crew"]["role"] = "cook"

        again = await people.find("people", [FilterClause("name", FilterOperator.EQ, "Luffy")])
        assert again[0]["crew"]["role"] == "captain"

    @pytest.mark.asyncio
    async def test_find_by_ids_and_update(self, people):
        luffy = (await people.find("people", [FilterClause("name", FilterOperator.EQ, "Luffy")]))[0]

        assert await people.update_one("people", luffy["id"], {"age": 21}) == 1
        assert await people.update_one("people", "missing", {"age": 21}) == 0
        updated = (await people.find_by_ids("people", [luffy["id"], "missing"]))
        assert [p["age"] for p in updated] == [21]
        assert updated[0]["createdAt"] == luffy["createdAt"]


class TestUniqueness:

    @pytest.mark.asyncio
    async def test_unique_among_live_records(self):
        store = InMemoryDocumentStore(unique_fields={"users": ("email",)})
        first = await store.insert_one("users", {"email": "a@b.io"})

        with pytest.raises(IntegrityViolationError) as exc_info:
            await store.insert_one("users", {"email": "a@b.io"})
        assert exc_info.value.field == "email"

        await store.update_one("users", first["id"], {"isDeleted": True})
        await store.insert_one("users", {"email": "a@b.io"})
        assert await store.count("users") == 2

    @pytest.mark.asyncio
    async def test_health(self, people):
        health = await people.check_health()
        assert health["status"] == "healthy"
        assert health["collections"] == {"people": 4}
