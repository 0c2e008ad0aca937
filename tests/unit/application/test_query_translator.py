"""
Unit tests for query string translation

Covers filter operators, value typing, text patterns, sort, population,
projection and rejection of malformed field names.
"""

import pytest

from jobportal.application.query_translator import coerce_value, translate
from jobportal.domain.exceptions import ValidationError
from jobportal.domain.query import FilterClause, FilterOperator, Projection, SortField, TextPattern


class TestValueCoercion:
    """Query string values are typed before they reach a store"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("18", 18),
            ("-3", -3),
            ("2.5", 2.5),
            ("true", True),
            ("false", False),
            ("null", None),
            ("Acme", "Acme"),
            ("18a", "18a"),
        ],
    )
    def test_coerce_value(self, raw, expected):
        assert coerce_value(raw) == expected
        assert type(coerce_value(raw)) is type(expected)


class TestFilters:
    """Filter clause parsing"""

    def test_empty_query(self):
        descriptor = translate("")
        assert descriptor.filter == []
        assert descriptor.sort is None
        assert descriptor.population is None
        assert descriptor.projection is None

    def test_none_query(self):
        assert translate(None).filter == []

    def test_pagination_keys_are_stripped(self):
        descriptor = translate("current=2&pageSize=5&name=Acme")
        assert descriptor.filter == [FilterClause("name", FilterOperator.EQ, "Acme")]

    def test_leading_question_mark(self):
        descriptor = translate("?age=30")
        assert descriptor.filter == [FilterClause("age", FilterOperator.EQ, 30)]

    @pytest.mark.parametrize("op", ["gt", "gte", "lt", "lte", "ne", "eq"])
    def test_comparison_operators(self, op):
        descriptor = translate(f"age[{op}]=18")
        assert descriptor.filter == [FilterClause("age", FilterOperator(op), 18)]

    def test_unknown_operator_degrades_to_equality(self):
        descriptor = translate("age[where]=18")
        assert descriptor.filter == [FilterClause("age", FilterOperator.EQ, 18)]

    def test_comma_value_becomes_membership(self):
        descriptor = translate("status=PENDING,APPROVED")
        assert descriptor.filter == [
            FilterClause("status", FilterOperator.IN, ["PENDING", "APPROVED"])
        ]

    def test_explicit_in_operator(self):
        descriptor = translate("age[in]=20,24")
        assert descriptor.filter == [FilterClause("age", FilterOperator.IN, [20, 24])]

    def test_repeated_keys_merge_into_membership(self):
        descriptor = translate("method=GET&method=POST")
        assert descriptor.filter == [FilterClause("method", FilterOperator.IN, ["GET", "POST"])]

    def test_pattern_value(self):
        descriptor = translate("name=/^lu/i")
        assert descriptor.filter == [
            FilterClause(
                "name",
                FilterOperator.REGEX,
                TextPattern(text="lu", anchored=True, case_insensitive=True),
            )
        ]

    def test_pattern_is_literal_text(self):
        clause = translate("email=/a.b(c)/").filter[0]
        assert clause.value == TextPattern(text="a.b(c)", anchored=False, case_insensitive=False)

    def test_path_value_is_not_a_pattern(self):
        clause = translate([("apiPath", "/api/v1/companies")]).filter[0]
        assert clause == FilterClause("apiPath", FilterOperator.EQ, "/api/v1/companies")

    def test_nested_path(self):
        clause = translate("company.name=Acme").filter[0]
        assert clause.field == "company.name"
        assert clause.path == ("company", "name")

    def test_mapping_input(self):
        descriptor = translate({"age[gte]": "18", "current": "1"})
        assert descriptor.filter == [FilterClause("age", FilterOperator.GTE, 18)]

    @pytest.mark.parametrize("key", ["$where", "name;drop", "a..b", "1abc", "na me"])
    def test_invalid_field_names_rejected(self, key):
        with pytest.raises(ValidationError):
            translate([(key, "x")])


class TestDirectives:
    """sort, populate and fields"""

    def test_sort(self):
        descriptor = translate("sort=-age,name")
        assert descriptor.sort == [SortField("age", descending=True), SortField("name")]

    def test_populate(self):
        assert translate("populate=role,company").population == ["role", "company"]

    def test_include_projection(self):
        projection = translate("fields=name,email").projection
        assert projection == Projection(fields=frozenset({"name", "email"}))
        assert projection.apply({"id": "1", "name": "n", "email": "e", "age": 3}) == {
            "id": "1",
            "name": "n",
            "email": "e",
        }

    def test_exclude_projection(self):
        projection = translate("fields=-age").projection
        assert projection.exclude is True
        assert projection.apply({"id": "1", "age": 3}) == {"id": "1"}

    def test_nested_include_trims_parent(self):
        projection = translate("fields=name,role.name").projection
        document = {"id": "1", "name": "Luffy", "role": {"id": "r1", "name": "ADMIN"}, "age": 19}

        assert projection.apply(document) == {"id": "1", "name": "Luffy", "role": {"name": "ADMIN"}}

    def test_nested_include_keeps_unexpanded_reference(self):
        projection = translate("fields=role.name").projection

        assert projection.apply({"id": "1", "role": "r1"}) == {"id": "1", "role": "r1"}

    def test_nested_paths_reach_into_lists(self):
        document = {
            "id": "1",
            "history": [
                {"status": "PENDING", "updatedBy": {"id": "u1"}},
                {"status": "REVIEWING", "updatedBy": {"id": "u2"}},
            ],
        }

        included = translate("fields=history.status").projection.apply(document)
        excluded = translate("fields=-history.updatedBy").projection.apply(document)

        assert included["history"] == [{"status": "PENDING"}, {"status": "REVIEWING"}]
        assert excluded["history"] == [{"status": "PENDING"}, {"status": "REVIEWING"}]

    def test_without_drops_nested_paths(self):
        projection = translate("fields=name,password.length").projection.without("password")

        assert projection.fields == frozenset({"name"})
        assert projection.apply({"id": "1", "name": "n", "password": "hash"}) == {"id": "1", "name": "n"}

    def test_invalid_sort_field_rejected(self):
        with pytest.raises(ValidationError):
            translate("sort=-$natural")
