"""Unit tests for pagination math and the list envelope."""

import math

import pytest
from hypothesis import given, strategies as st

from jobportal.application.pagination import effective_limit, page_envelope, paginate


class TestEffectiveLimit:

    @pytest.mark.parametrize("page_size", [None, 0, -5])
    def test_falls_back_to_default(self, page_size):
        assert effective_limit(page_size, default=10) == 10

    def test_uses_requested_size(self):
        assert effective_limit(3, default=10) == 3


class TestPaginate:

    def test_first_page(self):
        window = paginate(1, 5, 12)
        assert window.offset == 0
        assert window.effective_limit == 5
        assert window.total_pages == 3

    def test_later_page(self):
        window = paginate(3, 5, 12)
        assert window.offset == 10

    def test_no_items(self):
        assert paginate(1, 10, 0).total_pages == 0

    def test_page_zero_is_not_clamped(self):
        assert paginate(0, 10, 5).offset == -10

    @given(
        current=st.integers(min_value=1, max_value=1000),
        page_size=st.one_of(st.none(), st.integers(min_value=-5, max_value=200)),
        total=st.integers(min_value=0, max_value=10_000),
    )
    def test_window_properties(self, current, page_size, total):
        window = paginate(current, page_size, total, default_page_size=10)
        assert window.effective_limit >= 1
        assert window.offset == (current - 1) * window.effective_limit
        assert window.total_pages == math.ceil(total / window.effective_limit)
        # Every item lands on exactly one page
        assert window.total_pages * window.effective_limit >= total
        assert max(window.total_pages - 1, 0) * window.effective_limit < total or total == 0


class TestEnvelope:

    def test_meta_echoes_request_values(self):
        window = paginate(1, None, 4, default_page_size=10)
        envelope = page_envelope(None, None, window, 4, [{"id": "a"}])
        assert envelope == {
            "meta": {"current": None, "pageSize": None, "pages": 1, "total": 4},
            "result": [{"id": "a"}],
        }
