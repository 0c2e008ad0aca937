"""Pagination math and the list response envelope."""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class PageWindow:
    offset: int
    effective_limit: int
    total_pages: int


def effective_limit(page_size: Optional[int], default: int = DEFAULT_PAGE_SIZE) -> int:
    if isinstance(page_size, int) and not isinstance(page_size, bool) and page_size > 0:
        return page_size
    return default


def page_offset(current_page: int, limit: int) -> int:
    """Offset of a page; pages below 1 are not clamped and give a negative offset."""
    return (current_page - 1) * limit


def paginate(
    current_page: int,
    page_size: Optional[int],
    total_items: int,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> PageWindow:
    """
    Compute offset, effective limit and page count.

    Args:
        current_page: 1-based page number as sent by the caller
        page_size: Requested page size; non-positive or missing uses the default
        total_items: Size of the full matching set

    Returns:
        PageWindow with ``total_pages = ceil(total / limit)`` (0 for no items)
    """
    limit = effective_limit(page_size, default_page_size)
    return PageWindow(
        offset=page_offset(current_page, limit),
        effective_limit=limit,
        total_pages=math.ceil(total_items / limit) if total_items > 0 else 0,
    )


def page_envelope(
    current: Any,
    page_size: Any,
    window: PageWindow,
    total_items: int,
    result: List[Dict[str, Any]],
) -> Dict[str, Any]:
    # meta echoes the caller's raw current/pageSize
    return {
        "meta": {
            "current": current,
            "pageSize": page_size,
            "pages": window.total_pages,
            "total": total_items,
        },
        "result": result,
    }


__all__ = ["DEFAULT_PAGE_SIZE", "PageWindow", "effective_limit", "page_offset", "paginate", "page_envelope"]
