"""Page window calculation for comment listings."""

import math
import re
from typing import NamedTuple


_LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")

# CQL LIMIT is a 32-bit int; the store reads skip + limit rows
MAX_QUERY_ROWS = 2**31 - 1


class PageWindow(NamedTuple):
    """Resolved page with its query window."""

    page: int
    skip: int
    limit: int
    max_page: int


def parse_int(value: object) -> int | None:
    """Parse the leading integer of a number or string.

    ``"3"``, ``"3abc"`` and ``3.7`` give 3; anything without a leading integer
    gives None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT_PATTERN.match(value)
        return int(match.group(1)) if match else None
    return None


def calculate_page(
    requested_page: object,
    total_count: int,
    page_size: int,
    max_count: int,
) -> PageWindow:
    """Resolve a requested page into a query window.

    Absent, malformed, non-positive and out-of-range page requests silently
    fall back to page 1. A page is out of range past the last page a finite
    cap allows, or when its window cannot be read in one query.

    Args:
        requested_page: Raw page from the query string (1-based).
        total_count: Number of stored comments for the post.
        page_size: Comments per page.
        max_count: Per-post comment cap; 0 or negative means unlimited.

    Returns:
        PageWindow with the effective page, skip/limit and the last page.
    """
    page = parse_int(requested_page)

    if page is None or page <= 0:
        page = 1
    elif max_count > 0 and page > math.ceil(max_count / page_size):
        page = 1
    elif page * page_size > MAX_QUERY_ROWS:
        page = 1

    return PageWindow(
        page=page,
        skip=(page - 1) * page_size,
        limit=page_size,
        max_page=math.ceil(total_count / page_size),
    )
