"""Filter, sort and paginate a record sequence into a single page view."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
import math
from typing import Any

from core.models import FilterCriteria, PageView, SortConfig
from core.services.filter_service import filter_records
from core.services.sort_service import SortService


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages for `total_count` rows; never less than one."""
    return max(1, math.ceil(total_count / page_size))


def paginate(ordered: list[Any], page: int, page_size: int) -> PageView:
    """Slice an already filtered and sorted list into page `page`.

    Pages outside ``1..total_pages`` come back empty instead of raising.

    Raises:
        ValueError: If `page_size` is less than one.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    count = len(ordered)
    items: list[Any] = []
    if page >= 1:
        items = ordered[(page - 1) * page_size : page * page_size]
    return PageView(
        items=items,
        total_count=count,
        total_pages=total_pages(count, page_size),
        ordered=ordered,
    )


def view(
    records: Iterable[Any],
    criteria: FilterCriteria,
    sort_config: SortConfig,
    page: int,
    page_size: int,
    now: datetime | None = None,
    sorter: SortService | None = None,
    search_field: str = "name",
) -> PageView:
    """Compute page `page` (1-based) of the filtered, sorted view.

    Raises:
        KeyError: If `sort_config.key` is not a sortable column of `sorter`.
        ValueError: If `page_size` is less than one.
    """
    filtered = filter_records(records, criteria, now, search_field)
    ordered = (sorter or SortService()).sort(filtered, sort_config)
    return paginate(ordered, page, page_size)
