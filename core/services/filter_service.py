"""Record predicates built from independent filter criteria.

Each active criterion narrows the view; criteria combine by logical AND.
Time windows are resolved against the clock at evaluation time, so the same
criteria can admit different records as the day rolls over.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from typing import Any

from core.models import FilterCriteria, RelationAxis, TimeWindow

Predicate = Callable[[Any], bool]
Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Aware wall-clock time in the machine's local timezone."""
    return datetime.now().astimezone()


def window_start(window: TimeWindow, now: datetime) -> datetime:
    """Return the earliest `added_at` admitted by `window` at instant `now`.

    TODAY starts at midnight of `now`'s calendar day in `now`'s own timezone,
    so a local clock yields the local day.
    """
    if window is TimeWindow.TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if window is TimeWindow.LAST_7_DAYS:
        return now - timedelta(days=7)
    return now - timedelta(days=30)


def matches_search(record: Any, text: str, field: str = "name") -> bool:
    return text.casefold() in (getattr(record, field, None) or "").casefold()


def matches_relation(record: Any, axis: RelationAxis, selected: frozenset[str]) -> bool:
    """True if any of the record's ids on `axis` is selected, or nothing is."""
    if not selected:
        return True
    return any(i in selected for i in getattr(record, axis.field_name))


def build_predicate(criteria: FilterCriteria, now: datetime, search_field: str = "name") -> Predicate:
    """Compose the active criteria into a single predicate.

    Empty criteria are skipped entirely rather than evaluated as pass-all.
    `search_field` names the text attribute the search box matches against
    (`name` for movies, `title` for channels).
    """
    checks: list[Predicate] = []
    if criteria.search_text:
        text = criteria.search_text
        checks.append(lambda r: matches_search(r, text, search_field))
    for axis in RelationAxis:
        selected = criteria.relation_ids(axis)
        if selected:
            checks.append(lambda r, a=axis, s=selected: matches_relation(r, a, s))
    if criteria.statuses:
        statuses = criteria.statuses
        checks.append(lambda r: r.status in statuses)
    if criteria.time_window is not None:
        start = window_start(criteria.time_window, now)
        checks.append(lambda r: r.added_at >= start)

    def predicate(record: Any) -> bool:
        return all(check(record) for check in checks)

    return predicate


def matches(
    record: Any,
    criteria: FilterCriteria,
    now: datetime | None = None,
    search_field: str = "name",
) -> bool:
    return build_predicate(criteria, now or local_now(), search_field)(record)


def filter_records(
    records: Iterable[Any],
    criteria: FilterCriteria,
    now: datetime | None = None,
    search_field: str = "name",
) -> list[Any]:
    """Return the records passing every active criterion, in source order."""
    predicate = build_predicate(criteria, now or local_now(), search_field)
    return [r for r in records if predicate(r)]
