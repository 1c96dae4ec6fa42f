"""Sorting service for movie and channel record views.

Columns are a closed set of kinds, each knowing how to extract a comparable
value from a record and how to display it. `SortService` maps a sort key to
its column and produces a stable ordering without mutating the records.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from core.models import STATUS_ORDER, SortConfig


@dataclass(frozen=True)
class TextColumn:
    """Free text compared case-insensitively; missing values act as ``""``."""

    field: str
    label: str
    sortable: bool = True

    def sort_value(self, record: Any) -> Any:
        return (getattr(record, self.field, None) or "").casefold()

    def pinned_last(self, record: Any) -> bool:
        return False

    def display(self, record: Any, labels: Mapping[str, str] | None = None) -> str:
        return getattr(record, self.field, None) or ""


@dataclass(frozen=True)
class TimestampColumn:
    """Aware datetimes compared as absolute instants.

    Missing (None) values are pinned after every dated record.
    """

    field: str
    label: str
    sortable: bool = True
    fmt: str = "%Y-%m-%d %H:%M"

    def sort_value(self, record: Any) -> Any:
        value = getattr(record, self.field)
        return value.timestamp() if value is not None else 0.0

    def pinned_last(self, record: Any) -> bool:
        return getattr(record, self.field) is None

    def display(self, record: Any, labels: Mapping[str, str] | None = None) -> str:
        value = getattr(record, self.field)
        return value.astimezone().strftime(self.fmt) if value is not None else ""


def parse_count(value: Any) -> int:
    """Integer value of a count string; anything non-numeric counts as 0."""
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


@dataclass(frozen=True)
class NumericColumn:
    """Counts stored as strings, compared as integers."""

    field: str
    label: str
    sortable: bool = True

    def sort_value(self, record: Any) -> Any:
        return parse_count(getattr(record, self.field, None))

    def pinned_last(self, record: Any) -> bool:
        return False

    def display(self, record: Any, labels: Mapping[str, str] | None = None) -> str:
        return f"{parse_count(getattr(record, self.field, None)):,}"


@dataclass(frozen=True)
class RankColumn:
    """Enum-like values ordered by their position in `order`.

    Values outside `order` are pinned after every ranked value whichever
    direction is active.
    """

    field: str
    label: str
    order: tuple[str, ...]
    sortable: bool = True

    def rank(self, value: str) -> int:
        try:
            return self.order.index(value)
        except ValueError:
            return len(self.order)

    def sort_value(self, record: Any) -> Any:
        return self.rank(getattr(record, self.field))

    def pinned_last(self, record: Any) -> bool:
        return getattr(record, self.field) not in self.order

    def display(self, record: Any, labels: Mapping[str, str] | None = None) -> str:
        return getattr(record, self.field)


@dataclass(frozen=True)
class RelationColumn:
    """Zero-or-more related channel ids, displayed through a label map."""

    field: str
    label: str
    sortable: bool = False

    def sort_value(self, record: Any) -> Any:
        return ",".join(getattr(record, self.field)).casefold()

    def pinned_last(self, record: Any) -> bool:
        return False

    def display(self, record: Any, labels: Mapping[str, str] | None = None) -> str:
        labels = labels or {}
        return ", ".join(labels.get(i, i) for i in getattr(record, self.field))


Column = TextColumn | TimestampColumn | NumericColumn | RankColumn | RelationColumn


MOVIE_COLUMNS: tuple[Column, ...] = (
    TextColumn("name", "Movie Title"),
    RankColumn("status", "Status", STATUS_ORDER),
    TimestampColumn("added_at", "Date Added"),
    RelationColumn("channel_3d_ids", "3D Channel"),
    RelationColumn("channel_2d_ids", "2D Channel"),
    TextColumn("note", "Note"),
)

CHANNEL_COLUMNS: tuple[Column, ...] = (
    TextColumn("title", "Channel Name"),
    TimestampColumn("published_at", "Created Date"),
    NumericColumn("subscriber_count", "Subscribers"),
    NumericColumn("view_count", "Total Views"),
    NumericColumn("video_count", "Total Videos"),
    TimestampColumn("newest_video_date", "Newest Video"),
    TimestampColumn("oldest_video_date", "Oldest Video"),
)


class SortService:
    """Provides sorting utilities for record lists over a column set."""

    def __init__(self, columns: Iterable[Column] = MOVIE_COLUMNS) -> None:
        self._columns: dict[str, Column] = {c.field: c for c in columns}

    @property
    def sort_keys(self) -> list[str]:
        return [k for k, c in self._columns.items() if c.sortable]

    def column(self, key: str) -> Column:
        """Return the sortable column registered under `key`.

        Raises:
            KeyError: If `key` is unknown or not sortable.
        """
        col = self._columns.get(key)
        if col is None or not col.sortable:
            raise KeyError(f"Unknown sort key: {key}")
        return col

    def sort(self, records: Iterable[Any], config: SortConfig) -> list[Any]:
        """Return `records` ordered by `config`.

        The sort is stable, so records comparing equal keep their source
        order in either direction.
        """
        col = self.column(config.key)
        ordered = sorted(records, key=col.sort_value, reverse=not config.direction.ascending)
        ranked = [r for r in ordered if not col.pinned_last(r)]
        if len(ranked) == len(ordered):
            return ordered
        return ranked + [r for r in ordered if col.pinned_last(r)]
