"""Core domain models for movie and channel records, filters and sort state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class MovieStatus(str, Enum):
    """Ordered workflow stages; declaration order is the sort rank."""

    PLAYLIST = "Playlist"
    DOWNLOAD = "Download"
    COPYRIGHT_CHECK = "Copyright Check"
    VISUAL_COPYRIGHT = "Visual Copyright"
    AUDIO_COPYRIGHT = "Audio Copyright"
    STRIKE_CHECK = "Strike Check"
    DONE = "Done"


STATUS_ORDER: tuple[str, ...] = tuple(s.value for s in MovieStatus)


@dataclass
class MovieRecord:
    """A single movie row held by the record source.

    `status` is a plain string so rows carrying a value outside
    `MovieStatus` still load; such rows sort after every known stage.
    """

    id: str
    name: str
    status: str
    added_at: datetime
    channel_3d_ids: list[str] = field(default_factory=list)
    channel_2d_ids: list[str] = field(default_factory=list)
    note: str = ""


@dataclass(frozen=True)
class RelationOption:
    """A channel that movies can be related to on either axis."""

    id: str
    label: str


class TimeWindow(Enum):
    TODAY = "today"
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"


class RelationAxis(Enum):
    """The two independent channel axes a movie can be attached to."""

    CHANNEL_3D = "channel_3d_ids"
    CHANNEL_2D = "channel_2d_ids"

    @property
    def field_name(self) -> str:
        return self.value


@dataclass(frozen=True)
class FilterCriteria:
    """Independent filter dimensions combined by logical AND.

    Every empty dimension passes all records.
    """

    search_text: str = ""
    channel_3d_ids: frozenset[str] = frozenset()
    channel_2d_ids: frozenset[str] = frozenset()
    statuses: frozenset[str] = frozenset()
    time_window: TimeWindow | None = None

    def relation_ids(self, axis: RelationAxis) -> frozenset[str]:
        return getattr(self, axis.field_name)


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def ascending(self) -> bool:
        return self is SortDirection.ASC


@dataclass(frozen=True)
class SortConfig:
    """Active sort key and direction."""

    key: str
    direction: SortDirection = SortDirection.ASC

    def toggled(self, key: str) -> SortConfig:
        """Return the config after the user selects `key`.

        Re-selecting the current key flips the direction; a new key starts
        ascending.
        """
        if key == self.key and self.direction is SortDirection.ASC:
            return SortConfig(key, SortDirection.DESC)
        return SortConfig(key, SortDirection.ASC)


@dataclass(frozen=True)
class PageView:
    """One page of the filtered and sorted view.

    `ordered` holds every record that passed the filter, in sort order, so
    callers can act on the whole view (select all, export) without
    recomputing it.
    """

    items: list[Any]
    total_count: int
    total_pages: int
    ordered: list[Any] = field(default_factory=list)


class ChannelStatus(str, Enum):
    ACTIVE = "active"
    TERMINATED = "terminated"


@dataclass
class ChannelRecord:
    """A tracked channel and its statistics.

    Counts are kept as the raw strings the statistics feed delivers and are
    only parsed for sorting and display. The video dates are None until the
    channel's uploads have been looked up.
    """

    id: str
    title: str
    published_at: datetime
    subscriber_count: str = "0"
    view_count: str = "0"
    video_count: str = "0"
    status: str = ChannelStatus.ACTIVE.value
    newest_video_date: datetime | None = None
    oldest_video_date: datetime | None = None

    @property
    def is_terminated(self) -> bool:
        return self.status == ChannelStatus.TERMINATED.value


@dataclass(frozen=True)
class ChannelGroup:
    """A named set of channels saved from a selection."""

    id: str
    name: str
    channel_ids: tuple[str, ...]
    created_at: datetime
