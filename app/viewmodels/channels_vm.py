"""ViewModel for the tracked-channel table and channel groups."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import uuid

from loguru import logger

from app.viewmodels.table_vm import TableVM
from core.models import ChannelGroup, ChannelRecord, SortConfig
from core.services.filter_service import local_now
from core.services.sort_service import CHANNEL_COLUMNS, SortService
from infrastructure.settings import DEFAULT_CHANNEL_SORT, DEFAULT_ROWS_PER_PAGE


def _new_id() -> str:
    return str(uuid.uuid4())


class ChannelsVM(TableVM):
    """Channel table: search on title, numeric/date sorts, groups.

    `channels` is the caller-owned list; removals edit it in place.
    """

    search_field = "title"

    def __init__(
        self,
        channels: list[ChannelRecord],
        page_size: int = DEFAULT_ROWS_PER_PAGE,
        default_sort: SortConfig | None = None,
        clock: Callable[[], datetime] = local_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._channels = channels
        self._new_id = id_factory
        self.groups: list[ChannelGroup] = []
        super().__init__(
            default_sort or DEFAULT_CHANNEL_SORT,
            page_size,
            SortService(CHANNEL_COLUMNS),
            clock,
        )

    def source_records(self) -> list[ChannelRecord]:
        return self._channels

    def remove_selected(self) -> list[str]:
        """Stop tracking every selected channel; return the removed ids."""
        wanted = set(self.selection.ids)
        removed = [c.id for c in self._channels if c.id in wanted]
        if not removed:
            return []
        self._channels[:] = [c for c in self._channels if c.id not in wanted]
        self.selection.discard_many(removed)
        logger.info("Removed {} channels", len(removed))
        self.refresh()
        return removed

    def save_group(self, name: str, group_id: str | None = None) -> ChannelGroup:
        """Save the selected channels as a group named `name`.

        Passing the id of an existing group replaces it and keeps its
        creation time.

        Raises:
            ValueError: If `name` is blank.
        """
        name = name.strip()
        if not name:
            raise ValueError("Group name must not be blank")
        existing = next((g for g in self.groups if g.id == group_id), None)
        group = ChannelGroup(
            id=existing.id if existing else self._new_id(),
            name=name,
            channel_ids=tuple(self.selection.ids),
            created_at=existing.created_at if existing else self._clock(),
        )
        if existing:
            self.groups[self.groups.index(existing)] = group
        else:
            self.groups.append(group)
        logger.info("Saved group {} with {} channels", name, len(group.channel_ids))
        return group

    def select_group(self, group_id: str) -> None:
        """Replace the selection with the channels of a saved group."""
        group = next((g for g in self.groups if g.id == group_id), None)
        if group is None:
            raise KeyError(f"Unknown group: {group_id}")
        self.selection.clear()
        for channel_id in group.channel_ids:
            self.selection.toggle(channel_id)
