"""ViewModel orchestrating the movie table: filters, sort, paging and edits."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from loguru import logger

from app.viewmodels.table_vm import TableVM
from core.models import (
    MovieRecord,
    RelationAxis,
    RelationOption,
    SortConfig,
    TimeWindow,
)
from core.services.bulk_edit_service import BulkEditStaging, BulkKind, BulkState, DeleteConfirmation
from core.services.filter_service import local_now
from core.services.interfaces import IMovieMutations, IMovieSource
from core.services.sort_service import SortService
from core.services.summary_service import StatusSummary, summarize
from infrastructure.settings import DEFAULT_ROWS_PER_PAGE, DEFAULT_SORT

EDITABLE_FIELDS = ("status", "channel_3d_ids", "channel_2d_ids", "note")


class MoviesVM(TableVM):
    """Movie table view-model.

    Adds relation and time-window filters, bulk edits, the delete prompt and
    inline edits on top of the shared table state.
    """

    def __init__(
        self,
        store: IMovieSource,
        mutations: IMovieMutations | None = None,
        page_size: int = DEFAULT_ROWS_PER_PAGE,
        default_sort: SortConfig | None = None,
        channels: Iterable[RelationOption] = (),
        sorter: SortService | None = None,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        """Create a MoviesVM.

        Args:
            store: Record source read on every recompute.
            mutations: Mutation callbacks (defaults to `store`).
            page_size: Rows per page.
            default_sort: Initial sort (defaults to newest first).
            channels: Options for both relation axes.
            sorter: Sorting service (defaults to `SortService`).
            clock: Source of "now" for time-window filters.
        """
        self._store = store
        self._mutations: IMovieMutations = mutations or store  # type: ignore[assignment]
        self.channels: list[RelationOption] = list(channels)
        self.bulk = BulkEditStaging()
        self.delete_prompt = DeleteConfirmation()
        super().__init__(default_sort or DEFAULT_SORT, page_size, sorter, clock)

    def source_records(self) -> list[MovieRecord]:
        return self._store.get_records()

    @property
    def summary(self) -> StatusSummary:
        return summarize(self.page_view.ordered)

    @property
    def channel_labels(self) -> dict[str, str]:
        return {c.id: c.label for c in self.channels}

    # -- filters (each change returns to page 1) ----------------------------

    def set_channel_filter(self, axis: RelationAxis, channel_ids: Iterable[str]) -> None:
        self._replace_criteria(**{axis.field_name: frozenset(channel_ids)})

    def set_time_window(self, window: TimeWindow | None) -> None:
        self._replace_criteria(time_window=window)

    # -- bulk edit -----------------------------------------------------------

    @property
    def bulk_state(self) -> BulkState:
        return self.bulk.state

    def open_bulk_menu(self, kind: BulkKind) -> BulkState:
        return self.bulk.open(kind)

    def pick_bulk_value(self, value: str) -> BulkState:
        return self.bulk.pick(value)

    def visible_bulk_channels(self) -> list[RelationOption]:
        return self.bulk.visible_options(self.channels)

    def search_bulk_channels(self, term: str) -> list[RelationOption]:
        """Narrow the open channel menu by label and return what is left."""
        self.bulk.search_options(term)
        return self.visible_bulk_channels()

    def commit_bulk(self) -> bool:
        """Apply the staged bulk value to the selection; no-op if unstaged."""
        if not self.bulk.commit(self.selection.ids, self._mutations):
            return False
        self.selection.clear()
        self.refresh()
        return True

    def request_delete(self) -> bool:
        return self.delete_prompt.request(len(self.selection))

    def cancel_delete(self) -> None:
        self.delete_prompt.cancel()

    def confirm_delete(self) -> list[str]:
        deleted = self.delete_prompt.confirm(self.selection.ids, self._mutations)
        if deleted:
            self.selection.discard_many(deleted)
            self.refresh()
        return deleted

    def handle_escape(self) -> bool:
        """Close the innermost open context; return True if anything closed."""
        if self.delete_prompt.is_open:
            self.delete_prompt.cancel()
            return True
        if self.bulk.escape():
            return True
        return super().handle_escape()

    # -- single record edits -------------------------------------------------

    def add_movies(self, raw_text: str) -> list[MovieRecord]:
        created = self._mutations.add_records(raw_text)
        self.refresh()
        return created

    def update_note(self, record_id: str, note: str) -> bool:
        """Save `note` if it differs from the stored one."""
        record = self._find(record_id)
        if record is None or record.note == note:
            return False
        self._mutations.update_record(record_id, {"note": note})
        self.refresh()
        return True

    def set_status(self, record_id: str, status: str) -> None:
        self._mutations.update_record(record_id, {"status": status})
        self.refresh()

    def set_channel(self, record_id: str, axis: RelationAxis, channel_id: str | None) -> None:
        self._mutations.update_record(record_id, {axis.field_name: [channel_id] if channel_id else []})
        self.refresh()

    def edit_field(self, record_id: str, field: str, value: Any) -> bool:
        """Apply an inline cell edit; return True if the record changed.

        Channel cells accept a channel id or its label (case-insensitive);
        blank clears the channel.

        Raises:
            KeyError: If `field` is not one of `EDITABLE_FIELDS`.
        """
        if field not in EDITABLE_FIELDS:
            raise KeyError(f"Field not editable: {field}")
        text = "" if value is None else str(value).strip()
        if field == "note":
            return self.update_note(record_id, text)
        record = self._find(record_id)
        if record is None:
            return False
        if field == "status":
            if not text or text == record.status:
                return False
            self.set_status(record_id, text)
            return True

        axis = RelationAxis(field)
        channel_id = self.resolve_channel(text) if text else None
        if text and channel_id is None:
            logger.warning("Unknown channel for {}: {}", record_id, text)
            return False
        if getattr(record, field) == ([channel_id] if channel_id else []):
            return False
        self.set_channel(record_id, axis, channel_id)
        return True

    def resolve_channel(self, text: str) -> str | None:
        """Channel id for an id or a label; None if nothing matches."""
        for c in self.channels:
            if c.id == text:
                return c.id
        folded = text.casefold()
        for c in self.channels:
            if c.label.casefold() == folded:
                return c.id
        return None

    def _find(self, record_id: str) -> MovieRecord | None:
        for r in self._store.get_records():
            if r.id == record_id:
                return r
        logger.warning("Record not found: {}", record_id)
        return None
