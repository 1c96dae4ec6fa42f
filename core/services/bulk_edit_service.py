"""Bulk edit staging and delete confirmation for selected records.

The bulk menu state is an explicit tagged value: either `BulkClosed` or
`BulkMenuOpen` carrying the menu kind and at most one staged value. A staged
value is only applied on `commit`; closing, escaping or switching menus
discards it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from enum import Enum

from loguru import logger

from core.models import RelationAxis, RelationOption
from core.services.interfaces import IMovieMutations


class BulkKind(Enum):
    STATUS = "status"
    CHANNEL_3D = "3d"
    CHANNEL_2D = "2d"

    @property
    def axis(self) -> RelationAxis | None:
        if self is BulkKind.CHANNEL_3D:
            return RelationAxis.CHANNEL_3D
        if self is BulkKind.CHANNEL_2D:
            return RelationAxis.CHANNEL_2D
        return None


@dataclass(frozen=True)
class BulkClosed:
    pass


@dataclass(frozen=True)
class BulkMenuOpen:
    kind: BulkKind
    pending: str | None = None
    option_search: str = ""


BulkState = BulkClosed | BulkMenuOpen

CLOSED = BulkClosed()


class BulkEditStaging:
    """State machine for the bulk status / channel menus."""

    def __init__(self) -> None:
        self._state: BulkState = CLOSED

    @property
    def state(self) -> BulkState:
        return self._state

    @property
    def is_open(self) -> bool:
        return isinstance(self._state, BulkMenuOpen)

    @property
    def can_commit(self) -> bool:
        return isinstance(self._state, BulkMenuOpen) and self._state.pending is not None

    def open(self, kind: BulkKind) -> BulkState:
        """Toggle the menu for `kind`.

        Opening the menu that is already open closes it; opening another
        kind switches menus with nothing staged.
        """
        if isinstance(self._state, BulkMenuOpen) and self._state.kind is kind:
            self._state = CLOSED
        else:
            self._state = BulkMenuOpen(kind)
        return self._state

    def pick(self, value: str) -> BulkState:
        """Stage `value`, replacing any earlier pick.

        Raises:
            RuntimeError: If no bulk menu is open.
        """
        if not isinstance(self._state, BulkMenuOpen):
            raise RuntimeError("No bulk menu is open")
        self._state = replace(self._state, pending=value)
        return self._state

    def search_options(self, term: str) -> None:
        if isinstance(self._state, BulkMenuOpen):
            self._state = replace(self._state, option_search=term)

    def visible_options(self, options: Sequence[RelationOption]) -> list[RelationOption]:
        """Narrow `options` by the open menu's search term (label substring)."""
        term = self._state.option_search if isinstance(self._state, BulkMenuOpen) else ""
        if not term:
            return list(options)
        needle = term.casefold()
        return [o for o in options if needle in o.label.casefold()]

    def close(self) -> None:
        self._state = CLOSED

    def escape(self) -> bool:
        """Close an open menu; return True if the keystroke was consumed."""
        if not self.is_open:
            return False
        self._state = CLOSED
        return True

    def commit(self, selected_ids: Iterable[str], mutations: IMovieMutations) -> bool:
        """Apply the staged value to `selected_ids` and close the menu.

        Status goes out as one bulk call; a channel goes out as one
        `update_record` per id in selection order. Returns False without
        side effects when nothing is staged.
        """
        state = self._state
        if not isinstance(state, BulkMenuOpen) or state.pending is None:
            return False

        ids = list(selected_ids)
        value = state.pending
        if not ids:
            logger.warning("Bulk {} commit with empty selection ignored", state.kind.value)
        elif state.kind is BulkKind.STATUS:
            mutations.bulk_update_status(ids, value)
        else:
            field_name = state.kind.axis.field_name
            for record_id in ids:
                mutations.update_record(record_id, {field_name: [value]})

        logger.info("Committed bulk {} = {} to {} records", state.kind.value, value, len(ids))
        self._state = CLOSED
        return True


class DeleteConfirmation:
    """Blocking confirmation step in front of deleting selected records."""

    def __init__(self) -> None:
        self.is_open = False

    def request(self, selected_count: int) -> bool:
        """Open the prompt if anything is selected; return whether it opened."""
        self.is_open = selected_count > 0
        return self.is_open

    def cancel(self) -> None:
        self.is_open = False

    def confirm(self, selected_ids: Iterable[str], mutations: IMovieMutations) -> list[str]:
        """Delete every selected id and close the prompt.

        Returns the ids passed to `delete_record`; empty when the prompt was
        not open.
        """
        if not self.is_open:
            return []
        ids = list(selected_ids)
        for record_id in ids:
            mutations.delete_record(record_id)
        logger.info("Deleted {} records", len(ids))
        self.is_open = False
        return ids
