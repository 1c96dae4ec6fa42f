"""Multi-row selection tracking decoupled from any UI toolkit.

Selections are identifier based and span pages. "Select all" means every
record passing the active filter, never the whole unfiltered dataset.
Changing filters leaves existing selections in place.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class SelectionTracker:
    """Insertion-ordered set of selected record ids."""

    def __init__(self) -> None:
        self._ids: dict[str, None] = {}

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    @property
    def ids(self) -> list[str]:
        """Selected ids in the order they were selected."""
        return list(self._ids)

    def toggle(self, record_id: str) -> bool:
        """Flip selection of `record_id`; return True if it is now selected."""
        if record_id in self._ids:
            del self._ids[record_id]
            return False
        self._ids[record_id] = None
        return True

    def is_all_selected(self, filtered_count: int) -> bool:
        return filtered_count > 0 and len(self._ids) == filtered_count

    def toggle_all(self, filtered_ids: Iterable[str]) -> None:
        """Select exactly `filtered_ids`, or clear if they are all selected.

        Args:
            filtered_ids: Ids of every record passing the current filter,
                across all pages.
        """
        ids = list(filtered_ids)
        if self.is_all_selected(len(ids)):
            self.clear()
        else:
            self._ids = dict.fromkeys(ids)

    def clear(self) -> None:
        self._ids.clear()

    def discard_many(self, record_ids: Iterable[str]) -> None:
        for record_id in record_ids:
            self._ids.pop(record_id, None)
