"""Shared view-model state for paged, sortable, selectable record tables."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime
from typing import Any

from core.models import FilterCriteria, PageView, SortConfig
from core.services.filter_service import local_now
from core.services.pipeline import paginate, view
from core.services.selection_service import SelectionTracker
from core.services.sort_service import SortService
from infrastructure.settings import DEFAULT_ROWS_PER_PAGE


class TableVM:
    """Criteria, sort, page and selection for one record table.

    Every user action recomputes the view synchronously, so `page_view`
    always reflects the latest inputs when a handler returns. Subclasses
    provide the records through `source_records()` and set their own state
    before calling ``super().__init__`` (which runs the first refresh).
    """

    search_field = "name"

    def __init__(
        self,
        sort_config: SortConfig,
        page_size: int = DEFAULT_ROWS_PER_PAGE,
        sorter: SortService | None = None,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._page_size = page_size
        self._sorter = sorter or SortService()
        self._clock = clock

        self.criteria = FilterCriteria()
        self.sort_config = sort_config
        self.page = 1
        self.selection = SelectionTracker()

        self.page_view = PageView(items=[], total_count=0, total_pages=1)
        self.refresh()

    def source_records(self) -> Iterable[Any]:
        raise NotImplementedError

    # -- view ---------------------------------------------------------------

    def refresh(self) -> PageView:
        """Recompute filter, sort and the current page from the source.

        A page left past the end, after a delete or an edit narrowed the
        view, is pulled back to the last page.
        """
        self.page_view = view(
            self.source_records(),
            self.criteria,
            self.sort_config,
            self.page,
            self._page_size,
            now=self._clock(),
            sorter=self._sorter,
            search_field=self.search_field,
        )
        if self.page > self.page_view.total_pages:
            self.page = self.page_view.total_pages
            self.page_view = paginate(self.page_view.ordered, self.page, self._page_size)
        return self.page_view

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def filtered_records(self) -> list[Any]:
        """Every record passing the filter, sorted, across all pages."""
        return list(self.page_view.ordered)

    @property
    def filtered_count(self) -> int:
        return self.page_view.total_count

    @property
    def total_pages(self) -> int:
        return self.page_view.total_pages

    @property
    def is_empty(self) -> bool:
        return self.page_view.total_count == 0

    @property
    def channel_labels(self) -> dict[str, str]:
        return {}

    # -- filters (each change returns to page 1) ----------------------------

    def set_criteria(self, criteria: FilterCriteria) -> None:
        if criteria == self.criteria:
            return
        self.criteria = criteria
        self.page = 1
        self.refresh()

    def set_search_text(self, text: str) -> None:
        self._replace_criteria(search_text=text)

    def set_status_filter(self, statuses: Iterable[str]) -> None:
        self._replace_criteria(statuses=frozenset(statuses))

    def _replace_criteria(self, **changes: Any) -> None:
        self.set_criteria(replace(self.criteria, **changes))

    # -- sort & paging -------------------------------------------------------

    def sort_by(self, key: str) -> SortConfig:
        """Select `key` as the sort column; the current page is kept."""
        self._sorter.column(key)
        self.sort_config = self.sort_config.toggled(key)
        self.refresh()
        return self.sort_config

    def go_to_page(self, page: int) -> None:
        self.page = min(max(1, page), self.total_pages)
        self.refresh()

    def next_page(self) -> None:
        self.go_to_page(self.page + 1)

    def previous_page(self) -> None:
        self.go_to_page(self.page - 1)

    # -- selection -----------------------------------------------------------

    def toggle_row(self, record_id: str) -> bool:
        return self.selection.toggle(record_id)

    def toggle_all(self) -> None:
        self.selection.toggle_all(r.id for r in self.page_view.ordered)

    @property
    def is_all_selected(self) -> bool:
        return self.selection.is_all_selected(self.filtered_count)

    def clear_selection(self) -> None:
        self.selection.clear()

    def handle_escape(self) -> bool:
        """Clear the selection; return True if anything was selected."""
        if len(self.selection):
            self.selection.clear()
            return True
        return False
