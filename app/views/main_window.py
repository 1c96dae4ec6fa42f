"""MainWindow: movie tab (search, table, pager, bulk actions) and channel tab.

The window holds no table state of its own; every handler forwards to the
`MoviesVM` (or the channel panel's `ChannelsVM`) and then re-reads it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTableView,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.channels_vm import ChannelsVM
from app.viewmodels.movies_vm import MoviesVM
from app.views.channels_panel import ChannelsPanel
from app.views.components.choice_delegate import ChoiceDelegate
from app.views.components.menu_controller import MenuController
from app.views.constants import COL_SEL, DEFAULT_WINDOW_SIZE, NO_CHANNEL_LABEL, WINDOW_TITLE
from app.views.table_models import MovieTableModel
from core.models import STATUS_ORDER, FilterCriteria, RelationAxis, TimeWindow
from core.services.bulk_edit_service import BulkKind


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, vm: MoviesVM, repo: Any | None = None, channels_vm: ChannelsVM | None = None) -> None:
        """Initialize MainWindow.

        Args:
            vm: ViewModel driving the movie table.
            repo: Repository with `save(path, records)` for CSV export.
            channels_vm: ViewModel for the channel tab; no tab when None.
        """
        super().__init__()
        self._vm = vm
        self._repo = repo

        self.model = MovieTableModel(vm, parent=self)
        self.menu_controller = MenuController(self)
        self.channels_panel = ChannelsPanel(channels_vm, parent=self) if channels_vm else None

        self._setup_ui()
        self._connect_signals()
        self.refresh_view()

    def _setup_ui(self) -> None:
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(*DEFAULT_WINDOW_SIZE)

        self.search = QLineEdit()
        self.search.setPlaceholderText("Search movie...")

        self.table = QTableView()
        self.table.setModel(self.model)
        self.table.setSelectionBehavior(QTableView.SelectRows)
        self.table.setEditTriggers(QTableView.DoubleClicked | QTableView.EditKeyPressed)
        self.table.horizontalHeader().setSectionsClickable(True)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.verticalHeader().setVisible(False)
        self._setup_delegates()

        self.empty_label = QLabel("No movies match the current filter.")
        self.empty_label.setAlignment(Qt.AlignCenter)

        self.btn_prev = QPushButton("Previous")
        self.btn_next = QPushButton("Next")
        self.page_label = QLabel()

        pager = QHBoxLayout()
        pager.addWidget(self.btn_prev)
        pager.addWidget(self.page_label)
        pager.addWidget(self.btn_next)
        pager.addStretch(1)

        root = QVBoxLayout()
        root.addWidget(self.search)
        root.addWidget(self.table, 1)
        root.addWidget(self.empty_label)
        root.addLayout(pager)

        movies_tab = QWidget()
        movies_tab.setLayout(root)
        self.tabs = QTabWidget()
        self.tabs.addTab(movies_tab, "Movies")
        if self.channels_panel is not None:
            self.tabs.addTab(self.channels_panel, "Channels")
        self.setCentralWidget(self.tabs)

        self.menu_controller.setup_menus(self._vm.channels)

    def _setup_delegates(self) -> None:
        statuses = [(s, s) for s in STATUS_ORDER]
        self._status_delegate = ChoiceDelegate(lambda: statuses, self.table)
        self._channel_delegate = ChoiceDelegate(
            lambda: [(NO_CHANNEL_LABEL, "")] + [(c.label, c.id) for c in self._vm.channels],
            self.table,
        )
        self.table.setItemDelegateForColumn(self.model.section_of("status"), self._status_delegate)
        for axis in RelationAxis:
            self.table.setItemDelegateForColumn(self.model.section_of(axis.field_name), self._channel_delegate)

    def _connect_signals(self) -> None:
        self.menu_controller.connect_actions(
            {
                "add": self.on_add_movies,
                "export": self.on_export_csv,
                "exit": self.close,
                "bulk_status": lambda: self.on_bulk_edit(BulkKind.STATUS),
                "bulk_3d": lambda: self.on_bulk_edit(BulkKind.CHANNEL_3D),
                "bulk_2d": lambda: self.on_bulk_edit(BulkKind.CHANNEL_2D),
                "select_all": self.on_toggle_all,
                "delete": self.on_delete_selected,
                "clear_filters": self.on_clear_filters,
                "status_filter": self.on_status_filter,
                "channel_filter": self.on_channel_filter,
                "time_filter": self.on_time_filter,
            }
        )
        self.search.textChanged.connect(self.on_search_changed)
        self.table.horizontalHeader().sectionClicked.connect(self.on_header_clicked)
        self.btn_prev.clicked.connect(lambda: self._page(self._vm.previous_page))
        self.btn_next.clicked.connect(lambda: self._page(self._vm.next_page))
        self.model.dataChanged.connect(lambda *_: self.refresh_status())
        # An edit can move or hide the row; reload once the editor has closed
        self.model.recordEdited.connect(lambda _id: QTimer.singleShot(0, self.refresh_view))
        QShortcut(QKeySequence(Qt.Key_Escape), self, activated=self.on_escape)

    # View refresh

    def refresh_view(self) -> None:
        self.model.reload()
        self.model.headerDataChanged.emit(Qt.Horizontal, 0, self.model.columnCount() - 1)
        self.empty_label.setVisible(self._vm.is_empty)
        self.table.setVisible(not self._vm.is_empty)
        self.page_label.setText(f"Page {self._vm.page} / {self._vm.total_pages}")
        self.btn_prev.setEnabled(self._vm.page > 1)
        self.btn_next.setEnabled(self._vm.page < self._vm.total_pages)
        self.refresh_status()

    def refresh_status(self) -> None:
        summary = self._vm.summary
        parts = [f"{summary.total} movies"]
        parts += [f"{s}: {n}" for s, n in summary.by_status.items() if n]
        selected = len(self._vm.selection)
        if selected:
            parts.append(f"{selected} selected")
        self.statusBar().showMessage(" | ".join(parts))
        has_selection = selected > 0
        for name in ("bulk_status", "bulk_3d", "bulk_2d", "delete"):
            self.menu_controller.enable_action(name, has_selection)

    def _page(self, move: Callable[[], None]) -> None:
        move()
        self.refresh_view()

    # Handlers

    def on_search_changed(self, text: str) -> None:
        self._vm.set_search_text(text)
        self.refresh_view()

    def on_status_filter(self, _status: str) -> None:
        self._vm.set_status_filter(self.menu_controller.checked_statuses())
        self.refresh_view()

    def on_channel_filter(self, axis: RelationAxis) -> None:
        self._vm.set_channel_filter(axis, self.menu_controller.checked_channels(axis))
        self.refresh_view()

    def on_time_filter(self, window: TimeWindow) -> None:
        chosen = window if self._vm.criteria.time_window is not window else None
        self.menu_controller.check_time_window(chosen)
        self._vm.set_time_window(chosen)
        self.refresh_view()

    def on_clear_filters(self) -> None:
        self.menu_controller.uncheck_filters()
        self.search.blockSignals(True)
        self.search.clear()
        self.search.blockSignals(False)
        self._vm.set_criteria(FilterCriteria())
        self.refresh_view()

    def on_header_clicked(self, section: int) -> None:
        if section == COL_SEL:
            self.on_toggle_all()
        elif self.model.sort_by_section(section):
            self.refresh_view()

    def on_toggle_all(self) -> None:
        self._vm.toggle_all()
        self.refresh_view()

    def on_escape(self) -> None:
        if self.channels_panel is not None and self.tabs.currentWidget() is self.channels_panel:
            self.channels_panel.on_escape()
        elif self._vm.handle_escape():
            self.refresh_view()

    def on_bulk_edit(self, kind: BulkKind) -> None:
        self._vm.open_bulk_menu(kind)
        if kind is BulkKind.STATUS:
            labels = list(STATUS_ORDER)
            values = list(STATUS_ORDER)
        else:
            term, ok = QInputDialog.getText(self, "Bulk Edit", "Search channels (blank for all):")
            if not ok:
                self._vm.handle_escape()
                return
            options = self._vm.search_bulk_channels(term.strip())
            labels = [o.label for o in options]
            values = [o.id for o in options]
        if not values:
            self._vm.bulk.close()
            QMessageBox.information(self, "Bulk Edit", "No channels available.")
            return

        label, ok = QInputDialog.getItem(self, "Bulk Edit", "Apply to selected:", labels, 0, False)
        if not ok:
            self._vm.handle_escape()
            return
        self._vm.pick_bulk_value(values[labels.index(label)])
        self._vm.commit_bulk()
        self.refresh_view()

    def on_delete_selected(self) -> None:
        if not self._vm.request_delete():
            return
        count = len(self._vm.selection)
        reply = QMessageBox.question(
            self,
            "Confirm Delete",
            f"Delete {count} selected movie(s)?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if reply == QMessageBox.Yes:
            self._vm.confirm_delete()
        else:
            self._vm.cancel_delete()
        self.refresh_view()

    def on_add_movies(self) -> None:
        text, ok = QInputDialog.getMultiLineText(self, "Add Movies", "One title per line:")
        if ok and text.strip():
            created = self._vm.add_movies(text)
            self.statusBar().showMessage(f"Added {len(created)} movie(s)", 3000)
            self.refresh_view()

    def on_export_csv(self) -> None:
        if self._repo is None:
            return
        path, _ = QFileDialog.getSaveFileName(self, "Export CSV", "movies.csv", "CSV Files (*.csv)")
        if not path:
            return
        try:
            self._repo.save(path, self._vm.filtered_records)
        except OSError as ex:
            logger.error("Export failed: {}", ex)
            QMessageBox.critical(self, "Export", f"Export failed: {ex}")
