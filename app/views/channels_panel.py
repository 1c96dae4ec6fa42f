"""ChannelsPanel: the tracked-channel tab (search, table, pager, groups)."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from app.viewmodels.channels_vm import ChannelsVM
from app.views.constants import COL_SEL
from app.views.table_models import ChannelTableModel


class ChannelsPanel(QWidget):
    """Channel tab; every handler forwards to the `ChannelsVM` and re-reads it."""

    def __init__(self, vm: ChannelsVM, parent=None) -> None:
        super().__init__(parent)
        self._vm = vm
        self.model = ChannelTableModel(vm, parent=self)
        self._setup_ui()
        self._connect_signals()
        self.refresh_view()

    def _setup_ui(self) -> None:
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search channel...")

        self.table = QTableView()
        self.table.setModel(self.model)
        self.table.setSelectionBehavior(QTableView.SelectRows)
        self.table.horizontalHeader().setSectionsClickable(True)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.verticalHeader().setVisible(False)

        self.empty_label = QLabel("No channels match the current filter.")
        self.empty_label.setAlignment(Qt.AlignCenter)

        self.btn_prev = QPushButton("Previous")
        self.btn_next = QPushButton("Next")
        self.page_label = QLabel()
        self.status_label = QLabel()

        self.groups = QComboBox()
        self.groups.setPlaceholderText("Select group…")
        self.btn_save_group = QPushButton("Save Group…")
        self.btn_remove = QPushButton("Remove Selected…")

        toolbar = QHBoxLayout()
        toolbar.addWidget(self.search, 1)
        toolbar.addWidget(self.groups)
        toolbar.addWidget(self.btn_save_group)
        toolbar.addWidget(self.btn_remove)

        pager = QHBoxLayout()
        pager.addWidget(self.btn_prev)
        pager.addWidget(self.page_label)
        pager.addWidget(self.btn_next)
        pager.addStretch(1)
        pager.addWidget(self.status_label)

        root = QVBoxLayout()
        root.addLayout(toolbar)
        root.addWidget(self.table, 1)
        root.addWidget(self.empty_label)
        root.addLayout(pager)
        self.setLayout(root)

    def _connect_signals(self) -> None:
        self.search.textChanged.connect(self.on_search_changed)
        self.table.horizontalHeader().sectionClicked.connect(self.on_header_clicked)
        self.btn_prev.clicked.connect(lambda: self._page(self._vm.previous_page))
        self.btn_next.clicked.connect(lambda: self._page(self._vm.next_page))
        self.btn_save_group.clicked.connect(self.on_save_group)
        self.btn_remove.clicked.connect(self.on_remove_selected)
        self.groups.activated.connect(self.on_group_chosen)
        self.model.dataChanged.connect(lambda *_: self.refresh_status())

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
        selected = len(self._vm.selection)
        text = f"{self._vm.filtered_count} channels"
        if selected:
            text += f" | {selected} selected"
        self.status_label.setText(text)
        self.btn_save_group.setEnabled(selected > 0)
        self.btn_remove.setEnabled(selected > 0)

    def _page(self, move: Callable[[], None]) -> None:
        move()
        self.refresh_view()

    # Handlers

    def on_search_changed(self, text: str) -> None:
        self._vm.set_search_text(text)
        self.refresh_view()

    def on_header_clicked(self, section: int) -> None:
        if section == COL_SEL:
            self._vm.toggle_all()
            self.refresh_view()
        elif self.model.sort_by_section(section):
            self.refresh_view()

    def on_escape(self) -> bool:
        if not self._vm.handle_escape():
            return False
        self.refresh_view()
        return True

    def on_save_group(self) -> None:
        name, ok = QInputDialog.getText(self, "Save Group", "Group name:")
        if not ok:
            return
        try:
            group = self._vm.save_group(name)
        except ValueError as ex:
            QMessageBox.warning(self, "Save Group", str(ex))
            return
        self.groups.addItem(group.name, group.id)

    def on_group_chosen(self, index: int) -> None:
        group_id = self.groups.itemData(index)
        if group_id is None:
            return
        self._vm.select_group(group_id)
        self.refresh_view()

    def on_remove_selected(self) -> None:
        count = len(self._vm.selection)
        if not count:
            return
        reply = QMessageBox.question(
            self,
            "Remove Channels",
            f"Stop tracking {count} selected channel(s)?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if reply == QMessageBox.Yes:
            self._vm.remove_selected()
        self.refresh_view()
