"""Qt table models exposing the current page of a table view-model."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt, Signal
from PySide6.QtGui import QColor

from app.viewmodels.channels_vm import ChannelsVM
from app.viewmodels.movies_vm import EDITABLE_FIELDS, MoviesVM
from app.viewmodels.table_vm import TableVM
from app.views.constants import COL_SEL, ID_ROLE, SEL_HEADER, SORT_INDICATORS, TERMINATED_COLOR
from core.services.sort_service import CHANNEL_COLUMNS, MOVIE_COLUMNS, Column, RelationColumn


class RecordTableModel(QAbstractTableModel):
    """Rows for the visible page plus a selection checkbox column.

    Call `reload()` after any view-model change that alters the page.
    """

    def __init__(self, vm: TableVM, columns: tuple[Column, ...], parent=None) -> None:
        super().__init__(parent)
        self._vm = vm
        self._columns = columns
        self._rows = list(vm.page_view.items)

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    def reload(self) -> None:
        self.beginResetModel()
        self._rows = list(self._vm.page_view.items)
        self.endResetModel()

    def column_at(self, section: int) -> Column | None:
        if section == COL_SEL or not 0 < section <= len(self._columns):
            return None
        return self._columns[section - 1]

    def section_of(self, field: str) -> int:
        for section, col in enumerate(self._columns, start=1):
            if col.field == field:
                return section
        raise KeyError(field)

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # noqa: N802
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:  # noqa: N802
        return 0 if parent.isValid() else len(self._columns) + 1

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid() or index.row() >= len(self._rows):
            return None
        record = self._rows[index.row()]
        if role == ID_ROLE:
            return record.id
        if index.column() == COL_SEL:
            if role == Qt.CheckStateRole:
                return Qt.Checked if record.id in self._vm.selection else Qt.Unchecked
            return None
        if role == Qt.DisplayRole:
            col = self.column_at(index.column())
            return col.display(record, self._vm.channel_labels) if col else None
        return None

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.EditRole) -> bool:  # noqa: N802
        if not index.isValid() or index.column() != COL_SEL or role != Qt.CheckStateRole:
            return False
        record = self._rows[index.row()]
        checked = Qt.CheckState(value) == Qt.Checked
        if (record.id in self._vm.selection) != checked:
            self._vm.toggle_row(record.id)
            self.dataChanged.emit(index, index, [Qt.CheckStateRole])
        return True

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        if not index.isValid():
            return Qt.NoItemFlags
        base = Qt.ItemIsEnabled | Qt.ItemIsSelectable
        if index.column() == COL_SEL:
            return base | Qt.ItemIsUserCheckable
        return base

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole) -> Any:  # noqa: N802
        if orientation != Qt.Horizontal:
            return None
        if section == COL_SEL:
            if role == Qt.CheckStateRole:
                return Qt.Checked if self._vm.is_all_selected else Qt.Unchecked
            return SEL_HEADER if role == Qt.DisplayRole else None
        col = self.column_at(section)
        if col is None or role != Qt.DisplayRole:
            return None
        label = col.label
        if col.field == self._vm.sort_config.key:
            label += SORT_INDICATORS[self._vm.sort_config.direction.ascending]
        return label

    def sort_by_section(self, section: int) -> bool:
        """Sort by the column at `section`; False if it is not sortable."""
        col = self.column_at(section)
        if col is None or not col.sortable:
            return False
        self._vm.sort_by(col.field)
        self.reload()
        self.headerDataChanged.emit(Qt.Horizontal, 0, self.columnCount() - 1)
        return True


class MovieTableModel(RecordTableModel):
    """Movie rows; status, channel and note cells are editable in place.

    Edits go through `MoviesVM.edit_field`. `recordEdited` fires after a
    stored change so the owner can reload, since the edit may move or hide
    the row.
    """

    recordEdited = Signal(str)

    def __init__(self, vm: MoviesVM, columns: tuple[Column, ...] = MOVIE_COLUMNS, parent=None) -> None:
        super().__init__(vm, columns, parent)
        self._movies = vm

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if role == Qt.EditRole and index.isValid() and index.row() < len(self._rows):
            col = self.column_at(index.column())
            if col is None or col.field not in EDITABLE_FIELDS:
                return None
            value = getattr(self._rows[index.row()], col.field)
            if isinstance(col, RelationColumn):
                return value[0] if value else ""
            return value
        return super().data(index, role)

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.EditRole) -> bool:  # noqa: N802
        if role != Qt.EditRole:
            return super().setData(index, value, role)
        col = self.column_at(index.column()) if index.isValid() else None
        if col is None or col.field not in EDITABLE_FIELDS:
            return False
        record_id = self._rows[index.row()].id
        if not self._movies.edit_field(record_id, col.field, value):
            return False
        self.dataChanged.emit(index, index, [Qt.DisplayRole, Qt.EditRole])
        self.recordEdited.emit(record_id)
        return True

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        flags = super().flags(index)
        col = self.column_at(index.column()) if index.isValid() else None
        if col is not None and col.field in EDITABLE_FIELDS:
            flags |= Qt.ItemIsEditable
        return flags


class ChannelTableModel(RecordTableModel):
    """Read-only channel rows; terminated channels are greyed out."""

    def __init__(self, vm: ChannelsVM, columns: tuple[Column, ...] = CHANNEL_COLUMNS, parent=None) -> None:
        super().__init__(vm, columns, parent)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if role == Qt.ForegroundRole and index.isValid() and index.row() < len(self._rows):
            if self._rows[index.row()].is_terminated:
                return QColor(TERMINATED_COLOR)
            return None
        return super().data(index, role)
