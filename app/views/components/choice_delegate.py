"""ChoiceDelegate: combo-box editor for cells with a fixed set of values."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QComboBox, QStyledItemDelegate

Choices = Callable[[], list[tuple[str, str]]]


class ChoiceDelegate(QStyledItemDelegate):
    """Edits a cell by picking one `(label, value)` pair.

    `choices` is called each time an editor opens so the list follows the
    current channel options. The stored value is written back through
    ``model.setData(index, value, Qt.EditRole)``.
    """

    def __init__(self, choices: Choices, parent=None) -> None:
        super().__init__(parent)
        self._choices = choices

    def createEditor(self, parent, option, index):  # noqa: N802
        combo = QComboBox(parent)
        for label, value in self._choices():
            combo.addItem(label, value)
        return combo

    def setEditorData(self, editor, index):  # noqa: N802
        pos = editor.findData(index.data(Qt.EditRole))
        editor.setCurrentIndex(max(pos, 0))

    def setModelData(self, editor, model, index):  # noqa: N802
        model.setData(index, editor.currentData(), Qt.EditRole)
