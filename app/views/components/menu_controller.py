"""MenuController: Manages menu creation and action connections."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QMenuBar

from core.models import STATUS_ORDER, RelationAxis, RelationOption, TimeWindow

TIME_WINDOW_LABELS: dict[TimeWindow, str] = {
    TimeWindow.TODAY: "Added Today",
    TimeWindow.LAST_7_DAYS: "Last 7 Days",
    TimeWindow.LAST_30_DAYS: "Last 30 Days",
}

CHANNEL_AXIS_LABELS: dict[RelationAxis, str] = {
    RelationAxis.CHANNEL_3D: "3D Channels",
    RelationAxis.CHANNEL_2D: "2D Channels",
}


class MenuController:
    """Manages main window menu creation and action connections.

    Plain actions live in `actions`; the checkable filter actions live in
    `status_actions`, `channel_actions` (per axis) and `time_actions`.
    """

    def __init__(self, main_window: QMainWindow) -> None:
        self.window = main_window
        self.actions: dict[str, QAction] = {}
        self.status_actions: dict[str, QAction] = {}
        self.time_actions: dict[TimeWindow, QAction] = {}
        self.channel_actions: dict[RelationAxis, dict[str, QAction]] = {axis: {} for axis in RelationAxis}

    def setup_menus(self, channels: Iterable[RelationOption] = ()) -> dict[str, QAction]:
        """Create all menus and return action references.

        `channels` populates the 3D and 2D channel filter submenus.
        """
        channels = list(channels)
        menubar = QMenuBar(self.window)

        # File Menu
        file_menu = menubar.addMenu("File")
        self.actions["add"] = file_menu.addAction("Add Movies…")
        self.actions["export"] = file_menu.addAction("Export CSV…")
        file_menu.addSeparator()
        self.actions["exit"] = file_menu.addAction("Exit")

        # Bulk Menu
        bulk_menu = menubar.addMenu("Bulk")
        self.actions["bulk_status"] = bulk_menu.addAction("Set Status…")
        self.actions["bulk_3d"] = bulk_menu.addAction("Set 3D Channel…")
        self.actions["bulk_2d"] = bulk_menu.addAction("Set 2D Channel…")
        bulk_menu.addSeparator()
        self.actions["select_all"] = bulk_menu.addAction("Select All Filtered")
        self.actions["delete"] = bulk_menu.addAction("Delete Selected…")

        # Filter Menu
        filter_menu = menubar.addMenu("Filter")
        status_menu = filter_menu.addMenu("Status")
        for status in STATUS_ORDER:
            act = status_menu.addAction(status)
            act.setCheckable(True)
            self.status_actions[status] = act
        for axis, title in CHANNEL_AXIS_LABELS.items():
            channel_menu = filter_menu.addMenu(title)
            channel_menu.setEnabled(bool(channels))
            for option in channels:
                act = channel_menu.addAction(option.label)
                act.setCheckable(True)
                self.channel_actions[axis][option.id] = act
        time_menu = filter_menu.addMenu("Date Added")
        for window, label in TIME_WINDOW_LABELS.items():
            act = time_menu.addAction(label)
            act.setCheckable(True)
            self.time_actions[window] = act
        filter_menu.addSeparator()
        self.actions["clear_filters"] = filter_menu.addAction("Clear Filters")

        self.window.setMenuBar(menubar)
        return self.actions

    def connect_actions(self, handlers: dict[str, Callable]) -> None:
        """Connect menu actions to their handler methods.

        `status_filter`, `channel_filter` and `time_filter` receive the
        status string, `RelationAxis` or `TimeWindow` of the toggled action.
        """
        for name, action in self.actions.items():
            if name in handlers:
                action.triggered.connect(handlers[name])
        if "exit" not in handlers:
            self.actions["exit"].triggered.connect(self.window.close)

        if "status_filter" in handlers:
            for status, act in self.status_actions.items():
                act.triggered.connect(lambda _=False, s=status: handlers["status_filter"](s))
        if "channel_filter" in handlers:
            for axis, acts in self.channel_actions.items():
                for act in acts.values():
                    act.triggered.connect(lambda _=False, a=axis: handlers["channel_filter"](a))
        if "time_filter" in handlers:
            for window, act in self.time_actions.items():
                act.triggered.connect(lambda _=False, w=window: handlers["time_filter"](w))

    def checked_statuses(self) -> list[str]:
        return [s for s, act in self.status_actions.items() if act.isChecked()]

    def checked_channels(self, axis: RelationAxis) -> list[str]:
        return [i for i, act in self.channel_actions[axis].items() if act.isChecked()]

    def check_time_window(self, window: TimeWindow | None) -> None:
        """Keep at most one time-window action checked."""
        for w, act in self.time_actions.items():
            act.setChecked(w is window)

    def uncheck_filters(self) -> None:
        for act in self.status_actions.values():
            act.setChecked(False)
        for acts in self.channel_actions.values():
            for act in acts.values():
                act.setChecked(False)
        self.check_time_window(None)

    def enable_action(self, name: str, enabled: bool = True) -> None:
        action = self.actions.get(name)
        if action:
            action.setEnabled(enabled)
