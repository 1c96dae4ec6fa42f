"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

# Selection checkbox column precedes the data columns
COL_SEL: int = 0
SEL_HEADER: str = ""

# Data roles
ID_ROLE: int = Qt.UserRole  # record id on every cell

SORT_INDICATORS: dict[bool, str] = {True: " ▲", False: " ▼"}

WINDOW_TITLE: str = "Movie Desk"
DEFAULT_WINDOW_SIZE: tuple[int, int] = (1200, 760)

# Channels that no longer exist
TERMINATED_COLOR: str = "#9a9a9a"
NO_CHANNEL_LABEL: str = "(none)"
