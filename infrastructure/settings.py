"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.models import SortConfig, SortDirection

DEFAULT_ROWS_PER_PAGE = 100
DEFAULT_SORT = SortConfig("added_at", SortDirection.DESC)
DEFAULT_CHANNEL_SORT = SortConfig("subscriber_count", SortDirection.DESC)


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        node: Any = self._data
        for part in key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    @property
    def rows_per_page(self) -> int:
        """`table.rows_per_page`; missing, zero or non-numeric means 100."""
        try:
            value = int(self.get("table.rows_per_page", DEFAULT_ROWS_PER_PAGE) or 0)
        except (TypeError, ValueError):
            return DEFAULT_ROWS_PER_PAGE
        return value if value > 0 else DEFAULT_ROWS_PER_PAGE

    @property
    def default_sort(self) -> SortConfig:
        return self._sort_config("sorting.default", DEFAULT_SORT)

    @property
    def channel_sort(self) -> SortConfig:
        return self._sort_config("sorting.channels", DEFAULT_CHANNEL_SORT)

    def _sort_config(self, key: str, fallback: SortConfig) -> SortConfig:
        # Expect: {"field": "added_at", "asc": false}
        raw = self.get(key)
        if isinstance(raw, dict) and "field" in raw:
            direction = SortDirection.ASC if bool(raw.get("asc", True)) else SortDirection.DESC
            return SortConfig(str(raw["field"]), direction)
        return fallback
