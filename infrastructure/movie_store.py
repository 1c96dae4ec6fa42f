"""In-memory movie record store.

Implements both the record source and the mutation callbacks the table
engine consumes. Records are edited in place; the store never copies them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import fields
from datetime import datetime
from typing import Any
import uuid

from loguru import logger

from core.models import MovieRecord, MovieStatus
from core.services.filter_service import local_now

_MUTABLE_FIELDS = {f.name for f in fields(MovieRecord)} - {"id"}


def _new_id() -> str:
    return str(uuid.uuid4())


def parse_movie_names(raw_text: str) -> list[str]:
    """Split a pasted blob into trimmed, non-blank names (one per line)."""
    return [line.strip() for line in raw_text.splitlines() if line.strip()]


class MovieStore:
    """Caller-owned list of `MovieRecord` with mutation helpers."""

    def __init__(
        self,
        records: Iterable[MovieRecord] | None = None,
        clock: Callable[[], datetime] = local_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._records: list[MovieRecord] = list(records or [])
        self._clock = clock
        self._new_id = id_factory

    def get_records(self) -> list[MovieRecord]:
        return self._records

    def get(self, record_id: str) -> MovieRecord | None:
        for r in self._records:
            if r.id == record_id:
                return r
        return None

    def update_record(self, record_id: str, changes: Mapping[str, Any]) -> None:
        """Assign `changes` onto the record with `record_id`.

        Raises:
            KeyError: If `changes` names `id` or a field records do not have.
        """
        bad = set(changes) - _MUTABLE_FIELDS
        if bad:
            raise KeyError(f"Cannot update fields: {sorted(bad)}")
        record = self.get(record_id)
        if record is None:
            logger.warning("Update skipped, record not found: {}", record_id)
            return
        for name, value in changes.items():
            setattr(record, name, list(value) if isinstance(value, list) else value)

    def bulk_update_status(self, record_ids: Iterable[str], status: str) -> None:
        wanted = set(record_ids)
        updated = 0
        for r in self._records:
            if r.id in wanted:
                r.status = status
                updated += 1
        logger.info("Status set to {} on {} records", status, updated)

    def delete_record(self, record_id: str) -> None:
        before = len(self._records)
        self._records[:] = [r for r in self._records if r.id != record_id]
        if len(self._records) == before:
            logger.warning("Delete skipped, record not found: {}", record_id)

    def add_records(self, raw_text: str) -> list[MovieRecord]:
        """Create a Playlist record for each new name in `raw_text`.

        Names already in the store, and repeats inside the blob, are skipped
        case-insensitively.
        """
        seen = {r.name.casefold() for r in self._records}
        created: list[MovieRecord] = []
        now = self._clock()
        for name in parse_movie_names(raw_text):
            key = name.casefold()
            if key in seen:
                continue
            seen.add(key)
            created.append(
                MovieRecord(
                    id=self._new_id(),
                    name=name,
                    status=MovieStatus.PLAYLIST.value,
                    added_at=now,
                )
            )
        self._records.extend(created)
        logger.info("Added {} movies", len(created))
        return created
