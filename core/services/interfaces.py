"""Collaborator contracts consumed by the table engine.

The engine reads records through `IMovieSource` and proposes changes through
`IMovieMutations`; it never observes whether a mutation succeeded.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

from core.models import MovieRecord


class IMovieSource(Protocol):
    """Ordered, caller-owned record collection."""

    def get_records(self) -> Sequence[MovieRecord]:
        """Return the current records in source order."""
        raise NotImplementedError


class IMovieMutations(Protocol):
    """Mutation callbacks invoked fire-and-forget by the engine."""

    def update_record(self, record_id: str, changes: Mapping[str, Any]) -> None:
        """Apply a partial field update to one record."""
        raise NotImplementedError

    def bulk_update_status(self, record_ids: Iterable[str], status: str) -> None:
        """Set `status` on every record in `record_ids`."""
        raise NotImplementedError

    def delete_record(self, record_id: str) -> None:
        """Remove one record from the source."""
        raise NotImplementedError

    def add_records(self, raw_text: str) -> list[MovieRecord]:
        """Create records from a newline-delimited blob of names."""
        raise NotImplementedError
