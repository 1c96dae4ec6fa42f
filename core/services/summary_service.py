"""Per-status counts over a record view."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from core.models import STATUS_ORDER, MovieRecord


@dataclass
class StatusSummary:
    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)


def summarize(records: Iterable[MovieRecord]) -> StatusSummary:
    """Count `records` by status.

    Every known status is present (possibly zero) in rank order; unknown
    statuses follow under their own names.
    """
    counts = Counter(r.status for r in records)
    by_status = {s: counts.pop(s, 0) for s in STATUS_ORDER}
    by_status.update(sorted(counts.items()))
    return StatusSummary(total=sum(by_status.values()), by_status=by_status)
