# Shared fixtures: a fixed clock, sample movies, and a mutations double that
# records every callback so tests can assert on the exact calls issued.

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import os

import pytest

from core.models import ChannelRecord, MovieRecord

NOW = datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)


def make_movie(
    record_id: str,
    name: str = "",
    status: str = "Playlist",
    days_ago: float = 0,
    channel_3d_ids: list[str] | None = None,
    channel_2d_ids: list[str] | None = None,
    note: str = "",
) -> MovieRecord:
    return MovieRecord(
        id=record_id,
        name=name or f"Movie {record_id}",
        status=status,
        added_at=NOW - timedelta(days=days_ago),
        channel_3d_ids=list(channel_3d_ids or []),
        channel_2d_ids=list(channel_2d_ids or []),
        note=note,
    )


def make_channel(
    channel_id: str,
    title: str = "",
    subscribers: str = "0",
    views: str = "0",
    videos: str = "0",
    status: str = "active",
    published_days_ago: float = 1000,
    newest_days_ago: float | None = None,
    oldest_days_ago: float | None = None,
) -> ChannelRecord:
    return ChannelRecord(
        id=channel_id,
        title=title or f"Channel {channel_id}",
        published_at=NOW - timedelta(days=published_days_ago),
        subscriber_count=subscribers,
        view_count=views,
        video_count=videos,
        status=status,
        newest_video_date=None if newest_days_ago is None else NOW - timedelta(days=newest_days_ago),
        oldest_video_date=None if oldest_days_ago is None else NOW - timedelta(days=oldest_days_ago),
    )


class RecordingMutations:
    """Stand-in for the mutation callbacks; stores calls in order."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def update_record(self, record_id, changes):
        self.calls.append(("update_record", record_id, dict(changes)))

    def bulk_update_status(self, record_ids, status):
        self.calls.append(("bulk_update_status", list(record_ids), status))

    def delete_record(self, record_id):
        self.calls.append(("delete_record", record_id))

    def add_records(self, raw_text):
        self.calls.append(("add_records", raw_text))
        return []


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def movies() -> list[MovieRecord]:
    return [
        make_movie("m1", "Arrival", "Done", days_ago=40, channel_3d_ids=["c3a"], channel_2d_ids=["c2a"]),
        make_movie("m2", "Blade Runner", "Strike Check", days_ago=20, channel_3d_ids=["c3a", "c3b"]),
        make_movie("m3", "Coherence", "Playlist", days_ago=3, channel_2d_ids=["c2b"], note="check audio"),
        make_movie("m4", "Dune", "Download", days_ago=0.1, channel_3d_ids=["c3b"]),
        make_movie("m5", "ex machina", "Archived", days_ago=10),
    ]


@pytest.fixture
def channels() -> list[ChannelRecord]:
    return [
        make_channel("c1", "Cinema 3D", "182000", "45100000", "640", published_days_ago=2700, newest_days_ago=1, oldest_days_ago=2690),
        make_channel("c2", "retro 3D", "9400", "1200000", "88", published_days_ago=2100, newest_days_ago=19, oldest_days_ago=2095),
        make_channel("c3", "Flat Classics", "56000", "20300000", "1210", published_days_ago=3700, newest_days_ago=7, oldest_days_ago=3690),
        make_channel("c4", "Indie 2D", "hidden", "310000", "42", published_days_ago=1300),
        make_channel("c5", "Old Mirror", "0", "0", "0", status="terminated", published_days_ago=4200),
    ]


@pytest.fixture
def mutations() -> RecordingMutations:
    return RecordingMutations()


@pytest.fixture(scope="session")
def qapp():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtCore import QCoreApplication

    return QCoreApplication.instance() or QCoreApplication([])
