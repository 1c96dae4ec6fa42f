"""CSV persistence for movie and channel records.

Relation columns hold `;`-separated channel ids. Older exports carry a single
`Channel3DId` / `Channel2DId` column instead; it is read as a one-element
list when the list column is empty.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import csv
from datetime import datetime, timezone
from pathlib import Path

from loguru import logger

from core.models import ChannelRecord, ChannelStatus, MovieRecord

CSV_HEADERS = [
    "Id",
    "Name",
    "Status",
    "AddedAt",
    "Channel3DIds",
    "Channel2DIds",
    "Note",
]

REQUIRED_HEADERS = ["Id", "Name", "Status", "AddedAt"]

CHANNEL_CSV_HEADERS = [
    "Id",
    "Title",
    "PublishedAt",
    "SubscriberCount",
    "ViewCount",
    "VideoCount",
    "Status",
    "NewestVideoDate",
    "OldestVideoDate",
]

CHANNEL_REQUIRED_HEADERS = ["Id", "Title", "PublishedAt"]

_ID_SEP = ";"


def _parse_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC.

    Raises:
        ValueError: If the value is empty or not ISO 8601.
    """
    dt = datetime.fromisoformat(value.strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_optional_datetime(value: str | None) -> datetime | None:
    if not value or not value.strip():
        return None
    return _parse_datetime(value)


def _format_optional(value: datetime | None) -> str:
    return value.isoformat() if value is not None else ""


def _parse_ids(list_field: str | None, legacy_field: str | None) -> list[str]:
    ids = [p.strip() for p in (list_field or "").split(_ID_SEP) if p.strip()]
    if not ids and legacy_field and legacy_field.strip():
        ids = [legacy_field.strip()]
    return ids


class CsvMovieRepository:
    """Load and save movie records in CSV format."""

    def load(self, csv_path: str) -> Iterator[MovieRecord]:
        """Yield `MovieRecord` from CSV at `csv_path`, skipping bad rows."""
        path = Path(csv_path)
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            missing = [h for h in REQUIRED_HEADERS if h not in (reader.fieldnames or [])]
            if missing:
                raise ValueError(f"CSV missing required headers: {missing}")

            for row in reader:
                try:
                    record_id = (row.get("Id") or "").strip()
                    if not record_id:
                        raise ValueError("empty Id")
                    yield MovieRecord(
                        id=record_id,
                        name=row.get("Name") or "",
                        status=row.get("Status") or "",
                        added_at=_parse_datetime(row.get("AddedAt") or ""),
                        channel_3d_ids=_parse_ids(row.get("Channel3DIds"), row.get("Channel3DId")),
                        channel_2d_ids=_parse_ids(row.get("Channel2DIds"), row.get("Channel2DId")),
                        note=row.get("Note") or "",
                    )
                except (ValueError, TypeError) as ex:
                    logger.warning("CSV row skipped: {} | row={}", ex, row)
                    continue

    def save(self, csv_path: str, records: Iterable[MovieRecord]) -> None:
        """Write `records` to `csv_path` using canonical headers."""
        path = Path(csv_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        count = 0
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_HEADERS)
            writer.writeheader()
            for item in records:
                writer.writerow(
                    {
                        "Id": item.id,
                        "Name": item.name,
                        "Status": item.status,
                        "AddedAt": item.added_at.isoformat(),
                        "Channel3DIds": _ID_SEP.join(item.channel_3d_ids),
                        "Channel2DIds": _ID_SEP.join(item.channel_2d_ids),
                        "Note": item.note,
                    }
                )
                count += 1
        logger.info("Saved {} movies to {}", count, path)


class CsvChannelRepository:
    """Load and save tracked channels in CSV format.

    Counts are stored verbatim; empty video dates load as None.
    """

    def load(self, csv_path: str) -> Iterator[ChannelRecord]:
        """Yield `ChannelRecord` from CSV at `csv_path`, skipping bad rows."""
        path = Path(csv_path)
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            missing = [h for h in CHANNEL_REQUIRED_HEADERS if h not in (reader.fieldnames or [])]
            if missing:
                raise ValueError(f"CSV missing required headers: {missing}")

            for row in reader:
                try:
                    channel_id = (row.get("Id") or "").strip()
                    if not channel_id:
                        raise ValueError("empty Id")
                    yield ChannelRecord(
                        id=channel_id,
                        title=row.get("Title") or "",
                        published_at=_parse_datetime(row.get("PublishedAt") or ""),
                        subscriber_count=(row.get("SubscriberCount") or "0").strip(),
                        view_count=(row.get("ViewCount") or "0").strip(),
                        video_count=(row.get("VideoCount") or "0").strip(),
                        status=(row.get("Status") or ChannelStatus.ACTIVE.value).strip(),
                        newest_video_date=_parse_optional_datetime(row.get("NewestVideoDate")),
                        oldest_video_date=_parse_optional_datetime(row.get("OldestVideoDate")),
                    )
                except (ValueError, TypeError) as ex:
                    logger.warning("Channel CSV row skipped: {} | row={}", ex, row)
                    continue

    def save(self, csv_path: str, channels: Iterable[ChannelRecord]) -> None:
        path = Path(csv_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        count = 0
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CHANNEL_CSV_HEADERS)
            writer.writeheader()
            for item in channels:
                writer.writerow(
                    {
                        "Id": item.id,
                        "Title": item.title,
                        "PublishedAt": item.published_at.isoformat(),
                        "SubscriberCount": item.subscriber_count,
                        "ViewCount": item.view_count,
                        "VideoCount": item.video_count,
                        "Status": item.status,
                        "NewestVideoDate": _format_optional(item.newest_video_date),
                        "OldestVideoDate": _format_optional(item.oldest_video_date),
                    }
                )
                count += 1
        logger.info("Saved {} channels to {}", count, path)
