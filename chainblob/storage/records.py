"""Telemetry records written as blobs.

Turns sensor readings collected during a delivery into tracking log
entries, serializes them as JSON and writes them through a BlobWriter.
Source rows may only be deleted after a blob id is returned, so archive()
invokes the caller's purge hook strictly after a successful write.

Examples:
    >>> entries = build_tracking_entries(readings, user_id="42")
    >>> archiver = RecordArchiver(writer)
    >>> blob_id = await archiver.archive(entries, on_archived=delete_rows)

Tests:
    - tests/unit/test_storage/test_records.py
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterable

from pydantic import BaseModel, Field

from chainblob.core.types import BlobWriteOptions
from chainblob.storage.writer import BlobWriter

logger = logging.getLogger(__name__)

TRACKING_ACTION = "delivery_tracking"
DEFAULT_TRACKING_LIMIT = 5


def format_timestamp(value: datetime) -> str:
    """Format as UTC ISO-8601 with milliseconds and a Z suffix.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _utc_now_iso() -> str:
    return format_timestamp(datetime.now(timezone.utc))


class Vector3(BaseModel):
    """Three-axis sensor sample."""

    x: float
    y: float
    z: float


class SensorReading(BaseModel):
    """One row of telemetry captured by a tracking device."""

    product_id: int
    created_at: datetime
    longitude: float
    latitude: float
    temperature: float
    humidity: float
    pressure: float
    accel_x: float = 0.0
    accel_y: float = 0.0
    accel_z: float = 0.0
    gyro_x: float = 0.0
    gyro_y: float = 0.0
    gyro_z: float = 0.0


class LogEntry(BaseModel):
    """A log entry persisted inside a logs blob."""

    timestamp: str = Field(default_factory=_utc_now_iso)
    action: str
    details: dict[str, Any] = Field(default_factory=dict)
    user_id: str | None = Field(default=None, serialization_alias="userId")
    product_id: str | None = Field(default=None, serialization_alias="productId")


def build_tracking_entries(
    readings: Iterable[SensorReading],
    user_id: str | int | None = None,
    limit: int = DEFAULT_TRACKING_LIMIT,
) -> list[LogEntry]:
    """Convert the newest readings into delivery tracking log entries.

    Args:
        readings: Sensor readings in any order.
        user_id: Recipient attached to every entry.
        limit: Maximum number of entries, newest first.

    Returns:
        Log entries ordered newest first.
    """
    newest = sorted(readings, key=lambda r: r.created_at, reverse=True)[:limit]
    return [
        LogEntry(
            timestamp=format_timestamp(reading.created_at),
            action=TRACKING_ACTION,
            details={
                "longitude": reading.longitude,
                "latitude": reading.latitude,
                "temperature": reading.temperature,
                "humidity": reading.humidity,
                "pressure": reading.pressure,
                "acceleration": Vector3(x=reading.accel_x, y=reading.accel_y, z=reading.accel_z).model_dump(),
                "gyroscope": Vector3(x=reading.gyro_x, y=reading.gyro_y, z=reading.gyro_z).model_dump(),
            },
            product_id=str(reading.product_id),
            user_id=str(user_id) if user_id is not None else None,
        )
        for reading in newest
    ]


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(data, (list, tuple)):
        return [_to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: _to_jsonable(value) for key, value in data.items()}
    return data


def encode_json(data: Any) -> bytes:
    """Serialize arbitrary data (pydantic models included) to UTF-8 JSON."""
    return json.dumps(_to_jsonable(data), default=str).encode("utf-8")


class RecordArchiver:
    """Writes records and log batches as blobs.

    Attributes:
        writer: Blob writer used for every save.
        options: Write options; defaults come from the writer.
    """

    def __init__(self, writer: BlobWriter, options: BlobWriteOptions | None = None) -> None:
        self.writer = writer
        self.options = options

    async def save_record(self, data: Any) -> str:
        """Save any JSON-serializable record and return its blob id."""
        return await self.writer.write_blob_id(encode_json(data), self.options)

    async def save_logs(self, entries: list[LogEntry]) -> str:
        """Save a batch of log entries and return its blob id."""
        logger.info(f"[BLOB] Saving {len(entries)} log entries")
        return await self.writer.write_blob_id(encode_json(entries), self.options)

    async def archive(
        self,
        entries: list[LogEntry],
        on_archived: Callable[[str], Awaitable[Any]],
    ) -> str:
        """Save entries, then let the caller purge the source rows.

        Args:
            entries: Log entries to persist.
            on_archived: Awaited with the blob id only after the write
                succeeded; never called on failure.

        Returns:
            The blob id.

        Raises:
            BlobWriteError: If the write failed; source data must be kept.
        """
        blob_id = await self.save_logs(entries)
        await on_archived(blob_id)
        return blob_id
