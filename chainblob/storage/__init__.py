"""Blob storage package for chainblob.

Provides funded, retried blob writes to Walrus and telemetry record
archiving on top of them.

Examples:
    >>> from chainblob.storage import BlobWriter, RecordArchiver
    >>> writer = BlobWriter(provider, store)
    >>> blob_id = await RecordArchiver(writer).save_record({"temperature": 4.2})
"""

from chainblob.storage.backends import BlobStore, WalrusPublisherStore
from chainblob.storage.config import StorageConfig
from chainblob.storage.records import (
    LogEntry,
    RecordArchiver,
    SensorReading,
    build_tracking_entries,
    encode_json,
)
from chainblob.storage.writer import BlobWriter

__all__ = [
    "BlobStore",
    "BlobWriter",
    "LogEntry",
    "RecordArchiver",
    "SensorReading",
    "StorageConfig",
    "WalrusPublisherStore",
    "build_tracking_entries",
    "encode_json",
]
