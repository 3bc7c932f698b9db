"""Blob store configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """Configuration for the Walrus blob store.

    Attributes:
        publisher_url: Publisher used for writes.
        aggregator_url: Aggregator used for reads.
        timeout: Per-request timeout in seconds.
    """

    publisher_url: str | None = Field(default=None, description="Walrus publisher URL")
    aggregator_url: str | None = Field(default=None, description="Walrus aggregator URL")
    timeout: float = Field(default=120.0, gt=0, description="Request timeout in seconds")
