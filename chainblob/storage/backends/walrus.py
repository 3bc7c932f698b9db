"""Walrus blob store backend over the publisher and aggregator HTTP APIs.

Walrus HTTP API docs: https://docs.wal.app/usage/web-api.html

The publisher registers and certifies the blob on chain; the resulting blob
object is sent to the signer's address so the funded wallet owns it.

Tests:
    - tests/unit/test_storage/test_walrus.py
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from chainblob.core.errors import BlobStoreError
from chainblob.core.keys import SigningCredential
from chainblob.core.types import BlobWriteResult
from chainblob.storage.backends.base import BlobStore
from chainblob.storage.config import StorageConfig

logger = logging.getLogger(__name__)


def parse_store_response(data: dict[str, Any]) -> BlobWriteResult:
    """Extract the blob id from a publisher store response.

    Raises:
        BlobStoreError: If neither a new nor an already certified blob is reported.
    """
    if "newlyCreated" in data:
        blob_object = data["newlyCreated"].get("blobObject") or {}
        blob_id = blob_object.get("blobId")
        if blob_id:
            return BlobWriteResult(blob_id=blob_id, object_id=blob_object.get("id"))
    elif "alreadyCertified" in data:
        certified = data["alreadyCertified"]
        blob_id = certified.get("blobId")
        if blob_id:
            return BlobWriteResult(
                blob_id=blob_id,
                object_id=certified.get("object"),
                already_certified=True,
            )
    raise BlobStoreError(f"Unexpected publisher response: {str(data)[:200]}")


class WalrusPublisherStore(BlobStore):
    """Writes through a Walrus publisher, reads through an aggregator.

    Attributes:
        config: Publisher/aggregator URLs and timeout.
    """

    def __init__(self, config: StorageConfig) -> None:
        self.config = config
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get httpx async client (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _handle_error(self, response: httpx.Response) -> None:
        """Convert HTTP errors to BlobStoreError."""
        try:
            error_data = response.json()
            message = error_data.get("error", {}).get("message", response.text)
        except (ValueError, AttributeError):
            message = response.text
        raise BlobStoreError(message=message or "empty response", status_code=response.status_code)

    async def write(
        self,
        payload: bytes,
        *,
        epochs: int,
        deletable: bool,
        signer: SigningCredential,
    ) -> BlobWriteResult:
        if not self.config.publisher_url:
            raise BlobStoreError("No Walrus publisher configured")

        params: dict[str, Any] = {"epochs": epochs, "send_object_to": signer.address}
        if deletable:
            params["deletable"] = "true"
        else:
            params["permanent"] = "true"

        url = f"{self.config.publisher_url.rstrip('/')}/v1/blobs"
        try:
            response = await self.client.put(url, params=params, content=payload)
        except httpx.TimeoutException as e:
            raise BlobStoreError(f"Publisher timed out after {self.config.timeout}s") from e
        except httpx.HTTPError as e:
            raise BlobStoreError(f"Publisher request failed: {e}") from e

        if response.status_code != 200:
            self._handle_error(response)

        try:
            data = response.json()
        except ValueError as e:
            raise BlobStoreError("Publisher returned invalid JSON") from e

        result = parse_store_response(data)
        logger.info(
            f"[BLOB] Stored {len(payload)} bytes as {result.blob_id}"
            f"{' (already certified)' if result.already_certified else ''}"
        )
        return result

    async def read(self, blob_id: str) -> bytes:
        if not self.config.aggregator_url:
            raise BlobStoreError("No Walrus aggregator configured")

        url = f"{self.config.aggregator_url.rstrip('/')}/v1/blobs/{blob_id}"
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            raise BlobStoreError(f"Aggregator request failed: {e}") from e

        if response.status_code != 200:
            self._handle_error(response)
        return response.content
