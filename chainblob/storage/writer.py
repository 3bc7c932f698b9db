"""Blob writer: funded writes with bounded retry and exponential backoff.

Each attempt asks the FundedSignerProvider for a funded credential and then
writes the payload. Failures sleep ``base_delay * 2**(attempt - 1)`` seconds
before the next attempt; after the last attempt a BlobWriteError carrying
the attempt count and the last error is raised.

Examples:
    >>> writer = BlobWriter(provider, store, RetryConfig())
    >>> result = await writer.write(b'{"temperature": 21.5}')
    >>> result.blob_id

Tests:
    - tests/unit/test_storage/test_writer.py
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from chainblob.config import RetryConfig
from chainblob.core.errors import BlobWriteError
from chainblob.core.types import BlobWriteOptions, BlobWriteRequest, BlobWriteResult, RetryState
from chainblob.funding.provider import FundedSignerProvider
from chainblob.storage.backends.base import BlobStore

logger = logging.getLogger(__name__)


class BlobWriter:
    """Main entry point for persisting payloads.

    Attributes:
        provider: Source of funded credentials.
        store: Blob store backend.
        retry: Retry policy and default write options.
    """

    def __init__(
        self,
        provider: FundedSignerProvider,
        store: BlobStore,
        retry: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.provider = provider
        self.store = store
        self.retry = retry or RetryConfig()
        self._sleep = sleep

    def default_options(self) -> BlobWriteOptions:
        return BlobWriteOptions(epochs=self.retry.epochs, deletable=self.retry.deletable)

    async def _attempt(self, request: BlobWriteRequest) -> BlobWriteResult:
        credential = await self.provider.ensure_funded()
        return await self.store.write(
            request.payload,
            epochs=request.options.epochs,
            deletable=request.options.deletable,
            signer=credential,
        )

    async def write(
        self,
        payload: bytes,
        options: BlobWriteOptions | None = None,
    ) -> BlobWriteResult:
        """Write payload, retrying the whole funded write on failure.

        Args:
            payload: Bytes to store.
            options: Retention and deletability; defaults from RetryConfig.

        Returns:
            The write result; ``attempts`` records how many attempts it took.

        Raises:
            BlobWriteError: If every attempt failed or a non-retryable
                error stopped the loop.
        """
        request = BlobWriteRequest(payload=payload, options=options or self.default_options())
        state = RetryState(max_attempts=self.retry.max_attempts, base_delay=self.retry.base_delay)

        while not state.exhausted:
            state.attempt += 1
            logger.info(f"[BLOB] Attempt {state.attempt}/{state.max_attempts} to save blob...")
            try:
                result = await self._attempt(request)
            except Exception as e:
                state.record_failure(e)
                logger.error(f"[BLOB] Attempt {state.attempt} failed: {e}")
                if not getattr(e, "retryable", True):
                    raise BlobWriteError(state.attempt, e) from e
                if state.exhausted:
                    break
                logger.info(f"[BLOB] Retrying in {state.next_delay:.1f}s...")
                await self._sleep(state.next_delay)
                continue

            result.attempts = state.attempt
            logger.info(f"[BLOB] Blob saved successfully with ID: {result.blob_id}")
            return result

        raise BlobWriteError(state.attempt, state.last_error) from state.last_error

    async def write_blob_id(self, payload: bytes, options: BlobWriteOptions | None = None) -> str:
        """Write payload and return only the content identifier."""
        result = await self.write(payload, options)
        return result.blob_id

    async def read(self, blob_id: str) -> bytes:
        """Read a previously written blob back from the store."""
        return await self.store.read(blob_id)
