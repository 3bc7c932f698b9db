"""Abstract base class for blob store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from chainblob.core.keys import SigningCredential
from chainblob.core.types import BlobWriteResult


class BlobStore(ABC):
    """Abstract content-addressed blob store.

    A failed write leaves no partial blob behind; callers retry the whole
    write.
    """

    @abstractmethod
    async def write(
        self,
        payload: bytes,
        *,
        epochs: int,
        deletable: bool,
        signer: SigningCredential,
    ) -> BlobWriteResult:
        """Store payload and return its content identifier.

        Args:
            payload: Raw bytes to store.
            epochs: Retention in storage epochs.
            deletable: Whether the blob may be deleted before expiry.
            signer: Funded credential paying for and owning the blob.

        Returns:
            The write result with the blob id.

        Raises:
            BlobStoreError: If the store rejects or fails the write.
        """

    @abstractmethod
    async def read(self, blob_id: str) -> bytes:
        """Fetch a blob's content.

        Args:
            blob_id: Content identifier.

        Returns:
            The stored bytes.
        """

    async def close(self) -> None:
        """Release network resources."""
