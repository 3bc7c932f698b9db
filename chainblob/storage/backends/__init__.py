"""Blob store backends."""

from chainblob.storage.backends.base import BlobStore
from chainblob.storage.backends.walrus import WalrusPublisherStore

__all__ = ["BlobStore", "WalrusPublisherStore"]
