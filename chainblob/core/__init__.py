"""Core types, errors and signing for chainblob."""

from chainblob.core.errors import (
    BlobStoreError,
    BlobWriteError,
    ChainBlobError,
    CredentialError,
    ExchangeError,
    FaucetError,
    LedgerConfirmError,
    LedgerQueryError,
    LedgerSubmitError,
)
from chainblob.core.keys import SigningCredential
from chainblob.core.types import (
    BlobWriteOptions,
    BlobWriteRequest,
    BlobWriteResult,
    ExchangeConfig,
    ExecutionStatus,
    FaucetOutcome,
    FaucetResult,
    RetryState,
    TokenBalance,
)

__all__ = [
    "BlobStoreError",
    "BlobWriteError",
    "BlobWriteOptions",
    "BlobWriteRequest",
    "BlobWriteResult",
    "ChainBlobError",
    "CredentialError",
    "ExchangeConfig",
    "ExchangeError",
    "ExecutionStatus",
    "FaucetError",
    "FaucetOutcome",
    "FaucetResult",
    "LedgerConfirmError",
    "LedgerQueryError",
    "LedgerSubmitError",
    "RetryState",
    "SigningCredential",
    "TokenBalance",
]
