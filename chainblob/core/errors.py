"""Error taxonomy for funding and blob writes.

Every error raised by chainblob derives from ChainBlobError. Lower-level
errors (credential, ledger, exchange) propagate unmodified up to the active
BlobWriter attempt; BlobWriteError is the only error external callers are
expected to handle. FaucetError never propagates: faucet clients convert it
into a FaucetResult outcome.

Tests:
    - tests/unit/test_errors.py
"""

__all__ = [
    "ChainBlobError",
    "CredentialError",
    "LedgerQueryError",
    "LedgerSubmitError",
    "LedgerConfirmError",
    "ExchangeError",
    "FaucetError",
    "BlobStoreError",
    "BlobWriteError",
]


class ChainBlobError(Exception):
    """Base exception for chainblob errors.

    Attributes:
        message: Error message
        retryable: Whether retrying the whole funded write may help
    """

    retryable_default = True

    def __init__(self, message: str, retryable: bool | None = None) -> None:
        """Initialize error.

        Args:
            message: Error message.
            retryable: Override the class default retryability.
        """
        super().__init__(message)
        self.message = message
        self.retryable = self.retryable_default if retryable is None else retryable


class CredentialError(ChainBlobError):
    """Signing key missing or malformed. Fatal, never retried."""

    retryable_default = False


class LedgerQueryError(ChainBlobError):
    """A read against the ledger failed (network, timeout, bad payload)."""


class LedgerSubmitError(ChainBlobError):
    """The ledger rejected a transaction submission."""


class LedgerConfirmError(ChainBlobError):
    """Finality was not observed before the confirmation deadline.

    The transaction may still commit after this is raised.
    """

    def __init__(self, digest: str, timeout: float) -> None:
        """Initialize confirmation error.

        Args:
            digest: Digest of the submitted transaction.
            timeout: Seconds waited before giving up.
        """
        super().__init__(f"Transaction {digest} not final after {timeout:.1f}s")
        self.digest = digest
        self.timeout = timeout


class ExchangeError(ChainBlobError):
    """Exchange metadata was unusable or the conversion did not succeed."""


class FaucetError(ChainBlobError):
    """A faucet request failed. Converted to an outcome, never raised out."""

    def __init__(self, message: str, rate_limited: bool = False) -> None:
        super().__init__(message)
        self.rate_limited = rate_limited


class BlobStoreError(ChainBlobError):
    """The blob store rejected or failed a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize blob store error.

        Args:
            message: Error message.
            status_code: HTTP status code (if applicable).
        """
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code:
            return f"({self.status_code}) {self.message}"
        return self.message


class BlobWriteError(ChainBlobError):
    """All write attempts failed, or a fatal error stopped the retry loop.

    Attributes:
        attempts: Number of attempts made.
        last_error: The error raised by the final attempt.
    """

    retryable_default = False

    def __init__(self, attempts: int, last_error: BaseException | None) -> None:
        """Initialize blob write error.

        Args:
            attempts: Number of attempts made.
            last_error: The underlying error of the final attempt.
        """
        detail = str(last_error) if last_error is not None else "unknown error"
        super().__init__(f"Failed to write blob after {attempts} attempts: {detail}")
        self.attempts = attempts
        self.last_error = last_error
