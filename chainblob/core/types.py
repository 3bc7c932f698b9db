"""Value types shared across ledger, funding and storage layers.

Examples:
    >>> balance = TokenBalance(address="0x" + "ab" * 32, coin_type="0x2::sui::SUI", amount=10)
    >>> balance.amount
    10

Tests:
    - tests/unit/test_types.py
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

SUI_ADDRESS_LENGTH = 32


def normalize_address(value: str) -> str:
    """Normalize a Sui address or object id to 0x + 64 lowercase hex chars.

    Args:
        value: Address with or without 0x prefix, possibly shortened (0x2).

    Returns:
        The normalized address.

    Raises:
        ValueError: If the value is not hex or is longer than 32 bytes.
    """
    body = value.lower()
    if body.startswith("0x"):
        body = body[2:]
    if not body or len(body) > SUI_ADDRESS_LENGTH * 2:
        raise ValueError(f"Invalid Sui address: {value!r}")
    try:
        int(body, 16)
    except ValueError:
        raise ValueError(f"Invalid Sui address: {value!r}") from None
    return "0x" + body.rjust(SUI_ADDRESS_LENGTH * 2, "0")


class TokenBalance(BaseModel):
    """Balance of one coin type at an address, in the smallest denomination."""

    address: str
    coin_type: str
    amount: int = Field(ge=0)


class ExchangeConfig(BaseModel):
    """Where and how to convert SUI into WAL.

    The object id is stable; the package backing it is resolved live because
    the exchange contract may have been upgraded.
    """

    exchange_object_id: str
    module: str = "wal_exchange"
    function: str = "exchange_all_for_wal"


class ObjectRef(BaseModel):
    """Reference to a specific version of an owned object."""

    object_id: str
    version: int = Field(ge=0)
    digest: str


class CoinObject(BaseModel):
    """An owned coin object and its balance."""

    ref: ObjectRef
    balance: int = Field(ge=0)


class ObjectInfo(BaseModel):
    """Metadata of an on-chain object as returned by the ledger."""

    object_id: str
    version: int
    type: str | None = None
    initial_shared_version: int | None = None


class ExecutionStatus(BaseModel):
    """Final execution status of a submitted transaction."""

    digest: str
    status: str
    error: str | None = None
    effects: dict[str, Any] = Field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


class FaucetOutcome(str, Enum):
    """Result of a best-effort faucet request."""

    OK = "ok"
    RATE_LIMITED = "rate-limited"
    ERROR = "error"


class FaucetResult(BaseModel):
    """Outcome of a faucet request; callers may discard it."""

    outcome: FaucetOutcome
    address: str
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == FaucetOutcome.OK


class BlobWriteOptions(BaseModel):
    """Options for a single blob write."""

    epochs: int = Field(default=5, ge=1, description="Retention in storage epochs")
    deletable: bool = Field(default=False, description="Whether the blob can be deleted")


class BlobWriteRequest(BaseModel):
    """Payload plus options, consumed within one write call."""

    payload: bytes
    options: BlobWriteOptions = Field(default_factory=BlobWriteOptions)


class BlobWriteResult(BaseModel):
    """Identifier of a stored blob.

    Attributes:
        blob_id: Content identifier returned by the store.
        object_id: On-chain blob object id, when the store reports one.
        already_certified: True if the store already held this content.
        attempts: Number of attempts the write took.
    """

    blob_id: str
    object_id: str | None = None
    already_certified: bool = False
    attempts: int = Field(default=1, ge=1)

    @field_validator("blob_id")
    @classmethod
    def validate_blob_id(cls, v: str) -> str:
        if not v:
            raise ValueError("blob_id must be non-empty")
        return v


@dataclass
class RetryState:
    """Ephemeral per-call retry bookkeeping."""

    max_attempts: int
    base_delay: float
    attempt: int = 0
    last_error: BaseException | None = None
    next_delay: float = 0.0

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (2 ** (attempt - 1))

    def record_failure(self, error: BaseException) -> None:
        """Record the error of the current attempt and compute the next delay."""
        self.last_error = error
        self.next_delay = 0.0 if self.exhausted else self.delay_for(self.attempt)
