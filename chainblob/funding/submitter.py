"""Sign, submit and wait for transaction finality."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from chainblob.core.errors import LedgerConfirmError
from chainblob.core.keys import SigningCredential
from chainblob.core.types import ExecutionStatus
from chainblob.ledger.base import LedgerClient

logger = logging.getLogger(__name__)


class TransactionSubmitter:
    """Submits signed transactions and blocks until the ledger reports finality.

    A LedgerConfirmError does not mean the transaction failed: it may still
    commit after the deadline.

    Attributes:
        ledger: Ledger client.
        confirm_timeout: Seconds to wait for finality.
        poll_interval: Seconds between finality polls.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        confirm_timeout: float = 120.0,
        poll_interval: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ledger = ledger
        self.confirm_timeout = confirm_timeout
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

    async def submit_and_wait(self, tx_bytes: bytes, credential: SigningCredential) -> ExecutionStatus:
        """Sign tx_bytes, submit them and wait for effects.

        Args:
            tx_bytes: BCS TransactionData.
            credential: Signer; must be the transaction sender.

        Returns:
            Execution status parsed from the transaction effects.

        Raises:
            LedgerSubmitError: If the submission is rejected.
            LedgerConfirmError: If finality is not observed in time.
        """
        signature = credential.sign_transaction(tx_bytes)
        digest = await self.ledger.execute_transaction(tx_bytes, signature)
        effects = await self.wait_for_finality(digest)
        status = parse_status(digest, effects)
        logger.info(f"[LEDGER] Transaction {digest} final with status {status.status}")
        return status

    async def wait_for_finality(self, digest: str) -> dict[str, Any]:
        """Poll until the ledger returns effects for digest.

        Raises:
            LedgerConfirmError: If confirm_timeout elapses first.
        """
        deadline = self._clock() + self.confirm_timeout
        while True:
            effects = await self.ledger.get_transaction(digest)
            if effects is not None:
                return effects
            if self._clock() >= deadline:
                logger.warning(f"[LEDGER] Gave up waiting for {digest}; it may still commit")
                raise LedgerConfirmError(digest, self.confirm_timeout)
            await self._sleep(self.poll_interval)


def parse_status(digest: str, effects: dict[str, Any]) -> ExecutionStatus:
    """Build an ExecutionStatus from Sui transaction effects."""
    status = effects.get("status") or {}
    return ExecutionStatus(
        digest=digest,
        status=status.get("status", "unknown"),
        error=status.get("error"),
        effects=effects,
    )
