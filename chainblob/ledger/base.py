"""Abstract ledger network client.

Funding components talk to the ledger only through this interface, so a
test double or another transport can be injected in place of SuiClient.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from chainblob.core.types import CoinObject, ObjectInfo


class LedgerClient(ABC):
    """Read and write access to a Sui-style ledger.

    Implementations raise LedgerQueryError for failed reads and
    LedgerSubmitError for rejected submissions.
    """

    @abstractmethod
    async def get_balance(self, address: str, coin_type: str) -> int:
        """Total balance of coin_type owned by address.

        Args:
            address: Owner address.
            coin_type: Fully qualified coin type.

        Returns:
            Balance in the smallest denomination.
        """

    @abstractmethod
    async def get_object(self, object_id: str) -> ObjectInfo:
        """Fetch an object's type and ownership metadata.

        Args:
            object_id: Object id.

        Returns:
            The object metadata.
        """

    @abstractmethod
    async def get_coins(self, address: str, coin_type: str) -> list[CoinObject]:
        """List coin objects of coin_type owned by address."""

    @abstractmethod
    async def get_reference_gas_price(self) -> int:
        """Current reference gas price in MIST."""

    @abstractmethod
    async def execute_transaction(self, tx_bytes: bytes, signature: str) -> str:
        """Submit signed transaction bytes.

        Args:
            tx_bytes: BCS TransactionData.
            signature: Serialized signature over tx_bytes.

        Returns:
            Transaction digest.
        """

    @abstractmethod
    async def get_transaction(self, digest: str) -> dict[str, Any] | None:
        """Look up an executed transaction.

        Returns:
            The transaction effects, or None if the ledger does not know
            the digest yet.
        """

    async def close(self) -> None:
        """Release network resources."""
