"""Live balance queries. Nothing is cached between calls."""

from __future__ import annotations

import logging

from chainblob.config import SUI_COIN_TYPE
from chainblob.core.errors import LedgerQueryError
from chainblob.core.types import TokenBalance
from chainblob.ledger.base import LedgerClient

logger = logging.getLogger(__name__)


class BalanceOracle:
    """Reads token balances from the ledger.

    Attributes:
        ledger: Ledger client used for queries.
        native_coin_type: Gas token type.
        storage_coin_type: Storage-credit token type.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        storage_coin_type: str,
        native_coin_type: str = SUI_COIN_TYPE,
    ) -> None:
        self.ledger = ledger
        self.native_coin_type = native_coin_type
        self.storage_coin_type = storage_coin_type

    async def get_balance(self, address: str, coin_type: str) -> TokenBalance:
        """Query the balance of coin_type at address.

        Raises:
            LedgerQueryError: On network failure, timeout or a bad amount.
        """
        amount = await self.ledger.get_balance(address, coin_type)
        if amount < 0:
            raise LedgerQueryError(f"Ledger reported negative balance {amount} for {coin_type}")
        logger.debug(f"[BALANCE] {address} holds {amount} of {coin_type}")
        return TokenBalance(address=address, coin_type=coin_type, amount=amount)

    async def native_balance(self, address: str) -> TokenBalance:
        return await self.get_balance(address, self.native_coin_type)

    async def storage_credit_balance(self, address: str) -> TokenBalance:
        return await self.get_balance(address, self.storage_coin_type)
