"""SUI to WAL conversion through the on-chain exchange object.

The exchange object id is fixed in configuration, but its package may have
been upgraded since, so the package address is always resolved from the
object's live type before building the transaction.

Examples:
    >>> resolve_module_address("0xabc::wal_exchange::Exchange")
    '0x0000...0abc'

Tests:
    - tests/unit/test_exchange.py
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chainblob.config import SUI_COIN_TYPE
from chainblob.core.transaction import GAS_COIN, ProgrammableTransactionBuilder
from chainblob.core.errors import ExchangeError
from chainblob.core.keys import SigningCredential
from chainblob.core.types import CoinObject, ExchangeConfig, ExecutionStatus, ObjectRef, normalize_address
from chainblob.funding.submitter import TransactionSubmitter
from chainblob.ledger.base import LedgerClient

logger = logging.getLogger(__name__)

# Upper bound on gas payment coins accepted by Sui.
MAX_GAS_COINS = 255


def resolve_module_address(object_type: str | None) -> str:
    """Extract the package address from a Move struct tag.

    Args:
        object_type: Struct tag such as ``0xabc::wal_exchange::Exchange`` or
            ``0xabc::m::T<0x2::sui::SUI>``.

    Returns:
        The normalized package address.

    Raises:
        ExchangeError: If the type is missing or not a struct tag.
    """
    if not object_type:
        raise ExchangeError("Exchange type not found")
    head = object_type.split("<", 1)[0]
    parts = head.split("::")
    if len(parts) != 3 or not all(parts):
        raise ExchangeError(f"Malformed exchange type: {object_type!r}")
    try:
        return normalize_address(parts[0])
    except ValueError as e:
        raise ExchangeError(f"Malformed exchange package address: {parts[0]!r}") from e


@dataclass(frozen=True)
class ResolvedExchange:
    """Live location of the exchange contract."""

    object_id: str
    package: str
    initial_shared_version: int


def select_gas_coins(coins: list[CoinObject], required: int) -> list[ObjectRef]:
    """Pick the largest coins until their sum covers required.

    Raises:
        ExchangeError: If the owned coins cannot cover required.
    """
    selected: list[ObjectRef] = []
    total = 0
    for coin in sorted(coins, key=lambda c: c.balance, reverse=True)[:MAX_GAS_COINS]:
        if total >= required:
            break
        selected.append(coin.ref)
        total += coin.balance
    if total < required:
        raise ExchangeError(
            f"Insufficient native balance for conversion: have {total}, need {required}"
        )
    return selected


class ExchangeConverter:
    """Converts native gas token into storage-credit token.

    Attributes:
        ledger: Ledger client for metadata and coin queries.
        submitter: Transaction submitter.
        config: Exchange object id and entrypoint.
        gas_budget: Gas budget for the conversion transaction in MIST.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        submitter: TransactionSubmitter,
        config: ExchangeConfig,
        gas_budget: int,
    ) -> None:
        self.ledger = ledger
        self.submitter = submitter
        self.config = config
        self.gas_budget = gas_budget

    async def resolve_exchange(self) -> ResolvedExchange:
        """Fetch the exchange object and resolve its current package.

        Raises:
            ExchangeError: If the object metadata is missing or malformed.
            LedgerQueryError: If the lookup itself fails.
        """
        info = await self.ledger.get_object(self.config.exchange_object_id)
        package = resolve_module_address(info.type)
        if info.initial_shared_version is None:
            raise ExchangeError(f"Exchange {self.config.exchange_object_id} is not a shared object")
        return ResolvedExchange(
            object_id=info.object_id,
            package=package,
            initial_shared_version=info.initial_shared_version,
        )

    async def build_transaction(self, sender: str, native_amount: int) -> bytes:
        """Build the conversion transaction for sender.

        SplitCoins(gas, [amount]) -> exchange call -> transfer WAL to sender.
        """
        exchange = await self.resolve_exchange()

        coins = await self.ledger.get_coins(sender, SUI_COIN_TYPE)
        gas_payment = select_gas_coins(coins, native_amount + self.gas_budget)
        gas_price = await self.ledger.get_reference_gas_price()

        logger.info(
            f"[EXCHANGE] Converting {native_amount} MIST via "
            f"{exchange.package}::{self.config.module}::{self.config.function}"
        )

        builder = ProgrammableTransactionBuilder()
        exchange_arg = builder.shared_object(exchange.object_id, exchange.initial_shared_version)
        amount_arg = builder.pure_u64(native_amount)
        sui_coin = builder.split_coins(GAS_COIN, [amount_arg])
        wal_coin = builder.move_call(
            exchange.package,
            self.config.module,
            self.config.function,
            [exchange_arg, sui_coin],
        )
        recipient = builder.pure_address(sender)
        builder.transfer_objects([wal_coin], recipient)
        try:
            return builder.finish(sender, gas_payment, gas_price, self.gas_budget)
        except ValueError as e:
            raise ExchangeError(f"Could not serialize conversion transaction: {e}") from e

    async def convert(self, credential: SigningCredential, native_amount: int) -> ExecutionStatus:
        """Convert native_amount MIST into WAL credited to the credential's address.

        Raises:
            ExchangeError: On bad metadata, insufficient balance or a
                non-success execution status.
            LedgerQueryError, LedgerSubmitError, LedgerConfirmError: From the
                underlying ledger calls.
        """
        if native_amount <= 0:
            raise ExchangeError(f"Conversion amount must be positive, got {native_amount}")

        tx_bytes = await self.build_transaction(credential.address, native_amount)
        status = await self.submitter.submit_and_wait(tx_bytes, credential)
        if not status.succeeded:
            raise ExchangeError(
                f"Conversion transaction {status.digest} failed: {status.error or status.status}"
            )
        logger.info(f"[EXCHANGE] Conversion complete: {status.digest}")
        return status
