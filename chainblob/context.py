"""Explicitly constructed client graph.

Owns the network clients and wires the funding and storage components
together. Callers create one context, use it, and close it; nothing is a
module-level singleton.

Examples:
    >>> async with ChainBlobContext.from_settings(get_settings()) as ctx:
    ...     blob_id = await ctx.writer.write_blob_id(payload)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from chainblob.config import Settings
from chainblob.core.types import ExchangeConfig
from chainblob.funding.balance import BalanceOracle
from chainblob.funding.exchange import ExchangeConverter
from chainblob.funding.provider import FundedSignerProvider
from chainblob.funding.submitter import TransactionSubmitter
from chainblob.ledger.base import LedgerClient
from chainblob.ledger.faucet import FaucetClient, NullFaucetClient, SuiFaucetClient
from chainblob.ledger.sui import SuiClient
from chainblob.storage.backends.base import BlobStore
from chainblob.storage.backends.walrus import WalrusPublisherStore
from chainblob.storage.config import StorageConfig
from chainblob.storage.writer import BlobWriter

logger = logging.getLogger(__name__)


@dataclass
class ChainBlobContext:
    """All collaborators needed for funded blob writes."""

    ledger: LedgerClient
    faucet: FaucetClient
    store: BlobStore
    oracle: BalanceOracle
    provider: FundedSignerProvider
    writer: BlobWriter

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChainBlobContext":
        """Build the client graph from application settings."""
        funding = settings.get_funding_config()

        ledger = SuiClient(settings.rpc_url, timeout=settings.REQUEST_TIMEOUT)
        faucet: FaucetClient = (
            SuiFaucetClient(settings.faucet_url, timeout=settings.REQUEST_TIMEOUT)
            if settings.faucet_url
            else NullFaucetClient()
        )
        store = WalrusPublisherStore(
            StorageConfig(
                publisher_url=settings.publisher_url,
                aggregator_url=settings.aggregator_url,
                timeout=settings.REQUEST_TIMEOUT,
            )
        )

        oracle = BalanceOracle(ledger, storage_coin_type=settings.wal_coin_type)
        submitter = TransactionSubmitter(
            ledger,
            confirm_timeout=funding.confirm_timeout,
            poll_interval=funding.confirm_poll_interval,
        )
        converter = ExchangeConverter(
            ledger,
            submitter,
            ExchangeConfig(exchange_object_id=settings.wal_exchange_id),
            gas_budget=funding.gas_budget,
        )
        provider = FundedSignerProvider(
            settings.SUI_PRIVATE_KEY, oracle, faucet, converter, funding
        )
        writer = BlobWriter(provider, store, settings.get_retry_config())

        logger.info(f"[CONTEXT] Using {settings.NETWORK.value} at {settings.rpc_url}")
        return cls(
            ledger=ledger,
            faucet=faucet,
            store=store,
            oracle=oracle,
            provider=provider,
            writer=writer,
        )

    async def aclose(self) -> None:
        """Close every network client."""
        await self.store.close()
        await self.faucet.close()
        await self.ledger.close()

    async def __aenter__(self) -> "ChainBlobContext":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
