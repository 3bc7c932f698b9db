"""Unit tests for ChainBlobContext wiring.

Run with:
    pytest tests/unit/test_context.py -v
"""

import pytest

from conftest import TEST_SECRET

from chainblob.config import Settings
from chainblob.context import ChainBlobContext
from chainblob.ledger.faucet import NullFaucetClient, SuiFaucetClient
from chainblob.ledger.sui import SuiClient
from chainblob.storage.backends.walrus import WalrusPublisherStore


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, SUI_PRIVATE_KEY=TEST_SECRET, **overrides)


@pytest.mark.fast
class TestFromSettings:
    """Tests for ChainBlobContext.from_settings()."""

    def test_testnet_graph(self):
        ctx = ChainBlobContext.from_settings(
            make_settings(NETWORK="testnet", MIN_GAS=123, BLOB_MAX_ATTEMPTS=4)
        )

        assert isinstance(ctx.ledger, SuiClient)
        assert isinstance(ctx.faucet, SuiFaucetClient)
        assert isinstance(ctx.store, WalrusPublisherStore)
        assert ctx.provider.config.min_gas == 123
        assert ctx.writer.retry.max_attempts == 4
        assert ctx.writer.provider is ctx.provider
        assert ctx.provider.oracle is ctx.oracle
        assert ctx.provider.converter.config.exchange_object_id.startswith("0xf4d164ea")

    def test_mainnet_uses_null_faucet(self):
        ctx = ChainBlobContext.from_settings(
            make_settings(NETWORK="mainnet", WAL_EXCHANGE_ID="0xabc")
        )
        assert isinstance(ctx.faucet, NullFaucetClient)

    def test_missing_exchange_raises(self):
        with pytest.raises(ValueError, match="WAL_EXCHANGE_ID"):
            ChainBlobContext.from_settings(make_settings(NETWORK="mainnet"))

    @pytest.mark.asyncio
    async def test_context_manager_closes_clients(self):
        async with ChainBlobContext.from_settings(make_settings()) as ctx:
            http_client = ctx.ledger.client
        assert http_client.is_closed
