"""
Pytest configuration and fixtures for chainblob tests.

All network collaborators are replaced by AsyncMock doubles or
httpx.MockTransport; no test touches a real ledger, faucet or publisher.
"""
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chainblob.config import FundingConfig, RetryConfig
from chainblob.core.keys import SigningCredential
from chainblob.core.types import (
    BlobWriteResult,
    ExecutionStatus,
    FaucetOutcome,
    FaucetResult,
    TokenBalance,
)
from chainblob.funding.balance import BalanceOracle
from chainblob.funding.exchange import ExchangeConverter
from chainblob.funding.provider import FundedSignerProvider
from chainblob.ledger.base import LedgerClient
from chainblob.ledger.faucet import FaucetClient
from chainblob.storage.backends.base import BlobStore
from chainblob.storage.writer import BlobWriter

WAL_COIN_TYPE = "0x8270feb7375eee355e64fdb69c50abb6b5f9393a722883c1cf45f8e26048810a::wal::WAL"
EXCHANGE_ID = "0xf4d164ea2def5fe07dc573992a029e010dba09b1a8dcbc44c5c2e79567f39073"
TEST_SEED = bytes(range(32))
TEST_SECRET = "0x" + TEST_SEED.hex()


class SleepRecorder:
    """Async sleep double that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ============================================
# Credentials & config
# ============================================

@pytest.fixture
def credential() -> SigningCredential:
    return SigningCredential.from_seed(TEST_SEED)


@pytest.fixture
def funding_config() -> FundingConfig:
    return FundingConfig(
        min_gas=1_000,
        min_storage_credit=500,
        conversion_amount=300,
        gas_budget=50,
        faucet_propagation_delay=5.0,
    )


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig(max_attempts=3, base_delay=1.0)


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


# ============================================
# Collaborator doubles
# ============================================

@pytest.fixture
def mock_ledger() -> AsyncMock:
    return AsyncMock(spec=LedgerClient)


@pytest.fixture
def mock_oracle() -> AsyncMock:
    oracle = AsyncMock(spec=BalanceOracle)
    return oracle


@pytest.fixture
def mock_faucet() -> AsyncMock:
    faucet = AsyncMock(spec=FaucetClient)
    faucet.request_top_up.side_effect = lambda address: FaucetResult(
        outcome=FaucetOutcome.OK, address=address
    )
    return faucet


@pytest.fixture
def mock_converter() -> AsyncMock:
    converter = AsyncMock(spec=ExchangeConverter)
    converter.convert.return_value = ExecutionStatus(digest="txdigest", status="success")
    return converter


@pytest.fixture
def mock_store() -> AsyncMock:
    store = AsyncMock(spec=BlobStore)
    store.write.return_value = BlobWriteResult(blob_id="blob-abc")
    return store


def set_balances(oracle: AsyncMock, address: str, gas: list[int], storage: list[int]) -> None:
    """Queue successive native and storage-credit balances on an oracle double."""
    oracle.native_balance.side_effect = [
        TokenBalance(address=address, coin_type="0x2::sui::SUI", amount=a) for a in gas
    ]
    oracle.storage_credit_balance.side_effect = [
        TokenBalance(address=address, coin_type=WAL_COIN_TYPE, amount=a) for a in storage
    ]


@pytest.fixture
def provider(mock_oracle, mock_faucet, mock_converter, funding_config, sleep) -> FundedSignerProvider:
    return FundedSignerProvider(
        TEST_SECRET,
        mock_oracle,
        mock_faucet,
        mock_converter,
        funding_config,
        sleep=sleep,
    )


@pytest.fixture
def mock_provider(credential) -> AsyncMock:
    provider = AsyncMock(spec=FundedSignerProvider)
    provider.ensure_funded.return_value = credential
    return provider


@pytest.fixture
def writer(mock_provider, mock_store, retry_config, sleep) -> BlobWriter:
    return BlobWriter(mock_provider, mock_store, retry_config, sleep=sleep)


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (no external API calls)"
    )
