"""Application configuration with Pydantic Settings.

This module provides centralized configuration management using pydantic-settings.
Settings are loaded from environment variables and .env files. Funding and
retry tunables are lifted into two plain models (FundingConfig, RetryConfig)
that components receive by injection instead of reading globals.

Examples:
    >>> from chainblob.config import get_settings
    >>> settings = get_settings()
    >>> settings.rpc_url
    'https://fullnode.testnet.sui.io:443'

    >>> settings.get_funding_config().min_gas
    1000000000

Tests:
    - tests/unit/test_config.py::TestSettings
    - tests/unit/test_config.py::TestFundingConfig
    - tests/unit/test_config.py::TestRetryConfig
"""

from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 1 SUI = 10^9 MIST, 1 WAL = 10^9 FROST
MIST_PER_SUI = 1_000_000_000
FROST_PER_WAL = 1_000_000_000

SUI_COIN_TYPE = "0x2::sui::SUI"


class Network(str, Enum):
    """Supported Sui networks."""

    TESTNET = "testnet"
    DEVNET = "devnet"
    MAINNET = "mainnet"


# Network endpoint presets. None means the network has no public service of
# that kind and the URL must be configured explicitly.
NETWORK_PRESETS: dict[Network, dict[str, Any]] = {
    Network.TESTNET: {
        "rpc_url": "https://fullnode.testnet.sui.io:443",
        "faucet_url": "https://faucet.testnet.sui.io",
        "publisher_url": "https://publisher.walrus-testnet.walrus.space",
        "aggregator_url": "https://aggregator.walrus-testnet.walrus.space",
        "wal_coin_type": (
            "0x8270feb7375eee355e64fdb69c50abb6b5f9393a722883c1cf45f8e26048810a::wal::WAL"
        ),
        "wal_exchange_ids": [
            "0xf4d164ea2def5fe07dc573992a029e010dba09b1a8dcbc44c5c2e79567f39073",
            "0x19825121c52080bb1073662231cfea5c0e4d905fd13e95f21e9a018f2ef41862",
            "0x83b454e524c71f30803f4d6c302a86fb6a39e96cdfb873c2d1e93bc1c26a3bc5",
            "0x8d63209cf8589ce7aef8f262437163c67577ed09f3e636a9d8e0813843fb8bf1",
        ],
    },
    Network.DEVNET: {
        "rpc_url": "https://fullnode.devnet.sui.io:443",
        "faucet_url": "https://faucet.devnet.sui.io",
        "publisher_url": None,
        "aggregator_url": None,
        "wal_coin_type": None,
        "wal_exchange_ids": [],
    },
    Network.MAINNET: {
        "rpc_url": "https://fullnode.mainnet.sui.io:443",
        "faucet_url": None,
        "publisher_url": None,
        "aggregator_url": "https://aggregator.walrus-mainnet.walrus.space",
        "wal_coin_type": (
            "0x356a26eb9e012a68958082340d4c4116e7f55615cf27affcff209cf0ae544f59::wal::WAL"
        ),
        "wal_exchange_ids": [],
    },
}


class FundingConfig(BaseModel):
    """Thresholds and timings for keeping the signing wallet funded.

    Amounts are integers in the smallest denomination (MIST for SUI,
    FROST for WAL).

    Attributes:
        min_gas: Native balance below which the faucet is asked for a top-up.
        min_storage_credit: WAL balance below which SUI is converted to WAL.
        conversion_amount: MIST converted per exchange transaction.
        gas_budget: Gas budget for the exchange transaction.
        faucet_propagation_delay: Seconds to wait after a faucet top-up in
            the conversion branch.
        confirm_timeout: Seconds to wait for transaction finality.
        confirm_poll_interval: Seconds between finality polls.
    """

    min_gas: int = Field(default=MIST_PER_SUI, ge=0)
    min_storage_credit: int = Field(default=FROST_PER_WAL // 2, ge=0)
    conversion_amount: int = Field(default=MIST_PER_SUI // 2, gt=0)
    gas_budget: int = Field(default=MIST_PER_SUI // 100, gt=0)
    faucet_propagation_delay: float = Field(default=5.0, ge=0)
    confirm_timeout: float = Field(default=120.0, gt=0)
    confirm_poll_interval: float = Field(default=1.0, gt=0)


class RetryConfig(BaseModel):
    """Retry policy and default write options for blob writes.

    Attributes:
        max_attempts: Total write attempts before giving up.
        base_delay: Seconds slept after the first failure; doubles each time.
        epochs: Default retention in storage epochs.
        deletable: Default deletability of written blobs.
    """

    max_attempts: int = Field(default=3, ge=1, le=10)
    base_delay: float = Field(default=1.0, ge=0)
    epochs: int = Field(default=5, ge=1)
    deletable: bool = False


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables and .env file.
    Endpoint URLs left unset fall back to the NETWORK preset.

    Attributes:
        NETWORK: Sui network to target.
        SUI_RPC_URL: Full node JSON-RPC endpoint override.
        SUI_FAUCET_URL: Faucet endpoint override.
        WALRUS_PUBLISHER_URL: Walrus publisher override.
        WALRUS_AGGREGATOR_URL: Walrus aggregator override.
        SUI_PRIVATE_KEY: Signing key (suiprivkey bech32, base64 or hex).
        WAL_COIN_TYPE: Storage-credit coin type override.
        WAL_EXCHANGE_ID: Exchange shared object id override.
        REQUEST_TIMEOUT: Timeout in seconds applied to every network call.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    NETWORK: Network = Field(default=Network.TESTNET, description="Sui network")

    # Endpoints
    SUI_RPC_URL: str | None = Field(default=None, description="Sui JSON-RPC URL")
    SUI_FAUCET_URL: str | None = Field(default=None, description="Sui faucet URL")
    WALRUS_PUBLISHER_URL: str | None = Field(default=None, description="Walrus publisher URL")
    WALRUS_AGGREGATOR_URL: str | None = Field(default=None, description="Walrus aggregator URL")

    # Wallet
    SUI_PRIVATE_KEY: SecretStr | None = Field(default=None, description="Signing key secret")

    # Tokens
    WAL_COIN_TYPE: str | None = Field(default=None, description="WAL coin type")
    WAL_EXCHANGE_ID: str | None = Field(default=None, description="SUI->WAL exchange object")

    # Network
    REQUEST_TIMEOUT: float = Field(default=120.0, gt=0, description="Per-call timeout (s)")

    # Funding
    MIN_GAS: int = Field(default=MIST_PER_SUI, ge=0)
    MIN_STORAGE_CREDIT: int = Field(default=FROST_PER_WAL // 2, ge=0)
    CONVERSION_AMOUNT: int = Field(default=MIST_PER_SUI // 2, gt=0)
    GAS_BUDGET: int = Field(default=MIST_PER_SUI // 100, gt=0)
    FAUCET_PROPAGATION_DELAY: float = Field(default=5.0, ge=0)

    # Blob writes
    BLOB_MAX_ATTEMPTS: int = Field(default=3, ge=1, le=10)
    BLOB_RETRY_BASE_DELAY: float = Field(default=1.0, ge=0)
    BLOB_EPOCHS: int = Field(default=5, ge=1)
    BLOB_DELETABLE: bool = Field(default=False)

    LOG_LEVEL: str = Field(default="INFO", description="Root log level")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        valid = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of: {valid}")
        return v.upper()

    def _preset(self, key: str) -> Any:
        return NETWORK_PRESETS[self.NETWORK][key]

    @property
    def rpc_url(self) -> str:
        """Sui JSON-RPC URL for the configured network."""
        return self.SUI_RPC_URL or self._preset("rpc_url")

    @property
    def faucet_url(self) -> str | None:
        """Faucet URL, or None when the network has no faucet."""
        return self.SUI_FAUCET_URL or self._preset("faucet_url")

    @property
    def publisher_url(self) -> str | None:
        """Walrus publisher URL."""
        return self.WALRUS_PUBLISHER_URL or self._preset("publisher_url")

    @property
    def aggregator_url(self) -> str | None:
        """Walrus aggregator URL."""
        return self.WALRUS_AGGREGATOR_URL or self._preset("aggregator_url")

    @property
    def wal_coin_type(self) -> str:
        """WAL coin type.

        Raises:
            ValueError: If neither the setting nor the preset provides one.
        """
        coin_type = self.WAL_COIN_TYPE or self._preset("wal_coin_type")
        if not coin_type:
            raise ValueError(f"WAL_COIN_TYPE not configured for {self.NETWORK.value}")
        return coin_type

    @property
    def wal_exchange_id(self) -> str:
        """Exchange object id used for SUI->WAL conversion.

        Raises:
            ValueError: If no exchange is known for the network.
        """
        if self.WAL_EXCHANGE_ID:
            return self.WAL_EXCHANGE_ID
        exchange_ids = self._preset("wal_exchange_ids")
        if not exchange_ids:
            raise ValueError(f"WAL_EXCHANGE_ID not configured for {self.NETWORK.value}")
        return exchange_ids[0]

    def get_funding_config(self) -> FundingConfig:
        """Build the funding configuration from settings."""
        return FundingConfig(
            min_gas=self.MIN_GAS,
            min_storage_credit=self.MIN_STORAGE_CREDIT,
            conversion_amount=self.CONVERSION_AMOUNT,
            gas_budget=self.GAS_BUDGET,
            faucet_propagation_delay=self.FAUCET_PROPAGATION_DELAY,
            confirm_timeout=self.REQUEST_TIMEOUT,
        )

    def get_retry_config(self) -> RetryConfig:
        """Build the blob write retry configuration from settings."""
        return RetryConfig(
            max_attempts=self.BLOB_MAX_ATTEMPTS,
            base_delay=self.BLOB_RETRY_BASE_DELAY,
            epochs=self.BLOB_EPOCHS,
            deletable=self.BLOB_DELETABLE,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
