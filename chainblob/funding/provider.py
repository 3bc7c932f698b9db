"""Funded signer provider: guarantees a wallet can pay for a blob write.

Orchestrates BalanceOracle, FaucetClient and ExchangeConverter so that the
signing credential holds at least ``min_gas`` of the native token and at
least ``min_storage_credit`` of WAL before it is handed to the blob store.

Flow:
    1. Derive the credential from the configured secret (once).
    2. Gas below minimum -> faucet top-up (outcome ignored, no wait).
    3. WAL at or above minimum -> return immediately.
    4. Gas still below minimum -> faucet again, then wait for propagation.
    5. Convert the configured amount of SUI into WAL.
    6. Re-read WAL for the logs; a shortfall is not raised here.

Examples:
    >>> provider = FundedSignerProvider(secret, oracle, faucet, converter, FundingConfig())
    >>> credential = await provider.ensure_funded()

Tests:
    - tests/unit/test_provider.py
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from pydantic import SecretStr

from chainblob.config import FundingConfig
from chainblob.core.keys import SigningCredential
from chainblob.funding.balance import BalanceOracle
from chainblob.funding.exchange import ExchangeConverter
from chainblob.ledger.faucet import FaucetClient

logger = logging.getLogger(__name__)


class FundedSignerProvider:
    """Hands out a signing credential that meets minimum balances.

    The credential is derived once and reused; balances are queried live on
    every call.

    Attributes:
        oracle: Balance queries.
        faucet: Best-effort native token top-ups.
        converter: SUI to WAL conversion.
        config: Thresholds, conversion amount and propagation delay.
    """

    def __init__(
        self,
        secret: SecretStr | str | None,
        oracle: BalanceOracle,
        faucet: FaucetClient,
        converter: ExchangeConverter,
        config: FundingConfig | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._secret = secret
        self.oracle = oracle
        self.faucet = faucet
        self.converter = converter
        self.config = config or FundingConfig()
        self._sleep = sleep
        self._credential: SigningCredential | None = None

    @property
    def credential(self) -> SigningCredential:
        """Derived signing credential (lazy).

        Raises:
            CredentialError: If the secret is absent or malformed.
        """
        if self._credential is None:
            secret = self._secret.get_secret_value() if isinstance(self._secret, SecretStr) else self._secret
            self._credential = SigningCredential.from_secret(secret)
            logger.info(f"[FUNDING] Loaded signing credential for {self._credential.address}")
        return self._credential

    def reload_credential(self) -> SigningCredential:
        """Force re-derivation from the configured secret."""
        self._credential = None
        return self.credential

    async def _top_up(self, address: str) -> None:
        result = await self.faucet.request_top_up(address)
        if not result.ok:
            logger.info(f"[FUNDING] Continuing without faucet top-up ({result.outcome.value})")

    async def ensure_funded(
        self,
        min_gas: int | None = None,
        min_storage_credit: int | None = None,
    ) -> SigningCredential:
        """Return a credential holding at least the requested balances.

        Args:
            min_gas: Minimum native balance (defaults to config.min_gas).
            min_storage_credit: Minimum WAL balance (defaults to
                config.min_storage_credit).

        Returns:
            The signing credential.

        Raises:
            CredentialError: If the secret cannot be loaded.
            LedgerQueryError: If a balance query fails.
            ExchangeError: If the conversion fails.
        """
        min_gas = self.config.min_gas if min_gas is None else min_gas
        min_storage_credit = (
            self.config.min_storage_credit if min_storage_credit is None else min_storage_credit
        )

        credential = self.credential
        address = credential.address

        gas = await self.oracle.native_balance(address)
        if gas.amount < min_gas:
            logger.info(f"[FUNDING] Gas balance {gas.amount} below {min_gas}, requesting faucet")
            await self._top_up(address)

        storage = await self.oracle.storage_credit_balance(address)
        logger.info(f"[FUNDING] Storage credit balance: {storage.amount}")
        if storage.amount >= min_storage_credit:
            return credential

        logger.info(f"[FUNDING] Storage credit below {min_storage_credit}, converting native token")

        gas = await self.oracle.native_balance(address)
        if gas.amount < min_gas:
            logger.info("[FUNDING] Requesting faucet before conversion")
            await self._top_up(address)
            await self._sleep(self.config.faucet_propagation_delay)

        await self.converter.convert(credential, self.config.conversion_amount)

        storage = await self.oracle.storage_credit_balance(address)
        if storage.amount < min_storage_credit:
            logger.warning(
                f"[FUNDING] Storage credit still below minimum after conversion: "
                f"{storage.amount} < {min_storage_credit}"
            )
        else:
            logger.info(f"[FUNDING] Updated storage credit balance: {storage.amount}")
        return credential
