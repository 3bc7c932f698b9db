"""Best-effort faucet clients.

A faucet request never raises: every failure is reported as a FaucetResult
whose outcome the funding layer may log and discard.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from chainblob.core.errors import FaucetError
from chainblob.core.types import FaucetOutcome, FaucetResult

logger = logging.getLogger(__name__)


class FaucetClient(ABC):
    """Requests native gas token top-ups for an address."""

    @abstractmethod
    async def request_top_up(self, address: str) -> FaucetResult:
        """Ask for a top-up. One attempt, no retry.

        Args:
            address: Recipient address.

        Returns:
            The outcome. Never raises for faucet-side failures.
        """

    async def close(self) -> None:
        """Release network resources."""


class NullFaucetClient(FaucetClient):
    """Faucet for networks without one (mainnet). Always reports an error."""

    async def request_top_up(self, address: str) -> FaucetResult:
        return FaucetResult(
            outcome=FaucetOutcome.ERROR,
            address=address,
            detail="No faucet configured for this network",
        )


class SuiFaucetClient(FaucetClient):
    """HTTP client for the Sui faucet service (v2 gas endpoint).

    Attributes:
        url: Faucet host, e.g. https://faucet.testnet.sui.io.
        timeout: Request timeout in seconds.
    """

    def __init__(self, url: str, timeout: float = 120.0) -> None:
        self.url = url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get httpx async client (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.url, timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _post_gas(self, address: str) -> dict[str, Any]:
        """POST the gas request.

        Raises:
            FaucetError: On any transport, HTTP or payload failure.
        """
        try:
            response = await self.client.post(
                "/v2/gas",
                json={"FixedAmountRequest": {"recipient": address}},
            )
        except httpx.HTTPError as e:
            raise FaucetError(f"Faucet request failed: {e}") from e

        if response.status_code == 429:
            raise FaucetError("Faucet rate limit exceeded", rate_limited=True)
        if response.status_code >= 400:
            raise FaucetError(f"Faucet returned HTTP {response.status_code}: {response.text[:200]}")

        try:
            body = response.json()
        except ValueError as e:
            raise FaucetError("Faucet returned invalid JSON") from e
        if not isinstance(body, dict):
            raise FaucetError(f"Unexpected faucet response: {str(body)[:200]}")

        status = body.get("status")
        if body.get("error") or (status is not None and status != "Success"):
            raise FaucetError(f"Faucet refused request: {body.get('error') or status}")
        return body

    async def request_top_up(self, address: str) -> FaucetResult:
        try:
            await self._post_gas(address)
        except FaucetError as e:
            outcome = FaucetOutcome.RATE_LIMITED if e.rate_limited else FaucetOutcome.ERROR
            logger.warning(f"[FAUCET] Top-up for {address} not granted ({outcome.value}): {e}")
            return FaucetResult(outcome=outcome, address=address, detail=str(e))

        logger.info(f"[FAUCET] Top-up requested for {address}")
        return FaucetResult(outcome=FaucetOutcome.OK, address=address)
