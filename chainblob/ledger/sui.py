"""Sui full node JSON-RPC client.

This module provides the concrete LedgerClient for Sui, speaking JSON-RPC
2.0 over HTTPS with httpx.

Sui JSON-RPC docs: https://docs.sui.io/sui-api-ref

Examples:
    >>> from chainblob.ledger.sui import SuiClient
    >>> async with SuiClient("https://fullnode.testnet.sui.io:443") as client:
    ...     balance = await client.get_balance(address, "0x2::sui::SUI")

Tests:
    - tests/unit/test_sui_client.py
"""

from __future__ import annotations

import base64
import itertools
import logging
from typing import Any

import httpx

from chainblob.core.errors import LedgerQueryError, LedgerSubmitError
from chainblob.core.types import CoinObject, ObjectInfo, ObjectRef
from chainblob.ledger.base import LedgerClient

logger = logging.getLogger(__name__)

# Error text returned by sui_getTransactionBlock for digests not yet known.
TX_NOT_FOUND_MARKERS = ("Could not find the referenced transaction", "not found")

COINS_PAGE_LIMIT = 50


class SuiClient(LedgerClient):
    """JSON-RPC client for a Sui full node.

    Attributes:
        url: Full node JSON-RPC URL.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, url: str, timeout: float = 120.0) -> None:
        """Initialize the client.

        Args:
            url: Full node JSON-RPC URL.
            timeout: Request timeout in seconds.
        """
        self.url = url
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    @property
    def client(self) -> httpx.AsyncClient:
        """Get httpx async client (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "SuiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _call(
        self,
        method: str,
        params: list[Any],
        error_cls: type[LedgerQueryError] | type[LedgerSubmitError] = LedgerQueryError,
    ) -> Any:
        """Issue one JSON-RPC call and return its result.

        Raises:
            error_cls: On transport failure, timeout, HTTP error or a
                JSON-RPC error object.
        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            response = await self.client.post(self.url, json=payload)
        except httpx.TimeoutException as e:
            raise error_cls(f"{method} timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise error_cls(f"{method} failed: {e}") from e

        if response.status_code != 200:
            raise error_cls(f"{method} returned HTTP {response.status_code}: {response.text[:200]}")

        try:
            body = response.json()
        except ValueError as e:
            raise error_cls(f"{method} returned invalid JSON") from e

        if body.get("error"):
            error = body["error"]
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise error_cls(f"{method} error: {message}")
        if "result" not in body:
            raise error_cls(f"{method} returned no result")
        return body["result"]

    async def get_balance(self, address: str, coin_type: str) -> int:
        result = await self._call("suix_getBalance", [address, coin_type])
        try:
            return int(result["totalBalance"])
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerQueryError(f"Malformed balance response: {result!r}") from e

    async def get_object(self, object_id: str) -> ObjectInfo:
        result = await self._call(
            "sui_getObject",
            [object_id, {"showType": True, "showOwner": True}],
        )
        if result.get("error"):
            raise LedgerQueryError(f"Object {object_id} unavailable: {result['error']}")
        data = result.get("data")
        if not data:
            raise LedgerQueryError(f"Object {object_id} returned no data")

        initial_shared_version = None
        owner = data.get("owner")
        try:
            if isinstance(owner, dict) and "Shared" in owner:
                initial_shared_version = int(owner["Shared"]["initial_shared_version"])
            version = int(data.get("version", 0))
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerQueryError(f"Malformed object response for {object_id}: {data!r}") from e

        return ObjectInfo(
            object_id=data.get("objectId", object_id),
            version=version,
            type=data.get("type"),
            initial_shared_version=initial_shared_version,
        )

    async def get_coins(self, address: str, coin_type: str) -> list[CoinObject]:
        coins: list[CoinObject] = []
        cursor = None
        while True:
            result = await self._call(
                "suix_getCoins", [address, coin_type, cursor, COINS_PAGE_LIMIT]
            )
            for item in result.get("data", []):
                try:
                    coins.append(
                        CoinObject(
                            ref=ObjectRef(
                                object_id=item["coinObjectId"],
                                version=int(item["version"]),
                                digest=item["digest"],
                            ),
                            balance=int(item["balance"]),
                        )
                    )
                except (KeyError, TypeError, ValueError) as e:
                    raise LedgerQueryError(f"Malformed coin entry: {item!r}") from e
            if not result.get("hasNextPage"):
                return coins
            cursor = result.get("nextCursor")

    async def get_reference_gas_price(self) -> int:
        result = await self._call("suix_getReferenceGasPrice", [])
        try:
            return int(result)
        except (TypeError, ValueError) as e:
            raise LedgerQueryError(f"Malformed gas price response: {result!r}") from e

    async def execute_transaction(self, tx_bytes: bytes, signature: str) -> str:
        result = await self._call(
            "sui_executeTransactionBlock",
            [
                base64.b64encode(tx_bytes).decode("ascii"),
                [signature],
                {"showEffects": True},
                "WaitForEffectsCert",
            ],
            error_cls=LedgerSubmitError,
        )
        digest = result.get("digest")
        if not digest:
            raise LedgerSubmitError(f"Submission returned no digest: {result!r}")
        logger.info(f"[LEDGER] Submitted transaction {digest}")
        return digest

    async def get_transaction(self, digest: str) -> dict[str, Any] | None:
        try:
            result = await self._call(
                "sui_getTransactionBlock", [digest, {"showEffects": True}]
            )
        except LedgerQueryError as e:
            if any(marker in str(e) for marker in TX_NOT_FOUND_MARKERS):
                return None
            raise
        return result.get("effects") or None
