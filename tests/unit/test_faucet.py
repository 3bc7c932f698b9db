"""Unit tests for faucet clients.

Run with:
    pytest tests/unit/test_faucet.py -v
"""

import json

import httpx
import pytest

from chainblob.core.types import FaucetOutcome
from chainblob.ledger.faucet import NullFaucetClient, SuiFaucetClient

FAUCET_URL = "https://faucet.test"
ADDRESS = "0x" + "cd" * 32


def make_faucet(handler) -> SuiFaucetClient:
    faucet = SuiFaucetClient(FAUCET_URL, timeout=5)
    faucet._client = httpx.AsyncClient(base_url=FAUCET_URL, transport=httpx.MockTransport(handler))
    return faucet


@pytest.mark.fast
class TestSuiFaucetClient:
    """Tests for SuiFaucetClient.request_top_up()."""

    @pytest.mark.asyncio
    async def test_success(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"status": "Success", "coins_sent": []})

        faucet = make_faucet(handler)
        result = await faucet.request_top_up(ADDRESS)
        await faucet.close()

        assert result.outcome == FaucetOutcome.OK
        assert result.ok
        assert seen[0].url.path == "/v2/gas"
        assert json.loads(seen[0].content) == {"FixedAmountRequest": {"recipient": ADDRESS}}

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        faucet = make_faucet(lambda request: httpx.Response(429, text="Too Many Requests"))
        result = await faucet.request_top_up(ADDRESS)
        assert result.outcome == FaucetOutcome.RATE_LIMITED
        assert not result.ok

    @pytest.mark.asyncio
    async def test_server_error(self):
        faucet = make_faucet(lambda request: httpx.Response(502, text="bad gateway"))
        result = await faucet.request_top_up(ADDRESS)
        assert result.outcome == FaucetOutcome.ERROR
        assert "502" in result.detail

    @pytest.mark.asyncio
    async def test_refused_status(self):
        faucet = make_faucet(
            lambda request: httpx.Response(200, json={"status": {"Failure": {"internal": "empty"}}})
        )
        result = await faucet.request_top_up(ADDRESS)
        assert result.outcome == FaucetOutcome.ERROR

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [["queued"], "queued", 7])
    async def test_non_object_body_is_error_outcome(self, payload):
        faucet = make_faucet(lambda request: httpx.Response(200, json=payload))
        result = await faucet.request_top_up(ADDRESS)
        assert result.outcome == FaucetOutcome.ERROR
        assert "Unexpected faucet response" in result.detail

    @pytest.mark.asyncio
    async def test_network_failure_never_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = await make_faucet(handler).request_top_up(ADDRESS)
        assert result.outcome == FaucetOutcome.ERROR
        assert result.address == ADDRESS


@pytest.mark.fast
class TestNullFaucetClient:
    """Tests for NullFaucetClient."""

    @pytest.mark.asyncio
    async def test_always_error(self):
        result = await NullFaucetClient().request_top_up(ADDRESS)
        assert result.outcome == FaucetOutcome.ERROR
