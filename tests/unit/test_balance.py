"""Unit tests for BalanceOracle.

Run with:
    pytest tests/unit/test_balance.py -v
"""

import pytest

from conftest import WAL_COIN_TYPE

from chainblob.core.errors import LedgerQueryError
from chainblob.funding.balance import BalanceOracle

ADDRESS = "0x" + "01" * 32


@pytest.mark.fast
class TestBalanceOracle:
    """Tests for live balance queries."""

    @pytest.mark.asyncio
    async def test_native_balance(self, mock_ledger):
        mock_ledger.get_balance.return_value = 42
        oracle = BalanceOracle(mock_ledger, storage_coin_type=WAL_COIN_TYPE)

        balance = await oracle.native_balance(ADDRESS)

        assert balance.amount == 42
        assert balance.coin_type == "0x2::sui::SUI"
        mock_ledger.get_balance.assert_awaited_once_with(ADDRESS, "0x2::sui::SUI")

    @pytest.mark.asyncio
    async def test_storage_credit_balance(self, mock_ledger):
        mock_ledger.get_balance.return_value = 7
        oracle = BalanceOracle(mock_ledger, storage_coin_type=WAL_COIN_TYPE)

        balance = await oracle.storage_credit_balance(ADDRESS)

        assert balance.coin_type == WAL_COIN_TYPE
        assert balance.address == ADDRESS

    @pytest.mark.asyncio
    async def test_not_cached(self, mock_ledger):
        mock_ledger.get_balance.side_effect = [1, 2]
        oracle = BalanceOracle(mock_ledger, storage_coin_type=WAL_COIN_TYPE)

        assert (await oracle.native_balance(ADDRESS)).amount == 1
        assert (await oracle.native_balance(ADDRESS)).amount == 2

    @pytest.mark.asyncio
    async def test_negative_amount_rejected(self, mock_ledger):
        mock_ledger.get_balance.return_value = -5
        oracle = BalanceOracle(mock_ledger, storage_coin_type=WAL_COIN_TYPE)

        with pytest.raises(LedgerQueryError, match="negative"):
            await oracle.native_balance(ADDRESS)

    @pytest.mark.asyncio
    async def test_query_error_propagates(self, mock_ledger):
        mock_ledger.get_balance.side_effect = LedgerQueryError("timed out")
        oracle = BalanceOracle(mock_ledger, storage_coin_type=WAL_COIN_TYPE)

        with pytest.raises(LedgerQueryError, match="timed out"):
            await oracle.storage_credit_balance(ADDRESS)
