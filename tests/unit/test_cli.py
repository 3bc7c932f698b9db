"""Unit tests for the chainblob CLI.

Commands run through click's CliRunner against a context assembled from
the mock collaborators in conftest.

Run with:
    pytest tests/unit/test_cli.py -v
"""

from unittest.mock import AsyncMock

import pytest
from click.testing import CliRunner

from conftest import set_balances

from chainblob import cli
from chainblob.config import Settings
from chainblob.context import ChainBlobContext
from chainblob.core.errors import BlobStoreError
from chainblob.ledger.base import LedgerClient


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def context(mock_faucet, mock_store, mock_oracle, provider, writer) -> ChainBlobContext:
    return ChainBlobContext(
        ledger=AsyncMock(spec=LedgerClient),
        faucet=mock_faucet,
        store=mock_store,
        oracle=mock_oracle,
        provider=provider,
        writer=writer,
    )


@pytest.fixture
def patched_context(monkeypatch, context) -> ChainBlobContext:
    monkeypatch.setattr(cli, "build_context", lambda: context)
    return context


@pytest.mark.fast
class TestCommands:
    """Tests for CLI commands."""

    def test_version(self, runner):
        result = runner.invoke(cli.main, ["--version"])
        assert result.exit_code == 0
        assert "chainblob" in result.output

    def test_address(self, runner, patched_context, credential):
        result = runner.invoke(cli.main, ["address"])
        assert result.exit_code == 0
        assert credential.address in result.output.replace("\n", "")

    def test_balance(self, runner, patched_context, mock_oracle, credential):
        set_balances(mock_oracle, credential.address, gas=[2_500_000_000], storage=[500_000_000])

        result = runner.invoke(cli.main, ["balance"])

        assert result.exit_code == 0
        assert "2.5000" in result.output
        assert "0.5000" in result.output

    def test_fund(self, runner, patched_context, mock_oracle, mock_converter, credential):
        set_balances(mock_oracle, credential.address, gas=[5_000], storage=[700, 700])

        result = runner.invoke(cli.main, ["fund"])

        assert result.exit_code == 0
        assert "Wallet funded" in result.output
        mock_converter.convert.assert_not_called()

    def test_write(self, runner, patched_context, mock_store, tmp_path):
        path = tmp_path / "reading.json"
        path.write_bytes(b'{"temperature": 21.5}')

        result = runner.invoke(cli.main, ["write", str(path), "--epochs", "3", "--deletable"])

        assert result.exit_code == 0
        assert "blob-abc" in result.output
        call = mock_store.write.call_args
        assert call.args[0] == b'{"temperature": 21.5}'
        assert call.kwargs["epochs"] == 3
        assert call.kwargs["deletable"] is True

    def test_write_permanent_overrides_deletable_default(self, runner, patched_context, mock_store, tmp_path):
        path = tmp_path / "reading.json"
        path.write_bytes(b"{}")
        patched_context.writer.retry = patched_context.writer.retry.model_copy(update={"deletable": True})

        result = runner.invoke(cli.main, ["write", str(path), "--permanent"])

        assert result.exit_code == 0
        assert mock_store.write.call_args.kwargs["deletable"] is False

    def test_write_uses_deletable_default(self, runner, patched_context, mock_store, tmp_path):
        path = tmp_path / "reading.json"
        path.write_bytes(b"{}")
        patched_context.writer.retry = patched_context.writer.retry.model_copy(update={"deletable": True})

        result = runner.invoke(cli.main, ["write", str(path)])

        assert result.exit_code == 0
        assert mock_store.write.call_args.kwargs["deletable"] is True

    def test_write_failure_exits_nonzero(self, runner, patched_context, mock_store, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"x")
        mock_store.write.side_effect = BlobStoreError("publisher down")

        result = runner.invoke(cli.main, ["write", str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_read_to_stdout(self, runner, patched_context, mock_store):
        mock_store.read.return_value = b"hello walrus"

        result = runner.invoke(cli.main, ["read", "blob-abc"])

        assert result.exit_code == 0
        assert "hello walrus" in result.output

    def test_read_to_file(self, runner, patched_context, mock_store, tmp_path):
        mock_store.read.return_value = b"\x00\x01"
        output = tmp_path / "out.bin"

        result = runner.invoke(cli.main, ["read", "blob-abc", "-o", str(output)])

        assert result.exit_code == 0
        assert output.read_bytes() == b"\x00\x01"

    def test_configuration_error(self, runner, monkeypatch):
        monkeypatch.setattr(cli, "get_settings", lambda: Settings(_env_file=None, NETWORK="mainnet"))

        result = runner.invoke(cli.main, ["address"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output


@pytest.mark.fast
class TestFormatAmount:
    """Tests for format_amount()."""

    def test_format(self):
        assert cli.format_amount(1_234_500_000_000, 1_000_000_000) == "1,234.5000"
