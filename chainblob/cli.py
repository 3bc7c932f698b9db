"""
chainblob CLI

Command-line interface for the funded Walrus blob writer.

Usage:
    chainblob address          - Show the wallet address
    chainblob balance          - Show SUI and WAL balances
    chainblob fund             - Top up gas and convert SUI to WAL if needed
    chainblob write FILE       - Store a file as a blob
    chainblob read BLOB_ID     - Fetch a blob from the aggregator
"""
import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from chainblob import __version__
from chainblob.config import FROST_PER_WAL, MIST_PER_SUI, get_settings
from chainblob.context import ChainBlobContext
from chainblob.core.errors import ChainBlobError
from chainblob.core.types import BlobWriteOptions

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_context() -> ChainBlobContext:
    """Load settings and build the client graph, exiting on bad config."""
    try:
        settings = get_settings()
        configure_logging(settings.LOG_LEVEL)
        return ChainBlobContext.from_settings(settings)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]✗ Configuration error: {e}[/red]")
        sys.exit(1)


def run(coro_factory):
    """Run an async command against a fresh context, reporting chainblob errors."""

    async def _main():
        async with build_context() as ctx:
            return await coro_factory(ctx)

    try:
        return asyncio.run(_main())
    except ChainBlobError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        sys.exit(1)


def format_amount(amount: int, unit: int) -> str:
    return f"{amount / unit:,.4f}"


@click.group()
@click.version_option(version=__version__, prog_name="chainblob")
def main():
    """
    chainblob - funded blob storage on Walrus

    Keeps a Sui wallet stocked with SUI and WAL and writes payloads to Walrus.
    """
    load_dotenv()


@main.command()
def address():
    """Show the address derived from SUI_PRIVATE_KEY."""

    async def _address(ctx: ChainBlobContext):
        return ctx.provider.credential.address

    console.print(run(_address))


@main.command()
def balance():
    """Show native and storage-credit balances."""

    async def _balance(ctx: ChainBlobContext):
        addr = ctx.provider.credential.address
        gas = await ctx.oracle.native_balance(addr)
        storage = await ctx.oracle.storage_credit_balance(addr)
        return addr, gas, storage

    addr, gas, storage = run(_balance)

    table = Table(title=f"Balances for {addr}")
    table.add_column("Token", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Raw", justify="right", style="dim")
    table.add_row("SUI", format_amount(gas.amount, MIST_PER_SUI), str(gas.amount))
    table.add_row("WAL", format_amount(storage.amount, FROST_PER_WAL), str(storage.amount))
    console.print(table)


@main.command()
@click.option("--min-gas", type=int, default=None, help="Minimum SUI balance in MIST")
@click.option("--min-wal", type=int, default=None, help="Minimum WAL balance in FROST")
def fund(min_gas: int | None, min_wal: int | None):
    """Make sure the wallet can pay for a blob write."""

    async def _fund(ctx: ChainBlobContext):
        credential = await ctx.provider.ensure_funded(min_gas, min_wal)
        return await ctx.oracle.storage_credit_balance(credential.address)

    storage = run(_fund)
    console.print(
        f"[green]✓ Wallet funded[/green] - WAL balance {format_amount(storage.amount, FROST_PER_WAL)}"
    )


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--epochs", type=click.IntRange(min=1), default=None, help="Retention in epochs")
@click.option(
    "--deletable/--permanent",
    default=None,
    help="Allow the blob to be deleted, or force a permanent blob [default: from settings]",
)
def write(file: Path, epochs: int | None, deletable: bool | None):
    """Store FILE as a blob and print its blob id."""
    payload = file.read_bytes()

    async def _write(ctx: ChainBlobContext):
        options = ctx.writer.default_options()
        options = BlobWriteOptions(
            epochs=epochs or options.epochs,
            deletable=options.deletable if deletable is None else deletable,
        )
        return await ctx.writer.write(payload, options)

    result = run(_write)
    console.print(Panel(
        f"[bold cyan]{result.blob_id}[/bold cyan]\n"
        f"attempts: {result.attempts}"
        f"{' · already certified' if result.already_certified else ''}",
        title=f"✓ Stored {file.name} ({len(payload)} bytes)",
        border_style="green",
    ))


@main.command()
@click.argument("blob_id")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write to file")
def read(blob_id: str, output: Path | None):
    """Fetch BLOB_ID and print or save it."""

    async def _read(ctx: ChainBlobContext):
        return await ctx.writer.read(blob_id)

    data = run(_read)
    if output:
        output.write_bytes(data)
        console.print(f"[green]✓ Saved {len(data)} bytes to {output}[/green]")
    else:
        click.echo(data.decode("utf-8", errors="replace"))


if __name__ == "__main__":
    main()
