"""Ledger network and faucet clients."""

from chainblob.ledger.base import LedgerClient
from chainblob.ledger.faucet import FaucetClient, NullFaucetClient, SuiFaucetClient
from chainblob.ledger.sui import SuiClient

__all__ = [
    "FaucetClient",
    "LedgerClient",
    "NullFaucetClient",
    "SuiClient",
    "SuiFaucetClient",
]
