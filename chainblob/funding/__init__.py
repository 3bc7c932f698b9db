"""Wallet funding: balances, faucet top-ups and SUI to WAL conversion."""

from chainblob.funding.balance import BalanceOracle
from chainblob.funding.exchange import ExchangeConverter, resolve_module_address
from chainblob.funding.provider import FundedSignerProvider
from chainblob.funding.submitter import TransactionSubmitter

__all__ = [
    "BalanceOracle",
    "ExchangeConverter",
    "FundedSignerProvider",
    "TransactionSubmitter",
    "resolve_module_address",
]
