"""Blockchain explorer clients for wallet balances."""

from miningtools.explorer.etherscan_client import EtherscanClient

__all__ = ["EtherscanClient"]
