"""Abstract mining pool client interface.

Defines the contract for pool API implementations. Report and metrics code
depends only on this interface, keeping Nanopool-specific details isolated
in the concrete implementation.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from miningtools.models import MinerGeneralInfo, Payment, PriceQuote, ShareSample


class PoolClient(ABC):
    """Abstract base class for mining pool API clients."""

    @abstractmethod
    def close(self) -> None:
        """Release HTTP resources."""
        ...

    @abstractmethod
    def get_general_info(self, address: str) -> MinerGeneralInfo:
        """Fetch balance, hashrate and worker summary for an account."""
        ...

    @abstractmethod
    def get_payments(self, address: str) -> list[Payment]:
        """Fetch all payouts made to an account."""
        ...

    @abstractmethod
    def get_share_rate_history(self, address: str) -> list[ShareSample]:
        """Fetch the account's share history in 10-minute buckets."""
        ...

    @abstractmethod
    def get_balance(self, address: str) -> Decimal:
        """Fetch the account's current unpaid balance."""
        ...

    @abstractmethod
    def get_prices(self) -> PriceQuote:
        """Fetch current prices of the pool's coin."""
        ...
