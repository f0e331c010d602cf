"""Metric collection from the pool and the blockchain explorer.

Builds PoolMetric and FinancialMetric snapshots and concatenates their
line-protocol form into one payload for the time-series database. A failing
collector is logged and left out of the payload so the others still ship.
"""

import time
from collections.abc import Callable
from decimal import Decimal

from miningtools.analytics.share_rate import truncate_to_bucket
from miningtools.config import AppSettings
from miningtools.exceptions import MiningToolsError, ShareSampleNotFound
from miningtools.explorer.etherscan_client import EtherscanClient
from miningtools.logging import get_logger
from miningtools.models import PriceQuote
from miningtools.pool.client import PoolClient
from miningtools.timeseries.metrics import FinancialMetric, PoolMetric

logger = get_logger(__name__)


def _valued(location: str, balance: Decimal, prices: PriceQuote) -> FinancialMetric:
    return FinancialMetric(
        location=location,
        ethereum_usd=prices.price_usd,
        balance_eth=balance,
        balance_usd=prices.price_usd * balance,
        balance_btc=prices.price_btc * balance,
    )


class MetricsCollector:
    """Collects pool and wallet metrics for the time-series database.

    Args:
        settings: Application settings (pool and wallet addresses).
        pool_client: Mining pool API client.
        explorer_client: Blockchain explorer client for the wallet balance.
        clock: Zero-argument callable returning the current epoch time.
    """

    def __init__(
        self,
        settings: AppSettings,
        pool_client: PoolClient,
        explorer_client: EtherscanClient,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._pool = pool_client
        self._explorer = explorer_client
        self._clock = clock

    def collect_pool_stats(self) -> PoolMetric:
        """Pool balance plus the share count of the current 10-minute bucket.

        Raises:
            ShareSampleNotFound: If the history has no sample for the bucket.
        """
        address = self._settings.nanopool.address
        balance = self._pool.get_balance(address)
        bucket = truncate_to_bucket(self._clock())
        history = self._pool.get_share_rate_history(address)

        for sample in history:
            if sample.timestamp == bucket:
                return PoolMetric(location="nanopool", balance=balance, shares=sample.shares)
        raise ShareSampleNotFound(f"Date {bucket} not found in share rate history")

    def collect_nanopool_financial_stats(self) -> FinancialMetric:
        """Unpaid pool balance valued in USD and BTC."""
        balance = self._pool.get_balance(self._settings.nanopool.address)
        prices = self._pool.get_prices()
        return _valued("nanopool", balance, prices)

    def collect_wallet_financial_stats(self) -> FinancialMetric:
        """On-chain wallet balance valued in USD and BTC."""
        wallet = self._explorer.get_wallet_balance(self._settings.etherscan.address)
        prices = self._pool.get_prices()
        return _valued("wallet", wallet.balance, prices)

    def collect_payload(self) -> bytes:
        """Run every collector and join the successful ones into one payload."""
        collectors: list[tuple[str, str, Callable[[], PoolMetric | FinancialMetric]]] = [
            ("pool", "pool", self.collect_pool_stats),
            ("nanopool_financial", "financial", self.collect_nanopool_financial_stats),
            ("wallet_financial", "financial", self.collect_wallet_financial_stats),
        ]

        payload = b""
        for name, table, collect in collectors:
            try:
                metric = collect()
            except MiningToolsError as e:
                logger.error("metric_collection_failed", collector=name, error=str(e))
                continue
            payload += metric.to_line(table)
            logger.debug("metric_collected", collector=name, table=table)
        return payload
