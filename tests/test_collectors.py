"""Tests for MetricsCollector.

Pool and explorer clients are mocked; the clock is pinned to a 10-minute
aligned timestamp.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from miningtools.collectors import MetricsCollector
from miningtools.config import AppSettings
from miningtools.exceptions import ExplorerAPIError, PoolAPIError, ShareSampleNotFound
from miningtools.explorer.etherscan_client import EtherscanClient
from miningtools.models import PriceQuote, ShareSample, WalletBalance
from miningtools.pool.client import PoolClient

NOW = 1_700_000_400

PRICES = PriceQuote(price_usd=Decimal("2000"), price_btc=Decimal("0.05"))


@pytest.fixture
def pool_client() -> MagicMock:
    client = MagicMock(spec=PoolClient)
    client.get_balance.return_value = Decimal("0.5")
    client.get_prices.return_value = PRICES
    client.get_share_rate_history.return_value = [
        ShareSample(timestamp=NOW - 600, shares=8),
        ShareSample(timestamp=NOW, shares=11),
    ]
    return client


@pytest.fixture
def explorer_client() -> MagicMock:
    client = MagicMock(spec=EtherscanClient)
    client.get_wallet_balance.return_value = WalletBalance(
        address="0xwallet", raw="1500000000000000000", balance=Decimal("1.5")
    )
    return client


@pytest.fixture
def collector(
    mock_settings: AppSettings, pool_client: MagicMock, explorer_client: MagicMock
) -> MetricsCollector:
    return MetricsCollector(
        mock_settings, pool_client, explorer_client, clock=lambda: float(NOW + 42)
    )


class TestCollectPoolStats:
    """Tests for the pool snapshot."""

    def test_uses_current_bucket(self, collector: MetricsCollector, pool_client: MagicMock) -> None:
        metric = collector.collect_pool_stats()

        assert metric.location == "nanopool"
        assert metric.balance == Decimal("0.5")
        assert metric.shares == 11
        pool_client.get_balance.assert_called_once_with("0x01")
        pool_client.get_share_rate_history.assert_called_once_with("0x01")

    def test_missing_bucket_raises(
        self, collector: MetricsCollector, pool_client: MagicMock
    ) -> None:
        pool_client.get_share_rate_history.return_value = [
            ShareSample(timestamp=NOW - 600, shares=8)
        ]
        with pytest.raises(ShareSampleNotFound, match=str(NOW)):
            collector.collect_pool_stats()


class TestCollectFinancialStats:
    """Tests for balance valuation."""

    def test_nanopool_balance_valued(self, collector: MetricsCollector) -> None:
        metric = collector.collect_nanopool_financial_stats()

        assert metric.location == "nanopool"
        assert metric.ethereum_usd == Decimal("2000")
        assert metric.balance_eth == Decimal("0.5")
        assert metric.balance_usd == Decimal("1000")
        assert metric.balance_btc == Decimal("0.025")

    def test_wallet_balance_valued(
        self, collector: MetricsCollector, explorer_client: MagicMock
    ) -> None:
        metric = collector.collect_wallet_financial_stats()

        explorer_client.get_wallet_balance.assert_called_once_with("0xwallet")
        assert metric.location == "wallet"
        assert metric.balance_usd == Decimal("3000")
        assert metric.balance_btc == Decimal("0.075")


class TestCollectPayload:
    """Tests for payload assembly."""

    def test_all_collectors_succeed(self, collector: MetricsCollector) -> None:
        lines = collector.collect_payload().splitlines()

        assert len(lines) == 3
        assert lines[0].startswith(b"pool,Location=nanopool Balance=0.5,Shares=11 ")
        assert lines[1].startswith(b"financial,Location=nanopool ")
        assert lines[2].startswith(b"financial,Location=wallet ")

    def test_failed_collector_is_skipped(
        self, collector: MetricsCollector, explorer_client: MagicMock
    ) -> None:
        explorer_client.get_wallet_balance.side_effect = ExplorerAPIError("NOTOK")

        lines = collector.collect_payload().splitlines()

        assert len(lines) == 2
        assert not any(b"Location=wallet" in line for line in lines)

    def test_all_collectors_fail(
        self, collector: MetricsCollector, pool_client: MagicMock, explorer_client: MagicMock
    ) -> None:
        pool_client.get_balance.side_effect = PoolAPIError("down")
        explorer_client.get_wallet_balance.side_effect = ExplorerAPIError("down")

        assert collector.collect_payload() == b""
