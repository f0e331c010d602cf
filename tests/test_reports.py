"""Tests for the general info report service and its JSON rendering."""

import json
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from miningtools.analytics.share_rate import HourlyRateReducer
from miningtools.exceptions import InvalidWindow
from miningtools.models import MinerGeneralInfo, Payment, ShareSample, Worker
from miningtools.pool.client import PoolClient
from miningtools.reports import GeneralInfoService, render_report, report_to_dict

NOW = 1_700_000_400


def _history(shares: int, hours: int) -> list[ShareSample]:
    return [
        ShareSample(timestamp=NOW - i * 600, shares=shares) for i in reversed(range(hours * 6))
    ]


@pytest.fixture
def pool_client() -> MagicMock:
    client = MagicMock(spec=PoolClient)
    client.get_general_info.return_value = MinerGeneralInfo(
        account="0x01",
        balance=Decimal("0.142"),
        workers=[Worker(id="rig1", rating=2000), Worker(id="rig2", rating=8000)],
    )
    client.get_payments.return_value = [
        Payment(date=1600000000, tx_hash="0xaaa", amount=Decimal("0.058"), confirmed=True)
    ]
    client.get_share_rate_history.return_value = _history(10, 24)
    return client


@pytest.fixture
def service(pool_client: MagicMock) -> GeneralInfoService:
    return GeneralInfoService(pool_client, HourlyRateReducer(clock=lambda: float(NOW)))


class TestGeneralInfoService:
    """Tests for report assembly."""

    def test_plain_report_fetches_only_general_info(
        self, service: GeneralInfoService, pool_client: MagicMock
    ) -> None:
        report = service.build("0x01")

        assert report.info.account == "0x01"
        assert report.reward_per_share is None
        assert report.shares_per_hour is None
        assert report.reward_per_hour is None
        pool_client.get_payments.assert_not_called()
        pool_client.get_share_rate_history.assert_not_called()

    def test_reward_per_share(self, service: GeneralInfoService) -> None:
        report = service.build("0x01", reward_per_share=True)

        # (0.142 + 0.058) / 10000
        assert report.reward_per_share == Decimal("0.00002")
        assert report.reward_per_hour is None

    def test_shares_per_hour(self, service: GeneralInfoService) -> None:
        report = service.build("0x01", shares_per_hour=True, hours=24)

        assert report.shares_per_hour == 60
        assert report.share_rate_hours == 24

    def test_shrunk_window_reported(
        self, service: GeneralInfoService, pool_client: MagicMock
    ) -> None:
        pool_client.get_share_rate_history.return_value = _history(10, 10)

        report = service.build("0x01", shares_per_hour=True, hours=24)

        assert report.shares_per_hour == 60
        assert report.share_rate_hours == 10

    def test_reward_per_hour_needs_both(self, service: GeneralInfoService) -> None:
        report = service.build("0x01", reward_per_share=True, shares_per_hour=True)

        assert report.reward_per_hour == Decimal("0.0012")

    def test_invalid_window_propagates(
        self, service: GeneralInfoService, pool_client: MagicMock
    ) -> None:
        pool_client.get_share_rate_history.return_value = []

        with pytest.raises(InvalidWindow):
            service.build("0x01", shares_per_hour=True, hours=0)


class TestRenderReport:
    """Tests for JSON rendering."""

    def test_plain_report_has_no_derived_fields(self, service: GeneralInfoService) -> None:
        data = report_to_dict(service.build("0x01"))["data"]

        assert data["account"] == "0x01"
        assert data["balance"] == "0.142"
        assert "rewardPerShare" not in data
        assert "sharesPerHour" not in data

    def test_full_report(self, service: GeneralInfoService) -> None:
        rendered = render_report(
            service.build("0x01", reward_per_share=True, shares_per_hour=True)
        )
        body = json.loads(rendered)

        assert body["status"] is True
        assert body["data"]["rewardPerShare"] == "0.00002"
        assert body["data"]["sharesPerHour"] == 60
        assert body["data"]["shareRateHours"] == 24
        assert body["data"]["rewardPerHour"] == "0.0012"
        assert [w["rating"] for w in body["data"]["workers"]] == [2000, 8000]
