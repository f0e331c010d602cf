"""General info report for a pool account, with optional derived metrics.

Reward-per-share needs the payout history, shares-per-hour needs the share
rate history; each is only fetched when requested. Reward-per-hour is derived
when both are present.
"""

import json
from dataclasses import asdict
from typing import Any

from miningtools.analytics.rewards import (
    calc_reward_per_hour,
    calc_reward_per_share,
    calc_total_payout,
    calc_total_shares,
)
from miningtools.analytics.share_rate import HourlyRateReducer
from miningtools.logging import get_logger
from miningtools.models import GeneralInfoReport
from miningtools.pool.client import PoolClient
from miningtools.timeseries.metrics import format_number

logger = get_logger(__name__)


class GeneralInfoService:
    """Builds GeneralInfoReport values from a pool client.

    Args:
        pool_client: Mining pool API client.
        reducer: Hourly rate reducer (injectable clock for tests).
    """

    def __init__(
        self,
        pool_client: PoolClient,
        reducer: HourlyRateReducer | None = None,
    ) -> None:
        self._pool = pool_client
        self._reducer = reducer or HourlyRateReducer()

    def build(
        self,
        address: str,
        reward_per_share: bool = False,
        shares_per_hour: bool = False,
        hours: int = 24,
    ) -> GeneralInfoReport:
        """Fetch general info and compute the requested extras.

        Args:
            address: Pool account address.
            reward_per_share: Include lifetime reward-per-share.
            shares_per_hour: Include shares-per-hour over ``hours``.
            hours: Requested share rate window; may shrink to the history
                actually available (reported as ``share_rate_hours``).

        Returns:
            GeneralInfoReport for the account.

        Raises:
            PoolAPIError: If any pool request fails.
            InvalidInput: If reward-per-share is requested for an account
                with no shares.
            InvalidWindow: If the share rate window resolves to zero hours.
        """
        info = self._pool.get_general_info(address)
        report = GeneralInfoReport(info=info)

        if reward_per_share:
            payments = self._pool.get_payments(address)
            total_payouts = calc_total_payout(payments)
            total_shares = calc_total_shares(info.workers)
            report.reward_per_share = calc_reward_per_share(
                info.balance, total_payouts, total_shares
            )
            logger.debug(
                "reward_per_share_computed",
                total_payouts=str(total_payouts),
                total_shares=total_shares,
                reward_per_share=str(report.reward_per_share),
            )

        if shares_per_hour:
            history = self._pool.get_share_rate_history(address)
            result = self._reducer.compute(history, hours)
            report.shares_per_hour = result.shares_per_hour
            report.share_rate_hours = result.effective_hours
            if result.effective_hours != hours:
                logger.info(
                    "share_rate_window_shrunk",
                    requested_hours=hours,
                    effective_hours=result.effective_hours,
                )

        if report.reward_per_share is not None and report.shares_per_hour is not None:
            report.reward_per_hour = calc_reward_per_hour(
                report.reward_per_share, report.shares_per_hour
            )
            logger.debug("reward_per_hour_computed", reward_per_hour=str(report.reward_per_hour))

        return report


def report_to_dict(report: GeneralInfoReport) -> dict[str, Any]:
    """Shape a report like the pool's own ``user/:address`` response."""
    info = report.info
    data: dict[str, Any] = {
        "account": info.account,
        "unconfirmed_balance": str(info.unconfirmed_balance),
        "balance": str(info.balance),
        "hashrate": info.hashrate,
        "avgHashrate": asdict(info.avg_hashrate),
        "workers": [asdict(w) for w in info.workers],
    }
    if report.reward_per_share is not None:
        data["rewardPerShare"] = format_number(report.reward_per_share)
    if report.shares_per_hour is not None:
        data["sharesPerHour"] = report.shares_per_hour
        data["shareRateHours"] = report.share_rate_hours
    if report.reward_per_hour is not None:
        data["rewardPerHour"] = format_number(report.reward_per_hour)
    return {"status": True, "data": data}


def render_report(report: GeneralInfoReport) -> str:
    """Render a report as indented JSON."""
    return json.dumps(report_to_dict(report), indent=4)
