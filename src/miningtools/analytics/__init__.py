"""Pure computations over pool data: hourly share rate and reward metrics."""

from miningtools.analytics.rewards import (
    calc_reward_per_hour,
    calc_reward_per_share,
    calc_total_payout,
    calc_total_shares,
)
from miningtools.analytics.share_rate import (
    BUCKET_SECONDS,
    HourlyRateReducer,
    compute_shares_per_hour,
    truncate_to_bucket,
)

__all__ = [
    "BUCKET_SECONDS",
    "HourlyRateReducer",
    "calc_reward_per_hour",
    "calc_reward_per_share",
    "calc_total_payout",
    "calc_total_shares",
    "compute_shares_per_hour",
    "truncate_to_bucket",
]
