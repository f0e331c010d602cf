"""Reward metrics derived from pool account data.

Lifetime reward-per-share is (current balance + everything already paid out)
divided by the lifetime share count of all workers. Multiplying it by the
current shares-per-hour gives an estimated reward-per-hour.

All amounts use Decimal. No rounding is applied here; presentation code
decides how many digits to show.
"""

from collections.abc import Iterable
from decimal import Decimal

from miningtools.exceptions import InvalidInput
from miningtools.models import Payment, Worker


def calc_total_payout(payments: Iterable[Payment]) -> Decimal:
    """Sum all payment amounts. Returns Decimal("0") when there are none."""
    return sum((p.amount for p in payments), Decimal("0"))


def calc_total_shares(workers: Iterable[Worker]) -> int:
    """Sum the lifetime share rating of every worker."""
    return sum(w.rating for w in workers)


def calc_reward_per_share(
    balance: Decimal,
    total_payouts: Decimal,
    total_shares: int,
) -> Decimal:
    """Compute lifetime average reward per share.

    Args:
        balance: Current unpaid pool balance.
        total_payouts: Sum of all payouts already received.
        total_shares: Lifetime share count across all workers.

    Returns:
        Lifetime earnings divided by lifetime shares.

    Raises:
        InvalidInput: If total_shares is zero or negative.
    """
    if total_shares <= 0:
        raise InvalidInput(f"Cannot compute reward per share over {total_shares} shares")
    return (balance + total_payouts) / Decimal(total_shares)


def calc_reward_per_hour(reward_per_share: Decimal, shares_per_hour: int) -> Decimal:
    """Estimate hourly earnings from reward-per-share and shares-per-hour."""
    return reward_per_share * Decimal(shares_per_hour)
