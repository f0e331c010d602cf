"""Hourly share rate reduction over the pool's 10-minute share history.

The pool reports share counts in 10-minute buckets. Summing the buckets that
fall inside a lookback window and dividing by the window length yields
shares-per-hour. When the history is shorter than the window, the window is
shrunk to the span actually covered so the rate is not diluted.

Rounding: exact Decimal division followed by ROUND_HALF_UP, both for the
effective window (in whole hours) and for shares-per-hour.
"""

import time
from collections.abc import Callable, Iterable
from decimal import ROUND_HALF_UP, Decimal

from miningtools.exceptions import InvalidInput, InvalidWindow
from miningtools.models import RateRequest, RateResult, ShareSample

BUCKET_SECONDS = 600
SECONDS_PER_HOUR = 3600


def truncate_to_bucket(timestamp: float) -> int:
    """Truncate an epoch timestamp down to its 10-minute bucket boundary."""
    return int(timestamp) - int(timestamp) % BUCKET_SECONDS


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_shares_per_hour(
    series: Iterable[ShareSample],
    requested_hours: int,
    now: float,
) -> RateResult:
    """Reduce a share history to an hourly rate over a lookback window.

    Samples strictly newer than ``now - requested_hours`` are summed. If the
    oldest sample is still newer than that cutoff, the history does not reach
    back far enough and the window shrinks to the covered span, rounded to
    whole hours. A non-positive ``requested_hours`` sums the whole series over
    its full span.

    The series is scanned once. It is expected oldest-first, but ordering is
    not relied upon: the oldest timestamp is the minimum seen in the pass.

    Args:
        series: Share samples, 10-minute bucketed.
        requested_hours: Suggested lookback window in hours.
        now: Current epoch time; truncated to its 10-minute bucket.

    Returns:
        RateResult with the rounded shares-per-hour and the window used.

    Raises:
        InvalidInput: If any sample has a negative share count.
        InvalidWindow: If the effective window resolves to zero or fewer hours.
    """
    anchor = truncate_to_bucket(now)
    use_all = requested_hours <= 0
    cutoff = anchor - requested_hours * SECONDS_PER_HOUR

    total_shares = 0
    oldest: int | None = None
    for sample in series:
        if sample.shares < 0:
            raise InvalidInput(
                f"Negative share count {sample.shares} at timestamp {sample.timestamp}"
            )
        if oldest is None or sample.timestamp < oldest:
            oldest = sample.timestamp
        if use_all or sample.timestamp > cutoff:
            total_shares += sample.shares

    if oldest is None:
        if use_all:
            raise InvalidWindow("Cannot derive a window from an empty share history")
        effective_hours = requested_hours
    elif use_all or oldest > cutoff:
        span = Decimal(anchor - oldest) / Decimal(SECONDS_PER_HOUR)
        effective_hours = _round_half_up(span)
    else:
        effective_hours = requested_hours

    if effective_hours <= 0:
        raise InvalidWindow(
            f"Share history covers {effective_hours}h (requested {requested_hours}h)"
        )

    shares_per_hour = _round_half_up(Decimal(total_shares) / Decimal(effective_hours))
    return RateResult(shares_per_hour=shares_per_hour, effective_hours=effective_hours)


class HourlyRateReducer:
    """Computes shares-per-hour from share history anchored at the current time.

    The clock is injectable so callers and tests can pin "now".

    Args:
        clock: Zero-argument callable returning the current epoch time.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock

    def compute(self, series: Iterable[ShareSample], requested_hours: int) -> RateResult:
        """Reduce ``series`` to shares-per-hour over ``requested_hours``."""
        return compute_shares_per_hour(series, requested_hours, self._clock())

    def reduce(self, request: RateRequest) -> RateResult:
        """Reduce a prepared RateRequest."""
        return self.compute(request.series, request.requested_hours)
