"""Shared data models for mining-tools.

CRITICAL: All monetary values (balances, payouts, prices, rewards) use Decimal.
Share counts and epoch timestamps are plain integers.
"""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class ShareSample:
    """Share count of one 10-minute bucket of the pool's share rate history."""

    timestamp: int  # Unix epoch seconds, aligned to a 10-minute boundary
    shares: int


@dataclass(frozen=True)
class RateRequest:
    """Input to the hourly rate reduction.

    ``requested_hours`` is only a suggestion: the reducer shrinks it when the
    history does not reach back that far, and reports the window it actually
    used in RateResult.effective_hours. Zero or negative means "all history".
    """

    series: tuple[ShareSample, ...]
    requested_hours: int


@dataclass(frozen=True)
class RateResult:
    """Shares-per-hour together with the window it was computed over."""

    shares_per_hour: int
    effective_hours: int


@dataclass
class AverageHashrate:
    """Rolling average hashrates reported by the pool (MH/s, as strings)."""

    h1: str = ""
    h3: str = ""
    h6: str = ""
    h12: str = ""
    h24: str = ""


@dataclass
class Worker:
    """A single mining worker attached to the pool account."""

    id: str
    uid: int = 0
    hashrate: str = ""
    lastshare: int = 0  # Unix epoch seconds
    rating: int = 0  # lifetime share count credited to this worker
    h1: str = ""
    h3: str = ""
    h6: str = ""
    h12: str = ""
    h24: str = ""


@dataclass
class MinerGeneralInfo:
    """Account summary from the pool's general info endpoint."""

    account: str
    unconfirmed_balance: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    hashrate: str = ""
    avg_hashrate: AverageHashrate = field(default_factory=AverageHashrate)
    workers: list[Worker] = field(default_factory=list)


@dataclass
class Payment:
    """A payout sent from the pool to the miner's wallet."""

    date: int  # Unix epoch seconds
    tx_hash: str
    amount: Decimal
    confirmed: bool


@dataclass
class PriceQuote:
    """Spot prices of the pool's coin in several fiat and crypto currencies."""

    price_usd: Decimal = Decimal("0")
    price_eur: Decimal = Decimal("0")
    price_rur: Decimal = Decimal("0")
    price_cny: Decimal = Decimal("0")
    price_btc: Decimal = Decimal("0")


@dataclass
class WalletBalance:
    """On-chain wallet balance as reported by the blockchain explorer."""

    address: str
    raw: str  # balance in the smallest unit (wei), as returned by the explorer
    balance: Decimal  # balance in whole coins


@dataclass
class GeneralInfoReport:
    """General info of a pool account plus the optional derived metrics.

    ``share_rate_hours`` is the window shares_per_hour was actually computed
    over, which can be shorter than requested when the history is short.
    """

    info: MinerGeneralInfo
    reward_per_share: Decimal | None = None
    shares_per_hour: int | None = None
    share_rate_hours: int | None = None
    reward_per_hour: Decimal | None = None
