"""Metric records shipped to the time-series database.

Each record renders itself as one InfluxDB line-protocol line and can be
rebuilt from a row of a QuestDB query result. Amounts are Decimal; they are
written with 12 fractional digits and trailing zeros trimmed.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from miningtools.logging import get_logger

logger = get_logger(__name__)


def format_number(value: Decimal) -> str:
    """Render a number with 12 decimals, dropping trailing zeros and a bare point."""
    return f"{Decimal(value):.12f}".rstrip("0").rstrip(".")


def escape_tag(value: str) -> str:
    """Escape backslashes, commas, equals signs and spaces in a line-protocol tag value."""
    return (
        value.replace("\\", "\\\\")
        .replace(",", r"\,")
        .replace("=", r"\=")
        .replace(" ", r"\ ")
    )


def to_unix_nanos(ts: datetime) -> int:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return int(ts.timestamp()) * 1_000_000_000 + ts.microsecond * 1000


def parse_questdb_timestamp(value: Any) -> datetime:
    """Parse a QuestDB timestamp cell (ISO-8601 string or epoch micros)."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1_000_000, tz=timezone.utc)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _column_index(columns: list[dict], known: set[str], metric: str) -> dict[str, int]:
    index: dict[str, int] = {}
    for i, column in enumerate(columns):
        name = column.get("name", "")
        if name in known:
            index[name] = i
        else:
            logger.warning("unexpected_questdb_column", metric=metric, column=name)
    return index


@dataclass
class PoolMetric:
    """Pool-side snapshot: unpaid balance and shares in the current bucket."""

    location: str
    balance: Decimal = Decimal("0")
    shares: int = 0
    timestamp: datetime | None = None

    COLUMNS = frozenset({"Location", "Balance", "Shares", "timestamp"})

    def to_line(self, table: str = "pool") -> bytes:
        """Render as a line-protocol line (timestamp defaults to now)."""
        ts = self.timestamp or datetime.now(timezone.utc)
        return (
            f"{table},Location={escape_tag(self.location)} "
            f"Balance={format_number(self.balance)},Shares={self.shares} "
            f"{to_unix_nanos(ts)}\n"
        ).encode()

    @classmethod
    def from_questdb(cls, columns: list[dict], row: list[Any]) -> "PoolMetric":
        index = _column_index(columns, cls.COLUMNS, "pool")
        return cls(
            location=str(row[index["Location"]]) if "Location" in index else "",
            balance=Decimal(str(row[index["Balance"]])) if "Balance" in index else Decimal("0"),
            shares=int(row[index["Shares"]]) if "Shares" in index else 0,
            timestamp=(
                parse_questdb_timestamp(row[index["timestamp"]])
                if "timestamp" in index
                else None
            ),
        )


@dataclass
class FinancialMetric:
    """Financial snapshot of a balance valued in USD and BTC."""

    location: str
    ethereum_usd: Decimal = Decimal("0")
    balance_eth: Decimal = Decimal("0")
    balance_usd: Decimal = Decimal("0")
    balance_btc: Decimal = Decimal("0")
    timestamp: datetime | None = None

    # line-protocol field name -> attribute
    FIELDS = {
        "EthereumUSD": "ethereum_usd",
        "BalanceETH": "balance_eth",
        "BalanceUSD": "balance_usd",
        "BalanceBTC": "balance_btc",
    }

    def to_line(self, table: str = "financial") -> bytes:
        """Render as a line-protocol line (timestamp defaults to now)."""
        ts = self.timestamp or datetime.now(timezone.utc)
        fields = ",".join(
            f"{name}={format_number(getattr(self, attr))}"
            for name, attr in self.FIELDS.items()
        )
        return (
            f"{table},Location={escape_tag(self.location)} {fields} "
            f"{to_unix_nanos(ts)}\n"
        ).encode()

    @classmethod
    def from_questdb(cls, columns: list[dict], row: list[Any]) -> "FinancialMetric":
        known = set(cls.FIELDS) | {"Location", "timestamp"}
        index = _column_index(columns, known, "financial")
        values: dict[str, Any] = {
            attr: Decimal(str(row[index[name]]))
            for name, attr in cls.FIELDS.items()
            if name in index
        }
        return cls(
            location=str(row[index["Location"]]) if "Location" in index else "",
            timestamp=(
                parse_questdb_timestamp(row[index["timestamp"]])
                if "timestamp" in index
                else None
            ),
            **values,
        )
