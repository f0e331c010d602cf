"""Nanopool API client implementation over requests.

Every endpoint answers with an envelope ``{"status": bool, "data": ...}``;
failed lookups come back as ``{"status": false, "error": "..."}``, often with
HTTP 200. Both transport and envelope failures surface as PoolAPIError.
"""

from decimal import Decimal
from typing import Any

import requests

from miningtools.config import NanopoolSettings
from miningtools.exceptions import PoolAPIError
from miningtools.logging import get_logger
from miningtools.models import (
    AverageHashrate,
    MinerGeneralInfo,
    Payment,
    PriceQuote,
    ShareSample,
    Worker,
)
from miningtools.pool.client import PoolClient

logger = get_logger(__name__)


def _decimal(value: Any) -> Decimal:
    if value in (None, ""):
        return Decimal("0")
    return Decimal(str(value))


def _parse_worker(raw: dict) -> Worker:
    return Worker(
        id=str(raw.get("id", "")),
        uid=int(raw.get("uid") or 0),
        hashrate=str(raw.get("hashrate", "")),
        lastshare=int(raw.get("lastshare") or 0),
        rating=int(raw.get("rating") or 0),
        h1=str(raw.get("h1", "")),
        h3=str(raw.get("h3", "")),
        h6=str(raw.get("h6", "")),
        h12=str(raw.get("h12", "")),
        h24=str(raw.get("h24", "")),
    )


def parse_general_info(data: dict) -> MinerGeneralInfo:
    """Build MinerGeneralInfo from the ``data`` object of ``user/:address``."""
    avg = data.get("avgHashrate") or {}
    return MinerGeneralInfo(
        account=str(data.get("account", "")),
        unconfirmed_balance=_decimal(data.get("unconfirmed_balance")),
        balance=_decimal(data.get("balance")),
        hashrate=str(data.get("hashrate", "")),
        avg_hashrate=AverageHashrate(
            h1=str(avg.get("h1", "")),
            h3=str(avg.get("h3", "")),
            h6=str(avg.get("h6", "")),
            h12=str(avg.get("h12", "")),
            h24=str(avg.get("h24", "")),
        ),
        workers=[_parse_worker(w) for w in data.get("workers") or []],
    )


def parse_share_rate_history(data: list[dict]) -> list[ShareSample]:
    """Build ShareSample values from ``shareratehistory/:address`` rows."""
    return [
        ShareSample(timestamp=int(row["date"]), shares=int(row["shares"]))
        for row in data
    ]


class NanopoolClient(PoolClient):
    """Concrete Nanopool client using a shared requests session.

    Args:
        settings: API root and per-call timeout.
        session: Optional pre-built session (tests inject a mock here).
    """

    def __init__(
        self,
        settings: NanopoolSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "NanopoolClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _get(self, path: str) -> Any:
        """GET ``api_root + path`` and return the envelope's ``data`` field."""
        url = f"{self._settings.api_root.rstrip('/')}/{path}"
        logger.debug("nanopool_request", url=url)
        try:
            response = self._session.get(url, timeout=self._settings.timeout_seconds)
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as e:
            logger.error("nanopool_request_failed", url=url, error=str(e))
            raise PoolAPIError(f"GET {url} failed: {e}") from e
        except ValueError as e:
            logger.error("nanopool_response_not_json", url=url, error=str(e))
            raise PoolAPIError(f"GET {url} returned invalid JSON: {e}") from e

        if not isinstance(body, dict) or not body.get("status"):
            error = body.get("error", "unknown error") if isinstance(body, dict) else body
            logger.error("nanopool_error_response", url=url, error=error)
            raise PoolAPIError(f"Nanopool rejected {path}: {error}")
        return body.get("data")

    def get_general_info(self, address: str) -> MinerGeneralInfo:
        return parse_general_info(self._get(f"user/{address}") or {})

    def get_payments(self, address: str) -> list[Payment]:
        return [
            Payment(
                date=int(row.get("date") or 0),
                tx_hash=str(row.get("txHash", "")),
                amount=_decimal(row.get("amount")),
                confirmed=bool(row.get("confirmed", False)),
            )
            for row in self._get(f"payments/{address}") or []
        ]

    def get_share_rate_history(self, address: str) -> list[ShareSample]:
        samples = parse_share_rate_history(self._get(f"shareratehistory/{address}") or [])
        logger.debug("share_rate_history_fetched", address=address, samples=len(samples))
        return samples

    def get_balance(self, address: str) -> Decimal:
        return _decimal(self._get(f"balance/{address}"))

    def get_prices(self) -> PriceQuote:
        data = self._get("prices/") or {}
        return PriceQuote(
            price_usd=_decimal(data.get("price_usd")),
            price_eur=_decimal(data.get("price_eur")),
            price_rur=_decimal(data.get("price_rur")),
            price_cny=_decimal(data.get("price_cny")),
            price_btc=_decimal(data.get("price_btc")),
        )
