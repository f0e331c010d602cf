"""Etherscan account balance lookups.

Etherscan reports balances as an integer string in wei with ``status`` "1"
on success. Any other status carries an explanatory ``message``/``result``.
"""

from decimal import Decimal

import requests

from miningtools.config import EtherscanSettings
from miningtools.exceptions import ExplorerAPIError
from miningtools.logging import get_logger
from miningtools.models import WalletBalance

logger = get_logger(__name__)

WEI_PER_ETHER = Decimal(10) ** 18


class EtherscanClient:
    """Fetches on-chain wallet balances from an Etherscan-compatible API.

    Args:
        settings: API root, API key and per-call timeout.
        session: Optional pre-built session (tests inject a mock here).
    """

    def __init__(
        self,
        settings: EtherscanSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def close(self) -> None:
        self._session.close()

    def get_wallet_balance(self, address: str) -> WalletBalance:
        """Fetch the latest balance of ``address``.

        Raises:
            ExplorerAPIError: On transport failure, invalid JSON or a
                non-"1" status.
        """
        params = {
            "module": "account",
            "action": "balance",
            "address": address,
            "tag": "latest",
            "apikey": self._settings.api_key.get_secret_value(),
        }
        try:
            response = self._session.get(
                self._settings.api_root,
                params=params,
                timeout=self._settings.timeout_seconds,
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as e:
            logger.error("etherscan_request_failed", address=address, error=str(e))
            raise ExplorerAPIError(f"Balance lookup for {address} failed: {e}") from e
        except ValueError as e:
            raise ExplorerAPIError(f"Balance lookup for {address} returned invalid JSON") from e

        if body.get("status") != "1":
            logger.error(
                "etherscan_error_response",
                address=address,
                message=body.get("message"),
                result=body.get("result"),
            )
            raise ExplorerAPIError(
                f"Etherscan rejected balance lookup for {address}: "
                f"{body.get('message')} ({body.get('result')})"
            )

        raw = str(body.get("result", "0"))
        balance = Decimal(raw) / WEI_PER_ETHER
        logger.debug("wallet_balance_fetched", address=address, balance=str(balance))
        return WalletBalance(address=address, raw=raw, balance=balance)
