"""Shared test fixtures for mining-tools."""

import pytest

from miningtools.config import (
    AppSettings,
    EtherscanSettings,
    NanopoolSettings,
    TimeseriesSettings,
)

# 10-minute aligned epoch used to pin "now" in tests (2023-11-14T22:20:00Z).
FIXED_NOW = 1_700_000_400


@pytest.fixture
def fixed_now() -> int:
    """A 10-minute aligned epoch timestamp."""
    return FIXED_NOW


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults and dummy addresses."""
    return AppSettings(
        log_level="DEBUG",
        nanopool=NanopoolSettings(
            address="0x01",
            api_root="http://test.com/",
        ),
        etherscan=EtherscanSettings(
            address="0xwallet",
            api_root="http://explorer.test/api",
            api_key="test-api-key",  # type: ignore[arg-type]
        ),
        timeseries=TimeseriesSettings(
            address="127.0.0.1:9009",
            query_url="http://localhost:9000/",
        ),
    )
