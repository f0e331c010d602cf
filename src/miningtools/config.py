"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from miningtools.exceptions import TimeseriesError


class NanopoolSettings(BaseSettings):
    """Nanopool account and API settings."""

    model_config = SettingsConfigDict(env_prefix="NANOPOOL_")

    address: str = ""
    api_root: str = "https://api.nanopool.org/v1/eth/"
    timeout_seconds: float = 10.0


class EtherscanSettings(BaseSettings):
    """Blockchain explorer settings for wallet balance lookups."""

    model_config = SettingsConfigDict(env_prefix="ETHERSCAN_")

    address: str = ""
    api_root: str = "https://api.etherscan.io/api"
    api_key: SecretStr = SecretStr("")
    timeout_seconds: float = 10.0


class TimeseriesSettings(BaseSettings):
    """Time-series database settings (QuestDB ILP ingest + HTTP query)."""

    model_config = SettingsConfigDict(env_prefix="TIMESERIES_")

    address: str = "127.0.0.1:9009"
    protocol: Literal["InfluxDB"] = "InfluxDB"
    query_url: str = "http://localhost:9000/"
    timeout_seconds: float = 10.0

    @property
    def host(self) -> str:
        """Host part of ``address``."""
        return self.address.rpartition(":")[0] or self.address

    @property
    def port(self) -> int:
        """Port part of ``address`` (defaults to the ILP port 9009).

        Raises:
            TimeseriesError: If the port is not an integer.
        """
        host, sep, port = self.address.rpartition(":")
        if not sep or not host:
            return 9009
        try:
            return int(port)
        except ValueError as e:
            raise TimeseriesError(f"Invalid port in time-series address: {self.address}") from e


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_file: str | None = None
    share_rate_hours: int = 24  # rolling window for shares-per-hour
    nanopool: NanopoolSettings = Field(default_factory=NanopoolSettings)
    etherscan: EtherscanSettings = Field(default_factory=EtherscanSettings)
    timeseries: TimeseriesSettings = Field(default_factory=TimeseriesSettings)


def load_settings(config_file: str | None = None) -> AppSettings:
    """Load settings from the environment and an env-style config file.

    Args:
        config_file: Path of the env file to read. Defaults to ``.env`` in
            the working directory when not given.

    Returns:
        Fully populated AppSettings.
    """
    if config_file:
        return AppSettings(_env_file=config_file)  # type: ignore[call-arg]
    return AppSettings()
