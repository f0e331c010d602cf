"""Tests for settings loading from environment and env files."""

from pathlib import Path

import pytest

from miningtools.config import AppSettings, TimeseriesSettings, load_settings
from miningtools.exceptions import TimeseriesError


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run from an empty directory so no stray .env file is picked up."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "NANOPOOL_ADDRESS",
        "LOG_LEVEL",
        "SHARE_RATE_HOURS",
        "TIMESERIES_ADDRESS",
        "TIMESERIES_PROTOCOL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestAppSettings:
    """Tests for defaults and environment overrides."""

    def test_defaults(self) -> None:
        settings = AppSettings()

        assert settings.log_level == "INFO"
        assert settings.log_file is None
        assert settings.share_rate_hours == 24
        assert settings.nanopool.api_root == "https://api.nanopool.org/v1/eth/"
        assert settings.timeseries.address == "127.0.0.1:9009"
        assert settings.timeseries.protocol == "InfluxDB"

    def test_prefixed_environment_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NANOPOOL_ADDRESS", "0xenv")

        assert AppSettings().nanopool.address == "0xenv"

    def test_api_key_is_secret(self) -> None:
        settings = AppSettings(etherscan={"api_key": "hidden"})  # type: ignore[arg-type]

        assert settings.etherscan.api_key.get_secret_value() == "hidden"
        assert "hidden" not in repr(settings)


class TestLoadSettings:
    """Tests for config file loading."""

    def test_reads_config_file(self, tmp_path: Path) -> None:
        config = tmp_path / "mining-tools.env"
        config.write_text(
            "LOG_LEVEL=DEBUG\n"
            "SHARE_RATE_HOURS=12\n"
            "NANOPOOL__ADDRESS=0xfile\n"
            "TIMESERIES__ADDRESS=db.local:9009\n"
        )

        settings = load_settings(str(config))

        assert settings.log_level == "DEBUG"
        assert settings.share_rate_hours == 12
        assert settings.nanopool.address == "0xfile"
        assert settings.timeseries.address == "db.local:9009"

    def test_without_config_file_uses_defaults(self) -> None:
        assert load_settings().share_rate_hours == 24


class TestTimeseriesAddress:
    """Tests for host/port splitting of the ingest address."""

    def test_host_and_port(self) -> None:
        settings = TimeseriesSettings(address="db.local:9010")
        assert settings.host == "db.local"
        assert settings.port == 9010

    def test_port_defaults_to_ilp_port(self) -> None:
        settings = TimeseriesSettings(address="db.local")
        assert settings.host == "db.local"
        assert settings.port == 9009

    def test_non_numeric_port_raises(self) -> None:
        settings = TimeseriesSettings(address="db.local:abc")
        with pytest.raises(TimeseriesError, match="db.local:abc"):
            settings.port
