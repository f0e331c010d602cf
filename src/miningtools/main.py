"""Command-line entry point for mining-tools.

Commands:
- ``nanopool general-info`` prints the pool account summary as JSON, with
  optional reward-per-share, shares-per-hour and reward-per-hour.
- ``metrics`` collects pool and wallet metrics and ships them to the
  time-series database as line protocol (or prints them with ``--dryrun``).

Settings come from the environment and an env-style config file
(``--config``); command-line flags override them.
"""

import argparse
import sys

from pydantic import ValidationError

from miningtools.collectors import MetricsCollector
from miningtools.config import AppSettings, load_settings
from miningtools.exceptions import MiningToolsError
from miningtools.explorer.etherscan_client import EtherscanClient
from miningtools.logging import get_logger, setup_logging
from miningtools.pool.nanopool_client import NanopoolClient
from miningtools.reports import GeneralInfoService, render_report
from miningtools.timeseries.questdb import QuestDBClient


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all commands and flags."""
    parser = argparse.ArgumentParser(
        prog="mining-tools",
        description="Report mining pool account statistics and ship them as metrics.",
    )
    parser.add_argument("--config", help="env-style config file (default: ./.env)")
    parser.add_argument("--log", dest="log_file", help="append log records to this file")
    parser.add_argument("--log-level", help="log level name, e.g. DEBUG or INFO")
    parser.add_argument(
        "--timeseries-db",
        "--timeseriesDB",
        dest="timeseries_db",
        help="time-series DB ingest address host:port (default: 127.0.0.1:9009)",
    )
    parser.add_argument(
        "--timeseries-protocol",
        "--timeseriesProtocol",
        dest="timeseries_protocol",
        help="time-series wire protocol (supported: InfluxDB)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    nanopool = commands.add_parser("nanopool", help="query the Nanopool API")
    nanopool.add_argument("--address", help="miner account address")
    nanopool.add_argument(
        "--api-root", "--apiRoot", dest="api_root", help="base URL of the Nanopool API"
    )
    nanopool_commands = nanopool.add_subparsers(dest="nanopool_command", required=True)

    general_info = nanopool_commands.add_parser(
        "general-info",
        aliases=["generalInfo"],
        help="general info of the miner account",
    )
    general_info.add_argument(
        "-r",
        "--reward-per-share",
        "--rewardPerShare",
        dest="reward_per_share",
        action="store_true",
        help="include calculated rewardPerShare (lifetime average)",
    )
    general_info.add_argument(
        "-s",
        "--shares-per-hour",
        "--sharesPerHour",
        dest="shares_per_hour",
        action="store_true",
        help="include calculated sharesPerHour (rolling average)",
    )
    general_info.add_argument(
        "--hours",
        type=int,
        help="sharesPerHour window in hours; 0 uses all history (default: 24)",
    )
    general_info.set_defaults(handler=run_general_info)

    metrics = commands.add_parser("metrics", help="collect and ship time-series metrics")
    metrics.add_argument(
        "-d",
        "--dryrun",
        action="store_true",
        help="print metrics instead of shipping them to the time-series DB",
    )
    metrics.set_defaults(handler=run_metrics)

    return parser


def apply_overrides(settings: AppSettings, args: argparse.Namespace) -> AppSettings:
    """Return a copy of ``settings`` with command-line flags applied."""
    timeseries_updates = {
        key: value
        for key, value in (
            ("address", args.timeseries_db),
            ("protocol", args.timeseries_protocol),
        )
        if value
    }
    nanopool_updates = {
        key: value
        for key, value in (
            ("address", getattr(args, "address", None)),
            ("api_root", getattr(args, "api_root", None)),
        )
        if value
    }
    updates: dict = {
        "timeseries": settings.timeseries.model_copy(update=timeseries_updates),
        "nanopool": settings.nanopool.model_copy(update=nanopool_updates),
    }
    if args.log_level:
        updates["log_level"] = args.log_level
    if args.log_file:
        updates["log_file"] = args.log_file
    return settings.model_copy(update=updates)


def run_general_info(settings: AppSettings, args: argparse.Namespace) -> int:
    """Print the general info report for the configured Nanopool account."""
    hours = args.hours if args.hours is not None else settings.share_rate_hours
    with NanopoolClient(settings.nanopool) as client:
        report = GeneralInfoService(client).build(
            settings.nanopool.address,
            reward_per_share=args.reward_per_share,
            shares_per_hour=args.shares_per_hour,
            hours=hours,
        )
    print(render_report(report))
    return 0


def run_metrics(settings: AppSettings, args: argparse.Namespace) -> int:
    """Collect metrics and insert them, or print them on a dry run."""
    logger = get_logger("miningtools.main")
    pool_client = NanopoolClient(settings.nanopool)
    explorer_client = EtherscanClient(settings.etherscan)
    try:
        payload = MetricsCollector(settings, pool_client, explorer_client).collect_payload()
    finally:
        pool_client.close()
        explorer_client.close()

    if args.dryrun:
        print(f"DRYRUN: Metrics in InfluxDB Line format - {payload.decode()}", end="")
        return 0

    questdb = QuestDBClient(settings.timeseries)
    try:
        questdb.insert(payload)
    finally:
        questdb.close()
    logger.info("metrics_shipped", address=settings.timeseries.address)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging and run the selected command."""
    args = build_parser().parse_args(argv)
    try:
        settings = apply_overrides(load_settings(args.config), args)
    except ValidationError as e:
        setup_logging(args.log_level or "INFO", args.log_file)
        get_logger("miningtools.main").error("settings_invalid", error=str(e))
        return 1

    setup_logging(settings.log_level, settings.log_file)
    logger = get_logger("miningtools.main")
    logger.debug("command_started", command=args.command)

    try:
        return args.handler(settings, args)
    except MiningToolsError as e:
        logger.error("command_failed", command=args.command, error=str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
