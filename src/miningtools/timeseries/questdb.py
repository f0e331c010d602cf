"""QuestDB client: ILP ingest over TCP and SQL queries over HTTP.

QuestDB accepts InfluxDB line protocol on a raw TCP socket (port 9009 by
default) and never answers on that socket, so a successful write is the only
acknowledgement available. Queries go through the REST ``/exec`` endpoint,
which reports SQL errors in the JSON body rather than via status code.
"""

import socket
from dataclasses import dataclass, field
from typing import Any

import requests

from miningtools.config import TimeseriesSettings
from miningtools.exceptions import TimeseriesError
from miningtools.logging import get_logger
from miningtools.timeseries.metrics import FinancialMetric, PoolMetric

logger = get_logger(__name__)

SUPPORTED_PROTOCOLS = ("InfluxDB",)

METRIC_TABLES: dict[str, type[PoolMetric] | type[FinancialMetric]] = {
    "pool": PoolMetric,
    "financial": FinancialMetric,
}


@dataclass
class QueryResult:
    """Successful ``/exec`` response."""

    query: str
    columns: list[dict] = field(default_factory=list)
    dataset: list[list[Any]] = field(default_factory=list)
    count: int = 0


class QuestDBClient:
    """Writes line-protocol payloads to QuestDB and runs read queries.

    Args:
        settings: ILP address, query URL, protocol and timeout.
        session: Optional pre-built HTTP session for queries.
    """

    def __init__(
        self,
        settings: TimeseriesSettings,
        session: requests.Session | None = None,
    ) -> None:
        if settings.protocol not in SUPPORTED_PROTOCOLS:
            raise TimeseriesError(f"Unsupported time-series protocol: {settings.protocol}")
        self._settings = settings
        self._session = session or requests.Session()

    def close(self) -> None:
        self._session.close()

    def insert(self, payload: bytes) -> None:
        """Send a line-protocol payload in one TCP connection.

        Raises:
            TimeseriesError: If the connection or the write fails.
        """
        if not payload:
            logger.info("questdb_insert_skipped", reason="empty_payload")
            return

        address = (self._settings.host, self._settings.port)
        logger.debug("questdb_insert", address=self._settings.address, payload=payload.decode())
        try:
            with socket.create_connection(
                address, timeout=self._settings.timeout_seconds
            ) as conn:
                conn.sendall(payload)
        except OSError as e:
            logger.error("questdb_insert_failed", address=self._settings.address, error=str(e))
            raise TimeseriesError(f"Insert to {self._settings.address} failed: {e}") from e
        logger.info("questdb_insert_complete", lines=payload.count(b"\n"))

    def query(self, sql: str) -> QueryResult:
        """Run a SQL query through the ``/exec`` endpoint.

        Raises:
            TimeseriesError: On transport failure or an error response body.
        """
        url = self._settings.query_url.rstrip("/") + "/exec"
        logger.debug("questdb_query", url=url, query=sql)
        try:
            response = self._session.get(
                url, params={"query": sql}, timeout=self._settings.timeout_seconds
            )
            body = response.json()
        except requests.exceptions.RequestException as e:
            raise TimeseriesError(f"Query '{sql}' failed: {e}") from e
        except ValueError as e:
            raise TimeseriesError(f"Query '{sql}' returned invalid JSON") from e

        if body.get("error"):
            logger.error(
                "questdb_query_error",
                query=sql,
                error=body["error"],
                position=body.get("position"),
            )
            raise TimeseriesError(f"Query '{sql}' failed with error: {body['error']}")

        return QueryResult(
            query=body.get("query", sql),
            columns=body.get("columns") or [],
            dataset=body.get("dataset") or [],
            count=int(body.get("count") or 0),
        )

    def fetch_latest(self, table: str) -> list[PoolMetric | FinancialMetric]:
        """Return the latest metric per location stored in ``table``.

        Raises:
            TimeseriesError: If ``table`` is not a known metric table or the
                query fails.
        """
        metric_cls = METRIC_TABLES.get(table)
        if metric_cls is None:
            raise TimeseriesError(f"Unexpected table name: {table}")
        result = self.query(f"{table} LATEST BY location")
        return [metric_cls.from_questdb(result.columns, row) for row in result.dataset]
