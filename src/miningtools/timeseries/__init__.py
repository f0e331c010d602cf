"""Time-series sink: line-protocol metric records and the QuestDB client."""

from miningtools.timeseries.metrics import FinancialMetric, PoolMetric, format_number
from miningtools.timeseries.questdb import QueryResult, QuestDBClient

__all__ = [
    "FinancialMetric",
    "PoolMetric",
    "QueryResult",
    "QuestDBClient",
    "format_number",
]
