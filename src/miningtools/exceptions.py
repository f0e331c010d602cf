"""Custom exceptions for mining-tools.

Pool, explorer, time-series and computation errors all live here
to avoid circular imports between modules.
"""


class MiningToolsError(Exception):
    """Base exception for all mining-tools errors."""


class InvalidWindow(MiningToolsError):
    """Raised when an hourly rate window resolves to zero or negative hours."""


class InvalidInput(MiningToolsError):
    """Raised when a computation receives malformed input (e.g. negative shares)."""


class PoolAPIError(MiningToolsError):
    """Raised when the mining pool API is unreachable or returns an error response."""


class ExplorerAPIError(MiningToolsError):
    """Raised when the blockchain explorer API fails or rejects a balance query."""


class TimeseriesError(MiningToolsError):
    """Raised when the time-series database rejects an insert or query."""


class ShareSampleNotFound(MiningToolsError):
    """Raised when the share rate history has no sample for the requested bucket."""
