"""Mining pool client layer -- Nanopool API integration via requests."""

from miningtools.pool.client import PoolClient
from miningtools.pool.nanopool_client import NanopoolClient

__all__ = ["NanopoolClient", "PoolClient"]
