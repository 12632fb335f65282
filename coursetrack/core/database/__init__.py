"""Database connection module."""

from coursetrack.core.database.async_cassandra import (
    AsyncCassandraConnection,
    init_async_cassandra,
    shutdown_async_cassandra,
)
from coursetrack.core.database.store import STORE_ERRORS, CassandraService


__all__ = [
    "STORE_ERRORS",
    "AsyncCassandraConnection",
    "CassandraService",
    "init_async_cassandra",
    "shutdown_async_cassandra",
]
