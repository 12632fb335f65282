"""Base class for Cassandra-backed services.

Wraps ``session.aexecute`` with the store error policy: reads are retried
once on a driver error, writes are never retried. Both surface
``PersistenceError`` when the store cannot complete the statement.
"""

from typing import TYPE_CHECKING, Any

import structlog
from cassandra import DriverException
from cassandra.cluster import NoHostAvailable

from coursetrack.core.errors import PersistenceError


if TYPE_CHECKING:
    from cassandra.cluster import Session

logger = structlog.get_logger(__name__)

STORE_ERRORS = (DriverException, NoHostAvailable)


class CassandraService:
    """Service holding a Cassandra session and its prepared statements."""

    def __init__(self, session: "Session", keyspace: str):
        """Initialize with Cassandra session."""
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient execution."""

    async def _read(self, statement: Any, params: list[Any] | None = None) -> Any:
        """Execute a read, retrying once before giving up."""
        try:
            return await self.session.aexecute(statement, params)
        except STORE_ERRORS as first_error:
            logger.warning("store_read_retry", error=str(first_error))
            try:
                return await self.session.aexecute(statement, params)
            except STORE_ERRORS as e:
                logger.error("store_read_failed", error=str(e))
                msg = "The data could not be loaded, please retry"
                raise PersistenceError(msg) from e

    async def _write(
        self,
        statement: Any,
        params: list[Any] | None = None,
        *,
        operation: str,
    ) -> Any:
        """Execute a mutation exactly once.

        Single-row statements and LOGGED batches either apply fully or not
        at all, so a failure here leaves prior state intact.
        """
        try:
            return await self.session.aexecute(statement, params)
        except STORE_ERRORS as e:
            logger.error("store_write_failed", operation=operation, error=str(e))
            raise PersistenceError from e
