"""Async Neo4j client for Movie Atlas.

Handles driver lifecycle and scoped transactions.  Each public catalog call
opens exactly one transaction through ``read_transaction()`` (or
``write_transaction()`` for single-edge favorite changes) and the context
manager guarantees commit on success and rollback on every error path.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from loguru import logger
from neo4j import READ_ACCESS, WRITE_ACCESS, AsyncGraphDatabase
from neo4j.exceptions import DriverError, Neo4jError, ServiceUnavailable, SessionExpired

from movie_atlas.errors import StoreError, StoreUnavailable
from movie_atlas.telemetry import get_metrics, get_tracer

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from neo4j import AsyncDriver, AsyncTransaction

    from movie_atlas.settings import AtlasSettings

_tracer = get_tracer(__name__)

# Server status codes that mean the transaction hit its configured timeout.
_TIMEOUT_CODES = (
    "Neo.ClientError.Transaction.TransactionTimedOut",
    "Neo.ClientError.Transaction.TransactionTimedOutClientConfiguration",
    "Neo.TransientError.Transaction.LockClientStopped",
)


def to_store_error(exc: Exception) -> StoreError:
    """Map a driver/server exception onto the catalog error taxonomy."""
    if isinstance(exc, ServiceUnavailable | SessionExpired):
        return StoreUnavailable(f"Graph store unavailable: {exc}")
    code = getattr(exc, "code", None) or ""
    if code in _TIMEOUT_CODES:
        return StoreUnavailable(f"Graph store timed out: {exc}")
    return StoreError(str(exc))


class GraphTransaction:
    """Handle on one open transaction: runs parameterized Cypher, yields plain dict rows."""

    def __init__(self, tx: AsyncTransaction) -> None:
        self._tx = tx

    async def run(self, query: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run *query* and return every row as a dict."""
        with _tracer.start_as_current_span("graph.query", attributes={"db.statement": query[:200]}):
            result = await self._tx.run(query, params or {})  # type: ignore[arg-type]  # dynamic Cypher
            return [dict(record) async for record in result]

    async def single(self, query: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """Run *query* and return its first row, or ``None`` when it matched nothing."""
        rows = await self.run(query, params)
        return rows[0] if rows else None


class GraphClient:
    """Async Neo4j client wrapping the Bolt driver.

    Lifecycle: construct → ping → use → close.  The driver owns the
    connection pool; transactions are never shared between calls.
    """

    def __init__(self, settings: AtlasSettings) -> None:
        neo = settings.neo4j
        self._uri = neo.uri
        self._database = neo.database
        auth = (neo.username, neo.password) if neo.username else None
        self._driver: AsyncDriver = AsyncGraphDatabase.driver(
            self._uri,
            auth=auth,
            connection_timeout=neo.connection_timeout_s,
            max_connection_pool_size=neo.max_connection_pool_size,
        )
        self._query_timeout_s = neo.query_timeout_s
        self._write_timeout_s = neo.write_timeout_s
        logger.debug("Graph driver created for {} (database={})", self._uri, self._database)

    @property
    def uri(self) -> str:
        return self._uri

    @asynccontextmanager
    async def read_transaction(self) -> AsyncIterator[GraphTransaction]:
        """Open a read-only transaction; commit on exit, roll back on error."""
        async with self._transaction(READ_ACCESS, self._query_timeout_s) as tx:
            yield tx

    @asynccontextmanager
    async def write_transaction(self) -> AsyncIterator[GraphTransaction]:
        """Open a write transaction; commit on exit, roll back on error."""
        async with self._transaction(WRITE_ACCESS, self._write_timeout_s) as tx:
            yield tx

    @asynccontextmanager
    async def _transaction(self, access_mode: str, timeout_s: float) -> AsyncIterator[GraphTransaction]:
        try:
            async with self._driver.session(database=self._database, default_access_mode=access_mode) as session:
                # The transaction's own context manager commits on clean exit
                # and rolls back when the body raises.
                async with await session.begin_transaction(timeout=timeout_s) as tx:
                    yield GraphTransaction(tx)
        except (Neo4jError, DriverError) as exc:
            error = to_store_error(exc)
            get_metrics().store_errors.add(1, {"kind": type(error).__name__})
            logger.warning("Graph store error ({}): {}", type(exc).__name__, exc)
            raise error from exc

    async def ping(self) -> bool:
        """Health check — returns True if the store answers a trivial query."""
        records = await self.execute("RETURN 1 AS n")
        return len(records) == 1 and records[0]["n"] == 1

    async def execute(self, query: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Execute a single read query in its own transaction."""
        async with self.read_transaction() as tx:
            return await tx.run(query, params)

    async def execute_write(self, query: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Execute a single write query in its own transaction.

        Rows are fully consumed so server-side errors (e.g. constraint
        violations) surface here instead of being dropped.
        """
        async with self.write_transaction() as tx:
            return await tx.run(query, params)

    async def close(self) -> None:
        """Close the driver and its connection pool."""
        await self._driver.close()
        logger.debug("Graph driver closed for {}", self._uri)
