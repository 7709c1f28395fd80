"""
FalkorDB graph store for the relationship engine.

Every query borrows a connection from a blocking Redis connection pool for
the duration of that query only; nothing holds a session across requests.
FalkorDB executes each Cypher query atomically, so a query is the unit of
transaction: repositories express multi-edge mutations as one query.

All values leaving this module pass through normalize_value(), so callers
only ever see plain Python types.
"""

import logging
import numbers
from typing import Any

from falkordb import Edge, Node, Path
from falkordb.asyncio import FalkorDB
from redis.asyncio import BlockingConnectionPool
from redis.exceptions import RedisError

from circle.adapter.error import GraphStoreError

from .schema import SCHEMA_STATEMENTS

logger = logging.getLogger(__name__)


def normalize_value(value: Any) -> Any:
    """Convert a driver value into plain Python data.

    - integral numbers become int, other reals become float
    - nodes and edges become their property dicts
    - paths become the list of their nodes' property dicts
    - lists and maps are normalized recursively
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, (Node, Edge)):
        return {key: normalize_value(v) for key, v in value.properties.items()}
    if isinstance(value, Path):
        return [normalize_value(node) for node in value.nodes()]
    if isinstance(value, dict):
        return {key: normalize_value(v) for key, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_value(v) for v in value]
    return value


def normalize_rows(rows: list[list[Any]]) -> list[list[Any]]:
    """Normalize every cell of a result set."""
    return [[normalize_value(cell) for cell in row] for row in rows]


class GraphStore:
    """
    Async FalkorDB client shared by all repositories.

    Owns the connection pool; the pool is the only process-wide resource.
    Construction is cheap and offline; nothing touches the server until
    initialize() runs.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: str | None = None,
        graph_name: str = "circle",
        max_connections: int = 16,
    ):
        self.host = host
        self.port = port
        self.password = password
        self.graph_name = graph_name
        self.max_connections = max_connections

        # Set by initialize(), cleared by close()
        self._pool: BlockingConnectionPool | None = None
        self._db: FalkorDB | None = None
        self._graph = None
        self._initialized = False

    def _open_pool(self) -> BlockingConnectionPool:
        # Callers queue for a free connection instead of failing when the
        # pool is exhausted
        return BlockingConnectionPool(
            host=self.host,
            port=self.port,
            password=self.password,
            max_connections=self.max_connections,
            timeout=None,
            decode_responses=True,
        )

    async def _apply_schema(self) -> None:
        """Create the indices; re-running against an indexed graph is a no-op."""
        for statement in SCHEMA_STATEMENTS:
            try:
                await self._graph.query(statement)
            except RedisError as e:
                if "already indexed" in str(e).lower():
                    continue
                logger.warning(
                    f"Schema statement rejected: {e}",
                    extra={"statement": statement},
                )

    async def initialize(self) -> None:
        """Connect to FalkorDB and make sure the schema is in place.

        Safe to call more than once; later calls return immediately.
        """
        if self._initialized:
            return

        self._pool = self._open_pool()
        self._db = FalkorDB(connection_pool=self._pool)
        self._graph = self._db.select_graph(self.graph_name)
        await self._apply_schema()

        self._initialized = True
        logger.info(
            "GraphStore ready",
            extra={
                "host": self.host,
                "port": self.port,
                "graph": self.graph_name,
                "max_connections": self.max_connections,
            },
        )

    @property
    def graph(self):
        """The selected graph; only available after initialize()."""
        if self._graph is None:
            raise RuntimeError("GraphStore not initialized. Call initialize() first.")
        return self._graph

    async def query(
        self, cypher: str, params: dict[str, Any] | None = None
    ) -> list[list[Any]]:
        """Run a write query atomically.

        Args:
            cypher: Cypher statement
            params: Query parameters

        Returns:
            Normalized result rows

        Raises:
            GraphStoreError: If the database rejects the query
        """
        try:
            result = await self.graph.query(cypher, params=params or {})
        except RedisError as e:
            logger.error(f"Graph write failed: {e}", extra={"cypher": cypher})
            raise GraphStoreError(str(e)) from e
        return normalize_rows(result.result_set)

    async def read(
        self, cypher: str, params: dict[str, Any] | None = None
    ) -> list[list[Any]]:
        """Run a read-only query.

        Args:
            cypher: Cypher statement
            params: Query parameters

        Returns:
            Normalized result rows

        Raises:
            GraphStoreError: If the database rejects the query
        """
        try:
            result = await self.graph.ro_query(cypher, params=params or {})
        except RedisError as e:
            logger.error(f"Graph read failed: {e}", extra={"cypher": cypher})
            raise GraphStoreError(str(e)) from e
        return normalize_rows(result.result_set)

    async def scalar(
        self, cypher: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Run a read-only query and return the first cell, or None."""
        rows = await self.read(cypher, params)
        if not rows or not rows[0]:
            return None
        return rows[0][0]

    async def close(self) -> None:
        """Release the connection pool."""
        if self._pool is not None:
            await self._pool.aclose()
        self._pool = None
        self._db = None
        self._graph = None
        self._initialized = False
        logger.info("GraphStore closed")
