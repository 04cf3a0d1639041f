"""Cassandra / ScyllaDB session adapter.

Wraps ``cassandra.cluster.Cluster`` and its ``Session`` behind the small
surface the entity pipeline needs: keyspace management, statement
preparation, batch creation and execution.

Concurrency contract: one ``CassandraSession`` is shared by every write call
of a pipeline.  The driver's ``Session`` is thread-safe, so ``prepare``,
``batch`` and ``execute`` may be called concurrently; ``connect`` and
``close`` must not race with writes.

The driver is import-guarded: ``cassandra-driver`` is only required at
``connect()`` time.
"""

from __future__ import annotations

from typing import Any

from columnspine.core.errors import ConfigError, DatabaseConnectionError
from columnspine.core.logging import get_logger

from .types import CassandraConfig

logger = get_logger(__name__)


class CassandraSession:
    """
    Store session capability used by the entity pipeline.

    Usage:
        with CassandraSession(CassandraConfig(contact_points=["10.0.0.1"])) as session:
            session.create_keyspace_if_not_exists("crawl")
            session.change_keyspace("crawl")
    """

    thread_safe = True

    def __init__(self, config: CassandraConfig | None = None):
        self._config = config or CassandraConfig()
        self._cluster: Any = None
        self._session: Any = None

    @property
    def config(self) -> CassandraConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        """Whether a driver session is open."""
        return self._session is not None

    @property
    def keyspace(self) -> str | None:
        """Active keyspace of the driver session."""
        if self._session is None:
            return None
        return self._session.keyspace

    def connect(self) -> None:
        """Connect to the cluster. No-op when already connected."""
        if self._session is not None:
            return

        try:
            from cassandra.auth import PlainTextAuthProvider
            from cassandra.cluster import Cluster, NoHostAvailable
        except ImportError:
            raise ConfigError(
                "cassandra-driver is required. Install with: pip install cassandra-driver"
            ) from None

        auth_provider = None
        if self._config.username:
            auth_provider = PlainTextAuthProvider(
                username=self._config.username,
                password=self._config.password or "",
            )

        cluster = Cluster(
            contact_points=self._config.contact_points,
            port=self._config.port,
            auth_provider=auth_provider,
            connect_timeout=self._config.connect_timeout,
            **self._config.options,
        )
        try:
            if self._config.keyspace:
                session = cluster.connect(self._config.keyspace)
            else:
                session = cluster.connect()
        except NoHostAvailable as e:
            cluster.shutdown()
            raise DatabaseConnectionError(
                f"Failed to connect to Cassandra: {e}",
                cause=e,
            ) from e
        except BaseException:
            # e.g. InvalidRequest for an unknown keyspace; the cluster's
            # reactor threads are already running
            cluster.shutdown()
            raise

        self._cluster = cluster
        self._session = session
        logger.info(
            "cassandra_connected",
            contact_points=self._config.contact_points,
            port=self._config.port,
        )

    def close(self) -> None:
        """Shut down the session and cluster."""
        if self._session is not None:
            self._session.shutdown()
            self._session = None
        if self._cluster is not None:
            self._cluster.shutdown()
            self._cluster = None

    def _require_session(self) -> Any:
        if self._session is None:
            self.connect()
        return self._session

    def create_keyspace_if_not_exists(self, keyspace: str) -> None:
        """Create ``keyspace`` with SimpleStrategy replication if it does not exist."""
        self._require_session().execute(
            f"CREATE KEYSPACE IF NOT EXISTS {keyspace} WITH replication = "
            f"{{'class': 'SimpleStrategy', 'replication_factor': {self._config.replication_factor}}}"
        )

    def change_keyspace(self, keyspace: str) -> None:
        """Make ``keyspace`` the session's active keyspace."""
        self._require_session().set_keyspace(keyspace)

    def prepare(self, cql: str) -> Any:
        """Prepare a statement on the cluster."""
        return self._require_session().prepare(cql)

    def batch(self) -> Any:
        """New empty logged (atomic) batch."""
        from cassandra.query import BatchStatement, BatchType

        return BatchStatement(batch_type=BatchType.LOGGED)

    def execute(self, statement: Any, parameters: Any = None) -> Any:
        """Execute a CQL string, prepared/bound statement or batch."""
        return self._require_session().execute(statement, parameters)

    def __enter__(self) -> CassandraSession:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def is_transient_driver_error(error: Exception) -> bool:
    """True for driver errors raised while the cluster is (re)connecting."""
    try:
        from cassandra import OperationTimedOut, Unavailable, WriteTimeout
        from cassandra.cluster import NoHostAvailable
    except ImportError:
        return False
    return isinstance(error, (NoHostAvailable, OperationTimedOut, Unavailable, WriteTimeout))


__all__ = [
    "CassandraSession",
    "is_transient_driver_error",
]
