"""Store adapters -- the session capability the entity pipeline writes through.

Each adapter is **import-guarded**: the driver is only required at
``connect()`` time, not at import time.

Architecture::

    CassandraSession (cassandra.py)   cassandra-driver Cluster + Session
    CassandraConfig (types.py)        Connection parameters + connection strings

Modules
-------
types           CassandraConfig dataclass
cassandra       CassandraSession adapter (requires cassandra-driver)
"""

from .cassandra import CassandraSession, is_transient_driver_error
from .types import CassandraConfig

__all__ = [
    "CassandraConfig",
    "CassandraSession",
    "is_transient_driver_error",
]
