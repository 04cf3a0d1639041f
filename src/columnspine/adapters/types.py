"""Cluster connection configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from columnspine.core.errors import ConfigError, InvalidConfigError

_KEY_ALIASES = {
    "host": "contact_points",
    "hosts": "contact_points",
    "contact points": "contact_points",
    "port": "port",
    "username": "username",
    "user": "username",
    "user id": "username",
    "uid": "username",
    "password": "password",
    "pwd": "password",
    "keyspace": "keyspace",
    "default keyspace": "keyspace",
    "replication factor": "replication_factor",
}


@dataclass
class CassandraConfig:
    """
    Configuration for a cluster connection.

    ``keyspace`` is optional; the pipeline switches keyspace per entity.
    """

    contact_points: list[str] = field(default_factory=lambda: ["127.0.0.1"])
    port: int = 9042
    username: str | None = None
    password: str | None = None
    keyspace: str | None = None
    replication_factor: int = 1
    connect_timeout: float = 10.0

    # Extra options passed through to cassandra.cluster.Cluster
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_connection_string(cls, connection_string: str) -> CassandraConfig:
        """
        Parse ``Key=Value;`` pairs.

        Usage:
            CassandraConfig.from_connection_string(
                "Host=10.0.0.1,10.0.0.2;Port=9042;Username=app;Password=secret"
            )
        """
        if not connection_string or not connection_string.strip():
            raise ConfigError("Connection string is empty")

        values: dict[str, Any] = {}
        for part in connection_string.split(";"):
            part = part.strip()
            if not part:
                continue
            key, sep, value = part.partition("=")
            if not sep:
                raise InvalidConfigError("connection_string", part, f"Malformed connection string segment: {part!r}")
            attr = _KEY_ALIASES.get(key.strip().lower())
            if attr is None:
                raise InvalidConfigError("connection_string", key.strip(), f"Unknown connection string key: {key.strip()!r}")
            values[attr] = value.strip()

        if "contact_points" in values:
            values["contact_points"] = [h.strip() for h in values["contact_points"].split(",") if h.strip()]
            if not values["contact_points"]:
                raise InvalidConfigError("Host", "", "Connection string names no hosts")
        for int_key in ("port", "replication_factor"):
            if int_key in values:
                try:
                    values[int_key] = int(values[int_key])
                except ValueError:
                    raise InvalidConfigError(int_key, values[int_key]) from None

        return cls(**values)

    def to_connection_string(self) -> str:
        """Generate a connection string accepted by :meth:`from_connection_string`.

        Every field the connection string grammar knows is carried;
        ``connect_timeout`` and ``options`` are not.
        """
        parts = [f"Host={','.join(self.contact_points)}", f"Port={self.port}"]
        if self.username:
            parts.append(f"Username={self.username}")
        if self.password:
            parts.append(f"Password={self.password}")
        if self.keyspace:
            parts.append(f"Keyspace={self.keyspace}")
        if self.replication_factor != 1:
            parts.append(f"Replication Factor={self.replication_factor}")
        return ";".join(parts) + ";"


__all__ = [
    "CassandraConfig",
]
