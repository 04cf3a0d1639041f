"""Entity pipeline persisting extracted records into Cassandra.

Lifecycle::

    pipeline = CassandraEntityPipeline("Host=10.0.0.1;Port=9042")
    pipeline.add_entity(define_entity(Page))     # derive columns + CQL
    pipeline.init()                               # keyspace, table, indexes
    pipeline.process("Page", pages)               # one atomic batch per call
    pipeline.dispose()                            # close session, clear registry

Each ``process`` call builds its own batch; the only state shared between
concurrent calls is the session, whose thread-safety is documented on
:class:`~columnspine.adapters.CassandraSession`.
"""

from __future__ import annotations

import uuid
import warnings
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from columnspine.adapters.cassandra import CassandraSession, is_transient_driver_error
from columnspine.adapters.types import CassandraConfig
from columnspine.core.channels import (
    DEFAULT_CHANNEL,
    InlineWriteChannel,
    SerialWriteChannel,
    WriteChannel,
)
from columnspine.core.errors import (
    ConfigError,
    MissingSchemaWarning,
    PipelineStateError,
    UnsupportedOperationError,
    error_fields,
    is_retryable,
)
from columnspine.core.logging import LogContext, get_logger
from columnspine.core.retry import ExponentialBackoff
from columnspine.core.settings import ColumnSpineSettings, get_settings
from columnspine.entities.model import CassandraEntity, define_entity, is_unset_id
from columnspine.entities.types import DataType, EntityDefinition, PipelineMode

from .base import BaseEntityPipeline, EntityAdapter
from .cql import (
    PRIMARY_KEY,
    build_statements,
    create_index_statements,
    create_table_statement,
)

logger = get_logger(__name__)


def _is_transient(error: Exception) -> bool:
    return is_retryable(error) or is_transient_driver_error(error)


class CassandraEntityPipeline(BaseEntityPipeline):
    """
    Persists entity records into a wide-column store.

    Args:
        config: Connection config or a ``Key=Value;`` connection string.
        session: An already built session capability; created from ``config``
            on ``init()`` when omitted.
        default_pipeline_mode: Mode for entities without update columns.
            ``PipelineMode.UPDATE`` is rejected.
        serialize_writes: Route writes through a serialized, retrying channel.
        write_retries: Retries for transient failures when serializing writes.
        channel: Explicit write channel; overrides ``serialize_writes``.
        id_factory: Generator for time-ordered ids of unset ``TIME_UUID`` columns.
        clock: Current time, used to resolve postfixed table names at
            registration.
    """

    def __init__(
        self,
        config: CassandraConfig | str | None = None,
        *,
        session: Any = None,
        default_pipeline_mode: PipelineMode = PipelineMode.INSERT,
        serialize_writes: bool = False,
        write_retries: int = 3,
        channel: WriteChannel | None = None,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid1,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__()
        if isinstance(config, str):
            config = CassandraConfig.from_connection_string(config)
        self._config = config or CassandraConfig()
        self._session = session
        self._default_pipeline_mode = PipelineMode.INSERT
        self.default_pipeline_mode = default_pipeline_mode
        self._id_factory = id_factory
        self._clock = clock

        if channel is not None:
            self._channel: WriteChannel = channel
        elif serialize_writes:
            self._channel = SerialWriteChannel(
                ExponentialBackoff(max_retries=write_retries, retry_on=_is_transient)
            )
        else:
            self._channel = InlineWriteChannel()

    @classmethod
    def from_settings(
        cls, settings: ColumnSpineSettings | None = None, **kwargs: Any
    ) -> CassandraEntityPipeline:
        """Build a pipeline from environment settings."""
        settings = settings or get_settings()
        if settings.connection_string:
            config = CassandraConfig.from_connection_string(settings.connection_string)
            # a factor inside the connection string wins over the settings default
            if "replication_factor" in settings.model_fields_set:
                config.replication_factor = settings.replication_factor
        else:
            config = CassandraConfig(
                contact_points=list(settings.contact_points),
                port=settings.port,
                username=settings.username,
                password=settings.password,
                replication_factor=settings.replication_factor,
            )
        config.connect_timeout = settings.connect_timeout
        return cls(
            config,
            default_pipeline_mode=settings.default_pipeline_mode,
            serialize_writes=settings.serialize_writes,
            write_retries=settings.write_retries,
            **kwargs,
        )

    @property
    def default_pipeline_mode(self) -> PipelineMode:
        return self._default_pipeline_mode

    @default_pipeline_mode.setter
    def default_pipeline_mode(self, value: PipelineMode) -> None:
        value = PipelineMode(value)
        if value is PipelineMode.UPDATE:
            raise ConfigError("Can not set pipeline mode to update")
        self._default_pipeline_mode = value

    @property
    def session(self) -> Any:
        return self._session

    # ── Registration ─────────────────────────────────────────────

    def add_entity(self, definition: EntityDefinition | type | None) -> None:
        """Register an entity definition (or a ``CassandraEntity`` model class)."""
        if definition is None:
            raise ConfigError("Should not add a null entity to an entity pipeline")

        if isinstance(definition, type):
            definition = define_entity(definition)

        if not isinstance(definition, EntityDefinition):
            raise ConfigError(f"Expected an EntityDefinition, got {type(definition).__name__}")

        entity_type = definition.entity_type
        if not (isinstance(entity_type, type) and issubclass(entity_type, CassandraEntity)):
            raise ConfigError("Cassandra pipeline only supports CassandraEntity").with_context(
                entity=definition.name
            )

        if definition.table is None:
            message = f"Schema is necessary, skip {type(self).__name__} for {definition.name}"
            warnings.warn(MissingSchemaWarning(message), stacklevel=2)
            logger.warning(
                "entity_skipped_missing_schema",
                entity=definition.name,
                pipeline=type(self).__name__,
            )
            return

        if definition.column(PRIMARY_KEY) is None:
            raise ConfigError(
                f"Entity {definition.name} has no '{PRIMARY_KEY}' column"
            ).with_context(entity=definition.name)

        if definition.table.update_columns:
            mode = PipelineMode.UPDATE
        else:
            mode = self.default_pipeline_mode

        adapter = EntityAdapter(
            name=definition.name,
            table=definition.table,
            columns=definition.columns,
            pipeline_mode=mode,
            table_name=definition.table.calculate_table_name(self._clock()),
        )
        build_statements(adapter)

        replaced = adapter.name in self.registry
        self.registry.register(adapter)
        logger.info(
            "entity_registered",
            entity=adapter.name,
            keyspace=adapter.table.database,
            table=adapter.table_name,
            mode=mode.value,
            columns=len(adapter.columns),
            replaced=replaced,
        )

    # ── Schema lifecycle ─────────────────────────────────────────

    def init(self) -> None:
        """Connect (once) and provision keyspace, table and indexes per entity.

        Entities are provisioned independently in registration order; the
        first failure is raised after every entity has been attempted.
        """
        if self._session is None:
            self._session = CassandraSession(self._config)
        self._session.connect()

        failures: list[Exception] = []
        for adapter in self.registry:
            try:
                self._provision(adapter)
            except Exception as e:
                logger.error(
                    "schema_provision_failed",
                    entity=adapter.name,
                    keyspace=adapter.table.database,
                    **error_fields(e),
                )
                failures.append(e)

        if failures:
            raise failures[0]

    def _provision(self, adapter: EntityAdapter) -> None:
        create_table = create_table_statement(adapter)
        create_indexes = create_index_statements(adapter)
        keyspace = adapter.table.database

        with LogContext(entity=adapter.name, keyspace=keyspace):
            self._session.create_keyspace_if_not_exists(keyspace)
            self._session.change_keyspace(keyspace)
            self._session.execute(create_table)
            for statement in create_indexes:
                self._session.execute(statement)
            logger.info(
                "schema_provisioned",
                table=adapter.table_name,
                indexes=len(create_indexes),
            )

    def dispose(self) -> None:
        """Close the session and clear the registry."""
        if self._session is not None:
            self._session.close()
            self._session = None
        super().dispose()

    # ── Writes ───────────────────────────────────────────────────

    def process(self, name: str, records: Iterable[Any] | None) -> int:
        """Write ``records`` of entity ``name`` as one atomic batch.

        Returns:
            The number of records submitted; unregistered entities are a
            no-op that still reports the input count.

        Raises:
            UnsupportedOperationError: the entity's mode is insert-and-update.
            PipelineStateError: the pipeline has not been initialised.
        """
        if records is None:
            return 0

        records = list(records)
        adapter = self.registry.get(name)
        if adapter is None:
            return len(records)

        if adapter.pipeline_mode is PipelineMode.INSERT_AND_UPDATE:
            raise UnsupportedOperationError(
                "Cassandra does not support insert-and-update pipelines yet"
            ).with_context(entity=name)

        if not records:
            return 0

        session = self._session
        if session is None:
            raise PipelineStateError(
                f"Pipeline is not initialised, can not write {name}"
            ).with_context(entity=name)

        def write_batch() -> None:
            prepared = session.prepare(adapter.insert_statement)
            batch = session.batch()
            for record in records:
                batch.add(prepared.bind(self._bind_values(adapter, record)))
            session.execute(batch)

        self._channel.execute(DEFAULT_CHANNEL, write_batch)
        logger.debug("batch_written", entity=name, records=len(records))
        return len(records)

    def _bind_values(self, adapter: EntityAdapter, record: Any) -> list[Any]:
        values = []
        for column in adapter.columns:
            value = column.value_of(record)
            if column.data_type is DataType.TIME_UUID and is_unset_id(value):
                value = self._id_factory()
            values.append(value)
        return values


__all__ = [
    "CassandraEntityPipeline",
]
