"""columnspine -- persist extracted entities into a wide-column store.

Quick start::

    from columnspine import CassandraEntity, CassandraEntityPipeline, table

    @table("crawl", "pages", indexes=["Url"])
    class Page(CassandraEntity):
        Url: str
        Fetched: bool = False

    with CassandraEntityPipeline("Host=127.0.0.1;Port=9042") as pipeline:
        ...

Note: entering the context manager calls ``init()``, so register entities
before entering it.
"""

from columnspine.adapters import CassandraConfig, CassandraSession
from columnspine.core.errors import (
    ColumnSpineError,
    ConfigError,
    MissingSchemaWarning,
    UnsupportedOperationError,
)
from columnspine.entities import (
    NIL_UUID,
    UNSET_ID,
    CassandraEntity,
    DataType,
    EntityDefinition,
    PipelineMode,
    RecordAccess,
    TableInfo,
    TableNamePostfix,
    define_entity,
    table,
)
from columnspine.pipelines import CassandraEntityPipeline

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CassandraConfig",
    "CassandraSession",
    "ColumnSpineError",
    "ConfigError",
    "MissingSchemaWarning",
    "UnsupportedOperationError",
    "NIL_UUID",
    "UNSET_ID",
    "CassandraEntity",
    "DataType",
    "EntityDefinition",
    "PipelineMode",
    "RecordAccess",
    "TableInfo",
    "TableNamePostfix",
    "define_entity",
    "table",
    "CassandraEntityPipeline",
]
