"""Entity pipelines -- persist extracted records and provision their schema.

Modules
-------
base            EntityAdapter, EntityRegistry, BaseEntityPipeline
cql             Type mapping and CQL statement generation
cassandra       CassandraEntityPipeline
"""

from .base import BaseEntityPipeline, EntityAdapter, EntityRegistry
from .cassandra import CassandraEntityPipeline
from .cql import (
    build_statements,
    cql_type,
    create_index_statements,
    create_table_statement,
    insert_statement,
)

__all__ = [
    "BaseEntityPipeline",
    "EntityAdapter",
    "EntityRegistry",
    "CassandraEntityPipeline",
    "build_statements",
    "cql_type",
    "create_index_statements",
    "create_table_statement",
    "insert_statement",
]
