"""CQL statement generation for entity adapters.

Examples:
    >>> cql_type(DataType.INT64)
    'bigint'
    >>> insert_statement(adapter)
    'INSERT INTO pages (Id, Url, Fetched) VALUES (?, ?, ?);'
"""

from __future__ import annotations

from columnspine.core.errors import UnsupportedOperationError
from columnspine.entities.types import DataType, PipelineMode

from .base import EntityAdapter

PRIMARY_KEY = "Id"

_CQL_TYPES: dict[DataType, str] = {
    DataType.BOOLEAN: "boolean",
    DataType.DATETIME: "timestamp",
    DataType.DECIMAL: "decimal",
    DataType.DOUBLE: "double",
    DataType.FLOAT: "float",
    DataType.INT32: "int",
    DataType.INT64: "bigint",
    DataType.STRING: "text",
    DataType.TIME_UUID: "uuid",
}


def cql_type(data_type: DataType | None) -> str:
    """Physical column type; ``text`` for anything unrecognized."""
    return _CQL_TYPES.get(data_type, "text")


def insert_statement(adapter: EntityAdapter) -> str:
    table_name = adapter.table_name
    columns = ", ".join(adapter.column_names)
    placeholders = ", ".join("?" for _ in adapter.columns)
    return f"INSERT INTO {table_name} ({columns}) VALUES ({placeholders});"


def create_table_statement(adapter: EntityAdapter) -> str:
    table_name = adapter.table_name
    columns = ", ".join(f"{column.name} {cql_type(column.data_type)} " for column in adapter.columns)
    return (
        f"CREATE TABLE IF NOT EXISTS {adapter.table.database}.{table_name} "
        f"({columns}, PRIMARY KEY({PRIMARY_KEY}))"
    )


def create_index_statements(adapter: EntityAdapter) -> list[str]:
    """One statement per index group.

    Raises:
        UnsupportedOperationError: if the table declares uniqueness groups.
    """
    if adapter.table.uniques:
        raise UnsupportedOperationError(
            "Cassandra does not support unique indexes"
        ).with_context(entity=adapter.name, table=adapter.table_name)

    table_name = adapter.table_name
    statements = []
    for group in adapter.table.indexes:
        index_name = "_".join(group)
        statements.append(
            f"CREATE INDEX IF NOT EXISTS {index_name} "
            f"ON {adapter.table.database}.{table_name}({', '.join(group)});"
        )
    return statements


def update_statement(adapter: EntityAdapter) -> None:
    """Selective updates are not generated for this store."""
    return None


def select_statement(adapter: EntityAdapter) -> None:
    """Read-back is not generated for this store."""
    return None


def build_statements(adapter: EntityAdapter) -> None:
    """Attach the insert/update/select templates to ``adapter``."""
    if adapter.pipeline_mode is PipelineMode.INSERT_AND_UPDATE:
        raise UnsupportedOperationError(
            "Cassandra does not support insert-and-update pipelines yet"
        ).with_context(entity=adapter.name)

    adapter.insert_statement = insert_statement(adapter)
    if adapter.pipeline_mode is PipelineMode.UPDATE:
        adapter.update_statement = update_statement(adapter)
    adapter.select_statement = select_statement(adapter)


__all__ = [
    "PRIMARY_KEY",
    "cql_type",
    "insert_statement",
    "create_table_statement",
    "create_index_statements",
    "update_statement",
    "select_statement",
    "build_statements",
]
