"""Entity metadata types: semantic data types, columns, table descriptors."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any


class DataType(str, Enum):
    """Semantic scalar kinds a column can hold."""

    BOOLEAN = "boolean"
    DATETIME = "datetime"
    DECIMAL = "decimal"
    DOUBLE = "double"
    FLOAT = "float"
    INT32 = "int32"
    INT64 = "int64"
    STRING = "string"
    TIME_UUID = "time_uuid"
    UNKNOWN = "unknown"


class PipelineMode(str, Enum):
    """Write strategy for an entity."""

    INSERT = "insert"
    UPDATE = "update"
    INSERT_AND_UPDATE = "insert_and_update"


class RecordAccess(str, Enum):
    """How column values are read from a record."""

    ATTRIBUTE = "attribute"
    MAPPING = "mapping"


class TableNamePostfix(str, Enum):
    """Time period suffix appended to the physical table name."""

    NONE = "none"
    TODAY = "today"
    MONDAY = "monday"
    MONTH = "month"


@dataclass(frozen=True)
class Column:
    """A single column: name, semantic type and a bound value accessor."""

    name: str
    data_type: DataType
    accessor: Callable[[Any], Any] = field(compare=False, repr=False)

    def value_of(self, record: Any) -> Any:
        return self.accessor(record)


def _split_names(text: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in text.split(",") if part.strip())


def _normalize_groups(
    groups: str | Sequence[str | Sequence[str]] | None,
) -> tuple[tuple[str, ...], ...]:
    if not groups:
        return ()
    # a bare string is one group, never a sequence of one-letter groups
    if isinstance(groups, str):
        groups = [groups]
    normalized = []
    for group in groups:
        names = _split_names(group) if isinstance(group, str) else tuple(group)
        if names:
            normalized.append(names)
    return tuple(normalized)


def _normalize_columns(columns: str | Sequence[str] | None) -> tuple[str, ...]:
    if not columns:
        return ()
    if isinstance(columns, str):
        return _split_names(columns)
    return tuple(columns)


@dataclass(frozen=True)
class TableInfo:
    """
    Table descriptor for an entity.

    ``indexes`` and ``uniques`` are column groups; each group may be given
    as a comma separated string (``"Url,Fetched"``) or a sequence of names.
    A bare string passed in place of the group list is a single group.
    """

    database: str
    name: str
    indexes: tuple[tuple[str, ...], ...] = ()
    uniques: tuple[tuple[str, ...], ...] = ()
    update_columns: tuple[str, ...] = ()
    postfix: TableNamePostfix = TableNamePostfix.NONE

    def __post_init__(self) -> None:
        object.__setattr__(self, "indexes", _normalize_groups(self.indexes))
        object.__setattr__(self, "uniques", _normalize_groups(self.uniques))
        object.__setattr__(self, "update_columns", _normalize_columns(self.update_columns))

    def calculate_table_name(self, now: date | None = None) -> str:
        """Physical table name, suffixed with the current period if configured."""
        today = now or datetime.now().date()
        if isinstance(today, datetime):
            today = today.date()

        match self.postfix:
            case TableNamePostfix.NONE:
                return self.name
            case TableNamePostfix.TODAY:
                return f"{self.name}_{today:%Y_%m_%d}"
            case TableNamePostfix.MONDAY:
                monday = today - timedelta(days=today.weekday())
                return f"{self.name}_{monday:%Y_%m_%d}"
            case TableNamePostfix.MONTH:
                return f"{self.name}_{today:%Y_%m}_01"


@dataclass(frozen=True)
class EntityDefinition:
    """Everything the pipeline needs to know about one entity."""

    name: str
    entity_type: type
    columns: tuple[Column, ...]
    table: TableInfo | None = None

    def column(self, name: str) -> Column | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None


__all__ = [
    "DataType",
    "PipelineMode",
    "RecordAccess",
    "TableNamePostfix",
    "Column",
    "TableInfo",
    "EntityDefinition",
]
