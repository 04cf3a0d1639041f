"""
Entity models for the wide-column pipeline.

An entity is a pydantic model deriving from :class:`CassandraEntity` and
decorated with :func:`table`.  :func:`define_entity` turns the class into an
:class:`EntityDefinition`: one :class:`Column` per model field, in declaration
order, each with a value accessor bound once.

Examples:
    >>> @table("crawl", "pages", indexes=["Url"])
    ... class Page(CassandraEntity):
    ...     Url: str
    ...     Fetched: bool = False
    >>> definition = define_entity(Page)
    >>> [c.name for c in definition.columns]
    ['Id', 'Url', 'Fetched']

Guardrails:
    ❌ DON'T: Read record fields with getattr(record, name) in the write loop
    ✅ DO: Use the accessor stored on each Column
"""

from __future__ import annotations

import types
import typing
from collections.abc import Callable, Sequence
from datetime import datetime
from decimal import Decimal
from operator import attrgetter, itemgetter
from typing import Annotated, Any, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

from columnspine.core.errors import ConfigError

from .types import (
    Column,
    DataType,
    EntityDefinition,
    RecordAccess,
    TableInfo,
    TableNamePostfix,
)

M = TypeVar("M", bound=type)

NIL_UUID = UUID(int=0)


class _UnsetId:
    """Marker for an id the pipeline should generate."""

    _instance: _UnsetId | None = None

    def __new__(cls) -> _UnsetId:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET_ID"

    def __bool__(self) -> bool:
        return False


UNSET_ID = _UnsetId()

TimeUUID = Annotated[UUID, DataType.TIME_UUID]
Int32 = Annotated[int, DataType.INT32]
Float32 = Annotated[float, DataType.FLOAT]

_PYTHON_TYPES: dict[type, DataType] = {
    bool: DataType.BOOLEAN,
    datetime: DataType.DATETIME,
    Decimal: DataType.DECIMAL,
    float: DataType.DOUBLE,
    int: DataType.INT64,
    str: DataType.STRING,
    UUID: DataType.TIME_UUID,
}


class CassandraEntity(BaseModel):
    """Base class for entities persisted by the wide-column pipeline.

    ``Id`` is the table's primary key.  Leaving it at its default asks the
    pipeline to generate a time-ordered id at write time.
    """

    Id: TimeUUID = Field(default=NIL_UUID)


def is_unset_id(value: Any) -> bool:
    """True for ``None``, :data:`UNSET_ID` and the nil UUID."""
    return value is None or value is UNSET_ID or value == NIL_UUID


def infer_data_type(annotation: Any) -> DataType:
    """Map a field annotation to a semantic :class:`DataType`."""
    if typing.get_origin(annotation) is Annotated:
        base, *extras = typing.get_args(annotation)
        for extra in extras:
            if isinstance(extra, DataType):
                return extra
        return infer_data_type(base)

    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return infer_data_type(args[0])
        return DataType.UNKNOWN

    if origin is None and isinstance(annotation, type):
        # bool before int: bool is an int subclass
        for python_type, data_type in _PYTHON_TYPES.items():
            if annotation is python_type:
                return data_type
        for python_type, data_type in _PYTHON_TYPES.items():
            if issubclass(annotation, python_type):
                return data_type
    return DataType.UNKNOWN


def table(
    database: str,
    name: str,
    *,
    indexes: str | Sequence[str | Sequence[str]] = (),
    uniques: str | Sequence[str | Sequence[str]] = (),
    update_columns: str | Sequence[str] = (),
    postfix: TableNamePostfix = TableNamePostfix.NONE,
) -> Callable[[M], M]:
    """Class decorator attaching a :class:`TableInfo` to an entity model."""

    def decorator(cls: M) -> M:
        cls.__table__ = TableInfo(
            database=database,
            name=name,
            indexes=indexes,
            uniques=uniques,
            update_columns=update_columns,
            postfix=postfix,
        )
        return cls

    return decorator


def _accessor(field_name: str, access: RecordAccess) -> Callable[[Any], Any]:
    if access is RecordAccess.MAPPING:
        return itemgetter(field_name)
    return attrgetter(field_name)


def define_entity(
    model: type,
    *,
    name: str | None = None,
    access: RecordAccess = RecordAccess.ATTRIBUTE,
) -> EntityDefinition:
    """Derive an :class:`EntityDefinition` from a pydantic model class.

    Column names are the field aliases where set, otherwise the field names.
    With ``RecordAccess.MAPPING`` records are read by column name instead of
    by attribute.
    """
    if not isinstance(model, type) or not issubclass(model, BaseModel):
        raise ConfigError(f"Entity model must be a pydantic model class, got {model!r}")

    columns = []
    for field_name, info in model.model_fields.items():
        column_name = info.alias or field_name
        key = column_name if access is RecordAccess.MAPPING else field_name
        annotation: Any = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        columns.append(
            Column(
                name=column_name,
                data_type=infer_data_type(annotation),
                accessor=_accessor(key, access),
            )
        )

    return EntityDefinition(
        name=name or model.__name__,
        entity_type=model,
        columns=tuple(columns),
        table=getattr(model, "__table__", None),
    )


__all__ = [
    "NIL_UUID",
    "UNSET_ID",
    "TimeUUID",
    "Int32",
    "Float32",
    "CassandraEntity",
    "is_unset_id",
    "infer_data_type",
    "table",
    "define_entity",
]
