"""Entity definitions -- the shape of records written to the store.

Modules
-------
types           DataType, PipelineMode, Column, TableInfo, EntityDefinition
model           CassandraEntity base model, @table decorator, define_entity()
"""

from .model import (
    NIL_UUID,
    UNSET_ID,
    CassandraEntity,
    Float32,
    Int32,
    TimeUUID,
    define_entity,
    infer_data_type,
    is_unset_id,
    table,
)
from .types import (
    Column,
    DataType,
    EntityDefinition,
    PipelineMode,
    RecordAccess,
    TableInfo,
    TableNamePostfix,
)

__all__ = [
    # Types
    "Column",
    "DataType",
    "EntityDefinition",
    "PipelineMode",
    "RecordAccess",
    "TableInfo",
    "TableNamePostfix",
    # Model
    "NIL_UUID",
    "UNSET_ID",
    "CassandraEntity",
    "Float32",
    "Int32",
    "TimeUUID",
    "define_entity",
    "infer_data_type",
    "is_unset_id",
    "table",
]
