"""Tests for ``columnspine.entities.model``: entity models and definitions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID, uuid1

import pytest
from pydantic import Field

from columnspine.core.errors import ConfigError
from columnspine.entities import (
    NIL_UUID,
    UNSET_ID,
    CassandraEntity,
    DataType,
    Float32,
    Int32,
    RecordAccess,
    TableInfo,
    define_entity,
    infer_data_type,
    is_unset_id,
    table,
)
from tests._support.entities import Article, Draft, Page, Sample, Stock


class TestInferDataType:
    @pytest.mark.parametrize(
        ("annotation", "expected"),
        [
            (bool, DataType.BOOLEAN),
            (datetime, DataType.DATETIME),
            (Decimal, DataType.DECIMAL),
            (float, DataType.DOUBLE),
            (int, DataType.INT64),
            (str, DataType.STRING),
            (UUID, DataType.TIME_UUID),
            (Int32, DataType.INT32),
            (Float32, DataType.FLOAT),
            (Optional[str], DataType.STRING),
            (int | None, DataType.INT64),
            (Annotated[str, "doc"], DataType.STRING),
        ],
    )
    def test_known(self, annotation, expected):
        assert infer_data_type(annotation) == expected

    @pytest.mark.parametrize("annotation", [list[str], dict, bytes, int | str])
    def test_unknown(self, annotation):
        assert infer_data_type(annotation) == DataType.UNKNOWN


class TestIsUnsetId:
    def test_unset_values(self):
        assert is_unset_id(None)
        assert is_unset_id(UNSET_ID)
        assert is_unset_id(NIL_UUID)
        assert is_unset_id(UUID(int=0))

    def test_real_id_is_set(self):
        assert not is_unset_id(uuid1())

    def test_unset_marker_is_singleton_and_falsy(self):
        assert type(UNSET_ID)() is UNSET_ID
        assert not UNSET_ID
        assert repr(UNSET_ID) == "UNSET_ID"


class TestCassandraEntity:
    def test_id_defaults_to_nil(self):
        assert Page(Url="x", Fetched=True).Id == NIL_UUID

    def test_id_is_first_field(self):
        assert list(Page.model_fields)[0] == "Id"


class TestTableDecorator:
    def test_attaches_table_info(self):
        info = Article.__table__
        assert isinstance(info, TableInfo)
        assert info.database == "crawl"
        assert info.name == "articles"
        assert info.indexes == (("Author",), ("Author", "Published"))

    def test_update_columns(self):
        assert Stock.__table__.update_columns == ("Quantity",)

    def test_bare_string_groups(self):
        @table("crawl", "links", indexes="Url", update_columns="Seen")
        class Link(CassandraEntity):
            Url: str
            Seen: bool = False

        assert Link.__table__.indexes == (("Url",),)
        assert Link.__table__.update_columns == ("Seen",)


class TestDefineEntity:
    def test_columns_in_declaration_order(self):
        definition = define_entity(Article)
        assert [c.name for c in definition.columns] == ["Id", "Title", "Author", "Published", "Views"]

    def test_column_types(self):
        definition = define_entity(Sample)
        types = {c.name: c.data_type for c in definition.columns}
        assert types == {
            "Id": DataType.TIME_UUID,
            "Value": DataType.FLOAT,
            "Ratio": DataType.DOUBLE,
        }

    def test_int32_annotation(self):
        assert define_entity(Stock).column("Quantity").data_type is DataType.INT32

    def test_name_defaults_to_class_name(self):
        assert define_entity(Page).name == "Page"

    def test_name_override(self):
        assert define_entity(Page, name="WebPage").name == "WebPage"

    def test_table_read_from_model(self):
        assert define_entity(Page).table is Page.__table__

    def test_missing_table_is_none(self):
        assert define_entity(Draft).table is None

    def test_attribute_accessors(self):
        definition = define_entity(Page)
        page = Page(Url="http://x", Fetched=True)
        assert [c.value_of(page) for c in definition.columns] == [NIL_UUID, "http://x", True]

    def test_mapping_accessors(self):
        definition = define_entity(Page, access=RecordAccess.MAPPING)
        record = {"Id": None, "Url": "http://y", "Fetched": False}
        assert [c.value_of(record) for c in definition.columns] == [None, "http://y", False]

    def test_alias_used_as_column_name(self):
        @table("crawl", "links")
        class Link(CassandraEntity):
            target: str = Field(alias="Target")

        definition = define_entity(Link)
        assert definition.column("Target") is not None
        link = Link(Target="http://z")
        assert definition.column("Target").value_of(link) == "http://z"

    def test_non_model_rejected(self):
        with pytest.raises(ConfigError):
            define_entity(dict)

    def test_column_lookup_missing(self):
        assert define_entity(Page).column("Nope") is None
