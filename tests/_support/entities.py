"""Entity models shared by the test suite (and the CLI tests' MODULE:ATTR targets)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from columnspine.entities import (
    CassandraEntity,
    Float32,
    Int32,
    TableNamePostfix,
    table,
)


@table("crawl", "pages")
class Page(CassandraEntity):
    Url: str
    Fetched: bool


@table("crawl", "articles", indexes=["Author", "Author,Published"])
class Article(CassandraEntity):
    Title: str
    Author: str
    Published: datetime
    Views: int = 0


@table("crawl", "prices", uniques=["Sku"])
class Price(CassandraEntity):
    Sku: str
    Amount: Decimal


@table("crawl", "stocks", update_columns=["Quantity"])
class Stock(CassandraEntity):
    Sku: str
    Quantity: Int32


@table("metrics", "samples", postfix=TableNamePostfix.MONTH)
class Sample(CassandraEntity):
    Value: Float32
    Ratio: float


class Draft(CassandraEntity):
    """No @table: skipped by the pipeline."""

    Body: str


class PlainRecord(BaseModel):
    """Not a CassandraEntity."""

    Id: str


ALL = [Page, Article]
WITH_UNIQUE = [Page, Price]
