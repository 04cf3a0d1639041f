"""Base entity pipeline interface and per-entity bookkeeping."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from columnspine.entities.types import Column, PipelineMode, TableInfo


@dataclass
class EntityAdapter:
    """Per-entity metadata and cached statement templates.

    ``table_name`` is the physical table, postfix included. It is fixed when
    the adapter is built so that schema and writes target the same table.
    Statements are attached once at registration; the adapter is not
    modified while writes are running.
    """

    name: str
    table: TableInfo
    columns: tuple[Column, ...]
    pipeline_mode: PipelineMode = PipelineMode.INSERT
    table_name: str | None = None
    insert_statement: str | None = None
    update_statement: str | None = None
    select_statement: str | None = None

    def __post_init__(self) -> None:
        if self.table_name is None:
            self.table_name = self.table.calculate_table_name()

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]


class EntityRegistry:
    """Entity name -> adapter, iterated in registration order."""

    def __init__(self) -> None:
        self._adapters: dict[str, EntityAdapter] = {}

    def register(self, adapter: EntityAdapter) -> None:
        """Add an adapter, replacing any previous one with the same name."""
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> EntityAdapter | None:
        return self._adapters.get(name)

    def names(self) -> list[str]:
        return list(self._adapters)

    def clear(self) -> None:
        self._adapters.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._adapters

    def __iter__(self) -> Iterator[EntityAdapter]:
        return iter(list(self._adapters.values()))

    def __len__(self) -> int:
        return len(self._adapters)


class BaseEntityPipeline(ABC):
    """Base class for pipelines persisting extracted entities."""

    def __init__(self) -> None:
        self.registry = EntityRegistry()

    @abstractmethod
    def add_entity(self, definition: Any) -> None:
        """Register an entity definition. Called at configuration time."""
        ...

    @abstractmethod
    def init(self) -> None:
        """Prepare the store before the first write."""
        ...

    @abstractmethod
    def process(self, name: str, records: Iterable[Any] | None) -> int:
        """Persist ``records`` of entity ``name``; returns the number submitted."""
        ...

    def dispose(self) -> None:
        """Release resources and forget all registered entities."""
        self.registry.clear()

    def __enter__(self) -> BaseEntityPipeline:
        self.init()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(entities={self.registry.names()})"


__all__ = [
    "EntityAdapter",
    "EntityRegistry",
    "BaseEntityPipeline",
]
