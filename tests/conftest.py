"""
Shared pytest fixtures for columnspine tests.

This module provides:
- A recording fake session (no cluster needed)
- A pipeline wired to that session
- Auto-marking of tests by location
- Reset of process-global settings and logging around each test
"""

from __future__ import annotations

from pathlib import Path
from uuid import UUID

import pytest

from columnspine.core.logging import reset_logging
from columnspine.core.settings import get_settings
from columnspine.pipelines.cassandra import CassandraEntityPipeline
from tests._support.fake_session import RecordingSession

FIXED_ID = UUID("5f0c2a8e-1d2b-11ef-9262-0242ac120002")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def session() -> RecordingSession:
    return RecordingSession()


@pytest.fixture
def pipeline(session: RecordingSession) -> CassandraEntityPipeline:
    return CassandraEntityPipeline(session=session, id_factory=lambda: FIXED_ID)


@pytest.fixture(autouse=True)
def reset_structured_logging():
    """configure_logging() is process-global; undo it around each test."""
    reset_logging()
    yield
    reset_logging()
