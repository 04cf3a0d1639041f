"""Environment-driven settings for columnspine.

All fields can be set through ``COLUMNSPINE_*`` environment variables or a
``.env`` file, e.g. ``COLUMNSPINE_CONTACT_POINTS='["10.0.0.1","10.0.0.2"]'``
or ``COLUMNSPINE_CONNECTION_STRING="Host=10.0.0.1;Port=9042"``.

Examples:
    >>> from columnspine.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.default_pipeline_mode
    <PipelineMode.INSERT: 'insert'>

Requires ``pydantic-settings``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from columnspine.entities.types import PipelineMode


class ColumnSpineSettings(BaseSettings):
    """Connection, pipeline and logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="COLUMNSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Cluster ──────────────────────────────────────────────────
    connection_string: str | None = Field(
        default=None,
        description="Overrides contact_points/port/credentials when set",
    )
    contact_points: list[str] = Field(default=["127.0.0.1"])
    port: int = Field(default=9042)
    username: str | None = Field(default=None)
    password: str | None = Field(default=None)
    replication_factor: int = Field(default=1, ge=1)
    connect_timeout: float = Field(default=10.0)

    # ── Pipeline ─────────────────────────────────────────────────
    default_pipeline_mode: PipelineMode = Field(default=PipelineMode.INSERT)
    serialize_writes: bool = Field(
        default=False,
        description="Route batch writes through the serialized 'db' write channel",
    )
    write_retries: int = Field(default=3, ge=0)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("default_pipeline_mode")
    @classmethod
    def _reject_update_default(cls, value: PipelineMode) -> PipelineMode:
        if value is PipelineMode.UPDATE:
            raise ValueError("default pipeline mode can not be 'update'")
        return value


@lru_cache(maxsize=1)
def get_settings() -> ColumnSpineSettings:
    """Load and cache settings from the environment."""
    return ColumnSpineSettings()


__all__ = [
    "ColumnSpineSettings",
    "get_settings",
]
