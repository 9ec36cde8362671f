"""Exporter configuration — Pydantic BaseSettings loaded from env / .env."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, ByteSize, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "ccache-exporter"
    debug: bool = False
    log_level: str = "INFO"

    # Network
    host: str = "0.0.0.0"
    port: int = 9508
    api_prefix: str = "/api"
    metrics_path: str = "/metrics"

    # ccache — the exporter's own variables win over ccache's
    ccache_dir: str = Field(
        default="",
        validation_alias=AliasChoices("CCACHE_EXPORTER_CCACHE_DIR", "CCACHE_DIR", "ccache_dir"),
    )
    ccache_maxsize: ByteSize = Field(
        default=ByteSize(0),
        validation_alias=AliasChoices(
            "CCACHE_EXPORTER_CCACHE_MAXSIZE", "CCACHE_MAXSIZE", "ccache_maxsize"
        ),
    )

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="CCACHE_EXPORTER_",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("ccache_dir")
    @classmethod
    def _expand_ccache_dir(cls, value: str) -> str:
        if not value:
            return value
        return str(Path(value).expanduser())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
