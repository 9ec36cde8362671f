"""Exporter services — singleton registry."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ccache_exporter.config import settings

if TYPE_CHECKING:
    from prometheus_client import CollectorRegistry

    from ccache_exporter.services.collector import CcacheCollector

logger = logging.getLogger(__name__)

_registry: CollectorRegistry | None = None
_collector: CcacheCollector | None = None


def init_services(
    ccache_dir: str | Path | None = None,
    max_cache_size_bytes: int | None = None,
) -> None:
    """Create the metrics registry and the ccache collector.

    Falls back to the configured settings for anything not passed in.
    Raises RuntimeError when no ccache directory is configured at all.
    """
    global _registry, _collector

    from ccache_exporter.services.collector import build_registry

    ccache_dir = ccache_dir or settings.ccache_dir
    if not ccache_dir:
        raise RuntimeError(
            "--ccache-dir flag or CCACHE_DIR environment variable required"
        )
    if max_cache_size_bytes is None:
        max_cache_size_bytes = int(settings.ccache_maxsize)

    _registry, _collector = build_registry(ccache_dir, max_cache_size_bytes)
    logger.info(
        "ccache collector initialized for %s (max size %d bytes)",
        ccache_dir, max_cache_size_bytes,
    )


def shutdown_services() -> None:
    """Drop the registry; the next init starts from scratch."""
    global _registry, _collector
    _registry = None
    _collector = None


def get_registry() -> CollectorRegistry:
    if _registry is None:
        raise RuntimeError("Services not initialized — call init_services() first")
    return _registry


def get_collector() -> CcacheCollector:
    if _collector is None:
        raise RuntimeError("Services not initialized — call init_services() first")
    return _collector
