"""FastAPI dependency injection — exporter services."""

from __future__ import annotations

from prometheus_client import CollectorRegistry

from ccache_exporter import services
from ccache_exporter.services.collector import CcacheCollector


def get_registry() -> CollectorRegistry:
    """Registry scraped by the /metrics endpoint."""
    return services.get_registry()


def get_collector() -> CcacheCollector:
    return services.get_collector()
