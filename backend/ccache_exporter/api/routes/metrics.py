"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from ccache_exporter.api.deps import get_registry

router = APIRouter()


@router.get("", include_in_schema=False)
def metrics(registry: CollectorRegistry = Depends(get_registry)):
    """Prometheus text exposition; every request re-reads the stats tree."""
    return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)
