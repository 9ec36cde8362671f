"""Health check."""

from fastapi import APIRouter, Depends

from ccache_exporter import __version__
from ccache_exporter.api.deps import get_collector
from ccache_exporter.schemas.stats import HealthResponse
from ccache_exporter.services.collector import CcacheCollector

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(collector: CcacheCollector = Depends(get_collector)):
    """Liveness plus the ccache directory being exported."""
    return HealthResponse(version=__version__, ccache_dir=str(collector.ccache_dir))


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}
