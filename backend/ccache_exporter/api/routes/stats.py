"""ccache statistics as JSON."""

from fastapi import APIRouter, Depends, HTTPException, status

from ccache_exporter.api.deps import get_collector
from ccache_exporter.schemas.stats import CcacheStats
from ccache_exporter.services.collector import CcacheCollector
from ccache_exporter.services.stats_reader import StatsError

router = APIRouter()


@router.get("", response_model=CcacheStats)
def ccache_stats(collector: CcacheCollector = Depends(get_collector)):
    """Freshly aggregated ccache statistics (same values as /metrics)."""
    try:
        metrics = collector.read_metrics()
    except StatsError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"ccache stats unavailable: {e}",
        )
    return CcacheStats(**metrics.to_dict())
