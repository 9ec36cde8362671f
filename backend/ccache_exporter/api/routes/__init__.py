"""API route registration."""

from fastapi import APIRouter

from ccache_exporter.api.routes import health, stats

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
