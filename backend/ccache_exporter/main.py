"""ccache exporter FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from ccache_exporter import __version__
from ccache_exporter.config import settings
from ccache_exporter.services import init_services, shutdown_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    # === STARTUP ===
    _setup_logging()
    init_services()
    logger.info(
        "ccache exporter v%s started — listening on %s:%s, exporting %s",
        __version__, settings.host, settings.port, settings.ccache_dir,
    )

    try:
        yield
    finally:
        # === SHUTDOWN ===
        shutdown_services()
        logger.info("ccache exporter shutting down")


def _setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def create_app() -> FastAPI:
    """Application factory."""
    from ccache_exporter.api.routes import api_router
    from ccache_exporter.api.routes import metrics

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=_lifespan,
    )

    app.include_router(metrics.router, prefix=settings.metrics_path, tags=["metrics"])
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()


def run(**kwargs: Any) -> None:
    import uvicorn

    uvicorn.run(
        "ccache_exporter.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        **kwargs,
    )


if __name__ == "__main__":
    run()
