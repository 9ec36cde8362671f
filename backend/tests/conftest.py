"""Test fixtures — temporary ccache trees and FastAPI test client."""

from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from ccache_exporter.main import create_app
from ccache_exporter.services import init_services, shutdown_services
from ccache_exporter.services.counters import NUM_COUNTERS, Counter

MAX_CACHE_SIZE = 5 * 1024 ** 3


def _stats_lines(**counts: int) -> list[int]:
    values = [0] * NUM_COUNTERS
    for name, value in counts.items():
        values[Counter[name.upper()]] = value
    return values


@pytest.fixture
def stats_lines():
    """Full 82-line stats content with the given counters set, e.g. cache_miss=5."""
    return _stats_lines


@pytest.fixture
def ccache_dir(tmp_path) -> Path:
    """Empty ccache directory."""
    path = tmp_path / "ccache"
    path.mkdir()
    return path


@pytest.fixture
def write_stats(ccache_dir):
    """Write ``<ccache_dir>/<shard>/stats`` from a list of values or raw text."""

    def _write(shard: str, content: list[int] | str) -> Path:
        path = ccache_dir / shard / "stats"
        path.parent.mkdir(parents=True, exist_ok=True)
        if not isinstance(content, str):
            content = "".join(f"{v}\n" for v in content)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def exporter(ccache_dir):
    """Initialized exporter services pointing at the temp ccache dir."""
    init_services(ccache_dir=ccache_dir, max_cache_size_bytes=MAX_CACHE_SIZE)
    yield
    shutdown_services()


@pytest_asyncio.fixture
async def client(exporter):
    """Provide an async test client against a fresh app."""
    app = create_app()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
