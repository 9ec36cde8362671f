"""Prometheus collector — re-reads the ccache stats tree on every scrape."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable, Iterator

from prometheus_client import CollectorRegistry, Counter
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from ccache_exporter.services.derived_metrics import DerivedMetrics, collect_metrics
from ccache_exporter.services.stats_reader import StatsError

logger = logging.getLogger(__name__)

NAMESPACE = "ccache"

# (metric name, help text, DerivedMetrics attribute)
COUNTER_METRICS = (
    ("call_total", "Cache calls (total)", "call"),
    ("call_cachable_total", "Cachable cache calls (total)", "cachable"),
    ("called_for_link_total", "Called for link", "called_for_link"),
    ("called_for_preprocessing_total", "Called for preprocessing", "called_for_preprocessing"),
    ("compilation_failed_total", "Compilation failed", "compile_failed"),
    ("preprocessing_failed_total", "Preprocessing failed", "preprocessor_error"),
    ("unsupported_code_directive_total", "Unsupported code directive", "unsupported_code_directive"),
    ("no_input_file_total", "No input file", "no_input_file"),
    ("cleanups_performed_total", "Cleanups performed", "cleanups_performed"),
)

GAUGE_METRICS = (
    ("cache_hit_ratio", "Cache hit ratio (direct + preprocessed) / cachable", "hit_ratio"),
    ("cached_files", "Cached files", "files_in_cache"),
    ("cache_size_bytes", "Cache size (bytes)", "cache_size_bytes"),
    ("cache_size_max_bytes", "Maximum cache size (bytes)", "max_cache_size_bytes"),
)


class CcacheCollector(Collector):
    """Exposes ccache statistics; one full stats walk per scrape."""

    def __init__(
        self,
        ccache_dir: str | Path,
        max_cache_size_bytes: int = 0,
        parsing_errors: Counter | None = None,
        namespace: str = NAMESPACE,
    ):
        self._ccache_dir = Path(ccache_dir)
        self._max_cache_size_bytes = int(max_cache_size_bytes)
        self._parsing_errors = parsing_errors
        self._namespace = namespace
        self._lock = threading.Lock()

    @property
    def ccache_dir(self) -> Path:
        return self._ccache_dir

    @property
    def max_cache_size_bytes(self) -> int:
        return self._max_cache_size_bytes

    def read_metrics(self) -> DerivedMetrics:
        """Aggregate the stats tree once; failures are logged and re-raised."""
        with self._lock:
            try:
                return collect_metrics(self._ccache_dir, self._max_cache_size_bytes)
            except StatsError as e:
                logger.warning("ccache stats aggregation failed (%s): %s", e.path, e)
                raise

    def describe(self) -> Iterable[Metric]:
        return list(self._families(None))

    def collect(self) -> Iterable[Metric]:
        try:
            metrics = self.read_metrics()
        except StatsError:
            # Only failed scrapes are counted, not /api/stats requests.
            if self._parsing_errors is not None:
                self._parsing_errors.inc()
            return
        yield from self._families(metrics)

    def _name(self, name: str) -> str:
        return f"{self._namespace}_{name}"

    def _families(self, metrics: DerivedMetrics | None) -> Iterator[Metric]:
        for name, documentation, attr in COUNTER_METRICS:
            family = CounterMetricFamily(self._name(name), documentation)
            if metrics is not None:
                family.add_metric([], getattr(metrics, attr))
            yield family

        hits = CounterMetricFamily(self._name("call_hit_total"), "Cache hits", labels=["mode"])
        if metrics is not None:
            hits.add_metric(["direct"], metrics.direct_hits)
            hits.add_metric(["preprocessed"], metrics.preprocessed_hits)
        yield hits

        for name, documentation, attr in GAUGE_METRICS:
            family = GaugeMetricFamily(self._name(name), documentation)
            if metrics is not None:
                family.add_metric([], getattr(metrics, attr))
            yield family


def build_registry(
    ccache_dir: str | Path,
    max_cache_size_bytes: int = 0,
    namespace: str = NAMESPACE,
) -> tuple[CollectorRegistry, CcacheCollector]:
    """Create a registry holding the ccache collector and its error counter."""
    registry = CollectorRegistry()
    parsing_errors = Counter(
        "parsing_errors",
        "Collector parsing errors (total)",
        namespace=namespace,
        subsystem="collector",
        registry=None,
    )
    collector = CcacheCollector(
        ccache_dir,
        max_cache_size_bytes=max_cache_size_bytes,
        parsing_errors=parsing_errors,
        namespace=namespace,
    )
    # Collected in registration order: a failing scrape already shows the
    # incremented error count.
    registry.register(collector)
    registry.register(parsing_errors)
    return registry, collector
