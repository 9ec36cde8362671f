"""Derived ccache metrics — hit ratio and call breakdown from raw counters."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

from ccache_exporter.services.counters import U64_MASK, Counter, Counters
from ccache_exporter.services.stats_reader import read_all_stats

HIT_COUNTERS = (
    Counter.DIRECT_CACHE_HIT,
    Counter.PREPROCESSED_CACHE_HIT,
)

UNCACHEABLE_COUNTERS = (
    Counter.AUTOCONF_TEST,
    Counter.BAD_COMPILER_ARGUMENTS,
    Counter.CALLED_FOR_LINK,
    Counter.CALLED_FOR_PREPROCESSING,
    Counter.COMPILE_FAILED,
    Counter.COMPILER_PRODUCED_NO_OUTPUT,
    Counter.COMPILER_PRODUCED_EMPTY_OUTPUT,
    Counter.COULD_NOT_USE_MODULES,
    Counter.COULD_NOT_USE_PRECOMPILED_HEADER,
    Counter.DISABLED,
    Counter.MULTIPLE_SOURCE_FILES,
    Counter.NO_INPUT_FILE,
    Counter.OUTPUT_TO_STDOUT,
    Counter.PREPROCESSOR_ERROR,
    Counter.RECACHE,
    Counter.UNSUPPORTED_CODE_DIRECTIVE,
    Counter.UNSUPPORTED_COMPILER_OPTION,
    Counter.UNSUPPORTED_ENVIRONMENT_VARIABLE,
    Counter.UNSUPPORTED_SOURCE_LANGUAGE,
)

ERROR_COUNTERS = (
    Counter.BAD_OUTPUT_FILE,
    Counter.COMPILER_CHECK_FAILED,
    Counter.COULD_NOT_FIND_COMPILER,
    Counter.ERROR_HASHING_EXTRA_FILE,
    Counter.INTERNAL_ERROR,
    Counter.MISSING_CACHE_FILE,
)


def _u64_sum(*values: int) -> int:
    return sum(values) & U64_MASK


@dataclass(frozen=True)
class DerivedMetrics:
    """Metric values reported for one scrape."""

    direct_hits: int
    preprocessed_hits: int
    hits: int
    miss: int
    uncacheable: int
    errors: int
    cachable: int
    call: int
    hit_ratio: float
    called_for_link: int
    called_for_preprocessing: int
    compile_failed: int
    preprocessor_error: int
    unsupported_code_directive: int
    no_input_file: int
    cleanups_performed: int
    files_in_cache: int
    cache_size_bytes: int
    max_cache_size_bytes: int = 0

    @classmethod
    def from_counters(cls, counters: Counters, max_cache_size_bytes: int = 0) -> "DerivedMetrics":
        miss = counters[Counter.CACHE_MISS]
        hits = _u64_sum(*(counters[c] for c in HIT_COUNTERS))
        uncacheable = _u64_sum(*(counters[c] for c in UNCACHEABLE_COUNTERS))
        errors = _u64_sum(*(counters[c] for c in ERROR_COUNTERS))
        cachable = _u64_sum(miss, hits)
        call = _u64_sum(cachable, uncacheable, errors)

        hit_ratio = hits / cachable if cachable > 0 else 0.0

        return cls(
            direct_hits=counters[Counter.DIRECT_CACHE_HIT],
            preprocessed_hits=counters[Counter.PREPROCESSED_CACHE_HIT],
            hits=hits,
            miss=miss,
            uncacheable=uncacheable,
            errors=errors,
            cachable=cachable,
            call=call,
            hit_ratio=hit_ratio,
            called_for_link=counters[Counter.CALLED_FOR_LINK],
            called_for_preprocessing=counters[Counter.CALLED_FOR_PREPROCESSING],
            compile_failed=counters[Counter.COMPILE_FAILED],
            preprocessor_error=counters[Counter.PREPROCESSOR_ERROR],
            unsupported_code_directive=counters[Counter.UNSUPPORTED_CODE_DIRECTIVE],
            no_input_file=counters[Counter.NO_INPUT_FILE],
            cleanups_performed=counters[Counter.CLEANUPS_PERFORMED],
            files_in_cache=counters[Counter.FILES_IN_CACHE],
            cache_size_bytes=(counters[Counter.CACHE_SIZE_KIBIBYTE] * 1024) & U64_MASK,
            max_cache_size_bytes=max_cache_size_bytes,
        )

    def to_dict(self) -> dict:
        return asdict(self)


def collect_metrics(base_dir: str | Path, max_cache_size_bytes: int = 0) -> DerivedMetrics:
    """Read every shard below base_dir and derive the reported metrics.

    Raises StatsError when any shard file cannot be read or parsed.
    """
    counters = read_all_stats(base_dir)
    return DerivedMetrics.from_counters(counters, max_cache_size_bytes)
