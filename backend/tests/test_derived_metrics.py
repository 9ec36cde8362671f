"""Tests for derived metrics — call breakdown, hit ratio, end-to-end scenarios."""

import pytest

from ccache_exporter.services.counters import U64_MASK, Counter, Counters
from ccache_exporter.services.derived_metrics import (
    ERROR_COUNTERS,
    UNCACHEABLE_COUNTERS,
    DerivedMetrics,
    collect_metrics,
)
from ccache_exporter.services.stats_reader import StatsParseError


def _counters(**counts: int) -> Counters:
    counters = Counters()
    for name, value in counts.items():
        counters.add(Counter[name.upper()], value)
    return counters


def test_zero_counters():
    metrics = DerivedMetrics.from_counters(Counters())
    assert metrics.call == 0
    assert metrics.cachable == 0
    assert metrics.hit_ratio == 0.0


def test_hits_and_miss():
    metrics = DerivedMetrics.from_counters(
        _counters(direct_cache_hit=6, preprocessed_cache_hit=2, cache_miss=8)
    )
    assert metrics.direct_hits == 6
    assert metrics.preprocessed_hits == 2
    assert metrics.hits == 8
    assert metrics.miss == 8
    assert metrics.cachable == 16
    assert metrics.hit_ratio == 0.5


def test_every_uncacheable_counter_is_counted():
    counters = Counters()
    for c in UNCACHEABLE_COUNTERS:
        counters.add(c, 1)
    metrics = DerivedMetrics.from_counters(counters)
    assert metrics.uncacheable == 19
    assert metrics.errors == 0
    assert metrics.cachable == 0
    assert metrics.call == 19


def test_every_error_counter_is_counted():
    counters = Counters()
    for c in ERROR_COUNTERS:
        counters.add(c, 2)
    metrics = DerivedMetrics.from_counters(counters)
    assert metrics.errors == 12
    assert metrics.uncacheable == 0
    assert metrics.call == 12


def test_unrelated_counters_do_not_count_as_calls():
    metrics = DerivedMetrics.from_counters(
        _counters(
            none=1,
            compiler_produced_stdout=1,
            stats_zeroed_timestamp=1_700_000_000,
            direct_cache_miss=4,
            local_storage_hit=3,
            subdir_files_3=10,
        )
    )
    assert metrics.call == 0


@pytest.mark.parametrize(
    "counts",
    [
        {},
        {"cache_miss": 1},
        {"direct_cache_hit": 1},
        {"direct_cache_hit": 3, "preprocessed_cache_hit": 4, "cache_miss": 1000},
        {"preprocessed_cache_hit": 2 ** 40, "cache_miss": 1},
        {"called_for_link": 5, "internal_error": 1, "disabled": 2, "direct_cache_hit": 9},
    ],
)
def test_call_invariant_and_ratio_range(counts):
    metrics = DerivedMetrics.from_counters(_counters(**counts))
    assert metrics.call == metrics.cachable + metrics.uncacheable + metrics.errors
    if metrics.cachable > 0:
        assert 0.0 <= metrics.hit_ratio <= 1.0
    else:
        assert metrics.hit_ratio == 0.0


def test_passthrough_values():
    metrics = DerivedMetrics.from_counters(
        _counters(
            called_for_link=1,
            called_for_preprocessing=2,
            compile_failed=3,
            preprocessor_error=4,
            unsupported_code_directive=5,
            no_input_file=6,
            cleanups_performed=7,
            files_in_cache=8,
            cache_size_kibibyte=9,
        ),
        max_cache_size_bytes=1000,
    )
    assert metrics.called_for_link == 1
    assert metrics.called_for_preprocessing == 2
    assert metrics.compile_failed == 3
    assert metrics.preprocessor_error == 4
    assert metrics.unsupported_code_directive == 5
    assert metrics.no_input_file == 6
    assert metrics.cleanups_performed == 7
    assert metrics.files_in_cache == 8
    assert metrics.cache_size_bytes == 9 * 1024
    assert metrics.max_cache_size_bytes == 1000


def test_sums_wrap_at_64_bits():
    metrics = DerivedMetrics.from_counters(_counters(cache_miss=U64_MASK, direct_cache_hit=1))
    assert metrics.cachable == 0
    assert metrics.hit_ratio == 0.0


class TestCollectMetrics:
    def test_empty_tree(self, ccache_dir):
        metrics = collect_metrics(ccache_dir)
        assert metrics.call == 0
        assert metrics.hit_ratio == 0
        assert metrics.to_dict()["call"] == 0

    def test_single_miss_shard(self, ccache_dir, write_stats):
        write_stats("3", "0\n0\n0\n0\n5\n")
        metrics = collect_metrics(ccache_dir)
        assert metrics.miss == 5
        assert metrics.hits == 0
        assert metrics.cachable == 5
        assert metrics.call == 5
        assert metrics.hit_ratio == 0

    def test_hits_from_both_levels(self, ccache_dir, write_stats, stats_lines):
        write_stats("a", stats_lines(direct_cache_hit=3))
        write_stats("c/2", stats_lines(preprocessed_cache_hit=7))
        metrics = collect_metrics(ccache_dir)
        assert metrics.hits == 10
        assert metrics.miss == 0
        assert metrics.cachable == 10
        assert metrics.hit_ratio == 1.0

    def test_max_size_is_passed_through(self, ccache_dir):
        assert collect_metrics(ccache_dir, 42).max_cache_size_bytes == 42

    def test_parse_error_propagates(self, ccache_dir, write_stats):
        write_stats("b/1", "abc\n")
        with pytest.raises(StatsParseError):
            collect_metrics(ccache_dir)
