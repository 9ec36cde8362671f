"""ccache statistics schemas."""

from pydantic import BaseModel


class CcacheStats(BaseModel):
    """Derived ccache statistics for one aggregation pass."""
    call: int
    cachable: int
    hits: int
    direct_hits: int
    preprocessed_hits: int
    miss: int
    uncacheable: int
    errors: int
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
    max_cache_size_bytes: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    service: str = "ccache-exporter"
    ccache_dir: str
