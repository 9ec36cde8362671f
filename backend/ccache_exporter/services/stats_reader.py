"""Reading ccache stats files and walking the two-level shard tree."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from ccache_exporter.services.counters import NUM_COUNTERS, U64_MASK, Counters

logger = logging.getLogger(__name__)

STATS_FILENAME = "stats"
HEX_DIGITS = "0123456789abcdef"

_NUMBER_RE = re.compile(rb"[0-9]+")


class StatsError(Exception):
    """Aggregation of the ccache stats failed."""

    def __init__(self, message: str, path: str | Path):
        super().__init__(message)
        self.path = Path(path)


class StatsReadError(StatsError):
    """A stats file exists but could not be read."""


class StatsParseError(StatsError):
    """A stats file contains a line that is not an unsigned 64-bit integer."""

    def __init__(self, path: str | Path, line_number: int, value: str):
        super().__init__(
            f"{path}:{line_number}: invalid counter value {value!r}", path
        )
        self.line_number = line_number
        self.value = value


def _parse_value(path: Path, line_number: int, line: bytes) -> int:
    if not _NUMBER_RE.fullmatch(line) or int(line) > U64_MASK:
        raise StatsParseError(path, line_number, line.decode("utf-8", errors="replace"))
    return int(line)


def read_stats_file(path: str | Path, counters: Counters) -> None:
    """Accumulate one stats file into counters.

    A missing file is a shard that has not been used yet and contributes
    nothing. Lines end at ``\\n`` only (a trailing ``\\r`` is dropped). At
    most NUM_COUNTERS lines are consumed; anything after that is never
    looked at, not even decoded.
    """
    path = Path(path)
    try:
        with path.open("rb") as f:
            for index, line in enumerate(f):
                line = line.rstrip(b"\n")
                if line.endswith(b"\r"):
                    line = line[:-1]
                counters.add(index, _parse_value(path, index + 1, line))
                if index + 1 == NUM_COUNTERS:
                    break
    except FileNotFoundError:
        return
    except OSError as e:
        raise StatsReadError(f"Cannot read {path}: {e.strerror or e}", path) from e


def iter_stats_paths(base_dir: str | Path) -> Iterator[Path]:
    """Yield every shard stats path in ascending hex order.

    ``<base>/<h1>/stats`` comes right before the sixteen
    ``<base>/<h1>/<h2>/stats`` files below it.
    """
    base = Path(base_dir)
    for level1 in HEX_DIGITS:
        yield base / level1 / STATS_FILENAME
        for level2 in HEX_DIGITS:
            yield base / level1 / level2 / STATS_FILENAME


def read_all_stats(base_dir: str | Path, counters: Counters | None = None) -> Counters:
    """Sum every shard stats file below base_dir.

    The first read or parse failure aborts the walk; the caller should
    discard whatever was accumulated so far.
    """
    if counters is None:
        counters = Counters()
    for path in iter_stats_paths(base_dir):
        read_stats_file(path, counters)
    logger.debug("Aggregated ccache stats below %s", base_dir)
    return counters
