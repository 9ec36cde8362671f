"""ccache statistics counters — ordinal layout of the on-disk stats files."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterator

U64_MASK = 0xFFFF_FFFF_FFFF_FFFF


class Counter(IntEnum):
    """Statistic kinds. The ordinal is the line index in a stats file."""

    NONE = 0
    COMPILER_PRODUCED_STDOUT = 1
    COMPILE_FAILED = 2
    INTERNAL_ERROR = 3
    CACHE_MISS = 4
    PREPROCESSOR_ERROR = 5
    COULD_NOT_FIND_COMPILER = 6
    MISSING_CACHE_FILE = 7
    PREPROCESSED_CACHE_HIT = 8
    BAD_COMPILER_ARGUMENTS = 9
    CALLED_FOR_LINK = 10
    FILES_IN_CACHE = 11
    CACHE_SIZE_KIBIBYTE = 12
    OBSOLETE_MAX_FILES = 13
    OBSOLETE_MAX_SIZE = 14
    UNSUPPORTED_SOURCE_LANGUAGE = 15
    BAD_OUTPUT_FILE = 16
    NO_INPUT_FILE = 17
    MULTIPLE_SOURCE_FILES = 18
    AUTOCONF_TEST = 19
    UNSUPPORTED_COMPILER_OPTION = 20
    OUTPUT_TO_STDOUT = 21
    DIRECT_CACHE_HIT = 22
    COMPILER_PRODUCED_NO_OUTPUT = 23
    COMPILER_PRODUCED_EMPTY_OUTPUT = 24
    ERROR_HASHING_EXTRA_FILE = 25
    COMPILER_CHECK_FAILED = 26
    COULD_NOT_USE_PRECOMPILED_HEADER = 27
    CALLED_FOR_PREPROCESSING = 28
    CLEANUPS_PERFORMED = 29
    UNSUPPORTED_CODE_DIRECTIVE = 30
    STATS_ZEROED_TIMESTAMP = 31
    COULD_NOT_USE_MODULES = 32
    DIRECT_CACHE_MISS = 33
    PREPROCESSED_CACHE_MISS = 34
    LOCAL_STORAGE_READ_HIT = 35
    LOCAL_STORAGE_READ_MISS = 36
    REMOTE_STORAGE_READ_HIT = 37
    REMOTE_STORAGE_READ_MISS = 38
    REMOTE_STORAGE_ERROR = 39
    REMOTE_STORAGE_TIMEOUT = 40
    RECACHE = 41
    UNSUPPORTED_ENVIRONMENT_VARIABLE = 42
    LOCAL_STORAGE_WRITE = 43
    LOCAL_STORAGE_HIT = 44
    LOCAL_STORAGE_MISS = 45
    REMOTE_STORAGE_WRITE = 46
    REMOTE_STORAGE_HIT = 47
    REMOTE_STORAGE_MISS = 48

    # Files in level 2 subdirs 0-f
    SUBDIR_FILES_0 = 49
    SUBDIR_FILES_1 = 50
    SUBDIR_FILES_2 = 51
    SUBDIR_FILES_3 = 52
    SUBDIR_FILES_4 = 53
    SUBDIR_FILES_5 = 54
    SUBDIR_FILES_6 = 55
    SUBDIR_FILES_7 = 56
    SUBDIR_FILES_8 = 57
    SUBDIR_FILES_9 = 58
    SUBDIR_FILES_A = 59
    SUBDIR_FILES_B = 60
    SUBDIR_FILES_C = 61
    SUBDIR_FILES_D = 62
    SUBDIR_FILES_E = 63
    SUBDIR_FILES_F = 64

    # Size (KiB) in level 2 subdirs 0-f
    SUBDIR_SIZE_KIBIBYTE_0 = 65
    SUBDIR_SIZE_KIBIBYTE_1 = 66
    SUBDIR_SIZE_KIBIBYTE_2 = 67
    SUBDIR_SIZE_KIBIBYTE_3 = 68
    SUBDIR_SIZE_KIBIBYTE_4 = 69
    SUBDIR_SIZE_KIBIBYTE_5 = 70
    SUBDIR_SIZE_KIBIBYTE_6 = 71
    SUBDIR_SIZE_KIBIBYTE_7 = 72
    SUBDIR_SIZE_KIBIBYTE_8 = 73
    SUBDIR_SIZE_KIBIBYTE_9 = 74
    SUBDIR_SIZE_KIBIBYTE_A = 75
    SUBDIR_SIZE_KIBIBYTE_B = 76
    SUBDIR_SIZE_KIBIBYTE_C = 77
    SUBDIR_SIZE_KIBIBYTE_D = 78
    SUBDIR_SIZE_KIBIBYTE_E = 79
    SUBDIR_SIZE_KIBIBYTE_F = 80

    DISABLED = 81


NUM_COUNTERS = len(Counter)


class Counters:
    """Fixed-size vector of unsigned 64-bit counters, one slot per Counter."""

    __slots__ = ("_values",)

    def __init__(self) -> None:
        self._values = [0] * NUM_COUNTERS

    def __getitem__(self, index: int) -> int:
        return self._values[self._check(index)]

    def __len__(self) -> int:
        return NUM_COUNTERS

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Counters):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        nonzero = {Counter(i).name: v for i, v in enumerate(self._values) if v}
        return f"Counters({nonzero})"

    def add(self, index: int, value: int) -> None:
        """Accumulate value into slot index (wraps at 2**64 like the on-disk width)."""
        i = self._check(index)
        self._values[i] = (self._values[i] + value) & U64_MASK

    def as_dict(self) -> dict[str, int]:
        return {counter.name.lower(): self._values[counter] for counter in Counter}

    @staticmethod
    def _check(index: int) -> int:
        if not 0 <= index < NUM_COUNTERS:
            raise IndexError(f"Counter index out of range: {index}")
        return int(index)
