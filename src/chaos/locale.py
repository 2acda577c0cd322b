from __future__ import annotations
import logging
from dataclasses import dataclass
from functools import total_ordering
from typing import List

import numpy as np

from .errors import ChaosError, ChaosErrorKind

logger = logging.getLogger(__name__)

U64_MAX = (1 << 64) - 1
PEBBLE_BYTES = 64

def _checked_add_u64(x: int, y: int) -> int:
    r = x + y
    if r > U64_MAX:
        raise OverflowError(f"{x} + {y} overflows 64 bits")
    return r

def _require_u64(name: str, value: int) -> int:
    if not isinstance(value, (int, np.integer)) or isinstance(value, (bool, np.bool_)):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    value = int(value)
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{name} must be in [0, 2**64), got {value}")
    return value

@total_ordering
@dataclass(frozen=True)
class Locale:
    """
    Coordinates of the next block to generate: `pebble` indexes a 64-byte
    block within a stream, `stream` indexes the 2**64-pebble cycle.

    Ordered on (stream, pebble). Advancing never moves backwards; running
    past the last stream raises LOCALE_OVERFLOW instead of wrapping.
    """
    pebble: int = 0
    stream: int = 0

    def __post_init__(self):
        # frozen: normalise numpy integers to plain ints
        object.__setattr__(self, "pebble", _require_u64("pebble", self.pebble))
        object.__setattr__(self, "stream", _require_u64("stream", self.stream))

    def __lt__(self, other):
        if not isinstance(other, Locale):
            return NotImplemented
        return (self.stream, self.pebble) < (other.stream, other.pebble)

    def __str__(self) -> str:
        return f"(pebble = {self.pebble}, stream = {self.stream})"

    def same(self, other: Locale) -> bool:
        return self.pebble == other.pebble and self.stream == other.stream

    def skip(self, pebbles: int) -> Locale:
        """Locale `pebbles` blocks ahead of this one."""
        pebbles = _require_u64("pebbles", pebbles)
        if pebbles == 0:
            return self
        new_pebble = (self.pebble + pebbles) & U64_MAX
        if new_pebble >= self.pebble:
            return Locale(new_pebble, self.stream)
        try:
            return Locale(new_pebble, _checked_add_u64(self.stream, 1))
        except OverflowError as e:
            raise ChaosError(ChaosErrorKind.LOCALE_OVERFLOW, "Locale stream overflow.") from e

    def mock(self, n_bytes: int) -> Locale:
        """Locale left behind by generating `n_bytes` more bytes from here."""
        if n_bytes < 0:
            raise ValueError(f"n_bytes must be >= 0, got {n_bytes}")
        if n_bytes == 0:
            return self
        return self.skip((n_bytes + PEBBLE_BYTES - 1) // PEBBLE_BYTES)

    def partition(self, workers: int, pebbles_each: int) -> List[Locale]:
        """
        Starting locales of `workers` consecutive, non-overlapping ranges of
        `pebbles_each` pebbles, the first one starting here.
        """
        if workers <= 0:
            raise ValueError("workers must be > 0")
        if pebbles_each <= 0:
            raise ValueError("pebbles_each must be > 0")
        starts = [self]
        for _ in range(workers - 1):
            starts.append(starts[-1].skip(pebbles_each))
        logger.debug("partitioned %s into %d ranges of %d pebbles", self, workers, pebbles_each)
        return starts
