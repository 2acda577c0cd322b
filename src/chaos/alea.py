
# src/chaos/alea.py
from __future__ import annotations
import logging
from typing import List, Optional, Sequence

import numpy as np

from .config import ChaosConfig
from .engine import fill_big_integers, fill_bytes, fill_integers, new_kernel
from .locale import Locale

logger = logging.getLogger(__name__)

_I64_MAX = (1 << 63) - 1

class ChaosRandom:
    """
    High-level generator that threads its locale through every engine call.
    A sequence of calls yields exactly what the engine functions yield when
    the returned locales are passed along by hand.
    """
    def __init__(self, kernel: Optional[Sequence[int]] = None, config: Optional[ChaosConfig] = None,
                 locale: Optional[Locale] = None):
        self.config = config or ChaosConfig()
        self.kernel = new_kernel() if kernel is None else kernel
        self.rounds = self.config.rounds
        self._locale = locale if locale is not None else self.config.locale

    @property
    def locale(self) -> Locale:
        return self._locale

    def skip(self, pebbles: int) -> Locale:
        self._locale = self._locale.skip(pebbles)
        return self._locale

    def random_bytes(self, n: int) -> bytes:
        if n <= 0:
            return b""
        out = bytearray(n)
        self._locale = fill_bytes(out, self.kernel, self.rounds, self._locale)
        return bytes(out)

    def integers(self, count: int, min_val: int, max_val: int, dtype=np.int64) -> np.ndarray:
        out = np.empty(count, dtype=dtype)
        self._locale = fill_integers(out, min_val, max_val, self.kernel, self.rounds, self._locale)
        return out

    def big_integers(self, count: int, min_val: int, max_val: int) -> List[int]:
        out = [0] * count
        self._locale = fill_big_integers(out, min_val, max_val, self.kernel, self.rounds, self._locale)
        return out

    def randrange(self, n: int) -> int:
        if n <= 0: raise ValueError("n must be > 0")
        if n == 1:
            return 0
        if n <= _I64_MAX:
            return int(self.integers(1, 0, n)[0])
        return self.big_integers(1, 0, n)[0]

    def randint(self, a: int, b: int) -> int:
        if a > b: raise ValueError("a must be <= b")
        return a + self.randrange(b - a + 1)

    def rand_u32_array(self, count: int) -> np.ndarray:
        """Big-endian u32 words, straight from the byte stream."""
        if count <= 0:
            return np.empty(0, dtype='>u4')
        raw = self.random_bytes(count * 4)
        return np.frombuffer(raw, dtype='>u4', count=count)

    def spawn(self, workers: int, pebbles_each: int) -> List["ChaosRandom"]:
        """
        Independent generators over disjoint pebble ranges starting at the
        current locale. This generator moves past all of them.
        """
        starts = self._locale.partition(workers, pebbles_each)
        children = [ChaosRandom(self.kernel, self.config, start) for start in starts]
        self._locale = starts[-1].skip(pebbles_each)
        logger.debug("spawned %d generators, parent resumes at %s", workers, self._locale)
        return children
