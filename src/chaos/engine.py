
from __future__ import annotations
import logging
from typing import MutableSequence, Optional, Sequence, Tuple

import numpy as np
import nacl.utils

from .block import Block, BLOCK_BYTES
from .chacha_core import KEY_WORDS, outer_block, position_words
from .config import DEFAULT_ROUNDS
from .errors import ChaosError, ChaosErrorKind
from .locale import Locale

logger = logging.getLogger(__name__)

KERNEL_LEN = KEY_WORDS
PEBBLE_LEN = BLOCK_BYTES
PEBBLE_LEN32 = BLOCK_BYTES // 4
PEBBLE_LEN64 = BLOCK_BYTES // 8

BIG_INT_LEN = 512
BIG_INT_MIN = -(1 << (BIG_INT_LEN - 1))
BIG_INT_MAX = (1 << (BIG_INT_LEN - 1)) - 1

ERR_KERNEL = "Invalid kernel length."
ERR_ROUNDS = "Invalid number of rounds."
ERR_MIN_MAX = "Invalid [min, max) interval."
ERR_BIT_LEN = "Invalid integer bit length."

# ---------- validation ----------

def _check_kernel(kernel: Sequence[int]) -> None:
    if len(kernel) != KERNEL_LEN:
        raise ChaosError(ChaosErrorKind.INVALID_KERNEL, ERR_KERNEL)

def _check_rounds(rounds: int) -> None:
    if not isinstance(rounds, (int, np.integer)) or isinstance(rounds, bool):
        raise ChaosError(ChaosErrorKind.INVALID_ROUNDS, ERR_ROUNDS)
    if rounds <= 0 or rounds % 2:
        raise ChaosError(ChaosErrorKind.INVALID_ROUNDS, ERR_ROUNDS)

def _check_interval(min_val: int, max_val: int) -> None:
    if max_val - min_val < 2:
        raise ChaosError(ChaosErrorKind.INVALID_RANGE, ERR_MIN_MAX)

def _fill_mask(value: int, width: int) -> int:
    # smallest all-ones value >= value, by doubling shifts up to `width`
    shift = 1
    while shift < width:
        value |= value >> shift
        shift *= 2
    return value

# ---------- blocks ----------

def _next_block(kernel: Sequence[int], rounds: int, locale: Locale) -> Tuple[Block, Locale]:
    words = outer_block(kernel, position_words(locale.pebble, locale.stream), rounds)
    return Block.from_words32(words), locale.skip(1)

def generate_block(kernel: Sequence[int], rounds: int, locale: Locale) -> Tuple[Block, Locale]:
    """Block at `locale`, plus the locale right after it."""
    _check_kernel(kernel)
    _check_rounds(rounds)
    return _next_block(kernel, rounds, locale)

# ---------- public API ----------

def new_kernel(output: Optional[MutableSequence[int]] = None):
    """
    Fills an 8-word kernel from the system entropy source (libsodium
    randombytes). Allocates a fresh uint32 array when `output` is None.
    """
    if output is None:
        output = np.empty(KERNEL_LEN, dtype=np.uint32)
    if len(output) != KERNEL_LEN:
        raise ChaosError(ChaosErrorKind.INVALID_KERNEL, ERR_KERNEL)
    words = np.frombuffer(nacl.utils.random(KERNEL_LEN * 4), dtype="<u4")
    output[:] = words.tolist()
    logger.debug("new kernel drawn from system entropy")
    return output

def fill_bytes(output, kernel: Sequence[int], rounds: int = DEFAULT_ROUNDS,
               locale: Locale = Locale()) -> Locale:
    """
    Fills a writable buffer (bytearray, memoryview, numpy array) with block
    bytes in order. The last block may be partially consumed; the returned
    locale always points past it.
    """
    _check_kernel(kernel)
    _check_rounds(rounds)
    view = memoryview(output).cast("B")
    if view.readonly:
        raise TypeError("output buffer is read-only")
    n = len(view)
    if n == 0:
        return locale
    # raises LOCALE_OVERFLOW before anything is written
    locale.mock(n)

    pos = 0
    new_loc = locale
    while pos < n:
        block, new_loc = _next_block(kernel, rounds, new_loc)
        take = min(BLOCK_BYTES, n - pos)
        view[pos:pos + take] = block.to_bytes()[:take]
        pos += take
    logger.debug("fill_bytes: %d bytes %s -> %s", n, locale, new_loc)
    return new_loc

def fill_integers(output: np.ndarray, min_val: int, max_val: int, kernel: Sequence[int],
                  rounds: int = DEFAULT_ROUNDS, locale: Locale = Locale()) -> Locale:
    """
    Fills a numpy integer array with values in [min_val, max_val) by
    rejection sampling: every attempt takes one 64-bit word from the block
    stream (8 per block), masks it, and keeps it only if it is <= range.
    Words left in the last block are discarded.
    """
    _check_kernel(kernel)
    _check_rounds(rounds)
    min_val, max_val = int(min_val), int(max_val)
    _check_interval(min_val, max_val)
    if not np.issubdtype(output.dtype, np.integer):
        raise TypeError(f"output must have an integer dtype, got {output.dtype}")
    info = np.iinfo(output.dtype)
    if not (info.min <= min_val <= info.max and info.min <= max_val <= info.max):
        raise ChaosError(ChaosErrorKind.INVALID_WIDTH, ERR_BIT_LEN)

    count = output.size
    if count == 0:
        return locale

    span = max_val - min_val - 1
    mask = _fill_mask(span, 64)

    values = []
    new_loc = locale
    while len(values) < count:
        block, new_loc = _next_block(kernel, rounds, new_loc)
        for word in block.words64.tolist():
            draw = word & mask
            if draw > span:
                continue
            values.append(min_val + draw)
            if len(values) == count:
                break
    output.flat[:] = values
    logger.debug("fill_integers: %d x %s in [%d, %d) %s -> %s",
                 count, output.dtype, min_val, max_val, locale, new_loc)
    return new_loc

def fill_big_integers(output: MutableSequence[int], min_val: int, max_val: int,
                      kernel: Sequence[int], rounds: int = DEFAULT_ROUNDS,
                      locale: Locale = Locale()) -> Locale:
    """
    Fills a list with Python ints in [min_val, max_val), both bounds within
    the 512-bit signed envelope. Every attempt consumes one whole block read
    as a big-endian unsigned 512-bit integer, accepted or not.
    """
    _check_kernel(kernel)
    _check_rounds(rounds)
    min_val, max_val = int(min_val), int(max_val)
    if not (BIG_INT_MIN <= min_val <= BIG_INT_MAX and BIG_INT_MIN <= max_val <= BIG_INT_MAX):
        raise ChaosError(ChaosErrorKind.INVALID_WIDTH, ERR_BIT_LEN)
    _check_interval(min_val, max_val)

    if len(output) == 0:
        return locale

    span = max_val - min_val - 1
    mask = _fill_mask(span, BIG_INT_LEN)

    values = []
    new_loc = locale
    for _ in range(len(output)):
        while True:
            block, new_loc = _next_block(kernel, rounds, new_loc)
            draw = block.to_int() & mask
            if draw <= span:
                break
        values.append(min_val + draw)
    # nothing reaches the caller if the locale runs out midway
    output[:] = values
    logger.debug("fill_big_integers: %d in [%d, %d) %s -> %s",
                 len(output), min_val, max_val, locale, new_loc)
    return new_loc

# ---------- one-shot helpers (fresh kernel, default rounds, origin locale) ----------

def load_bytes(n: int) -> bytes:
    out = bytearray(n)
    fill_bytes(out, new_kernel(), DEFAULT_ROUNDS, Locale())
    return bytes(out)

def load_integers(count: int, min_val: int, max_val: int, dtype=np.int64) -> np.ndarray:
    out = np.empty(count, dtype=dtype)
    fill_integers(out, min_val, max_val, new_kernel(), DEFAULT_ROUNDS, Locale())
    return out

def load_big_integers(count: int, min_val: int, max_val: int) -> list:
    out = [0] * count
    fill_big_integers(out, min_val, max_val, new_kernel(), DEFAULT_ROUNDS, Locale())
    return out
