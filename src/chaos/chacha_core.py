
from __future__ import annotations
import struct
from typing import List, Sequence

# "expand 32-byte k"
CONSTANTS = struct.unpack("<4I", b"expand 32-byte k")

KEY_WORDS = 8
STATE_WORDS = 16

def _rotl32(x, n): return ((x << n) & 0xffffffff) | (x >> (32 - n))

def _qr(a, b, c, d):
    a = (a + b) & 0xffffffff; d ^= a; d = _rotl32(d, 16)
    c = (c + d) & 0xffffffff; b ^= c; b = _rotl32(b, 12)
    a = (a + b) & 0xffffffff; d ^= a; d = _rotl32(d, 8)
    c = (c + d) & 0xffffffff; b ^= c; b = _rotl32(b, 7)
    return a, b, c, d

def quarter_round(state: List[int], a: int, b: int, c: int, d: int) -> None:
    """Quarter round on state slots (a, b, c, d), in place."""
    state[a], state[b], state[c], state[d] = _qr(state[a], state[b], state[c], state[d])

def position_words(pebble: int, stream: int) -> List[int]:
    # pebble hi/lo, then stream hi/lo
    return [
        (pebble >> 32) & 0xffffffff, pebble & 0xffffffff,
        (stream >> 32) & 0xffffffff, stream & 0xffffffff,
    ]

def outer_block(kernel: Sequence[int], position: Sequence[int], rounds: int) -> List[int]:
    """
    ChaCha block function: constants, 8 kernel words and 4 position words
    mixed by rounds/2 double rounds, then added back to the initial state.

    No validation happens here; callers guarantee 8 kernel words, 4 position
    words and a positive even round count.
    """
    state = list(CONSTANTS) + [int(w) & 0xffffffff for w in kernel] + \
        [int(w) & 0xffffffff for w in position]
    working = state[:]
    for _ in range(rounds // 2):
        # column rounds then diagonal rounds, unrolled
        working[0], working[4], working[8],  working[12] = _qr(working[0], working[4], working[8],  working[12])
        working[1], working[5], working[9],  working[13] = _qr(working[1], working[5], working[9],  working[13])
        working[2], working[6], working[10], working[14] = _qr(working[2], working[6], working[10], working[14])
        working[3], working[7], working[11], working[15] = _qr(working[3], working[7], working[11], working[15])
        working[0], working[5], working[10], working[15] = _qr(working[0], working[5], working[10], working[15])
        working[1], working[6], working[11], working[12] = _qr(working[1], working[6], working[11], working[12])
        working[2], working[7], working[8],  working[13] = _qr(working[2], working[7], working[8],  working[13])
        working[3], working[4], working[9],  working[14] = _qr(working[3], working[4], working[9],  working[14])
    return [(working[i] + state[i]) & 0xffffffff for i in range(STATE_WORDS)]
