from __future__ import annotations
from typing import Sequence
import numpy as np

BLOCK_BYTES = 64

class Block:
    """
    One 512-bit output block. The canonical form is 64 bytes; the word views
    are big-endian reinterpretations of that same buffer:

      words32[i] = bytes[4i:4i+4] read as >u4
      words64[i] = (words32[2i] << 32) | words32[2i+1]
    """
    __slots__ = ("_buf",)

    def __init__(self, raw: bytes):
        if len(raw) != BLOCK_BYTES:
            raise ValueError(f"block must be {BLOCK_BYTES} bytes, got {len(raw)}")
        self._buf = np.frombuffer(bytes(raw), dtype=np.uint8)

    @classmethod
    def from_words32(cls, words: Sequence[int]) -> Block:
        if len(words) != BLOCK_BYTES // 4:
            raise ValueError(f"block must be 16 words, got {len(words)}")
        return cls(np.asarray(words, dtype=">u4").tobytes())

    @classmethod
    def from_words64(cls, words: Sequence[int]) -> Block:
        if len(words) != BLOCK_BYTES // 8:
            raise ValueError(f"block must be 8 words, got {len(words)}")
        return cls(np.asarray(words, dtype=">u8").tobytes())

    @property
    def bytes(self) -> np.ndarray:
        return self._buf

    @property
    def words32(self) -> np.ndarray:
        return self._buf.view(">u4")

    @property
    def words64(self) -> np.ndarray:
        return self._buf.view(">u8")

    def to_bytes(self) -> bytes:
        return self._buf.tobytes()

    def to_int(self) -> int:
        """The block as an unsigned 512-bit integer, big-endian."""
        return int.from_bytes(self._buf.tobytes(), "big")

    def __eq__(self, other):
        if not isinstance(other, Block):
            return NotImplemented
        return bool(np.array_equal(self._buf, other._buf))

    def __repr__(self) -> str:
        return f"Block({self.to_bytes().hex()})"
