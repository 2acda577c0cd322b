from __future__ import annotations
from enum import Enum
from typing import Optional

class ChaosErrorKind(Enum):
    INVALID_KERNEL = "invalid-kernel"      # kernel is not 8 words
    INVALID_ROUNDS = "invalid-rounds"      # rounds not positive and even
    INVALID_RANGE = "invalid-range"        # [min, max) holds fewer than 2 values
    INVALID_WIDTH = "invalid-width"        # bound does not fit the output width
    LOCALE_OVERFLOW = "locale-overflow"    # stream index exhausted

class ChaosError(Exception):
    """
    Every failure raised by the engine or a locale. `kind` tells callers
    which precondition failed without parsing the message.
    """
    def __init__(self, kind: ChaosErrorKind, message: Optional[str] = None):
        super().__init__(message or kind.value)
        self.kind = kind

    def __repr__(self) -> str:
        return f"ChaosError({self.kind.name}, {str(self)!r})"
