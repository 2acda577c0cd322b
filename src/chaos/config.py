import os
from dataclasses import dataclass

from .locale import Locale

# 20 rounds is the recommended policy; any positive even count is accepted.
DEFAULT_ROUNDS = 20

@dataclass
class ChaosConfig:
    rounds: int = DEFAULT_ROUNDS
    pebble: int = 0
    stream: int = 0

    @property
    def locale(self) -> Locale:
        return Locale(self.pebble, self.stream)

    @classmethod
    def from_env(cls) -> "ChaosConfig":
        return cls(
            rounds=int(os.environ.get("CHAOS_ROUNDS", str(DEFAULT_ROUNDS))),
            pebble=int(os.environ.get("CHAOS_PEBBLE", "0")),
            stream=int(os.environ.get("CHAOS_STREAM", "0")),
        )
