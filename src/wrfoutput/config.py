"""Run configuration for the rsl.out parser."""

from dataclasses import dataclass
from typing import Callable

# Seconds of silence tolerated between two records before a run is
# declared stalled.
DEFAULT_TIMEOUT = 0.1


def noop() -> None:
    return None


@dataclass
class ParserConfig:
    timeout: float = DEFAULT_TIMEOUT
    # called once when the parser reaches a terminal state
    on_close: Callable[[], None] = noop

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError(f"watchdog timeout must be positive, got {self.timeout!r}")
        if self.on_close is None:
            self.on_close = noop
