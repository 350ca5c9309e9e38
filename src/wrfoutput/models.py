"""Data models for WRF output file records."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, NamedTuple


class ParserState(Enum):
    AWAITING_START = "AWAITING_START"
    STREAMING = "STREAMING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class OutputFile:
    """A single file written by WRF, as reported by a timing line."""

    # type of file, e.g. auxhist23, wrfout
    kind: str
    domain: int
    instant: datetime
    # whole hours since the first instant of the run (hour 0)
    hour_offset: int
    filename: str


@dataclass(frozen=True)
class Filter:
    """Selects records by file kind and domain.

    An empty ``kind`` matches any kind, a zero ``domain`` matches any domain.
    """

    kind: str = ""
    domain: int = 0

    def matches(self, record: OutputFile) -> bool:
        if self.kind and self.kind != record.kind:
            return False
        if self.domain and self.domain != record.domain:
            return False
        return True


ALL = Filter()


class Handler(NamedTuple):
    filter: Filter
    fn: Callable[[OutputFile], None]
