"""Classification and decoding of single WRF rsl.out log lines.

Recognized shapes:

    d01 2021-08-04_00:00:00  alloc_space_field: domain            2 ,   5403068  bytes allocated
    Timing for Writing auxhist23_d03_2021-08-04_01:00:00 for domain        3:   10.02259 elapsed seconds
    d01 2021-08-06_00:00:00 wrf: SUCCESS COMPLETE WRF
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from wrfoutput.errors import (
    InvalidDomainError,
    InvalidInstantError,
    InvalidStartInstantError,
    MalformedFilenameError,
    MalformedStartLineError,
    MissingDomainMarkerError,
    MissingStartInstantError,
)
from wrfoutput.models import OutputFile

START_PREFIX = "d01 "
TIMING_PREFIX = "Timing for Writing "
SUCCESS_SUFFIX = "SUCCESS COMPLETE WRF"
DOMAIN_MARKER = " for domain"
RESTART_FILENAME = "restart"

START_INSTANT_FORMAT = "%Y-%m-%d_%H:%M:%S"
FILE_INSTANT_FORMAT = "%Y-%m-%d%H:%M:%S"

RE_DOMAIN = re.compile(r'd(\d{1,10})', re.ASCII)
# domain ids are 32-bit signed integers in WRF
MAX_DOMAIN = 2**31 - 1
RE_START_INSTANT = re.compile(r'\d{4}-\d{2}-\d{2}_\d{2}:\d{2}:\d{2}', re.ASCII)
RE_FILE_INSTANT = re.compile(r'\d{4}-\d{2}-\d{2}\d{2}:\d{2}:\d{2}', re.ASCII)


class LineKind(Enum):
    START = "START"
    TIMING = "TIMING"
    SUCCESS = "SUCCESS"
    OTHER = "OTHER"


def classify_line(line: str, start_known: bool) -> LineKind:
    """Tell which recognized shape a log line has.

    A start-instant line is only recognized while the run start is still
    unknown; afterwards ``d01`` lines are ordinary noise.
    """
    if not start_known and line.startswith(START_PREFIX):
        return LineKind.START
    if line.startswith(TIMING_PREFIX):
        return LineKind.TIMING
    if line.endswith(SUCCESS_SUFFIX):
        return LineKind.SUCCESS
    return LineKind.OTHER


def _parse_utc(value: str, pattern: re.Pattern, fmt: str) -> datetime:
    if not pattern.fullmatch(value):
        raise ValueError(f"time data {value!r} does not match layout {fmt!r}")
    return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)


def hours_between(start: datetime, instant: datetime) -> int:
    """Whole hours from ``start`` to ``instant``, truncated toward zero."""
    return int((instant - start).total_seconds() / 3600)


def decode_start_line(line: str) -> datetime:
    parts = line.split(" ", 2)
    if len(parts) != 3:
        raise MalformedStartLineError(
            line,
            "line must contain at least 3 space separated parts. "
            "e.g. `d01 2021-08-04_00:00:00 something`",
        )
    try:
        return _parse_utc(parts[1], RE_START_INSTANT, START_INSTANT_FORMAT)
    except ValueError as e:
        raise InvalidStartInstantError(line, str(e)) from e


def decode_timing_line(line: str, start: Optional[datetime]) -> Optional[OutputFile]:
    """Decode a timing line into an OutputFile.

    Returns None for restart checkpoints, which are not simulation output.
    """
    if start is None:
        raise MissingStartInstantError(line)

    # auxhist23_d03_2021-08-04_01:00:00 for domain        3:   10.02259 elapsed seconds
    remainder = line.removeprefix(TIMING_PREFIX)
    pieces = remainder.split(DOMAIN_MARKER)
    if len(pieces) != 2:
        raise MissingDomainMarkerError(line, "`for domain` expected to appear in line")

    filename = pieces[0].strip()
    if filename == RESTART_FILENAME:
        return None

    # auxhist23 / d03 / 2021-08-04 / 01:00:00
    name_parts = filename.split("_")
    if len(name_parts) != 4:
        raise MalformedFilenameError(
            line, "filename expected to be formed by 4 parts separated by underscores"
        )
    kind, domain_part, date_part, time_part = name_parts

    m = RE_DOMAIN.fullmatch(domain_part)
    domain = int(m.group(1)) if m else 0
    if not 0 < domain <= MAX_DOMAIN:
        raise InvalidDomainError(line, f"invalid domain: `{domain_part}`")

    try:
        instant = _parse_utc(date_part + time_part, RE_FILE_INSTANT, FILE_INSTANT_FORMAT)
    except ValueError as e:
        raise InvalidInstantError(line, f"invalid time instant: {e}") from e

    return OutputFile(
        kind=kind,
        domain=domain,
        instant=instant,
        hour_offset=hours_between(start, instant),
        filename=filename,
    )
