"""Entry points tying the log source, parser and result stream together."""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from wrfoutput.config import DEFAULT_TIMEOUT, ParserConfig
from wrfoutput.errors import SourceReadError
from wrfoutput.parsers.rsl import Line, RslParser
from wrfoutput.stream.results import ResultStream

_LOG = logging.getLogger(__name__)


def parse(
    source: Iterable[Line],
    timeout: float = DEFAULT_TIMEOUT,
    on_close: Optional[Callable[[], None]] = None,
) -> ResultStream:
    """Parse a WRF log from any iterable of lines.

    ``source`` can be an open text or binary file, a pipe, or a list of
    lines. Parsing proceeds in the background as the returned stream is
    consumed.
    """
    parser = RslParser(ParserConfig(timeout=timeout, on_close=on_close))
    return parser.parse(source)


def parse_file(path: Union[str, Path], timeout: float = DEFAULT_TIMEOUT) -> ResultStream:
    """Parse the WRF log at ``path``, closing the file once the run ends.

    A file that cannot be opened yields a stream whose only item is the
    SourceReadError.
    """
    try:
        f = open(path, "r", errors="replace")
    except OSError as e:
        _LOG.debug("cannot open %s: %s", path, e)
        return RslParser(ParserConfig(timeout=timeout)).fail(SourceReadError(e))

    return parse(f, timeout=timeout, on_close=f.close)
