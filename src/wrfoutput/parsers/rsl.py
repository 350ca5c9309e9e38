"""Streaming parser for the WRF rsl.out.0000 log."""

import dataclasses
import logging
import threading
from datetime import datetime
from typing import Callable, Iterable, Optional, Union

from wrfoutput.config import ParserConfig
from wrfoutput.errors import (
    CompletionHookError,
    SourceReadError,
    StreamIncompleteError,
    WrfOutputError,
)
from wrfoutput.models import OutputFile, ParserState
from wrfoutput.parsers.lines import (
    LineKind,
    classify_line,
    decode_start_line,
    decode_timing_line,
)
from wrfoutput.stream.handoff import Handoff, HandoffClosed
from wrfoutput.stream.results import ResultStream
from wrfoutput.stream.watchdog import LivenessWatchdog

_LOG = logging.getLogger(__name__)

Line = Union[str, bytes]


def _as_text(line: Line) -> str:
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    return line.rstrip("\r\n")


class RslParser:
    """Parse a WRF log into a stream of OutputFile records.

    ``parse`` runs the parser and its liveness watchdog in background
    threads and returns the ResultStream the caller consumes. A parser
    instance handles a single run.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = dataclasses.replace(config) if config else ParserConfig()
        self.start: Optional[datetime] = None
        self.state = ParserState.AWAITING_START
        self._started = False
        self._handoff = Handoff("parser handoff")
        self._outbox = Handoff("result stream")
        self.results = ResultStream(self._outbox)

    def set_on_close(self, fn: Callable[[], None]) -> None:
        if self._started:
            raise RuntimeError("on_close hook must be set before parse() starts")
        self.config.on_close = fn

    def parse(self, source: Iterable[Line]) -> ResultStream:
        if self._started:
            raise RuntimeError("parser already started")
        self._started = True

        LivenessWatchdog(self._handoff, self._outbox, self.config.timeout).start()
        threading.Thread(
            target=self.run, args=(source,), name="wrfoutput-parser", daemon=True
        ).start()
        return self.results

    def fail(self, failure: WrfOutputError) -> ResultStream:
        """Start a run whose only item is ``failure``.

        Used when the log source cannot even be opened.
        """
        if self._started:
            raise RuntimeError("parser already started")
        self._started = True

        LivenessWatchdog(self._handoff, self._outbox, self.config.timeout).start()
        threading.Thread(
            target=self._finish, args=(failure,), name="wrfoutput-parser", daemon=True
        ).start()
        return self.results

    def run(self, source: Iterable[Line]):
        try:
            failure = self._consume(source)
        except HandoffClosed:
            _LOG.debug("stream abandoned downstream, stopping parser")
            self.state = ParserState.FAILED
            self._close_source()
            return
        self._finish(failure)

    def _consume(self, source: Iterable[Line]) -> Optional[WrfOutputError]:
        try:
            lines = iter(source)
        except Exception as e:
            return SourceReadError(e)

        while True:
            try:
                line = _as_text(next(lines))
            except StopIteration:
                return StreamIncompleteError()
            except Exception as e:
                return SourceReadError(e)

            try:
                record = self._parse_line(line)
            except WrfOutputError as e:
                return e
            if self.state == ParserState.COMPLETED:
                return None
            if record is not None:
                _LOG.debug("hour %d: %s", record.hour_offset, record.filename)
                self._handoff.send(record)

    def _parse_line(self, line: str) -> Optional[OutputFile]:
        kind = classify_line(line, self.start is not None)

        if kind == LineKind.START:
            self.start = decode_start_line(line)
            self.state = ParserState.STREAMING
            _LOG.debug("run starts at %s", self.start.isoformat())
        elif kind == LineKind.TIMING:
            return decode_timing_line(line, self.start)
        elif kind == LineKind.SUCCESS:
            self.state = ParserState.COMPLETED
        return None

    def _finish(self, failure: Optional[WrfOutputError]):
        if failure is None:
            try:
                self.config.on_close()
            except Exception as e:
                failure = CompletionHookError(e)
        else:
            self._close_source()

        if failure is None:
            _LOG.debug("run completed")
            self._handoff.close()
            return

        self.state = ParserState.FAILED
        _LOG.debug("run failed: %s", failure)
        try:
            self._handoff.send(failure)
        except HandoffClosed:
            _LOG.debug("stream abandoned downstream, dropping %r", failure)
        finally:
            self._handoff.close()

    def _close_source(self):
        try:
            self.config.on_close()
        except Exception as e:
            _LOG.warning("on_close hook failed after stream failure: %s", e)
