"""Consumer side of a record stream."""

import logging
from typing import Callable, Iterator, Union

from wrfoutput.errors import HandlerError, WrfOutputError
from wrfoutput.models import Filter, Handler, OutputFile
from wrfoutput.stream.handoff import Handoff, HandoffClosed

_LOG = logging.getLogger(__name__)

Item = Union[OutputFile, WrfOutputError]


class ResultStream:
    """Records produced by one parse run, in the order WRF wrote the files.

    The stream is single-pass. Iterating it yields each OutputFile as soon
    as it is parsed; when the run fails, the last item is the failure.
    The parser blocks until items are consumed, so callers should drain the
    stream with ``collect``, ``execute`` or by iterating it to the end.
    """

    def __init__(self, outbox: Handoff):
        self._outbox = outbox
        self._handlers: list[Handler] = []
        self._dispatching = False

    def __iter__(self) -> Iterator[Item]:
        while True:
            try:
                yield self._outbox.receive()
            except HandoffClosed:
                return

    def records(self) -> Iterator[OutputFile]:
        """Yield records only, raising the terminal failure if there is one."""
        for item in self:
            if isinstance(item, WrfOutputError):
                raise item
            yield item

    def collect(self) -> list[OutputFile]:
        """Drain the stream and return every record.

        Raises the terminal failure instead, discarding partial results.
        """
        collected: list[OutputFile] = []
        failure = None
        for item in self:
            if isinstance(item, WrfOutputError):
                failure = item
                continue
            collected.append(item)
        if failure is not None:
            raise failure
        return collected

    def on_file_do(self, filter: Filter, fn: Callable[[OutputFile], None]) -> "ResultStream":
        """Register ``fn`` for records matching ``filter``.

        Handlers run in registration order. Returns the stream for chaining.
        """
        if self._dispatching:
            raise RuntimeError("handlers must be registered before execute()")
        self._handlers.append(Handler(filter, fn))
        return self

    def execute(self) -> None:
        self._dispatching = True
        for item in self:
            if isinstance(item, WrfOutputError):
                raise item
            for handler in self._handlers:
                if not handler.filter.matches(item):
                    continue
                try:
                    handler.fn(item)
                except Exception as e:
                    _LOG.debug("handler failed on %s: %s", item.filename, e)
                    raise HandlerError(e) from e
