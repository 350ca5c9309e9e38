"""Liveness watchdog relaying items from the parser to the consumer."""

import logging
import threading

from wrfoutput.errors import WatchdogTimeoutError, WrfOutputError
from wrfoutput.stream.handoff import Handoff, HandoffClosed, HandoffTimeout

_LOG = logging.getLogger(__name__)


class LivenessWatchdog:
    """Forward items from ``inbox`` to ``outbox``, failing the stream on silence.

    The timer only measures the gap between two items produced upstream:
    it is re-armed after each forward, so a slow consumer never trips it.
    """

    def __init__(self, inbox: Handoff, outbox: Handoff, timeout: float):
        self.inbox = inbox
        self.outbox = outbox
        self.timeout = timeout
        self._thread = threading.Thread(
            target=self.run, name="wrfoutput-watchdog", daemon=True
        )

    def start(self) -> "LivenessWatchdog":
        self._thread.start()
        return self

    def run(self):
        try:
            self._relay()
        finally:
            # release a parser still blocked on a handoff nobody will take
            self.inbox.close()
            self.outbox.close()

    def _relay(self):
        while True:
            try:
                item = self.inbox.receive(timeout=self.timeout)
            except HandoffClosed:
                _LOG.debug("upstream closed, stopping watchdog")
                return
            except HandoffTimeout:
                _LOG.debug("no item within %ss, emitting timeout", self.timeout)
                self._forward(WatchdogTimeoutError(self.timeout))
                return

            if not self._forward(item):
                return
            if isinstance(item, WrfOutputError):
                return

    def _forward(self, item) -> bool:
        try:
            self.outbox.send(item)
        except HandoffClosed:
            _LOG.debug("downstream closed, dropping %r", item)
            return False
        return True
