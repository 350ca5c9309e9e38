"""Unbuffered synchronous handoff between two threads.

``send`` returns only once a receiver has taken the item, so at most one
item is ever in flight between the two sides.
"""

import threading
import time
from typing import Any, Optional


class HandoffClosed(Exception):
    """Raised on send or receive once the handoff has been closed."""


class HandoffTimeout(Exception):
    """Raised by receive when no item arrives within the timeout."""


class Handoff:
    def __init__(self, name: str = "handoff"):
        self.name = name
        self._cond = threading.Condition()
        self._item: Any = None
        self._pending = False
        self._sent = 0
        self._received = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def send(self, item: Any) -> None:
        with self._cond:
            while self._pending and not self._closed:
                self._cond.wait()
            if self._closed:
                raise HandoffClosed(f"send on closed {self.name}")

            self._item = item
            self._pending = True
            self._sent += 1
            ticket = self._sent
            self._cond.notify_all()

            while self._received < ticket:
                if self._closed:
                    # nobody took it: withdraw
                    self._item = None
                    self._pending = False
                    raise HandoffClosed(f"{self.name} closed before item was received")
                self._cond.wait()

    def receive(self, timeout: Optional[float] = None) -> Any:
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while True:
                if self._closed:
                    raise HandoffClosed(f"receive on closed {self.name}")
                if self._pending:
                    break
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise HandoffTimeout(f"nothing received on {self.name} in {timeout}s")
                self._cond.wait(remaining)

            item = self._item
            self._item = None
            self._pending = False
            self._received += 1
            self._cond.notify_all()
            return item

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()
