"""Entrega de resultados al hilo dueño del estado de pantalla."""

from __future__ import annotations

import queue
import time
from abc import ABC, abstractmethod
from collections.abc import Callable


class Dispatcher(ABC):
    """Runs callables on the thread that owns the screen state."""

    @abstractmethod
    def post(self, fn: Callable[[], None]) -> None:
        """Schedule ``fn`` on the owner thread. Safe from any thread."""


class QueueDispatcher(Dispatcher):
    """Dispatcher for headless use: the owner thread drains a queue."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Callable[[], None]] = queue.Queue()

    def post(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    def drain(self) -> int:
        """Run every pending callable. Returns how many ran."""
        ran = 0
        while True:
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                return ran
            fn()
            ran += 1

    def run_until(self, done: Callable[[], bool], timeout: float) -> bool:
        """Process posted callables until ``done()`` holds or time runs out.

        Returns:
            True if ``done()`` became true, False on timeout.
        """
        deadline = time.monotonic() + timeout
        while not done():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            try:
                fn = self._queue.get(timeout=remaining)
            except queue.Empty:
                return done()
            fn()
        return True
