"""Multi-producer, single-consumer event channel between scan workers and the UI."""

from __future__ import annotations

import queue
import threading

from flbackupcleaner.core.constants import PROGRESS_BACKLOG
from flbackupcleaner.core.models import Progress, ScanEvent


class EventChannel:
    """Unbounded FIFO of scan events.

    Sending never blocks. Progress events are dropped while ``backlog``
    of them are waiting to be drained; every other event is always
    delivered.
    """

    def __init__(self, backlog: int = PROGRESS_BACKLOG):
        self._queue: queue.SimpleQueue[ScanEvent] = queue.SimpleQueue()
        self._backlog = backlog
        self._pending_progress = 0
        self._lock = threading.Lock()
        self.dropped_progress = 0

    def send(self, event: ScanEvent) -> bool:
        """Queue an event. Returns False if a progress event was dropped."""
        if isinstance(event, Progress):
            with self._lock:
                if self._pending_progress >= self._backlog:
                    self.dropped_progress += 1
                    return False
                self._pending_progress += 1
        self._queue.put(event)
        return True

    def drain(self) -> list[ScanEvent]:
        """Return every pending event in arrival order."""
        events: list[ScanEvent] = []
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                break
            if isinstance(event, Progress):
                with self._lock:
                    self._pending_progress -= 1
            events.append(event)
        return events
