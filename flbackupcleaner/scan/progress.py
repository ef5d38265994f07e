"""Adaptive estimate of the total number of files a scan will visit.

The total is unknown up front, so the estimate starts from a fixed
per-root baseline and grows as files are observed. The displayed
percentage is kept as a high-water mark capped at 95% until the scan
is finished, so it never moves backwards and never shows 100% early.
"""

from __future__ import annotations

import math
import threading

from flbackupcleaner.core.constants import (
    DISPLAY_CAP,
    PER_ROOT_BASELINE,
    RESCALE_FACTOR,
    RESCALE_THRESHOLD,
)


class ProgressEstimator:
    def __init__(self, root_count: int, baseline: int = PER_ROOT_BASELINE):
        self._lock = threading.Lock()
        self._scanned = 0
        self._estimate = max(1, root_count) * max(1, baseline)
        self._percent = 0.0
        self._finished = False

    def tick(self, files: int = 1) -> None:
        with self._lock:
            for _ in range(files):
                self._scanned += 1
                if self._scanned > self._estimate * RESCALE_THRESHOLD:
                    self._estimate = int(self._estimate * RESCALE_FACTOR)
                if not self._finished and self._scanned / self._estimate > DISPLAY_CAP:
                    self._estimate = math.ceil(self._scanned / DISPLAY_CAP)
            self._update_percent()

    def _update_percent(self):
        if self._finished:
            self._percent = 100.0
            return
        raw = min(DISPLAY_CAP * 100, 100.0 * self._scanned / self._estimate)
        self._percent = max(self._percent, raw)

    def finish(self) -> None:
        with self._lock:
            self._finished = True
            self._update_percent()

    @property
    def scanned(self) -> int:
        with self._lock:
            return self._scanned

    @property
    def estimate(self) -> int:
        with self._lock:
            return self._estimate

    @property
    def percent(self) -> float:
        with self._lock:
            return self._percent

    @property
    def finished(self) -> bool:
        with self._lock:
            return self._finished

    def snapshot(self) -> tuple[int, int, float]:
        """Return (scanned, estimate, percent) read under one lock."""
        with self._lock:
            return self._scanned, self._estimate, self._percent
