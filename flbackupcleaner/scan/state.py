"""Shared state for one scan invocation."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from flbackupcleaner.scan.progress import ProgressEstimator


def canonical_path(path: Path) -> str:
    """Resolved, symlink-free absolute form of path."""
    return os.path.normcase(os.path.realpath(path))


class ScanState:
    def __init__(self, root_count: int):
        self.estimator = ProgressEstimator(root_count)
        self._lock = threading.Lock()
        self._traversed: set[str] = set()
        self._completed_roots: set[Path] = set()

    def claim(self, path: Path) -> bool:
        """Record path as traversed. False if it was already claimed.

        Raises OSError when the path cannot be resolved.
        """
        key = canonical_path(path)
        with self._lock:
            if key in self._traversed:
                return False
            self._traversed.add(key)
            return True

    def mark_root_complete(self, root: Path) -> None:
        with self._lock:
            self._completed_roots.add(root)

    @property
    def completed_roots(self) -> set[Path]:
        with self._lock:
            return set(self._completed_roots)

    @property
    def traversed_count(self) -> int:
        with self._lock:
            return len(self._traversed)
