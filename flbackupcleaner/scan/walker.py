"""Depth-bounded, cycle-safe directory traversal looking for Backup folders."""

from __future__ import annotations

import logging
import os
import threading
import time
from pathlib import Path

from flbackupcleaner.core.constants import (
    BACKUP_DIR_NAME,
    PROGRESS_INTERVAL,
    SKIP_DIRS,
    WALKER_HIDDEN_PREFIXES,
    WARNING_INTERVAL,
)
from flbackupcleaner.core.matcher import match_backup_file
from flbackupcleaner.core.models import (
    BackupFile,
    FoundBackup,
    Progress,
    ProjectKey,
    ScanWarning,
)
from flbackupcleaner.scan.channel import EventChannel
from flbackupcleaner.scan.partition import is_skipped
from flbackupcleaner.scan.state import ScanState

logger = logging.getLogger(__name__)


class DirectoryWalker:
    """Walks directory trees for one worker.

    Every directory is claimed in the shared traversed set before it is
    listed, so a directory reachable through several paths (symlinks,
    overlapping roots) is visited once per scan. Unreadable entries are
    skipped; warnings about them are throttled per walker.
    """

    def __init__(
        self,
        state: ScanState,
        channel: EventChannel,
        max_depth: int,
        cancel: threading.Event | None = None,
        skip_dirs=SKIP_DIRS,
        name: str = "walker",
    ):
        self.state = state
        self.channel = channel
        self.max_depth = max_depth
        self.cancel = cancel or threading.Event()
        self.skip_dirs = skip_dirs
        self.name = name
        self.found: list[tuple[ProjectKey, BackupFile]] = []
        self.error_count = 0
        self._suppressed_errors = 0
        self._last_progress = 0.0
        self._last_warning: float | None = None

    def walk(self, start: Path, depth: int = 1) -> int:
        """Traverse start (at the given depth). Returns the number of matches found."""
        before = len(self.found)
        self._visit(Path(start), depth)
        return len(self.found) - before

    def _visit(self, directory: Path, depth: int):
        if self.cancel.is_set():
            return

        try:
            if not self.state.claim(directory):
                return
        except OSError as e:
            self._record_error(directory, e)
            return

        is_backup = directory.name == BACKUP_DIR_NAME
        subdirs: list[Path] = []

        try:
            with os.scandir(directory) as it:
                for entry in it:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            self.state.estimator.tick()
                            if is_backup:
                                self._match(Path(entry.path), directory.parent)
                        elif entry.is_dir():
                            if depth + 1 <= self.max_depth and not is_skipped(
                                entry.name, self.skip_dirs, WALKER_HIDDEN_PREFIXES
                            ):
                                subdirs.append(Path(entry.path))
                    except OSError as e:
                        self._record_error(Path(entry.path), e)
        except OSError as e:
            self._record_error(directory, e)
            return

        self._maybe_emit_progress(directory)

        for sub in subdirs:
            if self.cancel.is_set():
                return
            self._visit(sub, depth + 1)

    def _match(self, path: Path, project_folder: Path):
        backup = match_backup_file(path)
        if backup is None:
            return
        key = ProjectKey(project_folder, backup.project_name)
        self.found.append((key, backup))
        self.channel.send(FoundBackup(key, backup))

    def _maybe_emit_progress(self, directory: Path):
        now = time.monotonic()
        if now - self._last_progress < PROGRESS_INTERVAL:
            return
        self._last_progress = now
        scanned, estimate, percent = self.state.estimator.snapshot()
        self.channel.send(Progress(f"Scanning {directory}", scanned, estimate, percent))

    def _record_error(self, path: Path, error: OSError):
        self.error_count += 1
        logger.debug("%s skipped %s: %s", self.name, path, error)

        now = time.monotonic()
        if self._last_warning is not None and now - self._last_warning < WARNING_INTERVAL:
            self._suppressed_errors += 1
            return

        self._last_warning = now
        message = f"Skipped unreadable path {path}: {error}"
        if self._suppressed_errors:
            message += f" ({self._suppressed_errors} more skipped since last warning)"
            self._suppressed_errors = 0
        self.channel.send(ScanWarning(message))

    def flush_warnings(self) -> None:
        """Report errors that were held back by the warning throttle."""
        if self._suppressed_errors:
            self.channel.send(ScanWarning(
                f"{self.name}: {self._suppressed_errors} more unreadable paths skipped"
            ))
            self._suppressed_errors = 0
