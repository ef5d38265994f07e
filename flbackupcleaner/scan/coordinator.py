"""Orchestrates a full backup scan across all selected roots."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable

from flbackupcleaner.cleanup.retention import clean_backups
from flbackupcleaner.core.models import (
    AutoCleanRequested,
    BackupFile,
    CleanupFinished,
    Complete,
    Progress,
    ProjectKey,
    ScanConfig,
    ScanResult,
    ScanWarning,
)
from flbackupcleaner.scan.channel import EventChannel
from flbackupcleaner.scan.drives import get_all_drives
from flbackupcleaner.scan.partition import chunk_dirs, list_top_level_dirs
from flbackupcleaner.scan.state import ScanState
from flbackupcleaner.scan.walker import DirectoryWalker

logger = logging.getLogger(__name__)

Matches = list[tuple[ProjectKey, BackupFile]]


class ScanCoordinator:
    """Runs one scan: a worker per root, fanned out over chunks of its top-level dirs.

    Matches flow back through the worker futures and are merged into
    ``result.found`` on the coordinating thread only.
    """

    def __init__(
        self,
        config: ScanConfig,
        channel: EventChannel | None = None,
        enumerate_roots: Callable[[], list[Path]] = get_all_drives,
    ):
        self.config = config
        self.channel = channel or EventChannel()
        self.enumerate_roots = enumerate_roots
        self.result = ScanResult()
        self.state: ScanState | None = None
        self._cancel = threading.Event()
        self._thread: threading.Thread | None = None

    # ── Public API ─────────────────────────────────────────────────────────

    def start(self) -> threading.Thread:
        """Run the scan on a background thread."""
        self._thread = threading.Thread(target=self.run, name="ScanCoordinator", daemon=True)
        self._thread.start()
        return self._thread

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def auto_clean_pending(self) -> bool:
        """True while an auto-clean of ``result.found`` is due or in progress."""
        return self.config.auto_clean and not self.cancelled and self.result.retention is None

    def run(self) -> ScanResult:
        self.channel.send(Progress("Getting drive list...", 0, 0, 0.0))
        roots = self.select_roots()
        logger.info("Scanning %d root(s): %s", len(roots), ", ".join(str(r) for r in roots))

        self.state = ScanState(len(roots))
        for root in roots:
            try:
                self.state.claim(root)
            except OSError as e:
                logger.debug("Cannot resolve root %s: %s", root, e)

        if roots:
            with ThreadPoolExecutor(max_workers=len(roots), thread_name_prefix="root") as pool:
                futures = {pool.submit(self._scan_root, root, i): root for i, root in enumerate(roots)}
                for future in as_completed(futures):
                    root = futures[future]
                    try:
                        matches, complete = future.result()
                    except Exception as e:
                        logger.exception("Worker for %s failed", root)
                        self.channel.send(ScanWarning(f"Scan of {root} did not finish: {e}"))
                        continue
                    self._merge(matches)
                    if complete:
                        self.state.mark_root_complete(root)
                    logger.info("Finished %s: %d backup file(s)", root, len(matches))

        self.state.estimator.finish()
        self.result.files_scanned = self.state.estimator.scanned
        self.result.completed_roots = self.state.completed_roots
        self.result.cancelled = self.cancelled

        if self.cancelled:
            self.channel.send(ScanWarning("Scan cancelled"))
        self.channel.send(Complete(self.result.total_found))
        logger.info(
            "Scan complete: %d backup file(s) in %d project(s), %d files scanned",
            self.result.total_found, len(self.result.found), self.result.files_scanned,
        )

        if self.config.auto_clean and not self.cancelled:
            self.channel.send(AutoCleanRequested())
            self.result.retention = clean_backups(self.result.found)
            self.channel.send(CleanupFinished(self.result.retention))

        return self.result

    def select_roots(self) -> list[Path]:
        """Enumerated roots filtered to the configured selection."""
        available = self.enumerate_roots()
        if not self.config.roots:
            return list(available)

        by_key = {_root_key(r): r for r in available}
        selected: list[Path] = []
        for root in self.config.roots:
            match = by_key.get(_root_key(root))
            if match is None:
                logger.warning("Selected root %s is not available", root)
                self.channel.send(ScanWarning(f"Root not available: {root}"))
                continue
            if match not in selected:
                selected.append(match)
        return selected

    # ── Workers ────────────────────────────────────────────────────────────

    def _scan_root(self, root: Path, index: int) -> tuple[Matches, bool]:
        top_level = list_top_level_dirs(root, estimator=self.state.estimator)
        chunks = chunk_dirs(top_level, self.config.max_sub_workers)
        self.channel.send(Progress(
            f"Scanning {root} ({len(top_level)} folders, {len(chunks)} workers)...",
            *self.state.estimator.snapshot(),
        ))

        matches: Matches = []
        complete = True
        if not chunks:
            return matches, complete

        with ThreadPoolExecutor(
            max_workers=len(chunks), thread_name_prefix=f"root{index}"
        ) as pool:
            futures = {
                pool.submit(self._scan_chunk, chunk, f"root{index}-w{n}"): chunk
                for n, chunk in enumerate(chunks)
            }
            for future in as_completed(futures):
                try:
                    matches.extend(future.result())
                except Exception as e:
                    logger.exception("Chunk worker under %s failed", root)
                    self.channel.send(ScanWarning(f"Worker under {root} failed: {e}"))
                    complete = False

        return matches, complete and not self.cancelled

    def _scan_chunk(self, chunk: list[Path], name: str) -> Matches:
        walker = DirectoryWalker(
            self.state,
            self.channel,
            self.config.max_depth,
            cancel=self._cancel,
            name=name,
        )
        for directory in chunk:
            if self._cancel.is_set():
                break
            walker.walk(directory)
        walker.flush_warnings()
        return walker.found

    def _merge(self, matches: Matches):
        for key, backup in matches:
            self.result.found.setdefault(key, []).append(backup)
        self.result.total_found += len(matches)


def _root_key(path: Path) -> str:
    return os.path.normcase(os.path.abspath(path))
