"""Splits a scan root into units of parallel work."""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path

from flbackupcleaner.core.constants import PARTITION_HIDDEN_PREFIXES, SKIP_DIRS

logger = logging.getLogger(__name__)


def is_skipped(name: str, skip_dirs=SKIP_DIRS, hidden_prefixes=PARTITION_HIDDEN_PREFIXES) -> bool:
    return name.lower() in skip_dirs or name.startswith(hidden_prefixes)


def list_top_level_dirs(root: Path, skip_dirs=SKIP_DIRS, estimator=None) -> list[Path]:
    """List the immediate subdirectories of a root, sorted by name.

    Regular files directly in the root tick the estimator, if one is given.
    An unreadable root yields an empty list.
    """
    dirs: list[Path] = []
    try:
        with os.scandir(root) as it:
            for entry in it:
                try:
                    if entry.is_file(follow_symlinks=False):
                        if estimator is not None:
                            estimator.tick()
                        continue
                    if is_skipped(entry.name, skip_dirs):
                        continue
                    if entry.is_dir():
                        dirs.append(Path(entry.path))
                except OSError:
                    continue
    except OSError as e:
        logger.warning("Cannot list root %s: %s", root, e)
        return []

    dirs.sort(key=lambda d: d.name.lower())
    return dirs


def chunk_dirs(dirs: list[Path], max_sub_workers: int) -> list[list[Path]]:
    """Split dirs into contiguous chunks, at most max_sub_workers of them."""
    if not dirs:
        return []
    size = max(1, math.ceil(len(dirs) / max(1, max_sub_workers)))
    return [dirs[i:i + size] for i in range(0, len(dirs), size)]
