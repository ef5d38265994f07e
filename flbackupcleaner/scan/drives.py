"""Candidate scan roots for the current platform."""

from __future__ import annotations

import string
import sys
from pathlib import Path


def _candidate_roots() -> list[Path]:
    if sys.platform == "win32":
        return [Path(f"{letter}:\\") for letter in string.ascii_uppercase]
    if sys.platform == "darwin":
        return [Path("/"), Path("/Users"), Path("/Volumes")]
    return [Path("/"), Path("/home"), Path("/mnt"), Path("/media")]


def get_all_drives() -> list[Path]:
    """Return the existing platform roots, in a stable order."""
    drives: list[Path] = []
    for path in _candidate_roots():
        try:
            if path.is_dir():
                drives.append(path)
        except OSError:
            continue
    return drives
