"""Parses FL Studio autosave snapshot filenames."""

from __future__ import annotations

import re
from pathlib import Path

from flbackupcleaner.core.constants import SNAPSHOT_EXTENSION, SNAPSHOT_PATTERN
from flbackupcleaner.core.models import BackupFile

_SNAPSHOT_RE = re.compile(SNAPSHOT_PATTERN)


def parse_backup_name(name: str) -> tuple[str, int, int] | None:
    """Return (project_name, hours, minutes) or None if the name does not match.

    Hours are not range checked: "Song (overwritten at 99h00).flp" parses.
    """
    if not name.endswith(SNAPSHOT_EXTENSION):
        return None

    match = _SNAPSHOT_RE.match(name)
    if not match:
        return None

    return match.group(1), int(match.group(2)), int(match.group(3))


def format_timestamp(hours: int, minutes: int) -> str:
    return f"{hours}h{minutes:02d}"


def match_backup_file(path: Path) -> BackupFile | None:
    """Build a BackupFile for a snapshot on disk.

    Returns None for non-snapshot names and for files whose metadata
    cannot be read.
    """
    parsed = parse_backup_name(path.name)
    if parsed is None:
        return None

    project_name, hours, minutes = parsed
    try:
        st = path.stat()
    except OSError:
        return None

    return BackupFile(
        path=path,
        project_name=project_name,
        timestamp=format_timestamp(hours, minutes),
        file_size=st.st_size,
        hours=hours,
        minutes=minutes,
        modified_time=st.st_mtime,
    )
