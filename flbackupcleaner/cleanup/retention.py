"""Snapshot retention - keeps the latest backup per project, deletes the rest.

Pure logic, no GUI. Returns data structures for the GUI layer to display.
"""

from __future__ import annotations

import logging

from flbackupcleaner.core.models import (
    BackupFile,
    DeletionFailure,
    FoundBackups,
    FoundSummary,
    RetentionResult,
)

logger = logging.getLogger(__name__)


def retention_sort_key(backup: BackupFile) -> tuple[int, float, str]:
    """Newest first: time value, then file mtime, then path for equal times."""
    return (-backup.time_value, -backup.modified_time, str(backup.path))


def select_redundant(backups: list[BackupFile]) -> tuple[BackupFile, list[BackupFile]]:
    """Split a project's backups into (kept, to_delete)."""
    ordered = sorted(backups, key=retention_sort_key)
    return ordered[0], ordered[1:]


def clean_backups(found: FoundBackups) -> RetentionResult:
    """Delete all but the latest backup of every project.

    Each deletion is independent: a failure is recorded and the rest
    continue. Every collection in found is truncated to its kept entry.
    """
    result = RetentionResult()

    for key, backups in found.items():
        if len(backups) <= 1:
            continue

        keep, redundant = select_redundant(backups)
        for backup in redundant:
            try:
                backup.path.unlink()
            except OSError as e:
                logger.warning("Failed to delete %s: %s", backup.path, e)
                result.failures.append(DeletionFailure(backup.path, str(e)))
                continue
            result.deleted_count += 1
            result.reclaimed_bytes += backup.file_size

        logger.debug("Kept %s for %s", keep.path.name, key)
        backups[:] = [keep]

    logger.info(
        "Cleanup deleted %d files, reclaimed %d bytes, %d failures",
        result.deleted_count, result.reclaimed_bytes, len(result.failures),
    )
    return result


def summarize(found: FoundBackups) -> FoundSummary:
    """Counts shown before cleaning: what a cleanup would remove."""
    summary = FoundSummary(projects=len(found))
    for backups in found.values():
        summary.total_files += len(backups)
        if len(backups) > 1:
            summary.projects_with_multiple += 1
            _, redundant = select_redundant(backups)
            summary.redundant_files += len(redundant)
            summary.redundant_bytes += sum(b.file_size for b in redundant)
    return summary
