"""Dataclasses for all FL Backup Cleaner data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class BackupFile:
    path: Path
    project_name: str
    timestamp: str
    file_size: int
    hours: int
    minutes: int
    modified_time: float = 0.0

    @property
    def time_value(self) -> int:
        """Minutes since midnight, only used to order snapshots."""
        return self.hours * 60 + self.minutes


@dataclass(frozen=True)
class ProjectKey:
    project_folder: Path
    project_name: str

    def __str__(self) -> str:
        return f"{self.project_folder}#{self.project_name}"


FoundBackups = dict[ProjectKey, list[BackupFile]]


@dataclass(frozen=True)
class ScanConfig:
    """Immutable settings snapshot captured when a scan starts.

    An empty ``roots`` tuple selects every enumerated root.
    """

    roots: tuple[Path, ...] = ()
    max_sub_workers: int = 4
    max_depth: int = 10
    auto_clean: bool = False

    def __post_init__(self):
        if self.max_sub_workers < 1:
            raise ValueError(f"max_sub_workers must be >= 1, got {self.max_sub_workers}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")

    @classmethod
    def from_settings(
        cls,
        roots,
        max_sub_workers: int | str,
        max_depth: int | str,
        auto_clean: bool = False,
    ) -> ScanConfig:
        """Build a config from raw values entered in the outer layer."""
        return cls(
            roots=tuple(Path(r) for r in roots),
            max_sub_workers=int(max_sub_workers),
            max_depth=int(max_depth),
            auto_clean=bool(auto_clean),
        )


@dataclass
class DeletionFailure:
    path: Path
    reason: str


@dataclass
class RetentionResult:
    deleted_count: int = 0
    reclaimed_bytes: int = 0
    failures: list[DeletionFailure] = field(default_factory=list)

    @property
    def reclaimed_mb(self) -> float:
        return self.reclaimed_bytes / (1024 * 1024)


@dataclass
class FoundSummary:
    projects: int = 0
    total_files: int = 0
    projects_with_multiple: int = 0
    redundant_files: int = 0
    redundant_bytes: int = 0


@dataclass
class ScanResult:
    found: FoundBackups = field(default_factory=dict)
    total_found: int = 0
    files_scanned: int = 0
    completed_roots: set[Path] = field(default_factory=set)
    cancelled: bool = False
    retention: RetentionResult | None = None


# ── Events ──────────────────────────────────────────────────────────────────


class EventKind(Enum):
    PROGRESS = "progress"
    FOUND_BACKUP = "found_backup"
    WARNING = "warning"
    COMPLETE = "complete"
    AUTO_CLEAN_REQUESTED = "auto_clean_requested"
    CLEANUP_FINISHED = "cleanup_finished"


@dataclass(frozen=True)
class Progress:
    message: str
    files_scanned: int
    total_estimate: int
    percent: float
    kind: EventKind = field(default=EventKind.PROGRESS, init=False)


@dataclass(frozen=True)
class FoundBackup:
    project_key: ProjectKey
    backup: BackupFile
    kind: EventKind = field(default=EventKind.FOUND_BACKUP, init=False)


@dataclass(frozen=True)
class ScanWarning:
    message: str
    kind: EventKind = field(default=EventKind.WARNING, init=False)


@dataclass(frozen=True)
class Complete:
    total_found: int
    kind: EventKind = field(default=EventKind.COMPLETE, init=False)


@dataclass(frozen=True)
class AutoCleanRequested:
    kind: EventKind = field(default=EventKind.AUTO_CLEAN_REQUESTED, init=False)


@dataclass(frozen=True)
class CleanupFinished:
    result: RetentionResult
    kind: EventKind = field(default=EventKind.CLEANUP_FINISHED, init=False)


ScanEvent = Progress | FoundBackup | ScanWarning | Complete | AutoCleanRequested | CleanupFinished
