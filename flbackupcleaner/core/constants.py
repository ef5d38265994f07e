"""Naming conventions and tuning constants for the backup scan."""

# FL Studio autosave snapshots live in a folder with exactly this name
BACKUP_DIR_NAME = "Backup"

# Snapshot files: "<project> (overwritten at 3h05).flp"
SNAPSHOT_EXTENSION = ".flp"
SNAPSHOT_PATTERN = r"^(.+) \(overwritten at (\d{1,2})h(\d{2})\)\.flp$"

# Directory names never descended into (compared case-insensitively)
SKIP_DIRS = frozenset({
    # Windows system folders
    "windows",
    "program files",
    "program files (x86)",
    "programdata",
    "system volume information",
    "recovery",
    "$recycle.bin",
    # POSIX system trees
    "proc",
    "sys",
    "dev",
    "run",
    "boot",
    "snap",
    "lost+found",
    # Caches and build artifacts
    "node_modules",
    "__pycache__",
    "cache",
    "caches",
    "temp",
    "tmp",
})

# Name prefixes hidden from the top-level partition and from the walker
PARTITION_HIDDEN_PREFIXES = (".", "$", "~")
WALKER_HIDDEN_PREFIXES = (".", "~")

# Progress estimation
PER_ROOT_BASELINE = 50_000
RESCALE_THRESHOLD = 0.5
RESCALE_FACTOR = 1.5
DISPLAY_CAP = 0.95

# Event throttling (seconds)
PROGRESS_INTERVAL = 0.5
WARNING_INTERVAL = 5.0

# Progress events pending in the channel before new ones are dropped
PROGRESS_BACKLOG = 256
