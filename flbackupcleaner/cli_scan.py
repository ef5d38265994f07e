"""CLI entry point for headless scans.

Usage: py -m flbackupcleaner.cli_scan "D:\\Music" --workers 4 --depth 10 --clean

Outputs JSON to stdout; log lines go to stderr.
"""

import argparse
import json
import sys
from pathlib import Path

from flbackupcleaner.cleanup.retention import summarize
from flbackupcleaner.core.models import (
    BackupFile,
    RetentionResult,
    ScanConfig,
    ScanResult,
    ScanWarning,
)
from flbackupcleaner.scan.coordinator import ScanCoordinator
from flbackupcleaner.utils.config import DEFAULT_MAX_DEPTH, DEFAULT_SUB_WORKERS
from flbackupcleaner.utils.logging_setup import configure_logging


def _backup_to_dict(backup: BackupFile) -> dict:
    return {
        "path": str(backup.path),
        "timestamp": backup.timestamp,
        "time_value": backup.time_value,
        "size": backup.file_size,
    }


def _retention_to_dict(result: RetentionResult) -> dict:
    return {
        "deleted": result.deleted_count,
        "reclaimed_bytes": result.reclaimed_bytes,
        "failures": [{"path": str(f.path), "reason": f.reason} for f in result.failures],
    }


def build_report(result: ScanResult, warnings: list[str]) -> dict:
    found = result.found
    summary = summarize(found)
    projects = [
        {
            "name": key.project_name,
            "folder": str(key.project_folder),
            "backups": [_backup_to_dict(b) for b in backups],
        }
        for key, backups in sorted(found.items(), key=lambda kv: str(kv[0]))
    ]
    return {
        "projects": projects,
        "total_found": result.total_found,
        "projects_with_multiple": summary.projects_with_multiple,
        "redundant_bytes": summary.redundant_bytes,
        "files_scanned": result.files_scanned,
        "warnings": warnings,
        "cleanup": _retention_to_dict(result.retention) if result.retention else None,
    }


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="flbackupcleaner",
        description="Find FL Studio autosave backups and keep only the latest per project.",
    )
    parser.add_argument("roots", nargs="*", help="Folders to scan (default: all drives)")
    parser.add_argument("--workers", type=int, default=DEFAULT_SUB_WORKERS,
                        help="Sub-workers per root")
    parser.add_argument("--depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help="Maximum traversal depth")
    parser.add_argument("--clean", action="store_true",
                        help="Delete all but the latest backup of each project")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = ScanConfig.from_settings(args.roots, args.workers, args.depth, args.clean)
    except ValueError as e:
        print(json.dumps({"error": str(e)}))
        return 1

    roots = [Path(r) for r in args.roots]
    missing = [str(r) for r in roots if not r.is_dir()]
    if missing:
        print(json.dumps({"error": f"Folder not found: {', '.join(missing)}"}))
        return 1

    coordinator = ScanCoordinator(config)
    if roots:
        # Explicit folders are scanned as roots of their own
        coordinator.enumerate_roots = lambda: roots
    result = coordinator.run()

    warnings = [e.message for e in coordinator.channel.drain() if isinstance(e, ScanWarning)]
    report = build_report(result, warnings)
    print(json.dumps(report, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
