"""Tests for snapshot filename parsing."""

import tempfile
from pathlib import Path

from flbackupcleaner.core.matcher import match_backup_file, parse_backup_name


def test_parse_basic_name():
    """Should extract project name, hours and minutes."""
    assert parse_backup_name("Foo (overwritten at 3h05).flp") == ("Foo", 3, 5)


def test_parse_two_digit_hours():
    assert parse_backup_name("My Song v2 (overwritten at 14h30).flp") == ("My Song v2", 14, 30)


def test_project_name_is_greedy():
    """A name containing an earlier marker keeps it in the project name."""
    name = "A (overwritten at 1h00) (overwritten at 2h30).flp"
    assert parse_backup_name(name) == ("A (overwritten at 1h00)", 2, 30)


def test_hours_are_not_range_checked():
    assert parse_backup_name("Foo (overwritten at 99h00).flp") == ("Foo", 99, 0)


def test_rejects_malformed_names():
    """Missing marker, wrong extension or a 1-digit minute field are no match."""
    for name in [
        "Foo.flp",
        "Foo (overwritten at 3h5).flp",
        "Foo (overwritten at 123h05).flp",
        "Foo (overwritten at 3h05).FLP",
        "Foo (overwritten at 3h05).zip",
        "Foo (overwritten at 3h05).flp.bak",
        "Foo (saved at 3h05).flp",
        " (overwritten at 3h05).flp",
        "Foo(overwritten at 3h05).flp",
    ]:
        assert parse_backup_name(name) is None, name


def test_match_backup_file_reads_size():
    """Should build a complete BackupFile for a snapshot on disk."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "Foo (overwritten at 3h05).flp"
        path.write_bytes(b"\x00" * 123)

        backup = match_backup_file(path)
        assert backup is not None
        assert backup.path == path
        assert backup.project_name == "Foo"
        assert backup.timestamp == "3h05"
        assert backup.hours == 3
        assert backup.minutes == 5
        assert backup.time_value == 185
        assert backup.file_size == 123
        assert backup.modified_time > 0


def test_match_backup_file_missing_file():
    """A failed size lookup drops the candidate."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "Foo (overwritten at 3h05).flp"
        assert match_backup_file(path) is None


def test_match_backup_file_non_snapshot():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "Foo.flp"
        path.write_bytes(b"\x00")
        assert match_backup_file(path) is None
