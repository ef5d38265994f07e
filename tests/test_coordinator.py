"""End-to-end tests for the scan coordinator."""

import os
import tempfile
from pathlib import Path

from flbackupcleaner.core.models import (
    AutoCleanRequested,
    CleanupFinished,
    Complete,
    EventKind,
    FoundBackup,
    Progress,
    ProjectKey,
    ScanConfig,
    ScanWarning,
)
from flbackupcleaner.scan.channel import EventChannel
from flbackupcleaner.scan.coordinator import ScanCoordinator


def _touch(path: Path, size: int = 1):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\x00" * size)


def _make_library(root: Path) -> Path:
    """Two projects with backups; returns the first project folder."""
    song = root / "Music" / "Song"
    _touch(song / "Song.flp")
    _touch(song / "Backup" / "Song (overwritten at 9h00).flp", 100)
    _touch(song / "Backup" / "Song (overwritten at 14h30).flp", 200)
    _touch(song / "Backup" / "Song (overwritten at 8h59).flp", 300)
    beat = root / "Projects" / "Beat"
    _touch(beat / "Backup" / "Beat (overwritten at 1h00).flp", 10)
    return song


def _run(root, **kwargs):
    config = ScanConfig(**kwargs)
    coordinator = ScanCoordinator(config, enumerate_roots=lambda: [root])
    result = coordinator.run()
    return coordinator, result, coordinator.channel.drain()


def test_full_scan_groups_backups_by_project():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        song = _make_library(root)

        _, result, events = _run(root, max_sub_workers=2)

        assert result.total_found == 4
        assert result.files_scanned == 5
        assert len(result.found[ProjectKey(song, "Song")]) == 3
        assert result.completed_roots == {root}
        assert result.retention is None
        assert isinstance(events[-1], Complete)
        assert events[-1].total_found == 4
        assert sum(isinstance(e, FoundBackup) for e in events) == 4


def test_progress_never_reaches_100_before_complete():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _make_library(root)

        coordinator, _, events = _run(root)

        assert all(e.percent < 100 for e in events if isinstance(e, Progress))
        assert coordinator.state.estimator.percent == 100.0


def test_auto_clean_runs_after_complete():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        song = _make_library(root)

        _, result, events = _run(root, auto_clean=True)

        kinds = [e.kind for e in events]
        assert kinds[-3:] == [
            EventKind.COMPLETE,
            EventKind.AUTO_CLEAN_REQUESTED,
            EventKind.CLEANUP_FINISHED,
        ]
        assert isinstance(events[-2], AutoCleanRequested)
        assert isinstance(events[-1], CleanupFinished)
        assert result.retention.deleted_count == 2
        assert result.retention.reclaimed_bytes == 400
        remaining = sorted(p.name for p in (song / "Backup").iterdir())
        assert remaining == ["Song (overwritten at 14h30).flp"]


def test_cycle_and_concurrent_workers_count_each_file_once():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        expected = 0
        for i in range(6):
            for j in range(4):
                _touch(root / f"d{i}" / "sub" / f"f{j}")
                expected += 1
        os.symlink(root, root / "d0" / "sub" / "back-to-root", target_is_directory=True)
        os.symlink(root / "d2", root / "d1" / "to-d2", target_is_directory=True)
        os.symlink(root / "d3", root / "alias-d3", target_is_directory=True)
        _touch(root / "top1")
        _touch(root / "top2")
        expected += 2

        _, result, events = _run(root, max_sub_workers=4, max_depth=50)

        assert result.files_scanned == expected
        assert isinstance(events[-1], Complete)


def test_files_directly_in_root_are_counted_once():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _touch(root / "a" / "f1")
        _touch(root / "top1")
        _touch(root / "top2")
        os.symlink(root, root / "a" / "loop", target_is_directory=True)

        _, result, _ = _run(root, max_depth=20)

        assert result.files_scanned == 3


class _RecordingChannel(EventChannel):
    """Records the coordinator's state at the moment each event is sent."""

    def __init__(self):
        super().__init__()
        self.coordinator = None
        self.pending_at = {}

    def send(self, event):
        self.pending_at[event.kind] = self.coordinator.auto_clean_pending
        return super().send(event)


def test_auto_clean_is_pending_from_complete_until_cleanup_finished():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _make_library(root)
        channel = _RecordingChannel()
        coordinator = ScanCoordinator(
            ScanConfig(auto_clean=True), channel=channel, enumerate_roots=lambda: [root]
        )
        channel.coordinator = coordinator

        coordinator.run()

        assert channel.pending_at[EventKind.COMPLETE] is True
        assert channel.pending_at[EventKind.AUTO_CLEAN_REQUESTED] is True
        assert channel.pending_at[EventKind.CLEANUP_FINISHED] is False
        assert coordinator.auto_clean_pending is False


def test_no_auto_clean_pending_without_auto_clean():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _make_library(root)
        channel = _RecordingChannel()
        coordinator = ScanCoordinator(ScanConfig(), channel=channel, enumerate_roots=lambda: [root])
        channel.coordinator = coordinator

        coordinator.run()

        assert channel.pending_at[EventKind.COMPLETE] is False
        assert EventKind.CLEANUP_FINISHED not in channel.pending_at


def test_unavailable_root_is_warned_and_skipped():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _make_library(root)
        missing = root / "not-a-drive"

        _, result, events = _run(root, roots=(root, missing))

        warnings = [e.message for e in events if isinstance(e, ScanWarning)]
        assert any("not-a-drive" in w for w in warnings)
        assert result.total_found == 4


def test_unreadable_root_does_not_stop_the_scan(monkeypatch):
    with tempfile.TemporaryDirectory() as good_dir, tempfile.TemporaryDirectory() as bad_dir:
        good = Path(good_dir)
        bad = Path(bad_dir)
        _make_library(good)
        _make_library(bad)
        real_scandir = os.scandir

        def fake_scandir(path="."):
            if isinstance(path, int):
                return real_scandir(path)
            if Path(path) == bad:
                raise PermissionError("denied")
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", fake_scandir)

        coordinator = ScanCoordinator(ScanConfig(), enumerate_roots=lambda: [good, bad])
        result = coordinator.run()
        events = coordinator.channel.drain()

        assert result.total_found == 4
        assert all(key.project_folder.is_relative_to(good) for key in result.found)
        assert isinstance(events[-1], Complete)


def test_failed_root_worker_is_reported():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _make_library(root)
        coordinator = ScanCoordinator(ScanConfig(), enumerate_roots=lambda: [root])

        def boom(root, index):
            raise RuntimeError("worker died")

        coordinator._scan_root = boom
        result = coordinator.run()
        events = coordinator.channel.drain()

        assert result.completed_roots == set()
        assert any(isinstance(e, ScanWarning) and "worker died" in e.message for e in events)
        assert isinstance(events[-1], Complete)
        assert events[-1].total_found == 0


def test_cancelled_scan_skips_auto_clean():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        song = _make_library(root)
        coordinator = ScanCoordinator(
            ScanConfig(auto_clean=True), enumerate_roots=lambda: [root]
        )
        coordinator.cancel()
        result = coordinator.run()
        events = coordinator.channel.drain()

        assert result.cancelled
        assert result.retention is None
        assert result.total_found == 0
        assert any(isinstance(e, ScanWarning) and e.message == "Scan cancelled" for e in events)
        assert isinstance(events[-1], Complete)
        assert len(list((song / "Backup").iterdir())) == 3


def test_background_scan_can_be_joined():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _make_library(root)
        coordinator = ScanCoordinator(ScanConfig(), enumerate_roots=lambda: [root])

        thread = coordinator.start()
        thread.join(timeout=30)

        assert not coordinator.is_running
        assert coordinator.result.total_found == 4


def test_invalid_config_is_rejected():
    for kwargs in ({"max_sub_workers": 0}, {"max_depth": 0}):
        try:
            ScanConfig(**kwargs)
        except ValueError:
            continue
        raise AssertionError(f"accepted {kwargs}")


def test_config_from_settings_converts_raw_values():
    config = ScanConfig.from_settings(["/music"], "3", "7", 1)
    assert config.roots == (Path("/music"),)
    assert config.max_sub_workers == 3
    assert config.max_depth == 7
    assert config.auto_clean is True
