"""Tests for the adaptive progress estimate."""

import threading

from flbackupcleaner.core.constants import PER_ROOT_BASELINE
from flbackupcleaner.scan.progress import ProgressEstimator


def test_initial_estimate_scales_with_roots():
    assert ProgressEstimator(3).estimate == 3 * PER_ROOT_BASELINE
    assert ProgressEstimator(0).estimate == PER_ROOT_BASELINE


def test_estimate_grows_past_half():
    est = ProgressEstimator(1, baseline=10)
    for _ in range(6):
        est.tick()
    assert est.scanned == 6
    assert est.estimate == 15


def test_percent_is_monotonic_and_below_100():
    """Reported progress never moves backwards and never shows 100% early."""
    est = ProgressEstimator(1, baseline=10)
    previous = 0.0
    for _ in range(5000):
        est.tick()
        percent = est.percent
        assert percent >= previous
        assert percent < 100
        previous = percent
    assert est.estimate > est.scanned


def test_finish_forces_100():
    est = ProgressEstimator(2, baseline=100)
    est.tick(7)
    est.finish()
    assert est.finished
    assert est.percent == 100.0
    assert est.snapshot() == (7, est.estimate, 100.0)


def test_concurrent_ticks_are_all_counted():
    est = ProgressEstimator(1, baseline=100)

    def work():
        for _ in range(1000):
            est.tick()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert est.scanned == 8000
