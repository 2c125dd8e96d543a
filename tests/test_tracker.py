import threading

import pytest

from record_normalizer.tracker import ErrorTracker


def test_budget_exhausted_at_maximum():
    tracker = ErrorTracker(3)
    assert not tracker.budget_exhausted()
    tracker.record_error()
    tracker.record_error()
    assert not tracker.budget_exhausted()
    assert tracker.record_error() == 3
    assert tracker.budget_exhausted()


def test_default_maximum_is_100():
    assert ErrorTracker().max_errors == 100


def test_rejects_non_positive_maximum():
    with pytest.raises(ValueError):
        ErrorTracker(0)


def test_concurrent_increments_are_not_lost():
    tracker = ErrorTracker(10_000)

    def work():
        for _ in range(500):
            tracker.record_error()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert tracker.count == 4000
    assert not tracker.budget_exhausted()
