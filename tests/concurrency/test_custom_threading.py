import threading
import time

import pytest

from configs.constants import Constants
from utils.custom_threading import ThreadExecutor


def test_runs_every_item_once_and_collects_by_item():
    seen = []
    lock = threading.Lock()

    def worker(item):
        with lock:
            seen.append(item)
        return item * 10

    result = ThreadExecutor().run(list(range(20)), 4, worker)

    assert sorted(seen) == list(range(20))
    assert dict(result.succeeded) == {i: i * 10 for i in range(20)}
    assert result.failed == 0
    assert result.attempted == 20


def test_never_exceeds_width():
    active = 0
    peak = 0
    lock = threading.Lock()

    def worker(item):
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.01)
        with lock:
            active -= 1
        return item

    ThreadExecutor().run(list(range(12)), 3, worker)

    assert 1 <= peak <= 3


def test_failures_are_counted_and_do_not_stop_siblings():
    def worker(item):
        if item % 3 == 0:
            raise RuntimeError(f"boom {item}")
        return item

    result = ThreadExecutor(progress_every=2).run(list(range(10)), 2, worker)

    assert result.failed == 4
    assert sorted(item for item, _ in result.succeeded) == [1, 2, 4, 5, 7, 8]


def test_failure_is_logged_with_item_and_cause(caplog):
    def worker(item):
        raise ValueError("bad payload")

    ThreadExecutor().run(["stench"], 5, worker)

    assert "stench" in caplog.text
    assert "bad payload" in caplog.text


def test_empty_queue_returns_empty_result():
    result = ThreadExecutor().run([], 5, lambda item: item)

    assert result.succeeded == []
    assert result.failed == 0


def test_width_must_be_positive():
    with pytest.raises(ValueError):
        ThreadExecutor().run(["a"], 0, lambda item: item)


def test_progress_interval_defaults_to_configured_constant():
    assert ThreadExecutor().progress_every == Constants.PROGRESS_EVERY
