"""Tests for the fixed-size worker pool."""

import threading
import time

import pytest

from thread_pool import ThreadPool


def test_thread_pool_starts_fixed_worker_count() -> None:
    pool = ThreadPool(worker_count=3)
    pool.start()

    try:
        assert pool.worker_count == 3
        assert len(pool.threads) == 3
        assert all(thread.is_alive() for thread in pool.threads)
    finally:
        pool.shutdown()


def test_thread_pool_rejects_non_positive_worker_count() -> None:
    with pytest.raises(ValueError, match="worker_count must be positive"):
        ThreadPool(worker_count=0)


def test_each_job_runs_exactly_once() -> None:
    pool = ThreadPool(worker_count=4)
    pool.start()
    runs: list[int] = []
    lock = threading.Lock()

    def make_job(index: int):
        def job() -> None:
            with lock:
                runs.append(index)

        return job

    try:
        for index in range(50):
            assert pool.execute(make_job(index)) is True
        assert pool.wait_for_drain(timeout=2) is True
    finally:
        pool.shutdown()

    assert sorted(runs) == list(range(50))


def test_execute_returns_false_when_bounded_queue_is_full() -> None:
    pool = ThreadPool(worker_count=1, queue_size=1)

    assert pool.execute(lambda: None) is True
    assert pool.execute(lambda: None) is False


def test_unbounded_queue_accepts_many_jobs_before_start() -> None:
    pool = ThreadPool(worker_count=1, queue_size=0)

    assert all(pool.execute(lambda: None) for _ in range(500))

    pool.start()
    try:
        assert pool.wait_for_drain(timeout=2) is True
    finally:
        pool.shutdown()


def test_failing_job_does_not_kill_worker() -> None:
    pool = ThreadPool(worker_count=1)
    pool.start()
    done = threading.Event()

    def failing_job() -> None:
        raise RuntimeError("boom")

    try:
        pool.execute(failing_job)
        pool.execute(done.set)
        assert done.wait(timeout=2)
        assert pool.threads[0].is_alive()
    finally:
        pool.shutdown()


def test_single_worker_runs_one_job_at_a_time() -> None:
    pool = ThreadPool(worker_count=1)
    pool.start()
    active = 0
    max_active = 0
    lock = threading.Lock()

    def job() -> None:
        nonlocal active, max_active
        with lock:
            active += 1
            max_active = max(max_active, active)
        time.sleep(0.02)
        with lock:
            active -= 1

    try:
        for _ in range(5):
            pool.execute(job)
        assert pool.wait_for_drain(timeout=2) is True
    finally:
        pool.shutdown()

    assert max_active == 1


def test_workers_run_jobs_concurrently() -> None:
    pool = ThreadPool(worker_count=3)
    pool.start()
    barrier = threading.Barrier(3, timeout=2)
    passed: list[bool] = []

    def job() -> None:
        barrier.wait()
        passed.append(True)

    try:
        for _ in range(3):
            pool.execute(job)
        assert pool.wait_for_drain(timeout=3) is True
    finally:
        pool.shutdown()

    assert passed == [True, True, True]


def test_shutdown_stops_workers_and_refuses_new_jobs() -> None:
    pool = ThreadPool(worker_count=2)
    pool.start()

    pool.shutdown()
    pool.shutdown()

    assert not any(thread.is_alive() for thread in pool.threads)
    assert pool.execute(lambda: None) is False


def test_graceful_shutdown_finishes_queued_jobs() -> None:
    pool = ThreadPool(worker_count=1)
    pool.start()
    finished: list[int] = []

    def slow_job() -> None:
        time.sleep(0.05)
        finished.append(1)

    for _ in range(3):
        pool.execute(slow_job)
    pool.shutdown(graceful=True, timeout=2)

    assert finished == [1, 1, 1]


def test_wait_for_drain_times_out_while_job_is_running() -> None:
    pool = ThreadPool(worker_count=1)
    pool.start()
    release = threading.Event()

    try:
        pool.execute(lambda: release.wait(timeout=2))
        time.sleep(0.05)
        assert pool.wait_for_drain(timeout=0.1) is False
        release.set()
        assert pool.wait_for_drain(timeout=2) is True
    finally:
        release.set()
        pool.shutdown()


def test_graceful_shutdown_waits_for_long_running_job_to_exit() -> None:
    pool = ThreadPool(worker_count=1)
    pool.start()
    finished = threading.Event()

    def long_job() -> None:
        time.sleep(1.5)
        finished.set()

    pool.execute(long_job)
    time.sleep(0.05)
    pool.shutdown(graceful=True)

    assert finished.is_set()
    assert not any(thread.is_alive() for thread in pool.threads)
