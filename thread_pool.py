"""Fixed-size worker pool fed by one shared job queue."""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

Job = Callable[[], None]


class ThreadPool:
    """Persistent workers pulling jobs from a shared queue.

    ``queue_size <= 0`` leaves the queue unbounded; a positive size bounds it
    and makes :meth:`execute` refuse jobs once it is full.
    """

    def __init__(self, worker_count: int, queue_size: int = 0) -> None:
        if worker_count <= 0:
            raise ValueError("worker_count must be positive")

        self._queue: queue.Queue[Job | None] = queue.Queue(maxsize=max(queue_size, 0))
        self._stop_event = threading.Event()
        self._threads: list[threading.Thread] = []
        self._worker_count = worker_count
        self._pending_jobs = 0
        self._pending_lock = threading.Lock()
        self._drain_condition = threading.Condition(self._pending_lock)
        self._shutdown_lock = threading.Lock()
        self._shutdown_started = False

    @property
    def worker_count(self) -> int:
        return self._worker_count

    @property
    def threads(self) -> tuple[threading.Thread, ...]:
        return tuple(self._threads)

    def start(self) -> None:
        for index in range(self._worker_count):
            worker = threading.Thread(
                target=self._worker_loop,
                name=f"http-worker-{index}",
                daemon=True,
            )
            self._threads.append(worker)
            worker.start()

    def execute(self, job: Job) -> bool:
        """Enqueue ``job`` for a single run on one worker.

        Returns False when the pool is stopping or the bounded queue is full.
        """
        if self._stop_event.is_set():
            return False
        with self._drain_condition:
            self._pending_jobs += 1
        try:
            self._queue.put_nowait(job)
        except queue.Full:
            self._finish_job()
            return False
        return True

    def wait_for_drain(self, timeout: float | None = None) -> bool:
        with self._drain_condition:
            if timeout is None:
                while not self._is_drained_locked():
                    self._drain_condition.wait(timeout=0.1)
                return True

            deadline = time.monotonic() + timeout
            while not self._is_drained_locked():
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._drain_condition.wait(timeout=min(remaining, 0.1))
            return True

    def shutdown(self, *, graceful: bool = False, timeout: float | None = None) -> None:
        """Stop the workers once, idempotently.

        A graceful shutdown waits for pending jobs and for every worker to
        exit, bounded by ``timeout`` when given. Otherwise each worker gets a
        short join and a job still running keeps its daemon thread alive.
        """
        with self._shutdown_lock:
            if self._shutdown_started:
                return
            self._shutdown_started = True

        if graceful:
            self.wait_for_drain(timeout=timeout)

        self._stop_event.set()
        for _ in self._threads:
            self._queue.put(None)

        join_timeout = timeout if graceful else 1.0
        for thread in self._threads:
            thread.join(timeout=join_timeout)

    def _is_drained_locked(self) -> bool:
        return self._pending_jobs == 0

    def _worker_loop(self) -> None:
        while True:
            job = self._queue.get()
            try:
                if job is None:
                    return
                try:
                    job()
                except Exception:
                    logger.exception("Job failed in %s", threading.current_thread().name)
            finally:
                if job is not None:
                    self._finish_job()
                self._queue.task_done()

    def _finish_job(self) -> None:
        with self._drain_condition:
            self._pending_jobs = max(0, self._pending_jobs - 1)
            self._drain_condition.notify_all()
