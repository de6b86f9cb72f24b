"""Scoped recurring poll with a single-flight guard."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PollingSubscription:
    """Run `callback` every `interval_seconds` until cancelled.

    Each tick is dispatched on its own worker thread so a slow poll never
    delays the schedule; while one poll is in flight, further ticks are
    skipped. Leaving the `with` block always cancels the schedule.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        interval_seconds: float,
        name: str = "poll",
        run_immediately: bool = True,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.callback = callback
        self.interval_seconds = float(interval_seconds)
        self.name = name
        self.run_immediately = run_immediately
        self.skipped_ticks = 0
        self.completed_ticks = 0
        self._in_flight = threading.Lock()
        self._counter_lock = threading.Lock()
        self._cancelled = threading.Event()
        self._scheduler: threading.Thread | None = None
        self._workers: list[threading.Thread] = []

    @property
    def active(self) -> bool:
        return self._scheduler is not None and not self._cancelled.is_set()

    def start(self) -> PollingSubscription:
        if self._scheduler is not None:
            raise RuntimeError(f"{self.name} subscription already started")
        self._scheduler = threading.Thread(
            target=self._run_schedule,
            name=f"{self.name}-scheduler",
            daemon=True,
        )
        self._scheduler.start()
        return self

    def tick(self) -> bool:
        """Run one poll unless another is in flight; returns whether it ran."""
        if self._cancelled.is_set():
            return False
        if not self._in_flight.acquire(blocking=False):
            with self._counter_lock:
                self.skipped_ticks += 1
            logger.debug("%s: previous poll still in flight, skipping tick", self.name)
            return False
        try:
            self.callback()
            with self._counter_lock:
                self.completed_ticks += 1
        except Exception:
            logger.exception("%s: poll callback failed", self.name)
        finally:
            self._in_flight.release()
        return True

    def cancel(self, timeout: float | None = None) -> None:
        """Stop scheduling; idempotent. Waits for an in-flight poll to finish."""
        self._cancelled.set()
        scheduler = self._scheduler
        if scheduler is not None and scheduler is not threading.current_thread():
            scheduler.join(timeout)
        for worker in list(self._workers):
            if worker is not threading.current_thread():
                worker.join(timeout)
        self._workers.clear()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or `timeout` elapses; returns True if cancelled."""
        return self._cancelled.wait(timeout)

    def __enter__(self) -> PollingSubscription:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()

    def _run_schedule(self) -> None:
        if self.run_immediately:
            self._dispatch()
        while not self._cancelled.wait(self.interval_seconds):
            self._dispatch()

    def _dispatch(self) -> None:
        self._workers = [worker for worker in self._workers if worker.is_alive()]
        worker = threading.Thread(target=self.tick, name=f"{self.name}-tick", daemon=True)
        self._workers.append(worker)
        worker.start()
