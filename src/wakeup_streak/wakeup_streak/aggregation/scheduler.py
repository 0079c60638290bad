from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Optional

from ..common.calendar import next_occurrence
from ..common.clock import Clock
from ..core.constants import DEFAULT_SWEEP_HOUR, DEFAULT_SWEEP_MINUTE
from .model import SweepResult

logger = logging.getLogger(__name__)


class DailySweepScheduler:
    """Fires ``engine.run_sweep`` once a day at a fixed local time.

    At most one sweep is in flight: a trigger that arrives while another sweep
    is running is skipped, never run in parallel.
    """

    def __init__(
        self,
        engine,
        clock: Clock,
        *,
        hour: int = DEFAULT_SWEEP_HOUR,
        minute: int = DEFAULT_SWEEP_MINUTE,
        poll_seconds: float = 60.0,
    ):
        self._engine = engine
        self._clock = clock
        self._hour = int(hour)
        self._minute = int(minute)
        self._poll_seconds = float(poll_seconds)
        self._running = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def next_run_at(self, now: Optional[datetime] = None) -> datetime:
        return next_occurrence(now or self._clock.now(), hour=self._hour, minute=self._minute)

    def trigger(self, now: Optional[datetime] = None) -> Optional[SweepResult]:
        if not self._running.acquire(blocking=False):
            logger.warning("Sweep already in progress, skipping trigger")
            return None
        try:
            return self._engine.run_sweep(now or self._clock.now())
        finally:
            self._running.release()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="daily-sweep", daemon=True)
        self._thread.start()
        logger.info("Sweep scheduler started; next run at %s", self.next_run_at().isoformat())

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        due = self.next_run_at()
        while not self._stop.is_set():
            now = self._clock.now()
            if now >= due:
                try:
                    self.trigger(now)
                except Exception:
                    # Keep the daily timer alive after a failed sweep.
                    logger.exception("Scheduled sweep at %s failed", now.isoformat())
                due = self.next_run_at(now)
                continue
            # Poll so clock overrides and suspend/resume are picked up.
            wait = min(self._poll_seconds, (due - now).total_seconds())
            self._stop.wait(max(wait, 0.0))
