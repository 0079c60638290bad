from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Current local time.

    Note: Wrapped so tests can inject a fixed instant instead of patching.
    """

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock frozen at a given instant; ``advance`` moves it forward."""

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant

    def advance(self, **delta) -> datetime:
        self._instant = self._instant + timedelta(**delta)
        return self._instant


class OverridableClock:
    """System clock that operators can pin to a synthetic instant.

    Used by the ``@Bot test-time`` command; ``clear_override`` returns to the
    wrapped clock.
    """

    def __init__(self, base: Optional[Clock] = None):
        self._base = base or SystemClock()
        self._override: Optional[datetime] = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            override = self._override
        return override if override is not None else self._base.now()

    def override(self, instant: datetime) -> None:
        with self._lock:
            self._override = instant

    def clear_override(self) -> None:
        with self._lock:
            self._override = None

    @property
    def is_overridden(self) -> bool:
        with self._lock:
            return self._override is not None
