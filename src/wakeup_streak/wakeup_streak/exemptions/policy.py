from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.calendar import SUNDAY, days_between, start_of_week
from ..core.constants import EXEMPTION_CUTOFF_HOUR, WEEK_LENGTH_DAYS, WEEKLY_EXEMPTION_QUOTA
from ..core.exceptions import (
    ExemptionNotActiveError,
    ExemptionQuotaExhaustedError,
    ExemptionTooLateError,
)
from ..groups.model import UserState


@dataclass
class ExemptionPolicy:
    """Weekly "pass" rules: declare before the cutoff, at most ``quota`` per window.

    The quota window is anchored per user: it only moves when that user
    declares after their own window has aged ``WEEK_LENGTH_DAYS`` days.
    """

    cutoff_hour: int = EXEMPTION_CUTOFF_HOUR
    quota: int = WEEKLY_EXEMPTION_QUOTA
    anchor_weekday: int = SUNDAY

    def refresh_window(self, user: UserState, now: datetime) -> bool:
        start = user.week_window_start
        if start is not None and days_between(start, now) < WEEK_LENGTH_DAYS:
            return False
        user.week_window_start = start_of_week(now, anchor_weekday=self.anchor_weekday)
        user.week_exemption_count = 0
        return True

    def declare(self, user: UserState, now: datetime) -> None:
        self.refresh_window(user, now)

        if now.hour >= self.cutoff_hour:
            raise ExemptionTooLateError(f"A pass must be declared before {self.cutoff_hour}:00")

        if user.week_exemption_count >= self.quota:
            raise ExemptionQuotaExhaustedError("The weekly pass has already been used")

        user.exemption_active = True
        user.last_exemption_at = now
        user.week_exemption_count += 1

    def revoke(self, user: UserState) -> None:
        if not user.exemption_active:
            raise ExemptionNotActiveError("No active pass to cancel")

        user.exemption_active = False
        user.week_exemption_count = max(0, user.week_exemption_count - 1)
