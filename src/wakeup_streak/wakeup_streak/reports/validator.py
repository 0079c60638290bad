from __future__ import annotations

from datetime import datetime

from ..common.calendar import is_same_day
from ..core.exceptions import DuplicateReportError, NoPledgeError
from ..groups.model import UserState


class ReportValidator:
    """Accepts or rejects wake-up reports.

    Lateness is not judged here: an accepted report only stores its instant,
    the sweep compares it to the pledge later.
    """

    def submit_report(self, user: UserState, now: datetime) -> datetime:
        if user.wakeup_time is None:
            raise NoPledgeError("No wake-up time set")

        if user.reported_today and is_same_day(user.last_report_at, now):
            raise DuplicateReportError("Already reported today")

        user.last_report_at = now
        user.reported_today = True
        return now
