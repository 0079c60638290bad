from __future__ import annotations

from datetime import datetime

from ...common.calendar import deadline_for, is_same_day
from ...core.enums import Classification
from ...groups.model import UserState
from .base import ClassificationStrategy


class DeadlineStrategy(ClassificationStrategy):
    """Success iff today's report is at or before today's pledged time."""

    def classify(self, user: UserState, *, now: datetime) -> Classification:
        pledge = user.wakeup_time
        if pledge is None:
            return Classification.FAILURE

        deadline = deadline_for(now, hour=pledge.hour, minute=pledge.minute)
        reported = user.last_report_at
        if reported is not None and is_same_day(reported, now) and reported <= deadline:
            return Classification.SUCCESS
        return Classification.FAILURE
