from __future__ import annotations

from typing import Optional

from ..common.validators import require_hour, require_minute
from ..groups.model import Pledge, UserState


class PledgeService:
    def set_pledge(self, user: UserState, *, hour: int, minute: int) -> Pledge:
        pledge = Pledge(hour=require_hour(hour), minute=require_minute(minute))
        user.wakeup_time = pledge
        # A new pledge starts a fresh daily report.
        user.reported_today = False
        return pledge

    def get_pledge(self, user: Optional[UserState]) -> Optional[Pledge]:
        return user.wakeup_time if user else None
