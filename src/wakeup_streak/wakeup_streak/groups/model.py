from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.validators import require_hour, require_minute
from ..core.constants import DEFAULT_DISPLAY_NAME
from ..core.exceptions import MalformedTimeError, PersistenceError


@dataclass(frozen=True)
class Pledge:
    """Daily wake-up time a member commits to."""

    hour: int
    minute: int

    def label(self) -> str:
        return f"{self.hour}:{self.minute:02d}"


@dataclass
class UserState:
    """Per-member pledge/report/exemption record.

    Note: owned by exactly one GroupState; mutated only by the report
    validator, the exemption policy, the pledge service and the sweep.
    """

    user_id: str
    display_name: str = DEFAULT_DISPLAY_NAME
    wakeup_time: Optional[Pledge] = None
    last_report_at: Optional[datetime] = None
    reported_today: bool = False
    exemption_active: bool = False
    last_exemption_at: Optional[datetime] = None
    week_exemption_count: int = 0
    week_window_start: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.display_name,
            "wakeupTime": (
                {"hours": self.wakeup_time.hour, "minutes": self.wakeup_time.minute}
                if self.wakeup_time
                else None
            ),
            "lastReport": _dt_to_str(self.last_report_at),
            "todayReported": self.reported_today,
            "exemptionActive": self.exemption_active,
            "lastExemptionDate": _dt_to_str(self.last_exemption_at),
            "weekExemptionCount": self.week_exemption_count,
            "weekStartDate": _dt_to_str(self.week_window_start),
        }

    @classmethod
    def from_dict(cls, user_id: str, data: Dict[str, Any]) -> "UserState":
        wt = data.get("wakeupTime")
        return cls(
            user_id=str(user_id),
            display_name=str(data.get("name") or DEFAULT_DISPLAY_NAME),
            wakeup_time=stored_pledge(wt["hours"], wt["minutes"]) if wt else None,
            last_report_at=_str_to_dt(data.get("lastReport")),
            reported_today=bool(data.get("todayReported", False)),
            exemption_active=bool(data.get("exemptionActive", False)),
            last_exemption_at=_str_to_dt(data.get("lastExemptionDate")),
            week_exemption_count=min(1, max(0, int(data.get("weekExemptionCount", 0)))),
            week_window_start=_str_to_dt(data.get("weekStartDate")),
        )


@dataclass
class GroupState:
    group_id: str
    users: Dict[str, UserState] = field(default_factory=dict)
    current_streak: int = 0
    best_streak: int = 0

    def pledged_users(self) -> list[UserState]:
        return [u for u in self.users.values() if u.wakeup_time is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "users": {uid: u.to_dict() for uid, u in self.users.items()},
            "currentStreak": self.current_streak,
            "bestStreak": self.best_streak,
        }

    @classmethod
    def from_dict(cls, group_id: str, data: Dict[str, Any]) -> "GroupState":
        current = max(0, int(data.get("currentStreak", 0)))
        return cls(
            group_id=str(group_id),
            users={str(uid): UserState.from_dict(uid, u) for uid, u in (data.get("users") or {}).items()},
            current_streak=current,
            best_streak=max(current, int(data.get("bestStreak", 0))),
        )


@dataclass
class EngineState:
    """Explicit state container for every group the engine knows."""

    groups: Dict[str, GroupState] = field(default_factory=dict)

    def get_or_create_group(self, group_id: str) -> tuple[GroupState, bool]:
        group = self.groups.get(group_id)
        if group is not None:
            return group, False
        group = GroupState(group_id=group_id)
        self.groups[group_id] = group
        return group, True

    def to_dict(self) -> Dict[str, Any]:
        return {"groups": {gid: g.to_dict() for gid, g in self.groups.items()}}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineState":
        return cls(groups={str(gid): GroupState.from_dict(gid, g) for gid, g in (data.get("groups") or {}).items()})


def _dt_to_str(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _str_to_dt(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Bad timestamp {value!r}: {e}") from e
    return require_naive(parsed)


def require_naive(value: Optional[datetime]) -> Optional[datetime]:
    """All stored instants are local wall-clock times without an offset."""
    if value is not None and value.tzinfo is not None:
        raise PersistenceError(f"Timestamp {value.isoformat()} carries a UTC offset")
    return value


def stored_pledge(hour: Any, minute: Any) -> Pledge:
    try:
        return Pledge(hour=require_hour(hour), minute=require_minute(minute))
    except (MalformedTimeError, TypeError, ValueError) as e:
        raise PersistenceError(f"Bad stored wake-up time {hour!r}:{minute!r}: {e}") from e
