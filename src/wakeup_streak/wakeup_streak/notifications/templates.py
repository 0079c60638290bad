from __future__ import annotations

from typing import Any, Dict

from ..core.enums import NotificationKind

ALL_SUCCESS = "Everyone woke up on time! The streak is now {streak} day(s) 🎉"
SOME_FAILED = "⚠️ {failed_users} overslept... the streak is reset 💀\n(it was {previous_streak} day(s))"


def render_notification(kind: NotificationKind, payload: Dict[str, Any]) -> str:
    if kind == NotificationKind.ALL_SUCCESS:
        return ALL_SUCCESS.format(streak=payload["streak"])
    return SOME_FAILED.format(
        failed_users=", ".join(payload["failed_names"]),
        previous_streak=payload["previous_streak"],
    )
