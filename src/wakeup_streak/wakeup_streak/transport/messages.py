from __future__ import annotations

from typing import Optional

from ..core.constants import EXEMPTION_CUTOFF_HOUR
from ..core.enums import Action, RejectReason
from ..core.exceptions import ValidationError
from ..engine.model import ActionResult
from ..groups.model import Pledge

MESSAGES = {
    "report_accepted": "{user_name}, your wake-up report is recorded ✔️",
    "time_set": "OK! Wake-up time set to {time} ⏰",
    "pass_accepted": (
        "{user_name}, tomorrow's early rise is skipped. Sleep well 😴\n"
        "(you used this week's pass)"
    ),
    "pass_revoked": "{user_name}, your pass is cancelled. Tomorrow's wake-up counts as usual.",
    "record_status": "Current streak: {streak} day(s)\nBest streak: {best} day(s)",
    "user_settings": "{user_name}'s wake-up time: {time}",
    "test_sweep": "Ran the aggregation for testing.",
    "test_time": "Test time set to {time}.",
}

REJECTIONS = {
    RejectReason.NO_PLEDGE: "No wake-up time is set.\nSend \"wake up at 7\" to set one.",
    RejectReason.DUPLICATE: "You have already reported today!",
    RejectReason.MALFORMED_TIME: "That time is not valid. Example: wake up at 7 or wake up at 6:30",
    RejectReason.TOO_LATE: f"A pass must be declared before {EXEMPTION_CUTOFF_HOUR}:00.",
    RejectReason.QUOTA_EXHAUSTED: "The pass can only be used once a week.",
    RejectReason.NOT_ACTIVE: "You have no pass to cancel.",
}

HELP_TEXT = f"""Wake-up streak guide

📱 Commands
- "wake up at 7" / "wake up at 6:30"
  set your wake-up time
- "awake" / "woke up" / "good morning"
  report that you are up
- "pass" / "skip tomorrow"
  skip tomorrow's early rise (once a week)
- "cancel pass"
  undo the pass
- "streak"
  show current and best streak
- "settings"
  show your wake-up time
- "help"
  show this guide

🔄 Flow
set a time → report before it the next morning → results at noon.
Everyone on time: the streak grows. Anyone late: the streak resets.

😴 Pass
declare before {EXEMPTION_CUTOFF_HOUR}:00, once per week, cancellable.

⚠️ Notes
- report before your set time
- one report per day
- members without a time are not counted
"""


def render_result(result: ActionResult) -> str:
    if result.action == Action.REPORT:
        return MESSAGES["report_accepted"].format(user_name=result.display_name)
    if result.action == Action.TIME_SET:
        return MESSAGES["time_set"].format(time=result.pledge.label() if result.pledge else "-")
    if result.action == Action.EXEMPTION_DECLARE:
        return MESSAGES["pass_accepted"].format(user_name=result.display_name)
    return MESSAGES["pass_revoked"].format(user_name=result.display_name)


def render_rejection(error: ValidationError) -> str:
    return REJECTIONS.get(error.reason, str(error))


def render_record(current: int, best: int) -> str:
    return MESSAGES["record_status"].format(streak=current, best=best)


def render_settings(user_name: str, pledge: Optional[Pledge]) -> str:
    if pledge is None:
        return REJECTIONS[RejectReason.NO_PLEDGE]
    return MESSAGES["user_settings"].format(user_name=user_name, time=pledge.label())
