from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.enums import Classification, NotificationKind


@dataclass(frozen=True)
class UserVerdict:
    user_id: str
    display_name: str
    classification: Classification


@dataclass
class GroupOutcome:
    """Result of judging one group in a sweep."""

    group_id: str
    verdicts: List[UserVerdict]
    previous_streak: int
    current_streak: int
    best_streak: int
    kind: NotificationKind
    delivered: Optional[bool] = None

    @property
    def failed_names(self) -> List[str]:
        return [v.display_name for v in self.verdicts if v.classification == Classification.FAILURE]

    @property
    def successful_names(self) -> List[str]:
        return [v.display_name for v in self.verdicts if v.classification != Classification.FAILURE]

    def payload(self) -> Dict[str, Any]:
        if self.kind == NotificationKind.ALL_SUCCESS:
            return {"streak": self.current_streak}
        return {"failed_names": self.failed_names, "previous_streak": self.previous_streak}


@dataclass
class SweepResult:
    ran_at: datetime
    outcomes: List[GroupOutcome] = field(default_factory=list)

    def outcome_for(self, group_id: str) -> Optional[GroupOutcome]:
        for o in self.outcomes:
            if o.group_id == group_id:
                return o
        return None

    @property
    def failed_deliveries(self) -> List[str]:
        return [o.group_id for o in self.outcomes if o.delivered is False]
