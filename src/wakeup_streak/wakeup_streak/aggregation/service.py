from __future__ import annotations

import contextlib
import logging
from datetime import datetime
from typing import Callable, ContextManager, Optional

from ..core.enums import Classification, NotificationKind
from ..core.exceptions import TransportError
from ..groups.model import EngineState, GroupState
from ..notifications.notifier import Notifier
from .factory import ClassificationStrategyFactory
from .model import GroupOutcome, SweepResult, UserVerdict

logger = logging.getLogger(__name__)

LockFor = Callable[[str], ContextManager]


class Aggregator:
    """Daily sweep: judge every pledged member, move group streaks, notify.

    Order per sweep: all groups are judged and mutated first, then ``commit``
    (persistence) runs once, then notifications go out. A failed delivery for
    one group is logged and never affects the others or the committed state.
    """

    def __init__(self, notifier: Notifier, *, strategy_factory: ClassificationStrategyFactory | None = None):
        self._notifier = notifier
        self._factory = strategy_factory or ClassificationStrategyFactory()

    def judge_group(self, group: GroupState, now: datetime) -> Optional[GroupOutcome]:
        verdicts: list[UserVerdict] = []
        for user in group.pledged_users():
            strategy = self._factory.for_user(user)
            classification = strategy.classify(user, now=now)
            user.reported_today = False
            verdicts.append(
                UserVerdict(user_id=user.user_id, display_name=user.display_name, classification=classification)
            )

        # Groups without pledged members are skipped entirely.
        if not verdicts:
            return None

        previous = group.current_streak
        if any(v.classification == Classification.FAILURE for v in verdicts):
            group.current_streak = 0
            kind = NotificationKind.SOME_FAILED
        else:
            group.current_streak += 1
            group.best_streak = max(group.best_streak, group.current_streak)
            kind = NotificationKind.ALL_SUCCESS

        return GroupOutcome(
            group_id=group.group_id,
            verdicts=verdicts,
            previous_streak=previous,
            current_streak=group.current_streak,
            best_streak=group.best_streak,
            kind=kind,
        )

    def run(
        self,
        state: EngineState,
        now: datetime,
        *,
        lock_for: LockFor | None = None,
        commit: Callable[[], None] | None = None,
    ) -> SweepResult:
        result = SweepResult(ran_at=now)
        logger.info("Aggregation sweep started at %s (%d groups)", now.isoformat(), len(state.groups))

        for group_id in list(state.groups):
            group = state.groups[group_id]
            with lock_for(group_id) if lock_for else contextlib.nullcontext():
                outcome = self.judge_group(group, now)
            if outcome is None:
                continue
            logger.info(
                "Group %s: %s (streak %d -> %d, best %d, failed=%s)",
                group_id,
                outcome.kind.value,
                outcome.previous_streak,
                outcome.current_streak,
                outcome.best_streak,
                outcome.failed_names,
            )
            result.outcomes.append(outcome)

        if commit:
            commit()

        for outcome in result.outcomes:
            self._deliver(outcome)

        logger.info(
            "Aggregation sweep finished: %d groups judged, %d deliveries failed",
            len(result.outcomes),
            len(result.failed_deliveries),
        )
        return result

    def _deliver(self, outcome: GroupOutcome) -> None:
        try:
            self._notifier.notify(outcome.group_id, outcome.kind, outcome.payload())
            outcome.delivered = True
        except TransportError:
            outcome.delivered = False
            logger.exception("Failed to deliver %s notification to group %s", outcome.kind.value, outcome.group_id)
