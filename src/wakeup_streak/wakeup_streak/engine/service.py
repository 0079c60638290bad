from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Dict, Optional, Tuple

from ..aggregation.model import SweepResult
from ..aggregation.service import Aggregator
from ..common.calendar import start_of_week
from ..core.enums import Action
from ..core.exceptions import PersistenceError
from ..exemptions.policy import ExemptionPolicy
from ..groups.model import EngineState, GroupState, Pledge, UserState
from ..groups.repository import StateRepository
from ..pledges.service import PledgeService
from ..reports.validator import ReportValidator
from .model import ActionResult

logger = logging.getLogger(__name__)


class WakeupEngine:
    """Engine root: owns the state container and serializes mutations.

    Every inbound operation runs its read-modify-write under the group's lock,
    then persists the full snapshot before returning. Rejected actions raise a
    ValidationError subclass and are not persisted.
    """

    def __init__(
        self,
        state: EngineState,
        repository: StateRepository,
        aggregator: Aggregator,
        *,
        report_validator: ReportValidator | None = None,
        exemption_policy: ExemptionPolicy | None = None,
        pledge_service: PledgeService | None = None,
    ):
        self._state = state
        self._repository = repository
        self._aggregator = aggregator
        self._reports = report_validator or ReportValidator()
        self._exemptions = exemption_policy or ExemptionPolicy()
        self._pledges = pledge_service or PledgeService()

        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._save_lock = threading.Lock()
        self._dirty = False

    @classmethod
    def from_repository(cls, repository: StateRepository, aggregator: Aggregator, **kwargs) -> "WakeupEngine":
        """Load the initial snapshot; a PersistenceError here is fatal to the caller."""
        state = repository.load()
        logger.info("Loaded state with %d groups", len(state.groups))
        return cls(state, repository, aggregator, **kwargs)

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def has_unsaved_changes(self) -> bool:
        return self._dirty

    # Inbound operations ----------------------------------------------
    def on_report(self, user_id: str, group_id: str, now: datetime, *, display_name: Optional[str] = None) -> ActionResult:
        with self.lock_for(group_id):
            user = self._get_or_create_user(group_id, user_id, now=now, display_name=display_name)
            self._reports.submit_report(user, now)
            result = ActionResult(Action.REPORT, user_id, group_id, user.display_name, at=now)
        logger.debug("Report accepted: group=%s user=%s at=%s", group_id, user_id, now.isoformat())
        self._persist()
        return result

    def on_exemption_declare(
        self, user_id: str, group_id: str, now: datetime, *, display_name: Optional[str] = None
    ) -> ActionResult:
        with self.lock_for(group_id):
            user = self._get_or_create_user(group_id, user_id, now=now, display_name=display_name)
            self._exemptions.declare(user, now)
            result = ActionResult(Action.EXEMPTION_DECLARE, user_id, group_id, user.display_name, at=now)
        logger.debug("Pass declared: group=%s user=%s", group_id, user_id)
        self._persist()
        return result

    def on_exemption_revoke(self, user_id: str, group_id: str, *, display_name: Optional[str] = None) -> ActionResult:
        with self.lock_for(group_id):
            user = self._get_or_create_user(group_id, user_id, display_name=display_name)
            self._exemptions.revoke(user)
            result = ActionResult(Action.EXEMPTION_REVOKE, user_id, group_id, user.display_name)
        logger.debug("Pass revoked: group=%s user=%s", group_id, user_id)
        self._persist()
        return result

    def on_time_set(
        self,
        user_id: str,
        group_id: str,
        hour: int,
        minute: int,
        now: datetime,
        *,
        display_name: Optional[str] = None,
    ) -> ActionResult:
        with self.lock_for(group_id):
            user = self._get_or_create_user(group_id, user_id, now=now, display_name=display_name)
            pledge = self._pledges.set_pledge(user, hour=hour, minute=minute)
            result = ActionResult(Action.TIME_SET, user_id, group_id, user.display_name, at=now, pledge=pledge)
        logger.debug("Pledge set: group=%s user=%s time=%s", group_id, user_id, pledge.label())
        self._persist()
        return result

    def on_query_streak(self, group_id: str) -> Tuple[int, int]:
        """Read-only; an unknown group reads as (0, 0) and is not created."""
        group = self._state.groups.get(group_id)
        if group is None:
            return 0, 0
        with self.lock_for(group_id):
            return group.current_streak, group.best_streak

    def on_query_settings(self, user_id: str, group_id: str) -> Optional[Pledge]:
        with self.lock_for(group_id):
            group = self._state.groups.get(group_id)
            user = group.users.get(user_id) if group else None
            return self._pledges.get_pledge(user)

    def get_user(self, user_id: str, group_id: str) -> Optional[UserState]:
        group = self._state.groups.get(group_id)
        return group.users.get(user_id) if group else None

    def run_sweep(self, now: datetime) -> SweepResult:
        return self._aggregator.run(self._state, now, lock_for=self.lock_for, commit=self._persist)

    # Internal helpers -------------------------------------------------
    def lock_for(self, group_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(group_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[group_id] = lock
            return lock

    def _get_or_create_group(self, group_id: str) -> GroupState:
        group, created = self._state.get_or_create_group(group_id)
        if created:
            logger.info("New group %s", group_id)
        return group

    def _get_or_create_user(
        self,
        group_id: str,
        user_id: str,
        *,
        now: Optional[datetime] = None,
        display_name: Optional[str] = None,
    ) -> UserState:
        group = self._get_or_create_group(group_id)
        user = group.users.get(user_id)
        if user is None:
            user = UserState(
                user_id=user_id,
                week_window_start=start_of_week(now) if now else None,
            )
            group.users[user_id] = user
            logger.info("New member %s in group %s", user_id, group_id)
        if display_name:
            user.display_name = display_name
        return user

    def _persist(self) -> None:
        with self._save_lock:
            try:
                self._repository.save(self._state)
            except PersistenceError:
                # In-memory state stays authoritative; the next mutation retries.
                self._dirty = True
                logger.exception("Saving state failed; will retry on the next change")
                return
            if self._dirty:
                logger.info("State saved after earlier failure")
            self._dirty = False
