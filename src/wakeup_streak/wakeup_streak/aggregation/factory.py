from __future__ import annotations

from dataclasses import dataclass, field

from ..groups.model import UserState
from .strategies.base import ClassificationStrategy
from .strategies.deadline_strategy import DeadlineStrategy
from .strategies.exempt_strategy import ExemptStrategy


@dataclass
class ClassificationStrategyFactory:
    """Factory Pattern: choose the strategy that judges a member."""

    exempt: ClassificationStrategy = field(default_factory=ExemptStrategy)
    deadline: ClassificationStrategy = field(default_factory=DeadlineStrategy)

    def for_user(self, user: UserState) -> ClassificationStrategy:
        if user.exemption_active:
            return self.exempt
        return self.deadline
