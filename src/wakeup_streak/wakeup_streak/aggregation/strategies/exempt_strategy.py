from __future__ import annotations

from datetime import datetime

from ...core.enums import Classification
from ...groups.model import UserState
from .base import ClassificationStrategy


class ExemptStrategy(ClassificationStrategy):
    """Active pass: counts as success and is consumed.

    The weekly count is left alone; only the quota window resets it.
    """

    def classify(self, user: UserState, *, now: datetime) -> Classification:
        user.exemption_active = False
        return Classification.EXEMPT_SUCCESS
