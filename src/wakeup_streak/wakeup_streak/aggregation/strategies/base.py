from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ...core.enums import Classification
from ...groups.model import UserState


class ClassificationStrategy(ABC):
    """Strategy Pattern: encapsulate how a pledged member is judged in a sweep."""

    @abstractmethod
    def classify(self, user: UserState, *, now: datetime) -> Classification:
        raise NotImplementedError
