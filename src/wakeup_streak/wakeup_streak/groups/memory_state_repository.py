from __future__ import annotations

import copy
from typing import Optional

from .model import EngineState
from .repository import StateRepository


class InMemoryStateRepository(StateRepository):
    """Keeps the last saved snapshot as a dict (no I/O)."""

    def __init__(self, initial: Optional[EngineState] = None):
        self._snapshot = initial.to_dict() if initial else None
        self.save_count = 0

    def load(self) -> EngineState:
        if self._snapshot is None:
            return EngineState()
        return EngineState.from_dict(copy.deepcopy(self._snapshot))

    def save(self, state: EngineState) -> None:
        self._snapshot = state.to_dict()
        self.save_count += 1
