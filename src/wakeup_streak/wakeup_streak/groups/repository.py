from __future__ import annotations

from typing import Protocol

from .model import EngineState


class StateRepository(Protocol):
    """Load/save contract for the engine snapshot.

    Note (DIP): the engine depends on this interface only; the storage format
    belongs to each implementation. Implementations raise PersistenceError.
    """

    def load(self) -> EngineState:
        raise NotImplementedError

    def save(self, state: EngineState) -> None:
        raise NotImplementedError
