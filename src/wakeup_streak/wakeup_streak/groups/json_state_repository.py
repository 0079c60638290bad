from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from ..core.exceptions import PersistenceError
from .model import EngineState
from .repository import StateRepository

logger = logging.getLogger(__name__)


class JsonFileStateRepository(StateRepository):
    """Snapshot stored as one pretty-printed JSON document.

    Writes go to a sibling temp file that is then renamed over the target, so
    a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> EngineState:
        if not self._path.exists():
            logger.info("No state file at %s, starting empty", self._path)
            return EngineState()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read state file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"State file {self._path} does not contain an object")
        try:
            return EngineState.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"State file {self._path} is malformed: {e}") from e

    def save(self, state: EngineState) -> None:
        payload = json.dumps(state.to_dict(), ensure_ascii=False, indent=2)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise PersistenceError(f"Cannot write state file {self._path}: {e}") from e
