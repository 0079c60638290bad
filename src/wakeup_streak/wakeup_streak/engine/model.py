from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Action
from ..groups.model import Pledge


@dataclass(frozen=True)
class ActionResult:
    """Accepted inbound action, rendered into a reply by the transport."""

    action: Action
    user_id: str
    group_id: str
    display_name: str
    at: Optional[datetime] = None
    pledge: Optional[Pledge] = None
