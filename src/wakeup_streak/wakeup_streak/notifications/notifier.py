from __future__ import annotations

import logging
from typing import Any, Dict, Protocol

from ..core.enums import NotificationKind
from .templates import render_notification

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Outbound group notification.

    Implementations raise TransportError when delivery fails.
    """

    def notify(self, group_id: str, kind: NotificationKind, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Writes notifications to the log instead of a chat service."""

    def notify(self, group_id: str, kind: NotificationKind, payload: Dict[str, Any]) -> None:
        logger.info("[notify %s] %s", group_id, render_notification(kind, payload))
