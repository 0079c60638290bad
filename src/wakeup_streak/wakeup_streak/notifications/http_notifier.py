from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..core.enums import NotificationKind
from ..core.exceptions import TransportError
from .notifier import Notifier
from .templates import render_notification

logger = logging.getLogger(__name__)


class HttpPushNotifier(Notifier):
    """Pushes a text message to a group through a chat gateway.

    Request body: ``{"to": group_id, "messages": [{"type": "text", "text": ...}]}``
    with an optional bearer token.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        token: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self._endpoint = endpoint
        self._token = token
        self._client = client or httpx.Client(timeout=timeout)

    def notify(self, group_id: str, kind: NotificationKind, payload: Dict[str, Any]) -> None:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        body = {
            "to": group_id,
            "messages": [{"type": "text", "text": render_notification(kind, payload)}],
        }

        try:
            response = self._client.post(self._endpoint, json=body, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"Push to {group_id} failed: {e}") from e

        logger.debug("Pushed %s to %s (status %s)", kind.value, group_id, response.status_code)

    def close(self) -> None:
        self._client.close()
