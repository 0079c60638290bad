from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from ..core.constants import DEFAULT_DISPLAY_NAME
from ..core.exceptions import TransportError

logger = logging.getLogger(__name__)


class ProfileLookup(Protocol):
    def display_name(self, group_id: str, user_id: str) -> Optional[str]:
        """Member's current display name; raises TransportError when unreachable."""
        ...


class NoProfileLookup:
    """Used when no profile endpoint is configured: stored names are kept."""

    def display_name(self, group_id: str, user_id: str) -> Optional[str]:
        return None


class HttpProfileLookup:
    """Fetches ``GET {endpoint}/{group_id}/member/{user_id}`` -> ``{"displayName": ...}``."""

    def __init__(
        self,
        endpoint: str,
        *,
        token: Optional[str] = None,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        self._endpoint = endpoint.rstrip("/")
        self._token = token
        self._client = client or httpx.Client(timeout=timeout)

    def display_name(self, group_id: str, user_id: str) -> Optional[str]:
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = self._client.get(f"{self._endpoint}/{group_id}/member/{user_id}", headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TransportError(f"Profile lookup for {user_id} in {group_id} failed: {e}") from e

        name = data.get("displayName") if isinstance(data, dict) else None
        if not name:
            raise TransportError(f"Profile for {user_id} in {group_id} has no displayName")
        return str(name)

    def close(self) -> None:
        self._client.close()


def resolve_display_name(profiles: ProfileLookup, group_id: str, user_id: str) -> Optional[str]:
    try:
        return profiles.display_name(group_id, user_id)
    except TransportError:
        logger.warning("Profile lookup failed for %s/%s; using %r", group_id, user_id, DEFAULT_DISPLAY_NAME, exc_info=True)
        return DEFAULT_DISPLAY_NAME
