from __future__ import annotations

import httpx
import pytest

from src.wakeup_streak.wakeup_streak.core.constants import DEFAULT_DISPLAY_NAME
from src.wakeup_streak.wakeup_streak.core.exceptions import TransportError
from src.wakeup_streak.wakeup_streak.transport.profiles import HttpProfileLookup, NoProfileLookup, resolve_display_name
from src.wakeup_streak.wakeup_streak.transport.signature import sign_body, verify_signature


def _lookup(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpProfileLookup("https://chat.example/group/", token="secret", client=client)


def test_profile_lookup_reads_display_name():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"displayName": "Aki"})

    assert _lookup(handler).display_name("g1", "u1") == "Aki"
    assert str(seen[0].url) == "https://chat.example/group/g1/member/u1"
    assert seen[0].headers["Authorization"] == "Bearer secret"


@pytest.mark.parametrize(
    "response",
    [httpx.Response(404), httpx.Response(200, json={}), httpx.Response(200, content=b"not json")],
)
def test_profile_lookup_failures_become_transport_error(response):
    with pytest.raises(TransportError):
        _lookup(lambda request: response).display_name("g1", "u1")


def test_resolve_falls_back_to_default_name():
    lookup = _lookup(lambda request: httpx.Response(503))

    assert resolve_display_name(lookup, "g1", "u1") == DEFAULT_DISPLAY_NAME
    assert resolve_display_name(NoProfileLookup(), "g1", "u1") is None


def test_signature_matches_only_the_signed_body():
    body = b'{"events": []}'
    signature = sign_body("channel-secret", body)

    assert verify_signature("channel-secret", signature, body)
    assert not verify_signature("channel-secret", signature, body + b" ")
    assert not verify_signature("other-secret", signature, body)
    assert not verify_signature("channel-secret", None, body)
