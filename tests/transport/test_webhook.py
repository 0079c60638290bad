from __future__ import annotations

import json
from datetime import datetime
from types import SimpleNamespace

import pytest
from flask import Flask

from src.wakeup_streak.wakeup_streak.common.clock import FixedClock
from src.wakeup_streak.wakeup_streak.container import build_container
from src.wakeup_streak.wakeup_streak.core.constants import DEFAULT_DISPLAY_NAME
from src.wakeup_streak.wakeup_streak.core.enums import NotificationKind, RejectReason
from src.wakeup_streak.wakeup_streak.core.exceptions import TransportError
from src.wakeup_streak.wakeup_streak.groups.memory_state_repository import InMemoryStateRepository
from src.wakeup_streak.wakeup_streak.main import create_app
from src.wakeup_streak.wakeup_streak.transport.controller import register
from src.wakeup_streak.wakeup_streak.transport.messages import HELP_TEXT, REJECTIONS
from src.wakeup_streak.wakeup_streak.transport.signature import SIGNATURE_HEADER, sign_body


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, group_id, kind, payload):
        self.sent.append((group_id, kind, payload))


class FakeProfiles:
    def __init__(self, names):
        self._names = names

    def display_name(self, group_id, user_id):
        return self._names.get(user_id)


class UnreachableProfiles:
    def display_name(self, group_id, user_id):
        raise TransportError("profile endpoint down")


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    clock = FixedClock(datetime(2026, 2, 1, 21, 0))
    notifier = RecordingNotifier()
    repo = InMemoryStateRepository()
    app = create_app(
        start_scheduler=False,
        clock=clock,
        notifier=notifier,
        repository=repo,
        profiles=FakeProfiles({"u1": "Aki", "u2": "Ben"}),
    )
    return app.test_client(), clock, notifier, repo


def _say(client, text, *, user="u1", group="g1"):
    body = {
        "events": [
            {
                "type": "message",
                "replyToken": "tok",
                "text": text,
                "source": {"userId": user, "groupId": group},
            }
        ]
    }
    resp = client.post("/webhook", json=body)
    assert resp.status_code == 200
    replies = resp.get_json()["replies"]
    return replies[0]["text"] if replies else None


def test_full_day_through_webhook(env):
    client, clock, notifier, repo = env

    assert "7:00" in _say(client, "wake up at 7")
    assert _say(client, "settings") == "Aki's wake-up time: 7:00"

    clock.set(datetime(2026, 2, 2, 6, 55))
    assert "Aki" in _say(client, "good morning")
    assert _say(client, "morning") == REJECTIONS[RejectReason.DUPLICATE]

    resp = client.post("/admin/sweep", json={"at": "2026-02-02 12:00"})
    assert resp.status_code == 200
    assert resp.get_json()["outcomes"][0]["current_streak"] == 1

    assert _say(client, "streak") == "Current streak: 1 day(s)\nBest streak: 1 day(s)"
    assert notifier.sent == [("g1", NotificationKind.ALL_SUCCESS, {"streak": 1})]
    assert repo.save_count >= 3


def test_rejections_are_rendered(env):
    client, clock, _, _ = env

    assert _say(client, "awake") == REJECTIONS[RejectReason.NO_PLEDGE]
    assert _say(client, "wake up at 24:10") == REJECTIONS[RejectReason.MALFORMED_TIME]
    assert _say(client, "cancel pass") == REJECTIONS[RejectReason.NOT_ACTIVE]

    clock.set(datetime(2026, 2, 2, 22, 0))
    assert _say(client, "pass") == REJECTIONS[RejectReason.TOO_LATE]


def test_test_time_command_pins_clock(env):
    client, _, _, _ = env

    assert _say(client, "@Bot test-time 21:59") == "Test time set to 21:59."
    assert "pass" in _say(client, "pass")


def test_non_commands_and_non_group_events_get_no_reply(env):
    client, _, _, _ = env

    assert _say(client, "nice weather") is None
    resp = client.post(
        "/webhook",
        json={"events": [{"type": "message", "text": "help", "source": {"userId": "u1"}}]},
    )
    assert resp.get_json()["replies"] == []


def test_help_and_health(env):
    client, _, _, _ = env

    assert _say(client, "help") == HELP_TEXT
    health = client.get("/health").get_json()
    assert health["status"] == "ok"
    assert health["scheduler_running"] is False


def test_bad_webhook_body(env):
    client, _, _, _ = env

    assert client.post("/webhook", data="nope", content_type="text/plain").status_code == 400


def test_admin_sweep_rejects_bad_time(env):
    client, _, _, _ = env

    assert client.post("/admin/sweep", json={"at": "noon"}).status_code == 400


def test_unreadable_wake_time_is_rejected(env):
    client, _, _, repo = env

    assert _say(client, "wake up at 7:300") == REJECTIONS[RejectReason.MALFORMED_TIME]
    assert repo.save_count == 0


def test_test_time_out_of_range_is_rejected(env):
    client, _, _, _ = env

    assert _say(client, "@Bot test-time 99:99") == REJECTIONS[RejectReason.MALFORMED_TIME]
    assert _say(client, "@Bot test-time 23:60") == REJECTIONS[RejectReason.MALFORMED_TIME]


def test_streak_endpoint_does_not_create_groups(env):
    client, _, _, _ = env

    for i in range(3):
        body = client.get(f"/groups/stranger-{i}/streak").get_json()
        assert (body["current_streak"], body["best_streak"]) == (0, 0)

    assert client.get("/health").get_json()["groups"] == 0


def test_failed_profile_lookup_falls_back_to_default_name(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(
        start_scheduler=False,
        clock=FixedClock(datetime(2026, 2, 1, 21, 0)),
        notifier=RecordingNotifier(),
        repository=InMemoryStateRepository(),
        profiles=UnreachableProfiles(),
    )
    client = app.test_client()

    _say(client, "wake up at 7")
    assert _say(client, "settings") == f"{DEFAULT_DISPLAY_NAME}'s wake-up time: 7:00"
    assert app.extensions["wakeup_streak"].engine.get_user("u1", "g1").display_name == DEFAULT_DISPLAY_NAME


def _signed_app(*, secret, allow_unsigned=False):
    settings = SimpleNamespace(
        STATE_BACKEND="memory",
        ENABLE_TEST_COMMANDS=False,
        WEBHOOK_SECRET=secret,
        ALLOW_UNSIGNED_WEBHOOKS=allow_unsigned,
    )
    container = build_container(
        settings,
        clock=FixedClock(datetime(2026, 2, 1, 21, 0)),
        notifier=RecordingNotifier(),
        profiles=FakeProfiles({"u7": "Aki"}),
    )
    app = Flask(__name__)
    register(app, container)
    return app.test_client(), container


def _event_body(text, user="u7"):
    event = {"type": "message", "replyToken": "tok", "text": text, "source": {"userId": user, "groupId": "g1"}}
    return json.dumps({"events": [event]}).encode()


def test_unsigned_or_forged_webhook_is_refused():
    client, container = _signed_app(secret="channel-secret")
    body = _event_body("wake up at 7")

    unsigned = client.post("/webhook", data=body, content_type="application/json")
    forged = client.post(
        "/webhook",
        data=body,
        content_type="application/json",
        headers={SIGNATURE_HEADER: sign_body("someone-else", body)},
    )

    assert unsigned.status_code == 403
    assert forged.status_code == 403
    assert container.engine.get_user("u7", "g1") is None


def test_signed_webhook_is_processed():
    client, container = _signed_app(secret="channel-secret")
    body = _event_body("wake up at 7")

    resp = client.post(
        "/webhook",
        data=body,
        content_type="application/json",
        headers={SIGNATURE_HEADER: sign_body("channel-secret", body)},
    )

    assert resp.status_code == 200
    assert "7:00" in resp.get_json()["replies"][0]["text"]
    assert container.engine.get_user("u7", "g1").display_name == "Aki"


def test_webhook_without_secret_is_refused_unless_unsigned_allowed():
    client, _ = _signed_app(secret=None)
    assert client.post("/webhook", data=_event_body("help"), content_type="application/json").status_code == 403

    client, _ = _signed_app(secret=None, allow_unsigned=True)
    assert client.post("/webhook", data=_event_body("help"), content_type="application/json").status_code == 200
