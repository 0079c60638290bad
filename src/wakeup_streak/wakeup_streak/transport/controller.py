from __future__ import annotations

import logging
from datetime import datetime, time
from functools import wraps
from typing import Optional

from flask import Flask, abort, jsonify, request

from ..container import Container
from ..common.validators import require_hour, require_minute
from ..core.constants import DEFAULT_DISPLAY_NAME
from ..core.exceptions import MalformedTimeError, ValidationError
from .commands import CommandKind, parse_command
from .messages import HELP_TEXT, MESSAGES, render_record, render_rejection, render_result, render_settings
from .profiles import resolve_display_name
from .signature import SIGNATURE_HEADER, verify_signature

logger = logging.getLogger(__name__)


def handle_text(
    container: Container,
    *,
    user_id: str,
    group_id: str,
    text: str,
    display_name: Optional[str] = None,
) -> Optional[str]:
    """Run one chat message against the engine and return the reply text.

    Returns ``None`` for messages that are not commands. Without an explicit
    ``display_name`` the member profile is looked up once a command is found.
    """
    command = parse_command(text, allow_test_commands=container.enable_test_commands)
    if command is None:
        return None

    engine = container.engine
    now = container.clock.now()
    if display_name is None:
        display_name = resolve_display_name(container.profiles, group_id, user_id)

    try:
        if command.kind == CommandKind.SET_TIME:
            if command.hour is None:
                raise MalformedTimeError(f"Unrecognized wake-up time in {text!r}")
            result = engine.on_time_set(user_id, group_id, command.hour, command.minute, now, display_name=display_name)
            return render_result(result)
        if command.kind == CommandKind.REPORT:
            return render_result(engine.on_report(user_id, group_id, now, display_name=display_name))
        if command.kind == CommandKind.PASS:
            return render_result(engine.on_exemption_declare(user_id, group_id, now, display_name=display_name))
        if command.kind == CommandKind.PASS_CANCEL:
            return render_result(engine.on_exemption_revoke(user_id, group_id, display_name=display_name))
    except ValidationError as e:
        logger.debug("Rejected %s from %s/%s: %s", command.kind.value, group_id, user_id, e.reason.value)
        return render_rejection(e)

    if command.kind == CommandKind.RECORD:
        current, best = engine.on_query_streak(group_id)
        return render_record(current, best)
    if command.kind == CommandKind.SETTINGS:
        user = engine.get_user(user_id, group_id)
        name = display_name or (user.display_name if user else DEFAULT_DISPLAY_NAME)
        return render_settings(name, engine.on_query_settings(user_id, group_id))
    if command.kind == CommandKind.HELP:
        return HELP_TEXT
    if command.kind == CommandKind.TEST_SWEEP:
        container.scheduler.trigger(now)
        return MESSAGES["test_sweep"]
    if command.kind == CommandKind.TEST_TIME:
        try:
            pinned = time(hour=require_hour(command.hour), minute=require_minute(command.minute))
        except MalformedTimeError as e:
            return render_rejection(e)
        instant = datetime.combine(now.date(), pinned)
        container.clock.override(instant)
        return MESSAGES["test_time"].format(time=f"{instant.hour}:{instant.minute:02d}")
    return None


def register(app: Flask, container: Container) -> None:
    def test_commands_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not container.enable_test_commands:
                abort(404)
            return view(*args, **kwargs)

        return wrapper

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify(
            {
                "status": "ok",
                "groups": len(container.engine.state.groups),
                "unsaved_changes": container.engine.has_unsaved_changes,
                "scheduler_running": container.scheduler.is_running,
            }
        )

    @app.route("/webhook", methods=["POST"], endpoint="webhook")
    def webhook():
        body = request.get_data()
        if container.webhook_secret:
            if not verify_signature(container.webhook_secret, request.headers.get(SIGNATURE_HEADER), body):
                logger.warning("Rejected webhook with missing or bad signature")
                return jsonify({"success": False, "message": "Invalid signature"}), 403
        elif not container.allow_unsigned_webhooks:
            logger.error("WEBHOOK_SECRET is not configured; refusing webhook")
            return jsonify({"success": False, "message": "Webhook signing is not configured"}), 403

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"success": False, "message": "JSON body required"}), 400

        replies = []
        for event in data.get("events") or []:
            if event.get("type") != "message":
                continue
            source = event.get("source") or {}
            user_id = source.get("userId")
            group_id = source.get("groupId") or source.get("roomId")
            # 1:1 chats have no group and are ignored.
            if not user_id or not group_id:
                continue

            reply = handle_text(
                container,
                user_id=str(user_id),
                group_id=str(group_id),
                text=str(event.get("text") or ""),
            )
            if reply is not None:
                replies.append({"replyToken": event.get("replyToken"), "text": reply})

        return jsonify({"replies": replies})

    @app.route("/groups/<group_id>/streak", methods=["GET"], endpoint="group_streak")
    def group_streak(group_id: str):
        current, best = container.engine.on_query_streak(group_id)
        return jsonify({"group_id": group_id, "current_streak": current, "best_streak": best})

    @app.route("/admin/sweep", methods=["POST"], endpoint="admin_sweep")
    @test_commands_required
    def admin_sweep():
        data = request.get_json(silent=True) or {}
        at = data.get("at")
        try:
            now = datetime.strptime(at, "%Y-%m-%d %H:%M") if at else container.clock.now()
        except ValueError:
            return jsonify({"success": False, "message": "at must be YYYY-MM-DD HH:MM"}), 400

        result = container.scheduler.trigger(now)
        if result is None:
            return jsonify({"success": False, "message": "A sweep is already running"}), 409

        return jsonify(
            {
                "success": True,
                "ran_at": result.ran_at.isoformat(),
                "outcomes": [
                    {
                        "group_id": o.group_id,
                        "kind": o.kind.value,
                        "current_streak": o.current_streak,
                        "best_streak": o.best_streak,
                        "failed": o.failed_names,
                        "delivered": o.delivered,
                    }
                    for o in result.outcomes
                ],
            }
        )
