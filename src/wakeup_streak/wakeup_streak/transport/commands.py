"""Free-text command parsing for inbound chat messages."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CommandKind(str, Enum):
    SET_TIME = "SET_TIME"
    REPORT = "REPORT"
    PASS = "PASS"
    PASS_CANCEL = "PASS_CANCEL"
    RECORD = "RECORD"
    SETTINGS = "SETTINGS"
    HELP = "HELP"
    TEST_SWEEP = "TEST_SWEEP"
    TEST_TIME = "TEST_TIME"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    hour: Optional[int] = None
    minute: Optional[int] = None


SET_TIME_PATTERN = re.compile(r"\bwake(?:\s+up)?\s+at\s+(\d[\d:h時分]*)(?!\w)", re.IGNORECASE)
PLEDGE_TEXT_PATTERN = re.compile(r"^(\d{1,2})(?:(?::|h|時)(\d{1,2})?分?)?$", re.IGNORECASE)
TEST_TIME_PATTERN = re.compile(r"^@Bot test-time\s*(\d{1,2}):(\d{2})$")
TEST_SWEEP_TEXT = "@Bot test-sweep"

PASS_WORDS = ("pass", "skip tomorrow", "day off tomorrow")
PASS_CANCEL_WORDS = ("cancel pass", "undo pass", "pass cancel")
RECORD_WORDS = ("streak", "record")
SETTINGS_WORDS = ("settings", "my time")
HELP_WORDS = ("help", "usage", "how to")
WAKE_KEYWORDS = ("awake", "woke up", "i'm up", "im up", "good morning", "morning")


def parse_pledge_text(text: str) -> Optional[tuple[int, int]]:
    """Parse `7`, `7:30`, `7h`, `7時30` or `7時30分` into ``(hour, minute)``.

    Omitted minutes mean on the hour. Ranges are not checked here.
    """
    m = PLEDGE_TEXT_PATTERN.match((text or "").strip())
    if not m:
        return None
    return int(m.group(1)), int(m.group(2)) if m.group(2) else 0


def parse_command(text: str, *, allow_test_commands: bool = False) -> Optional[Command]:
    """Map a chat message to a command; ``None`` means the message is ignored.

    Exact phrases win over substring keywords, and the wake-time pattern is
    checked before report keywords so "wake up at 7" is never a report.
    """
    stripped = (text or "").strip()
    lowered = stripped.lower()
    if not stripped:
        return None

    if allow_test_commands:
        if stripped == TEST_SWEEP_TEXT:
            return Command(CommandKind.TEST_SWEEP)
        m = TEST_TIME_PATTERN.match(stripped)
        if m:
            return Command(CommandKind.TEST_TIME, hour=int(m.group(1)), minute=int(m.group(2)))

    m = SET_TIME_PATTERN.search(stripped)
    if m:
        parsed = parse_pledge_text(m.group(1))
        if parsed is None:
            # "wake up at 7:300": a time command with an unreadable time.
            return Command(CommandKind.SET_TIME)
        return Command(CommandKind.SET_TIME, hour=parsed[0], minute=parsed[1])

    if lowered in PASS_WORDS:
        return Command(CommandKind.PASS)
    if lowered in PASS_CANCEL_WORDS:
        return Command(CommandKind.PASS_CANCEL)
    if lowered in RECORD_WORDS:
        return Command(CommandKind.RECORD)
    if lowered in SETTINGS_WORDS:
        return Command(CommandKind.SETTINGS)
    if lowered in HELP_WORDS:
        return Command(CommandKind.HELP)

    if any(keyword in lowered for keyword in WAKE_KEYWORDS):
        return Command(CommandKind.REPORT)

    return None
