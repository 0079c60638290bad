from __future__ import annotations

from enum import Enum


class Classification(str, Enum):
    """Per-user verdict produced by an aggregation sweep."""

    SUCCESS = "SUCCESS"
    EXEMPT_SUCCESS = "EXEMPT_SUCCESS"
    FAILURE = "FAILURE"


class NotificationKind(str, Enum):
    ALL_SUCCESS = "ALL_SUCCESS"
    SOME_FAILED = "SOME_FAILED"


class RejectReason(str, Enum):
    """Why an inbound action was refused."""

    NO_PLEDGE = "NO_PLEDGE"
    DUPLICATE = "DUPLICATE"
    MALFORMED_TIME = "MALFORMED_TIME"
    TOO_LATE = "TOO_LATE"
    QUOTA_EXHAUSTED = "QUOTA_EXHAUSTED"
    NOT_ACTIVE = "NOT_ACTIVE"


class Action(str, Enum):
    REPORT = "REPORT"
    EXEMPTION_DECLARE = "EXEMPTION_DECLARE"
    EXEMPTION_REVOKE = "EXEMPTION_REVOKE"
    TIME_SET = "TIME_SET"
