from __future__ import annotations

from .enums import RejectReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when an inbound action violates a domain rule.

    Always recoverable; raised before any state is touched.
    """

    reason: RejectReason

    def __init__(self, message: str = "", *, reason: RejectReason | None = None):
        super().__init__(message or self.__class__.__doc__ or "")
        if reason is not None:
            self.reason = reason


class NoPledgeError(ValidationError):
    """No wake-up time has been set."""

    reason = RejectReason.NO_PLEDGE


class DuplicateReportError(ValidationError):
    """A wake-up report was already accepted today."""

    reason = RejectReason.DUPLICATE


class MalformedTimeError(ValidationError):
    """Wake-up time is outside 00:00-23:59."""

    reason = RejectReason.MALFORMED_TIME


class ExemptionTooLateError(ValidationError):
    """A pass must be declared before the evening cutoff."""

    reason = RejectReason.TOO_LATE


class ExemptionQuotaExhaustedError(ValidationError):
    """The weekly pass has already been used."""

    reason = RejectReason.QUOTA_EXHAUSTED


class ExemptionNotActiveError(ValidationError):
    """There is no active pass to cancel."""

    reason = RejectReason.NOT_ACTIVE


class TransportError(DomainError):
    """Raised when a notification or profile lookup cannot be delivered."""


class PersistenceError(DomainError):
    """Raised when the state snapshot cannot be loaded or saved."""
