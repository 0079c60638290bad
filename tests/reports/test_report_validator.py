from datetime import datetime

import pytest

from src.wakeup_streak.wakeup_streak.core.enums import RejectReason
from src.wakeup_streak.wakeup_streak.core.exceptions import DuplicateReportError, NoPledgeError
from src.wakeup_streak.wakeup_streak.groups.model import Pledge, UserState
from src.wakeup_streak.wakeup_streak.reports.validator import ReportValidator


def _pledged_user() -> UserState:
    return UserState(user_id="u1", display_name="Aki", wakeup_time=Pledge(hour=7, minute=0))


def test_report_without_pledge_is_rejected_and_not_recorded():
    user = UserState(user_id="u1")

    with pytest.raises(NoPledgeError) as exc:
        ReportValidator().submit_report(user, datetime(2026, 2, 2, 6, 50))

    assert exc.value.reason == RejectReason.NO_PLEDGE
    assert user.last_report_at is None
    assert user.reported_today is False


def test_second_report_same_day_is_duplicate():
    user = _pledged_user()
    validator = ReportValidator()

    validator.submit_report(user, datetime(2026, 2, 2, 6, 50))
    with pytest.raises(DuplicateReportError):
        validator.submit_report(user, datetime(2026, 2, 2, 6, 55))

    assert user.last_report_at == datetime(2026, 2, 2, 6, 50)


def test_late_report_is_still_recorded():
    user = _pledged_user()

    ReportValidator().submit_report(user, datetime(2026, 2, 2, 9, 30))

    assert user.last_report_at == datetime(2026, 2, 2, 9, 30)
    assert user.reported_today is True


def test_report_next_day_after_reset_is_accepted():
    user = _pledged_user()
    validator = ReportValidator()
    validator.submit_report(user, datetime(2026, 2, 2, 6, 50))

    # daily reset done by the sweep
    user.reported_today = False
    validator.submit_report(user, datetime(2026, 2, 3, 6, 40))

    assert user.last_report_at == datetime(2026, 2, 3, 6, 40)


def test_stale_flag_from_previous_day_does_not_block_report():
    user = _pledged_user()
    user.reported_today = True
    user.last_report_at = datetime(2026, 2, 1, 6, 0)

    ReportValidator().submit_report(user, datetime(2026, 2, 2, 6, 30))

    assert user.last_report_at == datetime(2026, 2, 2, 6, 30)
