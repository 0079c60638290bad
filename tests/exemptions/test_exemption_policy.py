from datetime import datetime

import pytest

from src.wakeup_streak.wakeup_streak.core.exceptions import (
    ExemptionNotActiveError,
    ExemptionQuotaExhaustedError,
    ExemptionTooLateError,
)
from src.wakeup_streak.wakeup_streak.exemptions.policy import ExemptionPolicy
from src.wakeup_streak.wakeup_streak.groups.model import Pledge, UserState

# 2026-02-01 is a Sunday
SUNDAY = datetime(2026, 2, 1)


def _user(**kwargs) -> UserState:
    return UserState(user_id="u1", display_name="Aki", wakeup_time=Pledge(hour=7, minute=0), **kwargs)


def test_declare_before_cutoff_succeeds():
    user = _user()
    now = datetime(2026, 2, 2, 21, 59)

    ExemptionPolicy().declare(user, now)

    assert user.exemption_active is True
    assert user.last_exemption_at == now
    assert user.week_exemption_count == 1
    assert user.week_window_start == SUNDAY


@pytest.mark.parametrize("hour,minute", [(22, 0), (22, 1), (23, 59)])
def test_declare_at_or_after_cutoff_is_too_late(hour, minute):
    user = _user()

    with pytest.raises(ExemptionTooLateError):
        ExemptionPolicy().declare(user, datetime(2026, 2, 2, hour, minute))

    assert user.exemption_active is False
    assert user.week_exemption_count == 0


def test_second_declare_in_same_window_exhausts_quota():
    user = _user()
    policy = ExemptionPolicy()
    policy.declare(user, datetime(2026, 2, 2, 20, 0))

    with pytest.raises(ExemptionQuotaExhaustedError):
        policy.declare(user, datetime(2026, 2, 4, 20, 0))

    assert user.week_exemption_count == 1
    assert user.last_exemption_at == datetime(2026, 2, 2, 20, 0)


def test_window_rolls_over_after_seven_days():
    user = _user()
    policy = ExemptionPolicy()
    policy.declare(user, datetime(2026, 2, 2, 20, 0))
    user.exemption_active = False  # consumed by a sweep

    with pytest.raises(ExemptionQuotaExhaustedError):
        policy.declare(user, datetime(2026, 2, 7, 20, 0))

    policy.declare(user, datetime(2026, 2, 8, 9, 0))

    assert user.week_window_start == datetime(2026, 2, 8)
    assert user.week_exemption_count == 1


def test_window_is_anchored_per_user():
    # Window started on an earlier Sunday and was never refreshed
    user = _user(week_window_start=datetime(2026, 1, 18), week_exemption_count=1)

    ExemptionPolicy().declare(user, datetime(2026, 2, 3, 8, 0))

    assert user.week_window_start == SUNDAY
    assert user.week_exemption_count == 1


def test_window_refresh_happens_even_when_too_late():
    user = _user(week_window_start=datetime(2026, 1, 18), week_exemption_count=1)

    with pytest.raises(ExemptionTooLateError):
        ExemptionPolicy().declare(user, datetime(2026, 2, 3, 22, 30))

    assert user.week_exemption_count == 0
    assert user.week_window_start == SUNDAY


def test_missing_window_start_is_initialized():
    user = _user()
    assert user.week_window_start is None

    ExemptionPolicy().declare(user, datetime(2026, 2, 5, 10, 0))

    assert user.week_window_start == SUNDAY


def test_revoke_never_declared_fails_and_keeps_count():
    user = _user(week_exemption_count=1)

    with pytest.raises(ExemptionNotActiveError):
        ExemptionPolicy().revoke(user)

    assert user.week_exemption_count == 1


def test_revoke_restores_quota_once():
    user = _user()
    policy = ExemptionPolicy()
    policy.declare(user, datetime(2026, 2, 2, 20, 0))

    policy.revoke(user)

    assert user.exemption_active is False
    assert user.week_exemption_count == 0
    with pytest.raises(ExemptionNotActiveError):
        policy.revoke(user)
    assert user.week_exemption_count == 0

    # quota is available again in the same window
    policy.declare(user, datetime(2026, 2, 3, 20, 0))
    assert user.week_exemption_count == 1


def test_revoke_never_goes_below_zero():
    user = _user(exemption_active=True, week_exemption_count=0)

    ExemptionPolicy().revoke(user)

    assert user.week_exemption_count == 0
