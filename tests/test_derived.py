from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

# Make the clubstore package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clubstore.domain.derived import (  # noqa: E402
    UNKNOWN_TEAM,
    PlayerSummary,
    calculate_age,
    filter_summaries,
    registration_window,
    resolve_team_name,
    roster_fill,
)


def test_age_before_and_on_birthday():
    dob = date(2000, 6, 15)
    assert calculate_age(dob, date(2024, 6, 14)) == 23
    assert calculate_age(dob, date(2024, 6, 15)) == 24
    assert calculate_age(dob, date(2024, 12, 31)) == 24


def test_age_without_date_of_birth():
    assert calculate_age(None, date(2024, 1, 1)) == 0


def test_registration_window_open_one_day_before():
    deadline = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    window = registration_window(deadline, deadline - timedelta(days=1))
    assert window.open is True
    assert window.days_remaining == 1


def test_registration_window_rounds_partial_days_up():
    deadline = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    window = registration_window(deadline, deadline - timedelta(days=2, hours=1))
    assert window.days_remaining == 3


def test_registration_window_boundaries():
    deadline = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    at_deadline = registration_window(deadline, deadline)
    assert at_deadline.open is True
    assert at_deadline.days_remaining == 0
    after = registration_window(deadline, deadline + timedelta(seconds=1))
    assert after.open is False
    assert after.days_remaining == 0


def test_registration_window_treats_naive_as_utc():
    deadline = datetime(2024, 5, 1, 12, 0)
    now = datetime(2024, 5, 1, 13, 0, tzinfo=timezone(timedelta(hours=2)))
    # 13:00+02:00 is 11:00 UTC, before the deadline
    assert registration_window(deadline, now).open is True


def test_team_name_fallback():
    names = {"t1": "Hawks"}
    assert resolve_team_name("t1", names) == "Hawks"
    assert resolve_team_name("gone", names) == UNKNOWN_TEAM
    assert resolve_team_name(None, names) == UNKNOWN_TEAM


def test_roster_fill_caps_at_one():
    assert roster_fill(4, 16) == 0.25
    assert roster_fill(20, 16) == 1.0


def test_filter_summaries_matches_name_team_or_position():
    rows = [
        PlayerSummary(id="1", name="Ana Silva", team="Hawks", position="Forward", age=20, team_id="t1"),
        PlayerSummary(id="2", name="Ben Cole", team="Unknown Team", position="Goalkeeper", age=30, team_id=None),
    ]
    assert [r.id for r in filter_summaries(rows, "silva")] == ["1"]
    assert [r.id for r in filter_summaries(rows, "HAWK")] == ["1"]
    assert [r.id for r in filter_summaries(rows, "keeper")] == ["2"]
    assert len(filter_summaries(rows, "  ")) == 2
