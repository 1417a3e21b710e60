"""
Tests for session bucketing.

Verifies that classify():
- Drops cancelled and rejected sessions and partitions the rest
- Lets manuallyCompleted override every date/time rule
- Treats both ends of the ongoing window as inclusive (minute resolution)
- Sorts upcoming soonest first and previous most recent first
- Defaults missing fields instead of raising
"""

from datetime import datetime, timedelta, timezone

import pytest

from alumni_portal.schemas.session import Bucket
from alumni_portal.services.session_classifier import (
    bucket_for,
    classify,
    parse_time,
    session_stats,
)


def ids(sessions):
    return [s.id for s in sessions]


class TestBucketing:
    """Date and time rules for a single session."""

    def test_same_day_inside_window_is_ongoing(self, session_factory, now):
        result = classify([session_factory(time="09:00")], now=now)
        assert ids(result.ongoing) == ["s1"]
        assert result.ongoing[0].status == "ongoing"

    def test_same_day_after_window_is_previous(self, session_factory):
        result = classify([session_factory(time="09:00")], now=datetime(2025, 6, 10, 11, 1))
        assert ids(result.previous) == ["s1"]
        assert result.previous[0].status == "completed"

    def test_same_day_before_start_is_upcoming(self, session_factory):
        result = classify([session_factory(time="14:00")], now=datetime(2025, 6, 10, 8, 0))
        assert ids(result.upcoming) == ["s1"]

    def test_future_date_is_upcoming(self, session_factory):
        result = classify([session_factory()], now=datetime(2025, 6, 5, 12, 0))
        assert ids(result.upcoming) == ["s1"]

    def test_past_date_is_previous(self, session_factory):
        result = classify([session_factory()], now=datetime(2025, 6, 15, 12, 0))
        assert ids(result.previous) == ["s1"]

    def test_start_equal_to_now_is_ongoing(self, session_factory):
        result = classify([session_factory(time="09:00")], now=datetime(2025, 6, 10, 9, 0))
        assert ids(result.ongoing) == ["s1"]

    def test_end_equal_to_now_is_still_ongoing(self, session_factory):
        result = classify([session_factory(time="09:00")], now=datetime(2025, 6, 10, 11, 0))
        assert ids(result.ongoing) == ["s1"]

    def test_seconds_past_end_minute_are_ignored(self, session_factory):
        result = classify([session_factory(time="09:00")], now=datetime(2025, 6, 10, 11, 0, 45))
        assert ids(result.ongoing) == ["s1"]

    def test_missing_time_starts_at_midnight(self, session_factory):
        record = session_factory(time=None)
        early = classify([record], now=datetime(2025, 6, 10, 1, 30))
        late = classify([record], now=datetime(2025, 6, 10, 2, 1))
        assert ids(early.ongoing) == ["s1"]
        assert ids(late.previous) == ["s1"]

    def test_custom_duration(self, session_factory):
        result = classify(
            [session_factory(time="09:00")],
            now=datetime(2025, 6, 10, 10, 30),
            duration=timedelta(minutes=60),
        )
        assert ids(result.previous) == ["s1"]

    def test_late_evening_session_stays_ongoing_until_midnight(self):
        start = datetime(2025, 6, 10, 23, 0)
        assert bucket_for(start, datetime(2025, 6, 10, 23, 59), timedelta(hours=2)) == Bucket.ONGOING
        assert bucket_for(start, datetime(2025, 6, 11, 0, 30), timedelta(hours=2)) == Bucket.PREVIOUS

    def test_aware_now_uses_its_wall_clock(self, session_factory):
        aware = datetime(2025, 6, 10, 10, 30, tzinfo=timezone.utc)
        result = classify([session_factory(time="09:00")], now=aware)
        assert ids(result.ongoing) == ["s1"]


class TestManualCompletion:

    @pytest.mark.parametrize("status", ["upcoming", "ongoing", "completed", "pending", None])
    def test_manually_completed_is_always_previous(self, session_factory, status):
        record = session_factory(date="2030-01-01", status=status, manuallyCompleted=True)
        result = classify([record], now=datetime(2025, 6, 10, 10, 30))
        assert ids(result.previous) == ["s1"]
        assert result.previous[0].status == "completed"
        assert result.previous[0].manually_completed is True

    def test_manually_completed_while_inside_window(self, session_factory, now):
        result = classify([session_factory(manuallyCompleted=True)], now=now)
        assert result.ongoing == []
        assert ids(result.previous) == ["s1"]


class TestPartition:

    def test_cancelled_and_rejected_are_dropped(self, session_factory, now):
        records = [
            session_factory("a", status="cancelled"),
            session_factory("b", status="rejected"),
            session_factory("c", status="Cancelled", manuallyCompleted=True),
            session_factory("d"),
        ]
        result = classify(records, now=now)
        assert ids(result.all()) == ["d"]

    def test_buckets_are_disjoint_and_cover_visible_sessions(self, session_factory, now):
        records = [
            session_factory("past", date="2025-06-01"),
            session_factory("today-early", time="06:00"),
            session_factory("today-now", time="10:00"),
            session_factory("today-later", time="18:00"),
            session_factory("future", date="2025-07-01"),
            session_factory("manual", date="2025-07-02", manuallyCompleted=True),
            session_factory("gone", status="cancelled"),
        ]
        result = classify(records, now=now)

        ongoing, upcoming, previous = set(ids(result.ongoing)), set(ids(result.upcoming)), set(ids(result.previous))
        assert not ongoing & upcoming
        assert not ongoing & previous
        assert not upcoming & previous
        assert ongoing | upcoming | previous == {
            "past", "today-early", "today-now", "today-later", "future", "manual"
        }
        assert ongoing == {"today-now"}
        assert upcoming == {"today-later", "future"}

    def test_stats_count_buckets(self, session_factory, now):
        records = [
            session_factory("a", date="2025-06-01"),
            session_factory("b", time="10:00"),
            session_factory("c", date="2025-07-01"),
            session_factory("d", date="2025-07-02"),
        ]
        stats = session_stats(classify(records, now=now))
        assert (stats.total, stats.ongoing, stats.upcoming, stats.previous) == (4, 1, 2, 1)


class TestOrdering:

    def test_upcoming_sorted_soonest_first(self, session_factory, now):
        records = [
            session_factory("late", date="2025-08-01"),
            session_factory("soon-afternoon", date="2025-06-11", time="15:00"),
            session_factory("soon-morning", date="2025-06-11", time="08:00"),
            session_factory("mid", date="2025-07-01"),
        ]
        result = classify(records, now=now)
        assert ids(result.upcoming) == ["soon-morning", "soon-afternoon", "mid", "late"]
        starts = [s.start for s in result.upcoming]
        assert starts == sorted(starts)

    def test_previous_sorted_most_recent_first(self, session_factory, now):
        records = [
            session_factory("old", date="2025-01-01"),
            session_factory("recent", date="2025-06-09"),
            session_factory("middle", date="2025-03-15"),
            session_factory("undated", date=None),
        ]
        result = classify(records, now=now)
        assert ids(result.previous) == ["recent", "middle", "old", "undated"]

    def test_ongoing_keeps_input_order(self, session_factory, now):
        records = [
            session_factory("b", time="10:00"),
            session_factory("a", time="09:00"),
        ]
        result = classify(records, now=now)
        assert ids(result.ongoing) == ["b", "a"]


class TestNormalization:

    def test_display_defaults(self, now):
        result = classify([{"_id": "x", "date": "2025-06-20"}], now=now)
        session = result.upcoming[0]
        assert session.title == "Untitled Session"
        assert session.description == "No description available"
        assert session.venue == "TBA"
        assert session.session_head.full_name == "TBA"
        assert session.profile_image == "/default-profile.png"
        assert session.time == ""
        assert session.day == "20"
        assert session.month == "June"

    def test_session_head_photo_becomes_profile_image(self, session_factory, now):
        record = session_factory(sessionHead={"_id": "h1", "fullName": "Dr. Rao", "profilePhoto": "/p/rao.png"})
        session = classify([record], now=now).ongoing[0]
        assert session.session_head.full_name == "Dr. Rao"
        assert session.profile_image == "/p/rao.png"

    def test_scalar_targets_are_wrapped(self, session_factory, now):
        record = session_factory(targetAudience="E-3", targetDepartments="ece")
        session = classify([record], now=now).ongoing[0]
        assert session.target_audience == ["E-3"]
        assert session.target_departments == ["ECE"]

    def test_absent_targets_default_to_everyone(self, session_factory, now):
        record = session_factory(targetAudience=None, targetDepartments=None)
        session = classify([record], now=now).ongoing[0]
        assert session.target_audience == ["all"]
        assert session.target_departments == ["ALL"]

    def test_legacy_year_codes(self, session_factory, now):
        record = session_factory(targetAudience=["E1", "e4", "ALL"])
        session = classify([record], now=now).ongoing[0]
        assert session.target_audience == ["E-1", "E-4", "all"]

    def test_malformed_records_do_not_raise(self, now):
        records = [None, {"_id": "a", "date": "not-a-date", "time": "xx:yy"}, {"_id": "b", "time": "25:99"}]
        result = classify(records, now=now)
        assert ids(result.previous) == ["a", "b"]


class TestParseTime:

    @pytest.mark.parametrize("value,expected", [
        ("09:30", (9, 30)),
        ("9:05", (9, 5)),
        ("18:00:00", (18, 0)),
        ("", (0, 0)),
        (None, (0, 0)),
        ("noon", (0, 0)),
        ("24:00", (0, 0)),
    ])
    def test_parse_time(self, value, expected):
        assert parse_time(value) == expected
