"""
Tests for usage sessions: start/end, billing, listing and stats.
"""
from datetime import datetime, timedelta, timezone

import pytest

from models.usage import UsageStatus
from services.exceptions import BadRequest, Forbidden, NotFound
from services.usage_service import calculate_cost, usage_service

START = datetime(2025, 1, 1, 8, 0, 0)


class TestCalculateCost:
    """Pro-rata billing by the minute."""

    def test_one_hour_at_72_per_day(self):
        assert calculate_cost(72.0, 60) == pytest.approx(3.0)

    def test_full_day_costs_price_per_day(self):
        assert calculate_cost(50.0, 1440) == pytest.approx(50.0)

    def test_zero_minutes_is_free(self):
        assert calculate_cost(72.0, 0) == 0.0


class TestStartUsage:

    def test_start_creates_active_session(self, user, dumpster):
        usage = usage_service.start_usage(user.id, dumpster.id, START, notes="driveway")

        assert usage.status == UsageStatus.ACTIVE
        assert usage.start_time == START
        assert usage.end_time is None
        assert usage.notes == "driveway"

    def test_aware_start_time_is_stored_as_naive_utc(self, user, dumpster):
        aware = datetime(2025, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        usage = usage_service.start_usage(user.id, dumpster.id, aware)
        assert usage.start_time == START

    def test_unavailable_dumpster_rejected(self, user, make_dumpster):
        dumpster = make_dumpster(is_available=False)
        with pytest.raises(BadRequest):
            usage_service.start_usage(user.id, dumpster.id, START)

    def test_missing_dumpster_is_not_found(self, user):
        with pytest.raises(NotFound):
            usage_service.start_usage(user.id, "00000000-0000-0000-0000-000000000000", START)

    def test_malformed_dumpster_id(self, user):
        with pytest.raises(BadRequest, match="invalid dumpster ID"):
            usage_service.start_usage(user.id, "not-a-uuid", START)

    def test_second_active_session_rejected(self, user, dumpster):
        usage_service.start_usage(user.id, dumpster.id, START)
        with pytest.raises(BadRequest, match="active usage session"):
            usage_service.start_usage(user.id, dumpster.id, START + timedelta(hours=1))

    def test_other_user_can_start_on_same_dumpster(self, user, other_user, dumpster):
        usage_service.start_usage(user.id, dumpster.id, START)
        usage = usage_service.start_usage(other_user.id, dumpster.id, START)
        assert usage.user_id == other_user.id

    def test_interleaved_starts_both_succeed(self, user, dumpster, monkeypatch):
        """Two requests that both pass the pre-check before either inserts."""
        monkeypatch.setattr(usage_service, "_active_session", lambda user_id, dumpster_id: None)

        first = usage_service.start_usage(user.id, dumpster.id, START)
        second = usage_service.start_usage(user.id, dumpster.id, START)

        assert first.id != second.id
        assert usage_service.list_by_user(user.id, status="active").total == 2


class TestEndUsage:

    def test_end_bills_duration(self, user, dumpster):
        usage = usage_service.start_usage(user.id, dumpster.id, START)
        ended = usage_service.end_usage(user.id, usage.id, START + timedelta(minutes=60))

        assert ended.status == UsageStatus.COMPLETED
        assert ended.duration_minutes == 60
        assert ended.total_cost == pytest.approx(3.0)

    def test_partial_minutes_are_truncated(self, user, dumpster):
        usage = usage_service.start_usage(user.id, dumpster.id, START)
        ended = usage_service.end_usage(user.id, usage.id, START + timedelta(minutes=1, seconds=59))
        assert ended.duration_minutes == 1

    def test_end_before_start_rejected(self, user, dumpster):
        usage = usage_service.start_usage(user.id, dumpster.id, START)
        with pytest.raises(BadRequest, match="end time must be after start time"):
            usage_service.end_usage(user.id, usage.id, START)
        with pytest.raises(BadRequest):
            usage_service.end_usage(user.id, usage.id, START - timedelta(minutes=5))

    def test_only_owner_can_end(self, user, other_user, dumpster):
        usage = usage_service.start_usage(user.id, dumpster.id, START)
        with pytest.raises(Forbidden):
            usage_service.end_usage(other_user.id, usage.id, START + timedelta(hours=1))

    def test_cannot_end_twice(self, user, dumpster):
        usage = usage_service.start_usage(user.id, dumpster.id, START)
        usage_service.end_usage(user.id, usage.id, START + timedelta(hours=1))
        with pytest.raises(BadRequest, match="not active"):
            usage_service.end_usage(user.id, usage.id, START + timedelta(hours=2))

    def test_blank_notes_keep_existing(self, user, dumpster):
        usage = usage_service.start_usage(user.id, dumpster.id, START, notes="gate code 1234")
        ended = usage_service.end_usage(user.id, usage.id, START + timedelta(hours=1), notes="")
        assert ended.notes == "gate code 1234"

    def test_new_session_allowed_after_completion(self, user, dumpster):
        usage = usage_service.start_usage(user.id, dumpster.id, START)
        usage_service.end_usage(user.id, usage.id, START + timedelta(hours=1))
        again = usage_service.start_usage(user.id, dumpster.id, START + timedelta(hours=2))
        assert again.status == UsageStatus.ACTIVE


class TestListingAndStats:

    def test_list_filters_by_status(self, user, make_dumpster):
        a, b = make_dumpster(), make_dumpster(title="Second dumpster")
        usage = usage_service.start_usage(user.id, a.id, START)
        usage_service.end_usage(user.id, usage.id, START + timedelta(hours=2))
        usage_service.start_usage(user.id, b.id, START)

        assert usage_service.list(status="completed").total == 1
        assert usage_service.list(status="active").total == 1
        assert usage_service.list().total == 2
        assert usage_service.list_by_dumpster(a.id).total == 1

    def test_invalid_status_rejected(self):
        with pytest.raises(BadRequest):
            usage_service.list(status="paused")

    def test_newest_start_first(self, user, make_dumpster):
        a, b = make_dumpster(), make_dumpster(title="Second dumpster")
        usage_service.start_usage(user.id, a.id, START)
        later = usage_service.start_usage(user.id, b.id, START + timedelta(days=1))
        assert usage_service.list_by_user(user.id).items[0].id == later.id

    def test_stats(self, user, other_user, make_dumpster):
        a, b = make_dumpster(), make_dumpster(title="Second dumpster")
        first = usage_service.start_usage(user.id, a.id, START)
        usage_service.end_usage(user.id, first.id, START + timedelta(minutes=60))
        second = usage_service.start_usage(other_user.id, a.id, START)
        usage_service.end_usage(other_user.id, second.id, START + timedelta(minutes=120))
        usage_service.start_usage(user.id, b.id, START)

        stats = usage_service.get_stats()
        assert stats.total_usages == 3
        assert stats.active_usages == 1
        assert stats.completed_usages == 2
        assert stats.total_minutes == 180
        assert stats.total_revenue == pytest.approx(9.0)

        by_user = usage_service.get_stats(user_id=user.id)
        assert by_user.total_usages == 2
        assert by_user.total_revenue == pytest.approx(3.0)

        by_dumpster = usage_service.get_stats(dumpster_id=b.id)
        assert by_dumpster.total_usages == 1
        assert by_dumpster.completed_usages == 0

    def test_stats_when_empty(self):
        stats = usage_service.get_stats()
        assert stats.total_usages == 0
        assert stats.total_revenue == 0.0

    def test_delete_hides_session(self, user, dumpster):
        usage = usage_service.start_usage(user.id, dumpster.id, START)
        usage_service.delete(usage.id)

        with pytest.raises(NotFound):
            usage_service.get_by_id(usage.id)
        assert usage_service.get_stats().total_usages == 0
