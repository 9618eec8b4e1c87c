"""Tests for the backlog burndown in app.services.burndown."""

from datetime import UTC, datetime

import pytest

from app.services.burndown import (
    build_burndown,
    burndown_series,
    estimated_days_to_clear,
    open_work,
    velocity,
    work_stats,
)

NOW = datetime(2026, 10, 15, 12, 0, tzinfo=UTC)


class TestBurndownSeries:
    def test_sample_points(self, tickets):
        series = burndown_series(tickets, 30, NOW)
        # step of two days across a thirty day window, both ends included
        assert len(series) == 16
        assert series[0].date == "2026-09-15"
        assert series[-1].date == "2026-10-15"

    def test_first_point(self, tickets):
        first = burndown_series(tickets, 30, NOW)[0]
        assert (first.total, first.completed, first.remaining) == (6, 3, 3)
        assert first.ideal == 12
        assert (first.critical_open, first.high_open) == (1, 1)

    def test_last_point(self, tickets):
        last = burndown_series(tickets, 30, NOW)[-1]
        assert (last.total, last.completed, last.remaining) == (12, 6, 6)
        assert last.ideal == 0
        assert (last.critical_open, last.high_open) == (2, 2)

    def test_ideal_line_never_negative(self, tickets):
        assert all(p.ideal >= 0 for p in burndown_series(tickets, 90, NOW))

    def test_rejects_other_ranges(self, tickets):
        with pytest.raises(ValueError):
            burndown_series(tickets, 45, NOW)

    def test_empty_when_nothing_created(self, ticket_factory):
        future = ticket_factory(ticket_created_at_utc="2027-01-01T00:00:00Z")
        assert burndown_series([future], 30, NOW) == []


# ── Open work ───────────────────────────────────────────────────────


class TestOpenWork:
    def test_priority_then_age(self, tickets):
        keys = [t.ticket_key for t in open_work(tickets)]
        assert keys == ["SEW-201", "SH-1004", "SEW-202", "CMG-50", "SH-1002", "SAS-312"]

    def test_priority_filter(self, tickets):
        assert [t.ticket_key for t in open_work(tickets, ["High"])] == ["SEW-202", "CMG-50"]

    def test_unknown_priority_sorts_last(self, ticket_factory):
        odd = ticket_factory(ticket_key="X-1", ticket_priority="P5", ticket_created_at_utc="2020-01-01T00:00:00Z")
        low = ticket_factory(ticket_key="X-2", ticket_priority="Low")
        assert [t.ticket_key for t in open_work([odd, low])] == ["X-2", "X-1"]


class TestWorkStats:
    def test_points(self, tickets):
        stats = work_stats(open_work(tickets))
        assert stats.total_open == 6
        assert stats.total_points == 32
        assert stats.by_priority["Critical"].count == 2
        assert stats.by_priority["Critical"].points == 16
        assert stats.by_priority["Medium"].points == 6

    def test_unknown_priority_is_one_point(self, ticket_factory):
        stats = work_stats([ticket_factory(ticket_priority="P5")])
        assert stats.total_points == 1
        assert stats.by_priority["P5"].count == 1


class TestVelocity:
    def test_last_week(self, tickets):
        assert velocity(tickets, NOW) == 0.1

    def test_days_to_clear(self):
        assert estimated_days_to_clear(6, 2.0) == 3
        assert estimated_days_to_clear(7, 2.0) == 4
        assert estimated_days_to_clear(5, 0) is None


class TestBuildBurndown:
    def test_response(self, tickets):
        result = build_burndown(tickets, 30, now=NOW)
        assert len(result.series) == 16
        assert [r.key for r in result.open_tickets][:2] == ["SEW-201", "SH-1004"]
        assert result.velocity == 0.1
        assert result.estimated_days_to_clear is not None

    def test_no_velocity_means_no_estimate(self, ticket_factory):
        result = build_burndown([ticket_factory()], 30, now=NOW)
        assert result.velocity == 0
        assert result.estimated_days_to_clear is None
