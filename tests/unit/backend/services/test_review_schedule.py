"""
Unit Tests for the Review Scheduler.

The scheduler is pure, so these tests need no fixtures beyond fixed datetimes.
"""

from datetime import datetime, timedelta

import pytest

from notehub.backend.services.review_schedule import (
    REVIEW_INTERVALS_DAYS,
    ReviewScheduler,
    ReviewStep,
    default_scheduler,
)

NOW = datetime(2024, 1, 1, 0, 0, 0)


class TestIntervalLadder:
    """Tests for the interval ladder itself."""

    def test_default_intervals(self):
        """The default ladder is 1, 3, 7, 14, 30 days."""
        assert REVIEW_INTERVALS_DAYS == (1, 3, 7, 14, 30)
        assert default_scheduler.intervals_days == (1, 3, 7, 14, 30)

    def test_max_stage_is_last_index(self):
        assert default_scheduler.max_stage == 4

    @pytest.mark.parametrize(
        "intervals",
        [(), (0, 1), (-1, 3), (3, 1), (1, 1, 2)],
    )
    def test_rejects_invalid_ladders(self, intervals):
        """Empty, non-positive, or non-ascending ladders are refused."""
        with pytest.raises(ValueError):
            ReviewScheduler(intervals)

    def test_custom_ladder(self):
        scheduler = ReviewScheduler([2, 5])
        assert scheduler.max_stage == 1
        assert scheduler.due_at(1, NOW) == NOW + timedelta(days=5)


class TestDueAt:
    """Tests for due date computation."""

    @pytest.mark.parametrize(
        ("stage", "days"),
        [(0, 1), (1, 3), (2, 7), (3, 14), (4, 30)],
    )
    def test_due_date_per_stage(self, stage, days):
        assert default_scheduler.due_at(stage, NOW) == NOW + timedelta(days=days)

    def test_stage_beyond_ladder_uses_last_interval(self):
        assert default_scheduler.due_at(9, NOW) == NOW + timedelta(days=30)

    def test_negative_stage_rejected(self):
        with pytest.raises(ValueError, match=">= 0"):
            default_scheduler.due_at(-1, NOW)

    def test_drops_sub_second_precision(self):
        now = NOW.replace(microsecond=999_999)
        assert default_scheduler.due_at(0, now) == NOW + timedelta(days=1)

    def test_first_review_is_one_day_out(self):
        assert default_scheduler.first_review_at(NOW) == datetime(2024, 1, 2, 0, 0, 0)


class TestNextReview:
    """Tests for advancing a note by one review."""

    def test_returns_review_step(self):
        step = default_scheduler.next_review(0, NOW)

        assert isinstance(step, ReviewStep)
        assert step.stage == 1
        assert step.next_review_at == NOW + timedelta(days=3)

    @pytest.mark.parametrize(
        ("current", "expected_stage", "days"),
        [(0, 1, 3), (1, 2, 7), (2, 3, 14), (3, 4, 30)],
    )
    def test_moves_one_stage_up(self, current, expected_stage, days):
        step = default_scheduler.next_review(current, NOW)

        assert step.stage == expected_stage
        assert step.next_review_at == NOW + timedelta(days=days)

    def test_saturates_at_top_stage(self):
        """A note at the top stays there and is rescheduled with the last interval."""
        later = NOW + timedelta(days=100)

        step = default_scheduler.next_review(4, later)

        assert step.stage == 4
        assert step.next_review_at == later + timedelta(days=30)

    def test_negative_stage_rejected(self):
        with pytest.raises(ValueError):
            default_scheduler.next_review(-1, NOW)

    def test_review_step_is_immutable(self):
        step = default_scheduler.next_review(0, NOW)
        with pytest.raises(AttributeError):
            step.stage = 3
