"""
Review Scheduler.

Fixed-ladder spaced repetition: each successful review moves a note one
rung up an ascending ladder of day intervals. The last rung repeats
indefinitely, so a note at the top stage keeps being scheduled every
``intervals[-1]`` days instead of graduating out of review.

The scheduler is pure: it reads nothing but its own interval ladder and
the ``now`` it is given, and writes nothing.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from notehub.backend.core.utils import truncate_to_seconds

REVIEW_INTERVALS_DAYS: tuple[int, ...] = (1, 3, 7, 14, 30)


@dataclass(frozen=True)
class ReviewStep:
    """Outcome of a review: the stage a note moves to and when it is due next."""

    stage: int
    next_review_at: datetime


class ReviewScheduler:
    """
    Computes review stages and due dates from an ascending interval ladder.

    Args:
        intervals_days: Day counts per stage, strictly ascending and positive
    """

    def __init__(self, intervals_days: Sequence[int] = REVIEW_INTERVALS_DAYS) -> None:
        intervals = tuple(intervals_days)
        if not intervals:
            raise ValueError("Review schedule needs at least one interval")
        if any(days <= 0 for days in intervals):
            raise ValueError("Review intervals must be positive")
        if any(later <= earlier for earlier, later in zip(intervals, intervals[1:])):
            raise ValueError("Review intervals must be strictly ascending")
        self._intervals = intervals

    @property
    def intervals_days(self) -> tuple[int, ...]:
        """The interval ladder, in days."""
        return self._intervals

    @property
    def max_stage(self) -> int:
        """Highest reachable stage."""
        return len(self._intervals) - 1

    def due_at(self, stage: int, now: datetime) -> datetime:
        """Due date for a note that has just reached ``stage`` at ``now``."""
        if stage < 0:
            raise ValueError(f"Review stage must be >= 0, got {stage}")
        interval_index = min(stage, self.max_stage)
        due = now + timedelta(days=self._intervals[interval_index])
        return truncate_to_seconds(due)

    def first_review_at(self, now: datetime) -> datetime:
        """Due date of a freshly created note (stage 0)."""
        return self.due_at(0, now)

    def next_review(self, current_stage: int, now: datetime) -> ReviewStep:
        """
        Advance a note by one review.

        The stage grows by one and saturates at ``max_stage``; a note already
        at the top keeps its stage and gets a fresh due date using the last
        interval.

        Args:
            current_stage: Stage before this review (>= 0)
            now: Review time, naive UTC

        Returns:
            New stage and due date

        Raises:
            ValueError: If current_stage is negative
        """
        if current_stage < 0:
            raise ValueError(f"Review stage must be >= 0, got {current_stage}")
        new_stage = min(current_stage + 1, self.max_stage)
        return ReviewStep(stage=new_stage, next_review_at=self.due_at(new_stage, now))


default_scheduler = ReviewScheduler()
