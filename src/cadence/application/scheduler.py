"""
SM-2 family scheduler for four-button confidence ratings.

This is a pure computation module with no I/O. The current time is always an
explicit argument, so the same (card, rating, now) always yields the same card.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from cadence.application.clock import ensure_aware
from cadence.domain.constants import DAYS_PER_MONTH, DAYS_PER_WEEK, EASE_PRECISION
from cadence.domain.models import (
    Difficulty,
    Rating,
    ReviewCard,
    SchedulingParameters,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


class Sm2Scheduler:
    """
    Computes the next review state of a card from a confidence rating.

    Stateless apart from its parameters and side-effect free.
    """

    def __init__(self, params: SchedulingParameters | None = None):
        self.params = params or SchedulingParameters()

    def initialize_card(
        self,
        question_id: str,
        channel: str,
        difficulty: Difficulty | str,
        now: datetime,
    ) -> ReviewCard:
        """
        Build a brand-new card that is due immediately.

        Persisting it (and the no-op for an existing key) is the service's job.
        """
        return ReviewCard(
            question_id=question_id,
            channel=channel,
            difficulty=Difficulty.parse(difficulty),
            ease_factor=self.params.default_ease,
            interval_days=0,
            repetitions=0,
            due_date=ensure_aware(now),
        )

    def record_review(
        self, card: ReviewCard, rating: Rating | str | int, now: datetime
    ) -> ReviewCard:
        """
        Apply one review to a card and return the updated copy.

        Args:
            card: Current card state; never mutated.
            rating: Again/Hard/Good/Easy (see Rating.parse for accepted forms).
            now: Review timestamp; due_date is scheduled relative to it.

        Raises:
            InvalidRatingError: before any computation if rating is unknown.
        """
        rating = Rating.parse(rating)
        now = ensure_aware(now)

        interval, ease, repetitions = self.next_state(card, rating)
        updated = replace(
            card,
            ease_factor=ease,
            interval_days=interval,
            repetitions=repetitions,
            due_date=now + timedelta(days=interval),
            last_reviewed_at=now,
            total_reviews=card.total_reviews + 1,
        )
        logger.debug(
            f"[scheduler] {card.key} rated {rating.value}: "
            f"interval {card.interval_days}->{interval}d, ease {card.ease_factor}->{ease}, "
            f"reps {card.repetitions}->{repetitions}"
        )
        return updated

    def next_state(self, card: ReviewCard, rating: Rating) -> tuple[int, float, int]:
        """
        Core arithmetic: (interval_days, ease_factor, repetitions) after a rating.
        """
        p = self.params
        ease = self._adjust_ease(card.ease_factor, rating)

        if rating.is_failing:
            return p.relearn_interval_days, ease, 0

        repetitions = card.repetitions + 1
        if repetitions == 1:
            base = p.first_interval_days
        elif repetitions == 2:
            base = p.second_interval_days
        else:
            base = round_half_up(card.interval_days * ease)

        interval = round_half_up(base * p.interval_multiplier(rating))
        interval = min(p.max_interval_days, max(1, interval))
        return interval, ease, repetitions

    def preview_intervals(self, card: ReviewCard) -> dict[Rating, int]:
        """Interval each rating would produce, without touching the card."""
        return {rating: self.next_state(card, rating)[0] for rating in Rating}

    def _adjust_ease(self, ease: float, rating: Rating) -> float:
        p = self.params
        adjusted = round(ease + p.ease_delta(rating), EASE_PRECISION)
        return min(p.max_ease, max(p.min_ease, adjusted))


def get_rating_label(rating: Rating | str | int) -> str:
    """Button label for a rating (Again, Hard, Good, Easy)."""
    return Rating.parse(rating).value.capitalize()


def format_interval(days: int) -> str:
    """
    Compact interval text for rating buttons.

    0 -> "now", under a week -> "Nd", under 30 days -> "Nw", otherwise "Nmo".
    """
    if days <= 0:
        return "now"
    if days < DAYS_PER_WEEK:
        return f"{days}d"
    if days < DAYS_PER_MONTH:
        return f"{round_half_up(days / DAYS_PER_WEEK)}w"
    return f"{round_half_up(days / DAYS_PER_MONTH)}mo"

