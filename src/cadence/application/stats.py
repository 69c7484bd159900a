"""
Stats calculator for summarizing a card collection.

This is a pure computation module with no I/O.
"""

from collections import Counter
from datetime import date, datetime, timedelta

from cadence.domain.constants import DAYS_PER_WEEK, MASTERED_THRESHOLD
from cadence.domain.models import ReviewCard, ReviewStats, ReviewStreak, ensure_aware


class StatsCalculator:
    """
    Computes collection-level counts and the daily review streak.

    Stateless and side-effect free.
    """

    def summarize(
        self, cards: list[ReviewCard], streak: ReviewStreak, now: datetime
    ) -> ReviewStats:
        """
        Bucket cards by due day and mastery.

        Due buckets compare calendar dates in the timezone of `now`, so a card
        due later today counts as due today.
        """
        now = ensure_aware(now)
        today = now.date()
        tomorrow = today + timedelta(days=1)
        week_end = today + timedelta(days=DAYS_PER_WEEK)

        stats = ReviewStats(
            total_cards=len(cards),
            review_streak=self.current_streak(streak, today),
            last_review_date=streak.last_review_date,
        )
        channels: Counter[str] = Counter()

        for card in cards:
            due_day = self._local_date(card.due_date, now)
            if due_day <= today:
                stats.due_today += 1
            if due_day == tomorrow:
                stats.due_tomorrow += 1
            if due_day <= week_end:
                stats.due_this_week += 1

            level = card.mastery_level
            if level >= MASTERED_THRESHOLD:
                stats.mastered += 1
            elif level > 0:
                stats.learning += 1

            if (
                card.total_reviews == 1
                and card.last_reviewed_at is not None
                and self._local_date(card.last_reviewed_at, now) == today
            ):
                stats.new_today += 1

            channels[card.channel] += 1

        stats.by_channel = dict(sorted(channels.items()))
        return stats

    def advance_streak(self, streak: ReviewStreak, today: date) -> ReviewStreak:
        """
        Register a review made on `today`.

        Same day or earlier: unchanged. Day after the last review: streak + 1.
        Anything else starts a new streak of 1.
        """
        last = streak.last_review_date
        if last is not None and today <= last:
            return streak
        if last is not None and last == today - timedelta(days=1):
            return ReviewStreak(streak_days=streak.streak_days + 1, last_review_date=today)
        return ReviewStreak(streak_days=1, last_review_date=today)

    def current_streak(self, streak: ReviewStreak, today: date) -> int:
        """Stored streak, or 0 once a whole day has passed without reviews."""
        last = streak.last_review_date
        if last is None or last < today - timedelta(days=1):
            return 0
        return streak.streak_days

    @staticmethod
    def _local_date(value: datetime, now: datetime) -> date:
        return ensure_aware(value).astimezone(now.tzinfo).date()
