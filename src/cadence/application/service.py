"""
SRS Service: Application layer orchestrator.

Coordinates the store, the scheduler and the clock. This is the surface the
session/UI layer talks to.
"""

import logging
from datetime import datetime

from cadence.domain.errors import CardNotFoundError
from cadence.domain.mastery import get_mastery_color, get_mastery_label
from cadence.domain.models import (
    CardKey,
    Difficulty,
    Rating,
    ReviewCard,
    ReviewStats,
    ReviewStreak,
    ensure_aware,
)
from cadence.domain.ports import CardStore, StreakStore

from .clock import Clock, utc_now
from .due_selector import DueCards, cards_due_within, get_due_cards
from .scheduler import Sm2Scheduler, format_interval
from .stats import StatsCalculator

logger = logging.getLogger(__name__)


class SrsService:
    """
    Application service for adding cards, recording reviews and querying due sets.

    Follows Dependency Inversion: depends on the CardStore/StreakStore
    abstractions, not concrete adapter implementations. Every method accepts
    an explicit `now`; the injected clock is only the fallback.
    """

    def __init__(
        self,
        store: CardStore,
        streak_store: StreakStore | None = None,
        scheduler: Sm2Scheduler | None = None,
        clock: Clock | None = None,
        auto_initialize: bool = True,
    ):
        """
        Args:
            store: The repository (port) holding review cards.
            streak_store: Where the daily streak lives; streak tracking is
                skipped when None.
            scheduler: Optional custom scheduler; uses default parameters if not provided.
            clock: Source of "now" when a call does not pass one.
            auto_initialize: If True, reviewing an unknown key creates the card
                first; if False it raises CardNotFoundError.
        """
        self._store = store
        self._streaks = streak_store
        self._scheduler = scheduler or Sm2Scheduler()
        self._stats = StatsCalculator()
        self._clock = clock or utc_now
        self.auto_initialize = auto_initialize

    @property
    def scheduler(self) -> Sm2Scheduler:
        return self._scheduler

    def _now(self, now: datetime | None) -> datetime:
        return ensure_aware(now if now is not None else self._clock())

    # ---------- Cards ----------

    def add_to_srs(
        self,
        question_id: str,
        channel: str,
        difficulty: Difficulty | str,
        now: datetime | None = None,
    ) -> ReviewCard:
        """
        Start tracking a question. Idempotent.

        Returns:
            The existing card unchanged if the key is already stored,
            otherwise a new card due immediately.
        """
        key = CardKey(question_id, channel, Difficulty.parse(difficulty))
        existing = self._store.get(key)
        if existing is not None:
            logger.debug(f"[srs] {key} already tracked, leaving it untouched")
            return existing

        card = self._scheduler.initialize_card(question_id, channel, key.difficulty, self._now(now))
        self._store.put(card)
        logger.info(f"[srs] Added {key}")
        return card

    def get_card(
        self, question_id: str, channel: str, difficulty: Difficulty | str
    ) -> ReviewCard | None:
        return self._store.get(CardKey(question_id, channel, Difficulty.parse(difficulty)))

    def is_in_srs(self, question_id: str, channel: str, difficulty: Difficulty | str) -> bool:
        return self.get_card(question_id, channel, difficulty) is not None

    def record_review(
        self,
        question_id: str,
        channel: str,
        difficulty: Difficulty | str,
        rating: Rating | str | int,
        now: datetime | None = None,
    ) -> ReviewCard:
        """
        Apply a confidence rating to a question's card and persist the result.

        The rating is validated before the store is touched, and the new state
        is written with a single put.

        Raises:
            InvalidRatingError: rating is not Again/Hard/Good/Easy.
            CardNotFoundError: key unknown and auto_initialize is False.
        """
        rating = Rating.parse(rating)
        now = self._now(now)
        key = CardKey(question_id, channel, Difficulty.parse(difficulty))

        card = self._store.get(key)
        if card is None:
            if not self.auto_initialize:
                raise CardNotFoundError(key)
            logger.info(f"[srs] {key} reviewed before being added, initializing")
            card = self._scheduler.initialize_card(question_id, channel, key.difficulty, now)

        updated = self._scheduler.record_review(card, rating, now)
        self._store.put(updated)

        if self._streaks is not None:
            streak = self._streaks.load_streak()
            advanced = self._stats.advance_streak(streak, now.date())
            if advanced != streak:
                self._streaks.save_streak(advanced)

        logger.info(
            f"[srs] {key} rated {rating.value}: next review in "
            f"{updated.interval_days}d ({updated.due_date.date().isoformat()})"
        )
        return updated

    # ---------- Queries ----------

    def get_due_cards(
        self,
        now: datetime | None = None,
        channel: str | None = None,
        difficulty: Difficulty | str | None = None,
        limit: int | None = None,
    ) -> DueCards:
        """Cards with due_date <= now, most overdue first. Re-iterable."""
        return get_due_cards(
            self._store, self._now(now), channel=channel, difficulty=difficulty, limit=limit
        )

    def get_cards_due_within(self, days: int, now: datetime | None = None) -> list[ReviewCard]:
        return cards_due_within(self._store, self._now(now), days)

    def get_stats(self, now: datetime | None = None) -> ReviewStats:
        streak = self._streaks.load_streak() if self._streaks is not None else ReviewStreak()
        return self._stats.summarize(self._store.list(), streak, self._now(now))

    def preview_next_review(
        self, question_id: str, channel: str, difficulty: Difficulty | str
    ) -> dict[Rating, str]:
        """
        Interval label each rating button would produce for this question.

        Unknown questions are previewed as brand-new cards; nothing is stored.
        """
        card = self.get_card(question_id, channel, difficulty)
        if card is None:
            card = self._scheduler.initialize_card(
                question_id, channel, difficulty, self._now(None)
            )
        return {
            rating: format_interval(days)
            for rating, days in self._scheduler.preview_intervals(card).items()
        }

    # ---------- Presentation ----------

    @staticmethod
    def get_mastery_label(level: int) -> str:
        return get_mastery_label(level)

    @staticmethod
    def get_mastery_color(level: int) -> str:
        return get_mastery_color(level)
