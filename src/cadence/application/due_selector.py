"""
Due-set selection.

Builds the ordered list of cards eligible for review. Read-only: nothing
here writes to the store.
"""

import logging
from collections.abc import Iterator
from datetime import datetime, timedelta

from cadence.domain.models import Difficulty, ReviewCard, ensure_aware
from cadence.domain.ports import CardStore

logger = logging.getLogger(__name__)


def due_order(card: ReviewCard) -> tuple:
    """Most overdue first; ties broken by question id, then channel and difficulty."""
    return (card.due_date, card.question_id, card.channel, card.difficulty.value)


class DueCards:
    """
    Restartable view over the cards due at a fixed instant.

    Every iteration re-reads the store, so iterating twice in a session is
    safe and reflects any put made in between. There is no cursor state.
    """

    def __init__(
        self,
        store: CardStore,
        now: datetime,
        channel: str | None = None,
        difficulty: Difficulty | str | None = None,
        limit: int | None = None,
    ):
        self.store = store
        self.now = ensure_aware(now)
        self.channel = channel
        self.difficulty = Difficulty.parse(difficulty) if difficulty is not None else None
        self.limit = limit

    def __iter__(self) -> Iterator[ReviewCard]:
        return iter(self.collect())

    def collect(self) -> list[ReviewCard]:
        """Materialize the current due set as a sorted list."""
        due = [card for card in self.store.list() if self._matches(card)]
        due.sort(key=due_order)
        if self.limit is not None:
            due = due[: max(0, self.limit)]
        logger.debug(f"[due] {len(due)} card(s) due at {self.now.isoformat()}")
        return due

    def _matches(self, card: ReviewCard) -> bool:
        if not card.is_due(self.now):
            return False
        if self.channel is not None and card.channel != self.channel:
            return False
        if self.difficulty is not None and card.difficulty is not self.difficulty:
            return False
        return True


def get_due_cards(
    store: CardStore,
    now: datetime,
    channel: str | None = None,
    difficulty: Difficulty | str | None = None,
    limit: int | None = None,
) -> DueCards:
    """Cards with due_date <= now, ordered oldest-due first."""
    return DueCards(store, now, channel=channel, difficulty=difficulty, limit=limit)


def cards_due_within(store: CardStore, now: datetime, days: int) -> list[ReviewCard]:
    """Every card due on or before now + days, in due order."""
    horizon = ensure_aware(now) + timedelta(days=days)
    cards = [card for card in store.list() if card.due_date <= horizon]
    cards.sort(key=due_order)
    return cards
