"""
In-memory store: dict-backed adapter for tests and embedding.
"""

from __future__ import annotations

from cadence.domain.models import CardKey, ReviewCard, ReviewStreak
from cadence.domain.ports import CardStore, StreakStore


class InMemoryCardStore(CardStore, StreakStore):
    """Keeps cards in a dict keyed by CardKey. Nothing survives the process."""

    def __init__(self, cards: list[ReviewCard] | None = None):
        self._cards: dict[CardKey, ReviewCard] = {}
        self._streak = ReviewStreak()
        for card in cards or []:
            self.put(card)

    def get(self, key: CardKey) -> ReviewCard | None:
        return self._cards.get(key)

    def put(self, card: ReviewCard) -> None:
        self._cards[card.key] = card

    def list(self) -> list[ReviewCard]:
        return [*self._cards.values()]

    def load_streak(self) -> ReviewStreak:
        return self._streak

    def save_streak(self, streak: ReviewStreak) -> None:
        self._streak = streak

    def __len__(self) -> int:
        return len(self._cards)
