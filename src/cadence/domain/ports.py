"""
Ports (interfaces) for card persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import CardKey, ReviewCard, ReviewStreak


class CardStore(ABC):
    """
    Port for reading and writing review cards.

    The only consistency requirement is that a put is visible to a later
    get/list in the same session. No locking or transactions are assumed.

    Implementations:
        - InMemoryCardStore: dict-backed, for tests and embedding.
        - JsonFileCardStore: a single JSON document on local disk.
    """

    @abstractmethod
    def get(self, key: CardKey) -> ReviewCard | None:
        """
        Fetch the card for a key.

        Returns:
            The stored card, or None if the key was never added.
        """
        pass

    @abstractmethod
    def put(self, card: ReviewCard) -> None:
        """Insert or replace the card stored under card.key."""
        pass

    @abstractmethod
    def list(self) -> list[ReviewCard]:
        """Return every stored card, in no particular order."""
        pass


class StreakStore(ABC):
    """Port for the daily review streak."""

    @abstractmethod
    def load_streak(self) -> ReviewStreak:
        """Return the stored streak, or an empty one."""
        pass

    @abstractmethod
    def save_streak(self, streak: ReviewStreak) -> None:
        pass
