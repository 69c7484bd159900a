"""
Domain models for spaced-repetition scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from . import constants as c
from .errors import InvalidDifficultyError, InvalidRatingError
from .mastery import mastery_level_for


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored due dates."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Rating(str, Enum):
    """Four-point self-assessed confidence given after revealing an answer."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, value: "Rating | str | int") -> "Rating":
        """
        Coerce a user-supplied rating.

        Accepts a Rating, its name or value (case-insensitive), or the
        button number 1-4 (1=Again, 4=Easy).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if 1 <= value <= len(_RATING_ORDER):
                return _RATING_ORDER[value - 1]
            raise InvalidRatingError(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text.isdigit():
                return cls.parse(int(text))
            for rating in cls:
                if text == rating.value:
                    return rating
        raise InvalidRatingError(value)

    @property
    def is_failing(self) -> bool:
        return self is Rating.AGAIN


_RATING_ORDER = [Rating.AGAIN, Rating.HARD, Rating.GOOD, Rating.EASY]


class Difficulty(str, Enum):
    """Question difficulty, copied onto the card for filtering."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def parse(cls, value: "Difficulty | str") -> "Difficulty":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            for difficulty in cls:
                if text == difficulty.value:
                    return difficulty
        raise InvalidDifficultyError(value)


@dataclass(frozen=True, order=True)
class CardKey:
    """Identity of a review card: one card per (question, channel, difficulty)."""

    question_id: str
    channel: str
    difficulty: Difficulty

    def __post_init__(self):
        if not isinstance(self.difficulty, Difficulty):
            object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))

    def __str__(self) -> str:
        return f"{self.channel}/{self.difficulty.value}/{self.question_id}"


@dataclass(frozen=True)
class ReviewCard:
    """
    Scheduling state for one question.

    Attributes:
        question_id: Opaque identifier of the question.
        channel: Topic channel the question belongs to.
        difficulty: Question difficulty.
        ease_factor: Multiplier controlling interval growth.
        interval_days: Days between the last review and due_date.
        repetitions: Consecutive passing reviews since the last Again.
        due_date: When the card next becomes eligible for review.
        last_reviewed_at: Time of the last review, None for a new card.
        total_reviews: Every review recorded, failing ones included.
    """

    question_id: str
    channel: str
    difficulty: Difficulty
    ease_factor: float
    interval_days: int
    repetitions: int
    due_date: datetime
    last_reviewed_at: datetime | None = None
    total_reviews: int = 0

    def __post_init__(self):
        if not self.question_id:
            raise ValueError("question_id must not be empty")
        if not self.channel:
            raise ValueError("channel must not be empty")
        if not isinstance(self.difficulty, Difficulty):
            object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))
        object.__setattr__(self, "due_date", ensure_aware(self.due_date))
        if self.last_reviewed_at is not None:
            object.__setattr__(self, "last_reviewed_at", ensure_aware(self.last_reviewed_at))
        if self.interval_days < 0:
            raise ValueError(f"interval_days must be >= 0, got {self.interval_days}")
        if self.repetitions < 0:
            raise ValueError(f"repetitions must be >= 0, got {self.repetitions}")

    @property
    def key(self) -> CardKey:
        return CardKey(self.question_id, self.channel, self.difficulty)

    @property
    def mastery_level(self) -> int:
        """Derived 0-5 progress summary; display only."""
        return mastery_level_for(self.repetitions, self.ease_factor)

    def is_due(self, now: datetime) -> bool:
        return self.due_date <= ensure_aware(now)


@dataclass(frozen=True)
class SchedulingParameters:
    """
    Tunable constants of the scheduling algorithm.

    Defaults follow conventional SM-2 bootstrapping adapted to a four-button
    scale. Built from SrsConfig in normal operation.
    """

    default_ease: float = c.DEFAULT_EASE_FACTOR
    min_ease: float = c.MIN_EASE_FACTOR
    max_ease: float = c.MAX_EASE_FACTOR
    again_ease_delta: float = c.AGAIN_EASE_DELTA
    hard_ease_delta: float = c.HARD_EASE_DELTA
    good_ease_delta: float = c.GOOD_EASE_DELTA
    easy_ease_delta: float = c.EASY_EASE_DELTA
    relearn_interval_days: int = c.RELEARN_INTERVAL_DAYS
    first_interval_days: int = c.FIRST_INTERVAL_DAYS
    second_interval_days: int = c.SECOND_INTERVAL_DAYS
    hard_interval_multiplier: float = c.HARD_INTERVAL_MULTIPLIER
    easy_interval_multiplier: float = c.EASY_INTERVAL_MULTIPLIER
    max_interval_days: int = c.MAX_INTERVAL_DAYS

    def __post_init__(self):
        if not (self.min_ease <= self.default_ease <= self.max_ease):
            raise ValueError(
                f"Expected min_ease <= default_ease <= max_ease, got "
                f"{self.min_ease} / {self.default_ease} / {self.max_ease}"
            )
        if self.relearn_interval_days < 0:
            raise ValueError("relearn_interval_days must be >= 0")
        if self.first_interval_days < 1 or self.second_interval_days < 1:
            raise ValueError("bootstrap intervals must be at least 1 day")
        if self.max_interval_days < max(self.first_interval_days, self.relearn_interval_days):
            raise ValueError("max_interval_days is smaller than the bootstrap intervals")

    def ease_delta(self, rating: Rating) -> float:
        return {
            Rating.AGAIN: self.again_ease_delta,
            Rating.HARD: self.hard_ease_delta,
            Rating.GOOD: self.good_ease_delta,
            Rating.EASY: self.easy_ease_delta,
        }[rating]

    def interval_multiplier(self, rating: Rating) -> float:
        if rating is Rating.HARD:
            return self.hard_interval_multiplier
        if rating is Rating.EASY:
            return self.easy_interval_multiplier
        return 1.0


@dataclass(frozen=True)
class ReviewStreak:
    """Consecutive calendar days with at least one review."""

    streak_days: int = 0
    last_review_date: date | None = None


@dataclass
class ReviewStats:
    """Aggregate counts over a user's whole card collection."""

    total_cards: int = 0
    due_today: int = 0
    due_tomorrow: int = 0
    due_this_week: int = 0
    mastered: int = 0
    learning: int = 0
    new_today: int = 0
    review_streak: int = 0
    last_review_date: date | None = None
    by_channel: dict[str, int] = field(default_factory=dict)
