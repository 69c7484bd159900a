# Domain Package
from .errors import (
    CardNotFoundError,
    InvalidDifficultyError,
    InvalidRatingError,
    SrsError,
    StoreCorruptedError,
)
from .mastery import get_mastery_color, get_mastery_label, mastery_level_for
from .models import (
    CardKey,
    Difficulty,
    Rating,
    ReviewCard,
    ReviewStats,
    ReviewStreak,
    SchedulingParameters,
)
from .ports import CardStore, StreakStore

__all__ = [
    "CardKey",
    "CardNotFoundError",
    "CardStore",
    "Difficulty",
    "InvalidDifficultyError",
    "InvalidRatingError",
    "Rating",
    "ReviewCard",
    "ReviewStats",
    "ReviewStreak",
    "SchedulingParameters",
    "SrsError",
    "StoreCorruptedError",
    "StreakStore",
    "get_mastery_color",
    "get_mastery_label",
    "mastery_level_for",
]
