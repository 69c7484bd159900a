"""
Mastery level derivation and its presentation lookups.

Mastery is a read-side projection of a card's progress. Nothing here feeds
back into interval or ease calculations.
"""

from .constants import (
    LOW_EASE_MASTERY_CAP,
    LOW_EASE_THRESHOLD,
    MASTERY_COLORS,
    MASTERY_LABELS,
    MAX_MASTERY_LEVEL,
)

# (minimum repetitions, level), checked from the top
_REPETITION_BUCKETS = [
    (7, 5),
    (5, 4),
    (3, 3),
    (2, 2),
    (1, 1),
]


def mastery_level_for(repetitions: int, ease_factor: float) -> int:
    """
    Map (repetitions, ease factor) to a 0-5 mastery level.

    Monotone non-decreasing in both arguments: more consecutive passes never
    lower the level, and a card whose ease has sunk below LOW_EASE_THRESHOLD
    cannot rise above LOW_EASE_MASTERY_CAP.
    """
    level = 0
    for min_reps, bucket_level in _REPETITION_BUCKETS:
        if repetitions >= min_reps:
            level = bucket_level
            break

    if ease_factor < LOW_EASE_THRESHOLD:
        level = min(level, LOW_EASE_MASTERY_CAP)
    return level


def _clamp_level(level: int) -> int:
    return max(0, min(int(level), MAX_MASTERY_LEVEL))


def get_mastery_label(level: int) -> str:
    """Human label for a mastery level (New ... Mastered)."""
    return MASTERY_LABELS[_clamp_level(level)]


def get_mastery_color(level: int) -> str:
    """Terminal colour token for a mastery level."""
    return MASTERY_COLORS[_clamp_level(level)]
