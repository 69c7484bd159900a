"""Error hierarchy for the scheduling core.

Every error is deterministic and meant to reach the caller; nothing in the
core recovers from these locally.
"""


class SrsError(Exception):
    """Base class for all cadence errors."""


class InvalidRatingError(SrsError, ValueError):
    """Raised when a rating is not one of Again/Hard/Good/Easy."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid rating {value!r}; expected one of again, hard, good, easy")


class InvalidDifficultyError(SrsError, ValueError):
    """Raised when a difficulty is not beginner/intermediate/advanced."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Invalid difficulty {value!r}; expected one of beginner, intermediate, advanced"
        )


class CardNotFoundError(SrsError, KeyError):
    """Raised when reviewing a card that was never added (auto-initialize disabled)."""

    def __init__(self, key: object):
        self.key = key
        super().__init__(f"No review card for {key}")

    def __str__(self) -> str:
        # KeyError repr-quotes its argument otherwise
        return str(self.args[0])


class StoreCorruptedError(SrsError):
    """Raised when persisted card data cannot be parsed or validated."""
