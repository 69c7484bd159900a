"""cadence: spaced-repetition scheduling for interview question cards."""

from cadence.consts import VERSION

__version__ = VERSION
