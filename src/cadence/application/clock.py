"""Time helpers. All scheduling datetimes are timezone-aware."""

from collections.abc import Callable
from datetime import datetime, timezone

from cadence.domain.models import ensure_aware

Clock = Callable[[], datetime]

__all__ = ["Clock", "ensure_aware", "utc_now"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
