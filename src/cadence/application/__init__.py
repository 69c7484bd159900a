# Application Package
from .due_selector import DueCards, cards_due_within, get_due_cards
from .scheduler import Sm2Scheduler, format_interval, get_rating_label
from .service import SrsService
from .stats import StatsCalculator

__all__ = [
    "DueCards",
    "Sm2Scheduler",
    "SrsService",
    "StatsCalculator",
    "cards_due_within",
    "format_interval",
    "get_due_cards",
    "get_rating_label",
]
