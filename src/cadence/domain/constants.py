"""Centralized constants for the cadence scheduler.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Ease factor ----------
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 3.0
EASE_PRECISION = 4  # decimal places kept after each adjustment

# Ease delta per rating
AGAIN_EASE_DELTA = -0.3
HARD_EASE_DELTA = -0.15
GOOD_EASE_DELTA = 0.0
EASY_EASE_DELTA = 0.15

# ---------- Intervals (days) ----------
RELEARN_INTERVAL_DAYS = 0
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
MAX_INTERVAL_DAYS = 180  # 6 months

HARD_INTERVAL_MULTIPLIER = 0.8
EASY_INTERVAL_MULTIPLIER = 1.3

# ---------- Mastery ----------
MAX_MASTERY_LEVEL = 5
MASTERED_THRESHOLD = 4  # level counted as "mastered" in stats
LOW_EASE_MASTERY_CAP = 3
LOW_EASE_THRESHOLD = 2.0

MASTERY_LABELS = ["New", "Learning", "Familiar", "Proficient", "Expert", "Mastered"]
MASTERY_COLORS = ["bright_black", "blue", "cyan", "green", "magenta", "yellow"]

# ---------- Due-set / stats ----------
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30

# ---------- Persistence ----------
STORE_FORMAT_VERSION = 1
