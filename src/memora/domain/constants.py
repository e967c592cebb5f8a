"""Centralized constants for memora.

All magic numbers and scheduling defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
DAY_MS = 86_400_000
WEEK_DAYS = 7

# ---------- SM-2 ----------
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MIN_RATING = 0
MAX_RATING = 5
PASSING_RATING = 3  # ratings below this count as a failed recall
FIRST_INTERVAL = 1  # days
SECOND_INTERVAL = 6  # days

# ---------- Card status ----------
LEARNING_REPETITIONS = 2  # repetitions below this -> learning
MASTERED_INTERVAL = 30  # days; interval at or above this -> mastered

# ---------- Dashboard ----------
ACTIVITY_WINDOW_DAYS = 14
STREAK_TIERS = [
    (30, "legendary"),
    (14, "strong"),
    (7, "steady"),
    (3, "warming"),
]
