"""
Memory-decay and stability-update formulas (simplified FSRS).

Pure, stateless functions with no I/O.
"""

import math
from datetime import datetime, timedelta

from alfanumrik.domain.constants import (
    CONCEPT_DECAY_RATE,
    DIFFICULTY_STEP_FAILURE,
    DIFFICULTY_STEP_SUCCESS,
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    MIN_STABILITY,
    REQUEST_RETENTION,
    STABILITY_GROWTH,
    STABILITY_LAPSE_FACTOR,
)
from alfanumrik.domain.errors import InvalidInputError

SECONDS_PER_DAY = 86400.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def elapsed_days(start: datetime, end: datetime) -> float:
    """Fractional days between two instants."""
    return (end - start).total_seconds() / SECONDS_PER_DAY


def retrievability(elapsed: float, stability: float) -> float:
    """
    Probability of recall after ``elapsed`` days.

    R = 0.9^(t/S), so R is exactly 0.9 when t == S.
    """
    if stability <= 0:
        raise InvalidInputError(f"stability must be positive, got {stability}")
    if elapsed < 0 or math.isnan(elapsed):
        raise InvalidInputError(f"elapsed days must be >= 0, got {elapsed}")
    return REQUEST_RETENTION ** (elapsed / stability)


def grow_stability(prev_stability: float, recall_probability: float) -> float:
    """
    Stability after a successful review.

    Recalling an item that was close to being forgotten earns the largest gain.
    """
    return prev_stability * (1 + STABILITY_GROWTH * (1 - recall_probability))


def decay_stability(prev_stability: float) -> float:
    """Stability after a failed review: halved, floored at half a day."""
    return max(MIN_STABILITY, prev_stability * STABILITY_LAPSE_FACTOR)


def adjust_difficulty_on_success(prev_difficulty: float) -> float:
    return clamp(prev_difficulty - DIFFICULTY_STEP_SUCCESS, MIN_DIFFICULTY, MAX_DIFFICULTY)


def adjust_difficulty_on_failure(prev_difficulty: float) -> float:
    return clamp(prev_difficulty + DIFFICULTY_STEP_FAILURE, MIN_DIFFICULTY, MAX_DIFFICULTY)


def next_due_date(now: datetime, stability: float) -> datetime:
    """Schedule whole days ahead, rounding up so nothing comes due early."""
    return now + timedelta(days=math.ceil(stability))


def concept_decay(days_since_last_seen: float) -> float:
    """Ebbinghaus forgetting curve used for the concept-stability trace."""
    return math.exp(-CONCEPT_DECAY_RATE * days_since_last_seen)
