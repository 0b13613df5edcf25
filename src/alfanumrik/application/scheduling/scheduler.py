"""
Review scheduler for the revision set.

Owns the collection of ReviewItems and moves them through the simplified
FSRS state machine after each review outcome.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime, timedelta

from alfanumrik.application.id_service import item_key_for
from alfanumrik.application.utils.clock import utcnow
from alfanumrik.domain import fsrs
from alfanumrik.domain.constants import (
    DEFAULT_DIFFICULTY,
    DEFAULT_LEVEL,
    DEFAULT_STABILITY,
    FULL_ACCURACY,
    INITIAL_DUE_DAYS,
)
from alfanumrik.domain.learning.models import BankQuestion, ReviewItem

logger = logging.getLogger(__name__)


def is_correct(accuracy: float) -> bool:
    """Only a perfect attempt counts as a successful review."""
    return accuracy == FULL_ACCURACY


def new_review_item(question: BankQuestion, now: datetime) -> ReviewItem:
    """Initial scheduling state: due tomorrow with default stability and difficulty."""
    return ReviewItem(
        item_key=item_key_for(question),
        question=question,
        last_reviewed_at=now,
        next_due_at=now + timedelta(days=INITIAL_DUE_DAYS),
        stability=DEFAULT_STABILITY,
        difficulty=DEFAULT_DIFFICULTY,
        repetitions=0,
        lapses=0,
        level=DEFAULT_LEVEL,
    )


def apply_outcome(item: ReviewItem, was_correct: bool, now: datetime) -> ReviewItem:
    """
    Compute the item's next scheduling state.

    Correct: stability grows with how unlikely recall was, difficulty eases.
    Incorrect: stability halves (floor 0.5), difficulty rises, a lapse is counted.
    """
    if was_correct:
        elapsed = fsrs.elapsed_days(item.last_reviewed_at, now)
        r = fsrs.retrievability(elapsed, item.stability)
        stability = fsrs.grow_stability(item.stability, r)
        difficulty = fsrs.adjust_difficulty_on_success(item.difficulty)
        lapses = item.lapses
    else:
        stability = fsrs.decay_stability(item.stability)
        difficulty = fsrs.adjust_difficulty_on_failure(item.difficulty)
        lapses = item.lapses + 1

    return replace(
        item,
        stability=stability,
        difficulty=difficulty,
        repetitions=item.repetitions + 1,
        lapses=lapses,
        last_reviewed_at=now,
        next_due_at=fsrs.next_due_date(now, stability),
    )


class ReviewScheduler:
    """
    The revision set, keyed by item key, in insertion order.

    Read-modify-write operations hold a lock so the scheduler can be shared
    by request handlers running on a thread pool.
    """

    def __init__(self, items: Iterable[ReviewItem] | None = None):
        self._items: dict[str, ReviewItem] = {}
        self._lock = threading.RLock()
        for item in items or []:
            # First occurrence wins when restoring a collection with duplicates
            self._items.setdefault(item.item_key, item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_key: object) -> bool:
        return item_key in self._items

    def get(self, item_key: str) -> ReviewItem | None:
        return self._items.get(item_key)

    def items(self) -> list[ReviewItem]:
        with self._lock:
            return list(self._items.values())

    def toggle(self, question: BankQuestion, now: datetime | None = None) -> bool:
        """
        Add the question to the revision set, or remove it if already present.

        Returns:
            True if the question was added, False if it was removed.
        """
        key = item_key_for(question)
        with self._lock:
            if key in self._items:
                del self._items[key]
                logger.info(f"Removed {key} from revision set")
                return False

            self._items[key] = new_review_item(question, now or utcnow())
            logger.info(f"Added {key} to revision set ({len(self._items)} items)")
            return True

    def record_outcome(self, item_key: str, was_correct: bool, now: datetime) -> ReviewItem | None:
        """
        Apply a review outcome to the item.

        Unknown keys are ignored: the item may have been removed between
        being shown and being answered.
        """
        with self._lock:
            item = self._items.get(item_key)
            if item is None:
                logger.debug(f"Outcome for unknown item {item_key} ignored")
                return None

            updated = apply_outcome(item, was_correct, now)
            self._items[item_key] = updated

        logger.debug(
            f"Reviewed {item_key}: correct={was_correct} "
            f"stability={item.stability:.3f}->{updated.stability:.3f} "
            f"difficulty={item.difficulty:.1f}->{updated.difficulty:.1f} "
            f"due={updated.next_due_at.isoformat()}"
        )
        return updated

    def bump_level(self, item_key: str) -> ReviewItem | None:
        """Raise the display level of an item. Unknown keys are ignored."""
        with self._lock:
            item = self._items.get(item_key)
            if item is None:
                return None
            updated = replace(item, level=item.level + 1)
            self._items[item_key] = updated
            return updated

    def due_items(self, now: datetime) -> list[ReviewItem]:
        """
        Items whose due date has passed, in collection order.

        Callers wanting most-overdue-first must sort the result themselves.
        """
        with self._lock:
            return [item for item in self._items.values() if item.next_due_at <= now]

    def count(self, predicate: Callable[[ReviewItem], bool]) -> int:
        with self._lock:
            return sum(1 for item in self._items.values() if predicate(item))

    def due_count(self, now: datetime) -> int:
        return self.count(lambda item: item.next_due_at <= now)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
        logger.info("Revision set cleared")
