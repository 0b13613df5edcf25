"""
Metrics calculator for deriving insights from revision items.

This is a pure computation module with no I/O.
"""

from dataclasses import dataclass
from datetime import datetime

from alfanumrik.domain import fsrs
from alfanumrik.domain.learning.models import ReviewItem


@dataclass
class EnrichedReviewItem:
    """
    A revision item enriched with computed metrics.
    """

    item_key: str
    subject: str
    chapter: str
    question_text: str
    stability: float
    difficulty: float
    repetitions: int
    lapses: int
    level: int
    next_due_at: datetime

    # Computed metrics
    current_retrievability: float
    lapse_rate: float | None  # lapses / repetitions
    days_overdue: float  # Negative if not yet due


class MetricsCalculator:
    """
    Computes derived metrics from ReviewItem objects.

    Stateless and side-effect free.
    """

    def enrich(self, item: ReviewItem, now: datetime) -> EnrichedReviewItem:
        """
        Enrich an item with its current recall probability and overdue days.
        """
        return EnrichedReviewItem(
            item_key=item.item_key,
            subject=item.question.subject.value,
            chapter=item.question.chapter,
            question_text=item.question.question_text,
            stability=item.stability,
            difficulty=item.difficulty,
            repetitions=item.repetitions,
            lapses=item.lapses,
            level=item.level,
            next_due_at=item.next_due_at,
            current_retrievability=self._compute_retrievability(item, now),
            lapse_rate=self._compute_lapse_rate(item),
            days_overdue=fsrs.elapsed_days(item.next_due_at, now),
        )

    def most_overdue_first(
        self, items: list[ReviewItem], now: datetime
    ) -> list[EnrichedReviewItem]:
        """Enrich and order items by how far past due they are."""
        enriched = [self.enrich(item, now) for item in items]
        return sorted(enriched, key=lambda e: e.days_overdue, reverse=True)

    def _compute_retrievability(self, item: ReviewItem, now: datetime) -> float:
        """
        R = 0.9^(t/S) where t = days since last review, S = stability.

        A review clock that runs ahead of ``now`` counts as zero elapsed days.
        """
        elapsed = max(0.0, fsrs.elapsed_days(item.last_reviewed_at, now))
        return fsrs.retrievability(elapsed, item.stability)

    def _compute_lapse_rate(self, item: ReviewItem) -> float | None:
        if item.repetitions == 0:
            return None
        return item.lapses / item.repetitions
