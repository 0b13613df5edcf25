"""
Learning Tracker: Application layer orchestrator.

Wires the review scheduler, the activity ledger and the mastery aggregator
to a storage backend and (optionally) a content provider.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from alfanumrik.application.id_service import item_key_for
from alfanumrik.application.ledger import ActivityLedger, validate_entry
from alfanumrik.application.repository import TrackerRepository
from alfanumrik.application.scheduling import ReviewScheduler, is_correct
from alfanumrik.application.stats import (
    EnrichedReviewItem,
    MasteryAggregator,
    MetricsCalculator,
)
from alfanumrik.application.utils.clock import utcnow
from alfanumrik.domain.constants import FULL_ACCURACY
from alfanumrik.domain.errors import ContentUnavailableError
from alfanumrik.domain.learning.models import (
    ActivityEntry,
    ActivityRecord,
    BankQuestion,
    BloomsLevel,
    Difficulty,
    MasterySummary,
    QuestionType,
    ReviewItem,
    Subject,
    UserProfile,
)
from alfanumrik.domain.learning.ports import ContentProvider

logger = logging.getLogger(__name__)


@dataclass
class AttemptResult:
    """Outcome of answering a question."""

    record: ActivityRecord
    correct: bool
    item: ReviewItem | None  # Updated scheduling state, if the question is in the revision set


def evaluate_answer(question: BankQuestion, answer: str | None) -> bool:
    """
    MCQs are correct only on an exact match with the correct answer.

    Free-text answers cannot be graded locally and count as completed.
    """
    if question.question_type == QuestionType.MCQ:
        return answer is not None and answer == question.correct_answer
    return True


class LearningTracker:
    """
    Application service owning one learner's revision set and history.

    Follows Dependency Inversion: depends on the KeyValueStore and
    ContentProvider abstractions, not concrete adapter implementations.
    """

    def __init__(
        self,
        repository: TrackerRepository,
        content: ContentProvider | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Args:
            repository: Loads and persists the three collections.
            content: Optional question source for practice sessions.
            clock: Source of the current instant.
        """
        self._repo = repository
        self._content = content
        self._clock = clock
        self.scheduler = ReviewScheduler(repository.load_review_items())
        self.ledger = ActivityLedger(repository.load_activity(), clock=clock)
        self.profile = repository.load_profile()
        self._aggregator = MasteryAggregator()
        self._calc = MetricsCalculator()
        logger.debug(
            f"Tracker loaded: {len(self.scheduler)} revision items, "
            f"{len(self.ledger)} activity records"
        )

    # -- Revision set ------------------------------------------------------

    def toggle_revision(self, question: BankQuestion) -> bool:
        """Add or remove a question from the revision set. Returns True if added."""
        added = self.scheduler.toggle(question, self._clock())
        self._repo.save_review_items(self.scheduler.items())
        return added

    def due_items(self, now: datetime | None = None) -> list[ReviewItem]:
        return self.scheduler.due_items(now or self._clock())

    def due_count(self, now: datetime | None = None) -> int:
        return self.scheduler.due_count(now or self._clock())

    def due_report(self, now: datetime | None = None) -> list[EnrichedReviewItem]:
        """Due items with live retrievability, most overdue first."""
        now = now or self._clock()
        return self._calc.most_overdue_first(self.scheduler.due_items(now), now)

    def submit_review(
        self,
        item_key: str,
        answer: str | None,
        time_spent_seconds: float = 0,
        now: datetime | None = None,
    ) -> AttemptResult | None:
        """
        Grade an answer to a revision item, reschedule it and log the attempt.

        Returns None when the item is no longer in the revision set.
        """
        item = self.scheduler.get(item_key)
        if item is None:
            logger.info(f"Review for {item_key} ignored: not in revision set")
            return None

        correct = evaluate_answer(item.question, answer)
        return self.record_attempt(
            item.question,
            accuracy=FULL_ACCURACY if correct else 0,
            time_spent_seconds=time_spent_seconds,
            now=now,
        )

    # -- Activity ----------------------------------------------------------

    def record_attempt(
        self,
        question: BankQuestion,
        accuracy: float,
        time_spent_seconds: float = 0,
        now: datetime | None = None,
    ) -> AttemptResult:
        """
        Log an attempt at ``question`` and, if it is in the revision set,
        feed the outcome to the scheduler.

        The scheduler runs before the ledger, so an outcome it rejects
        leaves no activity record behind.
        """
        now = now or self._clock()
        correct = is_correct(accuracy)
        marks = question.marks or 1

        entry = ActivityEntry(
            subject=question.subject,
            chapter=question.chapter,
            difficulty=question.difficulty_level,
            blooms_level=question.blooms_level,
            accuracy=accuracy,
            marks_achieved=marks if correct else 0,
            total_marks=marks,
            time_spent_seconds=time_spent_seconds,
        )
        validate_entry(entry)

        key = item_key_for(question)
        item = self.scheduler.record_outcome(key, correct, now)
        if item is not None:
            if correct:
                item = self.scheduler.bump_level(key)
            self._repo.save_review_items(self.scheduler.items())

        record = self.ledger.append(entry, attempted_at=now)
        self._repo.save_activity(list(self.ledger.snapshot()))
        return AttemptResult(record=record, correct=correct, item=item)

    def log_practice(self, entry: ActivityEntry) -> ActivityRecord:
        """Append an attempt that did not come from a tracked question."""
        record = self.ledger.append(entry)
        self._repo.save_activity(list(self.ledger.snapshot()))
        return record

    def recent_activity(self, n: int) -> list[ActivityRecord]:
        return self.ledger.recent(n)

    def reset_history(self) -> None:
        """Wipe the activity history. The revision set is left alone."""
        self.ledger.clear()
        self._repo.clear_activity()

    # -- Analytics ---------------------------------------------------------

    def summary(self, now: datetime | None = None) -> MasterySummary:
        """
        Mastery summary of the current history.

        Without an explicit ``now`` the result is reused until the ledger
        changes; concept decay is then as of the first call after the change.
        """
        cache_key = self.ledger.revision if now is None else (self.ledger.revision, now)
        return self._aggregator.summarize(
            self.ledger.snapshot(), now or self._clock(), cache_key=cache_key
        )

    # -- Profile -----------------------------------------------------------

    def update_profile(self, **changes: Any) -> UserProfile:
        self.profile = replace(self.profile, **changes)
        self._repo.save_profile(self.profile)
        return self.profile

    # -- Content -----------------------------------------------------------

    async def next_practice_question(
        self,
        subject: Subject | None = None,
        chapter: str | None = None,
        difficulty: Difficulty | None = None,
        blooms_level: BloomsLevel | None = None,
    ) -> BankQuestion:
        if self._content is None:
            raise ContentUnavailableError("No content provider configured")
        return await self._content.fetch_question(subject, chapter, difficulty, blooms_level)
