"""
Mastery aggregator: folds the activity history into a MasterySummary.

This is a pure computation module with no I/O.
"""

import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from alfanumrik.application.utils.clock import utcnow
from alfanumrik.domain import fsrs
from alfanumrik.domain.constants import (
    ADVANCED_THRESHOLD,
    CONCEPTUALIST_POINTS,
    CRITICAL_THINKER_POINTS,
    FOUNDATION_THRESHOLD,
    FULL_ACCURACY,
    PREDICTION_TREND_BONUS,
    PREDICTION_TREND_PENALTY,
    READINESS_COVERAGE_CAP,
    READINESS_COVERAGE_PER_CHAPTER,
    READINESS_MASTERY_WEIGHT,
    VELOCITY_WINDOW,
    WEAK_CHAPTER_THRESHOLD,
)
from alfanumrik.domain.learning.models import (
    ActivityRecord,
    BloomsLevel,
    ChapterScore,
    Difficulty,
    MasterySummary,
    Subject,
)

logger = logging.getLogger(__name__)

DIFFICULTY_WEIGHTS: dict[Difficulty, int] = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
    Difficulty.HOTS: 5,
}

FOUNDATION_SUGGESTION = "Prioritize Remember/Understand tasks"
INTERMEDIATE_SUGGESTION = "Advance to Apply/Analyze scenarios"
ADVANCED_SUGGESTION = "Ready for Evaluate/Create complexity"


@dataclass
class _ChapterTally:
    subject: Subject
    chapter: str
    weighted_score: float = 0.0
    weight_total: float = 0.0


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def suggestions_for(score: float) -> list[str]:
    """Tiered next steps for a chapter score. Every chapter gets one, weak or strong."""
    if score < FOUNDATION_THRESHOLD:
        return [FOUNDATION_SUGGESTION]
    if score < ADVANCED_THRESHOLD:
        return [INTERMEDIATE_SUGGESTION]
    return [ADVANCED_SUGGESTION]


def milestone_for(total_points: float) -> str:
    if total_points < CONCEPTUALIST_POINTS:
        return "Rememberer"
    if total_points < CRITICAL_THINKER_POINTS:
        return "Conceptualist"
    return "Critical Thinker"


def concept_key(subject: Subject, chapter: str) -> str:
    return f"{subject.value} - {chapter}"


def days_since(day: date, now: datetime) -> float:
    """Days from midnight UTC of ``day`` to ``now``."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return fsrs.elapsed_days(start, now)


class MasteryAggregator:
    """
    Computes MasterySummary objects from activity records.

    Stateless apart from an optional memo that is only consulted when the
    caller supplies an explicit ``cache_key`` (e.g. the ledger revision).
    """

    def __init__(self):
        self._memo: tuple[Hashable, MasterySummary] | None = None

    def summarize(
        self,
        records: Sequence[ActivityRecord],
        now: datetime | None = None,
        cache_key: Hashable | None = None,
    ) -> MasterySummary:
        if cache_key is not None and self._memo is not None and self._memo[0] == cache_key:
            return self._memo[1]

        summary = summarize(records, now)
        if cache_key is not None:
            self._memo = (cache_key, summary)
        return summary


def summarize(records: Sequence[ActivityRecord], now: datetime | None = None) -> MasterySummary:
    """
    Fold newest-first activity records into a MasterySummary.

    Deterministic for a given ``records`` sequence and ``now``.
    """
    now = now or utcnow()

    tallies: dict[tuple[Subject, str], _ChapterTally] = {}
    blooms_total = {level: 0 for level in BloomsLevel}
    blooms_correct = {level: 0 for level in BloomsLevel}
    concept_trace: dict[str, float] = {}

    for record in records:
        key = (record.subject, record.chapter)
        tally = tallies.get(key)
        if tally is None:
            tally = tallies[key] = _ChapterTally(record.subject, record.chapter)

        weight = DIFFICULTY_WEIGHTS.get(record.difficulty, 1)
        tally.weighted_score += (record.accuracy / 100) * weight
        tally.weight_total += weight

        if record.blooms_level is not None:
            blooms_total[record.blooms_level] += 1
            if record.accuracy == FULL_ACCURACY:
                blooms_correct[record.blooms_level] += 1

        # Later records overwrite earlier ones for the same chapter
        decay = fsrs.concept_decay(days_since(record.date, now))
        concept_trace[concept_key(record.subject, record.chapter)] = (record.accuracy / 100) * decay

    blooms_mastery = {
        level: (
            fsrs.round_half_up(blooms_correct[level] / blooms_total[level] * 100)
            if blooms_total[level] > 0
            else 0
        )
        for level in BloomsLevel
    }

    chapters = []
    for t in tallies.values():
        score = (t.weighted_score / t.weight_total) * 100 if t.weight_total > 0 else 0.0
        chapters.append(ChapterScore(t.subject, t.chapter, score, suggestions_for(score)))

    weak = sorted(
        (c for c in chapters if c.score < WEAK_CHAPTER_THRESHOLD),
        key=lambda c: c.score,
    )
    strong = sorted(
        (c for c in chapters if c.score >= WEAK_CHAPTER_THRESHOLD),
        key=lambda c: c.score,
        reverse=True,
    )

    total_points = sum(r.marks_achieved or 0 for r in records)
    avg_chapter_score = mean([c.score for c in chapters])

    latest = records[:VELOCITY_WINDOW]
    previous = records[VELOCITY_WINDOW : 2 * VELOCITY_WINDOW]
    if latest and previous:
        velocity = mean([r.accuracy for r in latest]) - mean([r.accuracy for r in previous])
    else:
        velocity = 0.0

    coverage = min(len(chapters) * READINESS_COVERAGE_PER_CHAPTER, READINESS_COVERAGE_CAP)
    board_readiness = min(
        fsrs.round_half_up(avg_chapter_score * READINESS_MASTERY_WEIGHT + coverage), 100
    )
    trend = PREDICTION_TREND_BONUS if velocity > 0 else PREDICTION_TREND_PENALTY
    predicted_score = min(100, fsrs.round_half_up(board_readiness + trend))

    logger.debug(
        f"Summarized {len(records)} records: {len(weak)} weak, {len(strong)} strong, "
        f"readiness={board_readiness}"
    )

    return MasterySummary(
        weak_chapters=weak,
        strong_chapters=strong,
        overall_accuracy=mean([r.accuracy for r in records]),
        total_points=total_points,
        next_milestone=milestone_for(total_points),
        board_readiness=board_readiness,
        learning_velocity=velocity,
        predicted_score=predicted_score,
        blooms_mastery=blooms_mastery,
        concept_stability=concept_trace,
    )
