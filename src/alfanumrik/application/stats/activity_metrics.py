"""Per-subject progress and recent-accuracy views over the activity history."""

from collections.abc import Sequence

from alfanumrik.domain import fsrs
from alfanumrik.domain.constants import FULL_ACCURACY, PULSE_LENGTH
from alfanumrik.domain.learning.models import ActivityRecord, Subject


def subject_mastery(records: Sequence[ActivityRecord]) -> dict[Subject, int]:
    """Percent of fully-correct attempts per subject, 0 for untouched subjects."""
    totals = {subject: 0 for subject in Subject}
    correct = {subject: 0 for subject in Subject}
    for record in records:
        totals[record.subject] += 1
        if record.accuracy == FULL_ACCURACY:
            correct[record.subject] += 1

    return {
        subject: fsrs.round_half_up(correct[subject] / totals[subject] * 100)
        if totals[subject] > 0
        else 0
        for subject in Subject
    }


def overall_mastery(records: Sequence[ActivityRecord]) -> float:
    """Mean, over attempted subjects, of each subject's mean accuracy."""
    sums: dict[Subject, float] = {}
    counts: dict[Subject, int] = {}
    for record in records:
        sums[record.subject] = sums.get(record.subject, 0.0) + record.accuracy
        counts[record.subject] = counts.get(record.subject, 0) + 1

    if not counts:
        return 0.0
    return sum(sums[s] / counts[s] for s in counts) / len(counts)


def accuracy_pulse(records: Sequence[ActivityRecord], limit: int = PULSE_LENGTH) -> list[float]:
    """Accuracies of the latest ``limit`` attempts, oldest first."""
    return [record.accuracy for record in reversed(records[:limit])]
