from datetime import date, timedelta

import pytest

from alfanumrik.application.scheduling import ReviewScheduler
from alfanumrik.application.stats import (
    MetricsCalculator,
    accuracy_pulse,
    overall_mastery,
    subject_mastery,
)
from alfanumrik.domain.learning.models import ActivityRecord, Difficulty, Subject


@pytest.fixture
def calculator():
    return MetricsCalculator()


def test_metrics_calculator_retrievability(calculator, mcq_question, now):
    scheduler = ReviewScheduler()
    scheduler.toggle(mcq_question, now - timedelta(days=1))
    item = scheduler.items()[0]

    enriched = calculator.enrich(item, now)

    # R = 0.9^(t/S) = 0.9^(1/1)
    assert enriched.current_retrievability == pytest.approx(0.9)
    assert enriched.days_overdue == pytest.approx(0.0)
    assert enriched.lapse_rate is None
    assert enriched.subject == "Physics"


def test_metrics_calculator_clock_skew(calculator, mcq_question, now):
    scheduler = ReviewScheduler()
    scheduler.toggle(mcq_question, now + timedelta(hours=2))
    enriched = calculator.enrich(scheduler.items()[0], now)
    assert enriched.current_retrievability == 1.0
    assert enriched.days_overdue < 0


def test_metrics_calculator_lapse_rate(calculator, mcq_question, now):
    scheduler = ReviewScheduler()
    scheduler.toggle(mcq_question, now - timedelta(days=5))
    key = scheduler.items()[0].item_key
    scheduler.record_outcome(key, False, now - timedelta(days=4))
    scheduler.record_outcome(key, True, now - timedelta(days=3))

    assert calculator.enrich(scheduler.get(key), now).lapse_rate == 0.5


def test_most_overdue_first(calculator, mcq_question, short_question, now):
    scheduler = ReviewScheduler()
    scheduler.toggle(mcq_question, now - timedelta(days=2))
    scheduler.toggle(short_question, now - timedelta(days=6))

    ordered = calculator.most_overdue_first(scheduler.due_items(now), now)
    assert [e.chapter for e in ordered] == ["Light", "Electricity"]


def _rec(subject, accuracy, i):
    return ActivityRecord(
        id=i,
        date=date(2024, 1, 1),
        subject=subject,
        chapter="C",
        difficulty=Difficulty.EASY,
        accuracy=accuracy,
        marks_achieved=0,
        total_marks=1,
        time_spent_seconds=0,
    )


def test_subject_mastery():
    records = [
        _rec(Subject.PHYSICS, 100, 1),
        _rec(Subject.PHYSICS, 50, 2),
        _rec(Subject.PHYSICS, 100, 3),
        _rec(Subject.ENGLISH, 0, 4),
    ]
    mastery = subject_mastery(records)
    assert mastery[Subject.PHYSICS] == 67
    assert mastery[Subject.ENGLISH] == 0
    assert mastery[Subject.BIOLOGY] == 0
    assert set(mastery) == set(Subject)


def test_overall_mastery_averages_subjects():
    records = [
        _rec(Subject.PHYSICS, 100, 1),
        _rec(Subject.PHYSICS, 50, 2),
        _rec(Subject.ENGLISH, 0, 3),
    ]
    assert overall_mastery(records) == pytest.approx(37.5)
    assert overall_mastery([]) == 0


def test_accuracy_pulse_is_oldest_first():
    records = [_rec(Subject.PHYSICS, a, i) for i, a in enumerate([30, 20, 10])]
    assert accuracy_pulse(records, limit=2) == [20, 30]
    assert accuracy_pulse([]) == []
