"""Tests for the append-only activity ledger."""

from datetime import date, datetime, timedelta, timezone

import pytest

from alfanumrik.application.ledger import ActivityLedger
from alfanumrik.domain.errors import InvalidRecordError
from alfanumrik.domain.learning.models import ActivityEntry, Difficulty, Subject


def entry(accuracy=100, chapter="Light", subject=Subject.PHYSICS, **kw):
    return ActivityEntry(
        subject=subject,
        chapter=chapter,
        difficulty=kw.pop("difficulty", Difficulty.EASY),
        accuracy=accuracy,
        marks_achieved=kw.pop("marks_achieved", 1),
        total_marks=kw.pop("total_marks", 1),
        **kw,
    )


@pytest.fixture
def clock():
    t = datetime(2024, 5, 1, 23, 59, tzinfo=timezone.utc)
    return lambda: t


def test_append_prepends_and_stamps(clock):
    ledger = ActivityLedger(clock=clock)
    first = ledger.append(entry(chapter="Light"))
    second = ledger.append(entry(chapter="Electricity"))

    assert ledger.recent(10) == [second, first]
    assert first.date == date(2024, 5, 1)
    assert second.id > first.id


def test_ids_strictly_increase_with_frozen_clock(clock):
    ledger = ActivityLedger(clock=clock)
    ids = [ledger.append(entry()).id for _ in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


def test_ids_continue_after_restored_history(clock):
    ledger = ActivityLedger(clock=clock)
    far_future = ledger.append(entry())
    restored = ActivityLedger(
        [type(far_future)(**{**far_future.__dict__, "id": far_future.id + 10_000})],
        clock=clock,
    )
    assert restored.append(entry()).id == far_future.id + 10_001


def test_recent_slices_newest(clock):
    ledger = ActivityLedger(clock=clock)
    for i in range(5):
        ledger.append(entry(accuracy=i * 10))
    assert [r.accuracy for r in ledger.recent(2)] == [40, 30]
    assert ledger.recent(0) == []
    assert len(ledger.recent(50)) == 5


def test_filters_by_chapter_and_subject(clock):
    ledger = ActivityLedger(clock=clock)
    ledger.append(entry(chapter="Light"))
    ledger.append(entry(chapter="Acids", subject=Subject.CHEMISTRY))
    ledger.append(entry(chapter="Light", accuracy=0))

    assert [r.accuracy for r in ledger.for_chapter(Subject.PHYSICS, "Light")] == [0, 100]
    assert len(ledger.for_subject(Subject.CHEMISTRY)) == 1
    assert ledger.for_chapter(Subject.CHEMISTRY, "Light") == []


def test_clear_and_revision(clock):
    ledger = ActivityLedger(clock=clock)
    assert ledger.revision == 0
    ledger.append(entry())
    assert ledger.revision == 1
    snap = ledger.snapshot()

    ledger.clear()
    assert len(ledger) == 0
    assert ledger.revision == 2
    # Snapshots are isolated from later mutation
    assert len(snap) == 1


@pytest.mark.parametrize(
    "bad",
    [
        {"accuracy": -1},
        {"accuracy": 101},
        {"accuracy": float("nan")},
        {"marks_achieved": -2},
        {"time_spent_seconds": -5},
        {"chapter": ""},
    ],
)
def test_append_rejects_malformed_entries(clock, bad):
    ledger = ActivityLedger(clock=clock)
    with pytest.raises(InvalidRecordError):
        ledger.append(entry(**bad))
    assert len(ledger) == 0


def test_date_follows_clock_day():
    t = [datetime(2024, 5, 1, 12, tzinfo=timezone.utc)]
    ledger = ActivityLedger(clock=lambda: t[0])
    ledger.append(entry())
    t[0] += timedelta(days=1)
    assert ledger.append(entry()).date == date(2024, 5, 2)


def test_concurrent_appends_get_unique_ids(clock):
    from concurrent.futures import ThreadPoolExecutor

    ledger = ActivityLedger(clock=clock)
    with ThreadPoolExecutor(max_workers=8) as pool:
        records = list(pool.map(lambda _: ledger.append(entry()), range(200)))

    assert len({r.id for r in records}) == 200
    assert len(ledger) == 200
    assert [r.id for r in ledger.recent(200)] == sorted((r.id for r in records), reverse=True)


def test_attempted_at_sets_the_record_date(clock):
    ledger = ActivityLedger(clock=clock)
    record = ledger.append(entry(), attempted_at=datetime(2024, 4, 20, 8, 0, tzinfo=timezone.utc))

    assert record.date == date(2024, 4, 20)
    assert record.id == int(clock().timestamp() * 1000)
