"""Tests for the review scheduler state machine."""

import math
import random
from dataclasses import replace
from datetime import timedelta

import pytest

from alfanumrik.application.id_service import item_key_for
from alfanumrik.application.scheduling import ReviewScheduler, apply_outcome, is_correct
from alfanumrik.domain.errors import InvalidInputError


@pytest.fixture
def scheduler():
    return ReviewScheduler()


class TestToggle:
    def test_adds_with_default_state(self, scheduler, mcq_question, now):
        assert scheduler.toggle(mcq_question, now) is True

        item = scheduler.get(item_key_for(mcq_question))
        assert item is not None
        assert item.stability == 1.0
        assert item.difficulty == 5.0
        assert item.repetitions == 0
        assert item.lapses == 0
        assert item.level == 1
        assert item.last_reviewed_at == now
        assert item.next_due_at == now + timedelta(days=1)

    def test_toggle_twice_restores_collection(self, scheduler, mcq_question, short_question, now):
        scheduler.toggle(short_question, now)
        before = scheduler.items()

        scheduler.toggle(mcq_question, now)
        assert scheduler.toggle(mcq_question, now) is False

        assert scheduler.items() == before
        assert item_key_for(mcq_question) not in scheduler

    def test_same_text_is_same_item(self, scheduler, mcq_question, now):
        copy = replace(mcq_question, chapter="Something else")
        scheduler.toggle(mcq_question, now)
        scheduler.toggle(copy, now)
        assert len(scheduler) == 0

    def test_restore_keeps_first_duplicate(self, mcq_question, now):
        first = ReviewScheduler()
        first.toggle(mcq_question, now)
        item = first.items()[0]
        later = replace(item, level=7)

        restored = ReviewScheduler([item, later])
        assert len(restored) == 1
        assert restored.get(item.item_key).level == 1


class TestRecordOutcome:
    def test_correct_after_two_days(self, scheduler, mcq_question, now):
        scheduler.toggle(mcq_question, now - timedelta(days=2))
        key = item_key_for(mcq_question)

        updated = scheduler.record_outcome(key, True, now)

        assert updated.stability == pytest.approx(1 + math.e * (1 - 0.81))
        assert updated.stability == pytest.approx(1.5165, abs=1e-4)
        assert updated.difficulty == 4.5
        assert updated.repetitions == 1
        assert updated.lapses == 0
        assert updated.last_reviewed_at == now
        assert updated.next_due_at == now + timedelta(days=2)

    def test_incorrect_halves_stability(self, scheduler, mcq_question, now):
        scheduler.toggle(mcq_question, now - timedelta(days=1))
        key = item_key_for(mcq_question)
        item = replace(scheduler.get(key), stability=2.0)

        updated = apply_outcome(item, False, now)

        assert updated.stability == 1.0
        assert updated.difficulty == 6.0
        assert updated.lapses == 1
        assert updated.repetitions == 1
        assert updated.next_due_at == now + timedelta(days=1)

    def test_unknown_key_is_a_no_op(self, scheduler, mcq_question, now):
        scheduler.toggle(mcq_question, now)
        before = scheduler.items()

        assert scheduler.record_outcome("q_missing", True, now) is None
        assert scheduler.items() == before

    def test_review_before_last_review_fails_fast(self, scheduler, mcq_question, now):
        scheduler.toggle(mcq_question, now)
        with pytest.raises(InvalidInputError):
            scheduler.record_outcome(item_key_for(mcq_question), True, now - timedelta(hours=1))

    def test_level_is_not_touched(self, scheduler, mcq_question, now):
        scheduler.toggle(mcq_question, now)
        key = item_key_for(mcq_question)
        scheduler.record_outcome(key, True, now + timedelta(days=1))
        assert scheduler.get(key).level == 1

        assert scheduler.bump_level(key).level == 2
        assert scheduler.bump_level("q_missing") is None

    def test_bounds_hold_for_any_outcome_sequence(self, scheduler, mcq_question, now):
        rng = random.Random(42)
        scheduler.toggle(mcq_question, now)
        key = item_key_for(mcq_question)
        t = now

        for _ in range(200):
            t += timedelta(hours=rng.randint(0, 240))
            item = scheduler.record_outcome(key, rng.random() < 0.5, t)
            assert item.stability >= 0.5
            assert 1.0 <= item.difficulty <= 10.0
            assert item.next_due_at >= item.last_reviewed_at
            assert item.next_due_at >= t


class TestQueries:
    def test_due_items_in_collection_order(self, scheduler, mcq_question, short_question, now):
        scheduler.toggle(short_question, now - timedelta(days=3))
        scheduler.toggle(mcq_question, now - timedelta(days=2))

        due = scheduler.due_items(now)
        assert [i.question for i in due] == [short_question, mcq_question]
        assert scheduler.due_items(now - timedelta(days=2)) == []

    def test_due_boundary_is_inclusive(self, scheduler, mcq_question, now):
        scheduler.toggle(mcq_question, now - timedelta(days=1))
        assert len(scheduler.due_items(now)) == 1

    def test_count_and_due_count(self, scheduler, mcq_question, short_question, now):
        scheduler.toggle(short_question, now - timedelta(days=3))
        scheduler.toggle(mcq_question, now)

        assert scheduler.due_count(now) == 1
        assert scheduler.count(lambda i: i.difficulty == 5.0) == 2

    def test_clear(self, scheduler, mcq_question, now):
        scheduler.toggle(mcq_question, now)
        scheduler.clear()
        assert len(scheduler) == 0


@pytest.mark.parametrize("accuracy,expected", [(100, True), (100.0, True), (99.9, False), (0, False)])
def test_only_full_accuracy_is_correct(accuracy, expected):
    assert is_correct(accuracy) is expected
