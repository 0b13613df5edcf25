"""
Activity ledger: append-only history of practice attempts, newest first.
"""

import logging
import math
import threading
from collections.abc import Callable, Iterable
from datetime import datetime

from alfanumrik.application.utils.clock import utcnow
from alfanumrik.domain.constants import FULL_ACCURACY
from alfanumrik.domain.errors import InvalidRecordError
from alfanumrik.domain.learning.models import ActivityEntry, ActivityRecord, Subject

logger = logging.getLogger(__name__)


class ActivityLedger:
    """
    Reverse-chronological log of ActivityRecords.

    Records are never edited or removed individually; ``clear`` is the only
    deletion path. ``revision`` changes on every mutation and can be used
    as a cache key for derived views.
    """

    def __init__(
        self,
        records: Iterable[ActivityRecord] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._records: list[ActivityRecord] = list(records or [])
        self._clock = clock
        self._lock = threading.Lock()
        self._last_id = max((r.id for r in self._records), default=0)
        self.revision = 0

    def __len__(self) -> int:
        return len(self._records)

    def append(
        self, entry: ActivityEntry, attempted_at: datetime | None = None
    ) -> ActivityRecord:
        """
        Stamp the entry with an id and a date and prepend it.

        The date is taken from ``attempted_at`` when given, else from the
        clock. Ids always come from the millisecond clock, bumped past the
        previous id when the clock has not advanced.
        """
        validate_entry(entry)
        now = self._clock()
        with self._lock:
            record_id = max(int(now.timestamp() * 1000), self._last_id + 1)
            record = ActivityRecord(
                id=record_id,
                date=(attempted_at or now).date(),
                subject=entry.subject,
                chapter=entry.chapter,
                difficulty=entry.difficulty,
                accuracy=entry.accuracy,
                marks_achieved=entry.marks_achieved,
                total_marks=entry.total_marks,
                time_spent_seconds=entry.time_spent_seconds,
                blooms_level=entry.blooms_level,
            )
            self._records.insert(0, record)
            self._last_id = record_id
            self.revision += 1

        logger.debug(
            f"Logged attempt {record_id}: {entry.subject.value}/{entry.chapter} "
            f"accuracy={entry.accuracy}"
        )
        return record

    def recent(self, n: int) -> list[ActivityRecord]:
        """The ``n`` most recent records."""
        return self._records[: max(n, 0)]

    def snapshot(self) -> tuple[ActivityRecord, ...]:
        """Immutable copy for consistent aggregation."""
        with self._lock:
            return tuple(self._records)

    def for_chapter(self, subject: Subject, chapter: str) -> list[ActivityRecord]:
        return [r for r in self._records if r.subject == subject and r.chapter == chapter]

    def for_subject(self, subject: Subject) -> list[ActivityRecord]:
        return [r for r in self._records if r.subject == subject]

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._records)
            self._records = []
            self.revision += 1
        logger.info(f"Activity history cleared ({dropped} records)")


def validate_entry(entry: ActivityEntry) -> None:
    """Raise InvalidRecordError unless ``entry`` can be appended."""
    numbers = {
        "accuracy": entry.accuracy,
        "marks_achieved": entry.marks_achieved,
        "total_marks": entry.total_marks,
        "time_spent_seconds": entry.time_spent_seconds,
    }
    for name, value in numbers.items():
        if value is None or math.isnan(value):
            raise InvalidRecordError(f"{name} must be a number, got {value!r}")
        if value < 0:
            raise InvalidRecordError(f"{name} must be >= 0, got {value}")

    if entry.accuracy > FULL_ACCURACY:
        raise InvalidRecordError(f"accuracy must be <= {FULL_ACCURACY}, got {entry.accuracy}")

    if not entry.chapter:
        raise InvalidRecordError("chapter must not be empty")
