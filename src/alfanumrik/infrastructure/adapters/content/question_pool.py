"""
Local Question Pool: ContentProvider backed by a curated question list.

Serves as the offline fallback when no generative provider is configured.
"""

import logging
import random
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from alfanumrik.domain.errors import ContentUnavailableError, StorageError
from alfanumrik.domain.learning.models import BankQuestion, BloomsLevel, Difficulty, Subject
from alfanumrik.domain.learning.ports import ContentProvider

logger = logging.getLogger(__name__)

_QUESTIONS = TypeAdapter(list[BankQuestion])


class LocalQuestionPool(ContentProvider):
    def __init__(self, questions: list[BankQuestion], rng: random.Random | None = None):
        self.questions = list(questions)
        self._rng = rng or random.Random()

    @classmethod
    def from_file(cls, path: Path, rng: random.Random | None = None) -> "LocalQuestionPool":
        """Load a JSON array of questions."""
        try:
            questions = _QUESTIONS.validate_json(Path(path).read_bytes())
        except (OSError, ValidationError) as e:
            raise StorageError(f"Could not load question pool {path}: {e}") from e
        logger.info(f"Loaded {len(questions)} questions from {path}")
        return cls(questions, rng=rng)

    def matching(
        self,
        subject: Subject | None = None,
        chapter: str | None = None,
        difficulty: Difficulty | None = None,
        blooms_level: BloomsLevel | None = None,
    ) -> list[BankQuestion]:
        return [
            q
            for q in self.questions
            if (subject is None or q.subject == subject)
            and (chapter is None or q.chapter == chapter)
            and (difficulty is None or q.difficulty_level == difficulty)
            and (blooms_level is None or q.blooms_level == blooms_level)
        ]

    async def fetch_question(
        self,
        subject: Subject | None = None,
        chapter: str | None = None,
        difficulty: Difficulty | None = None,
        blooms_level: BloomsLevel | None = None,
    ) -> BankQuestion:
        candidates = self.matching(subject, chapter, difficulty, blooms_level)
        if not candidates:
            raise ContentUnavailableError(
                f"No question for subject={subject} chapter={chapter} "
                f"difficulty={difficulty} blooms={blooms_level}"
            )
        return self._rng.choice(candidates)
