"""
Domain models for revision scheduling and mastery tracking.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class Subject(str, Enum):
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    BIOLOGY = "Biology"
    MATHEMATICS = "Mathematics"
    SCIENCE = "Science"
    SOCIAL_SCIENCE = "Social Science"
    ENGLISH = "English"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    HOTS = "HOTS"


class BloomsLevel(str, Enum):
    """Cognitive-demand tiers, lowest first."""

    REMEMBER = "Remember"
    UNDERSTAND = "Understand"
    APPLY = "Apply"
    ANALYZE = "Analyze"
    EVALUATE = "Evaluate"
    CREATE = "Create"


class QuestionType(str, Enum):
    MCQ = "Multiple Choice Question"
    SHORT_ANSWER = "Short Answer"
    LONG_ANSWER = "Long Answer"


@dataclass(frozen=True)
class BankQuestion:
    """
    A question as handed over by the content provider.

    The tracker treats it as an opaque value and only reads the subject,
    chapter, difficulty, Bloom's level, marks, text and correct answer.
    """

    subject: Subject
    chapter: str
    question_text: str
    difficulty_level: Difficulty
    blooms_level: BloomsLevel | None = None
    question_type: QuestionType = QuestionType.SHORT_ANSWER
    grade: int = 10
    options: list[str] | None = None
    correct_answer: str | None = None
    model_answer: str | None = None
    explanation: str | None = None
    solution_steps: list[str] | None = None
    marks: int | None = None
    examiner_tips: str = ""
    source_year: int | None = None
    concept_tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReviewItem:
    """
    Scheduling state for one question in the revision set.

    Attributes:
        item_key: Content hash of the question text.
        question: The underlying question.
        last_reviewed_at: When the item was last reviewed (or added).
        next_due_at: When the item should be shown again.
        stability: Days until recall probability drops to 90%.
        difficulty: Learner-specific difficulty on a 1-10 scale.
        repetitions: Completed reviews.
        lapses: Failed reviews.
        level: Display-only progress tier.
    """

    item_key: str
    question: BankQuestion
    last_reviewed_at: datetime
    next_due_at: datetime
    stability: float
    difficulty: float
    repetitions: int = 0
    lapses: int = 0
    level: int = 1


@dataclass(frozen=True)
class ActivityRecord:
    """
    A single completed practice attempt.

    Attributes:
        id: Strictly increasing identifier assigned by the ledger.
        date: Day the attempt was logged.
        accuracy: 0-100; only 100 counts as fully correct.
    """

    id: int
    date: date
    subject: Subject
    chapter: str
    difficulty: Difficulty
    accuracy: float
    marks_achieved: float
    total_marks: float
    time_spent_seconds: float
    blooms_level: BloomsLevel | None = None


@dataclass(frozen=True)
class ActivityEntry:
    """An attempt waiting to be appended; the ledger assigns id and date."""

    subject: Subject
    chapter: str
    difficulty: Difficulty
    accuracy: float
    marks_achieved: float
    total_marks: float
    time_spent_seconds: float = 0
    blooms_level: BloomsLevel | None = None


@dataclass(frozen=True)
class ChapterScore:
    subject: Subject
    chapter: str
    score: float
    suggestions: list[str] = field(default_factory=list)


@dataclass
class MasterySummary:
    """
    Consolidated view derived from the activity history.

    Never persisted; recomputed from the record sequence on demand.
    """

    weak_chapters: list[ChapterScore]
    strong_chapters: list[ChapterScore]
    overall_accuracy: float
    total_points: float
    next_milestone: str
    board_readiness: int
    learning_velocity: float
    predicted_score: int
    blooms_mastery: dict[BloomsLevel, int]
    concept_stability: dict[str, float]


@dataclass
class UserProfile:
    grade: int = 10
    selected_subjects: list[Subject] = field(default_factory=list)
    name: str = ""
    is_setup: bool = False
