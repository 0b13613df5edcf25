from datetime import datetime, timezone

import pytest

from alfanumrik.application.repository import TrackerRepository
from alfanumrik.application.tracker_service import LearningTracker
from alfanumrik.domain.learning.models import (
    BankQuestion,
    BloomsLevel,
    Difficulty,
    QuestionType,
    Subject,
)
from alfanumrik.infrastructure.adapters.storage import InMemoryStore

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def mcq_question():
    return BankQuestion(
        subject=Subject.PHYSICS,
        chapter="Electricity",
        question_text="What is the commercial unit of electrical energy?",
        difficulty_level=Difficulty.EASY,
        blooms_level=BloomsLevel.REMEMBER,
        question_type=QuestionType.MCQ,
        options=["Joule", "Watt-hour", "Kilowatt-hour", "Volt-ampere"],
        correct_answer="Kilowatt-hour",
        marks=1,
    )


@pytest.fixture
def short_question():
    return BankQuestion(
        subject=Subject.PHYSICS,
        chapter="Light",
        question_text=(
            "An object is placed 10 cm from a convex mirror of focal length 15 cm. "
            "Find the position and nature of the image."
        ),
        difficulty_level=Difficulty.MEDIUM,
        blooms_level=BloomsLevel.APPLY,
        marks=3,
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def tracker(store, now):
    """Tracker over an in-memory store with a frozen clock."""
    return LearningTracker(TrackerRepository(store), clock=lambda: now)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and state
    monkeypatch.setenv("HOME", str(home))
    for var in ("ALFANUMRIK_BACKEND", "ALFANUMRIK_DATA_DIR", "ALFANUMRIK_HOST", "ALFANUMRIK_PORT"):
        monkeypatch.delenv(var, raising=False)
    return home
