# Domain Learning Package
from .models import (
    ActivityEntry,
    ActivityRecord,
    BankQuestion,
    BloomsLevel,
    ChapterScore,
    Difficulty,
    MasterySummary,
    QuestionType,
    ReviewItem,
    Subject,
    UserProfile,
)
from .ports import ContentProvider, KeyValueStore

__all__ = [
    "ActivityEntry",
    "ActivityRecord",
    "BankQuestion",
    "BloomsLevel",
    "ChapterScore",
    "ContentProvider",
    "Difficulty",
    "KeyValueStore",
    "MasterySummary",
    "QuestionType",
    "ReviewItem",
    "Subject",
    "UserProfile",
]
