"""
Tracker Factory
Centralizes the logic for selecting storage and content adapters.
"""

import logging

from alfanumrik.application.config import AppConfig
from alfanumrik.application.repository import TrackerRepository
from alfanumrik.application.tracker_service import LearningTracker
from alfanumrik.domain.learning.ports import ContentProvider, KeyValueStore
from alfanumrik.infrastructure.adapters.content import LocalQuestionPool
from alfanumrik.infrastructure.adapters.storage import InMemoryStore, JsonDirectoryStore

logger = logging.getLogger(__name__)


def get_store(config: AppConfig) -> KeyValueStore:
    """
    Returns the KeyValueStore implementation selected by config.
    """
    if config.backend == "memory":
        return InMemoryStore()
    return JsonDirectoryStore(config.data_dir)


def get_content_provider(config: AppConfig) -> ContentProvider | None:
    """
    Returns a question source, or None when no pool file is configured.
    """
    if config.question_pool is None:
        return None
    return LocalQuestionPool.from_file(config.question_pool)


def build_tracker(config: AppConfig) -> LearningTracker:
    store = get_store(config)
    logger.debug(f"Storage backend: {config.backend} ({config.data_dir})")
    return LearningTracker(TrackerRepository(store), content=get_content_provider(config))
