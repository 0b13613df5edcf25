"""
Tracker repository: (de)serializes whole collections to a KeyValueStore.

One logical key per collection; every save rewrites the whole collection.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from alfanumrik.domain.constants import ACTIVITY_KEY, PROFILE_KEY, REVISION_SET_KEY
from alfanumrik.domain.errors import StorageError
from alfanumrik.domain.learning.models import ActivityRecord, ReviewItem, UserProfile
from alfanumrik.domain.learning.ports import KeyValueStore

logger = logging.getLogger(__name__)

_REVIEW_ITEMS = TypeAdapter(list[ReviewItem])
_ACTIVITY = TypeAdapter(list[ActivityRecord])
_PROFILE = TypeAdapter(UserProfile)


class TrackerRepository:
    """
    Loads and saves the revision set, the activity history and the profile.

    Missing keys read back as empty collections (or a default profile);
    payloads that exist but cannot be parsed raise StorageError.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load(self, key: str, adapter: TypeAdapter, default):
        raw = self.store.get(key)
        if raw is None or not raw.strip():
            return default
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            raise StorageError(f"Corrupt data under '{key}': {e}") from e

    def _save(self, key: str, adapter: TypeAdapter, value) -> None:
        self.store.set(key, adapter.dump_json(value).decode("utf-8"))

    def load_review_items(self) -> list[ReviewItem]:
        return self._load(REVISION_SET_KEY, _REVIEW_ITEMS, [])

    def save_review_items(self, items: list[ReviewItem]) -> None:
        self._save(REVISION_SET_KEY, _REVIEW_ITEMS, items)
        logger.debug(f"Saved {len(items)} revision items")

    def load_activity(self) -> list[ActivityRecord]:
        return self._load(ACTIVITY_KEY, _ACTIVITY, [])

    def save_activity(self, records: list[ActivityRecord]) -> None:
        self._save(ACTIVITY_KEY, _ACTIVITY, records)
        logger.debug(f"Saved {len(records)} activity records")

    def clear_activity(self) -> None:
        self.store.delete(ACTIVITY_KEY)

    def load_profile(self) -> UserProfile:
        return self._load(PROFILE_KEY, _PROFILE, UserProfile())

    def save_profile(self, profile: UserProfile) -> None:
        self._save(PROFILE_KEY, _PROFILE, profile)
