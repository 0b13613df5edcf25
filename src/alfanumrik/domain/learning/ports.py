"""
Ports (interfaces) for state storage and question supply.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import BankQuestion, BloomsLevel, Difficulty, Subject


class KeyValueStore(ABC):
    """
    Port for a flat text store with whole-value granularity.

    Implementations:
        - InMemoryStore: Process-local dict, used for tests and ephemeral runs.
        - JsonDirectoryStore: One JSON file per key inside a data directory.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """
        Read the value stored under ``key``.

        Returns:
            The stored text, or None if the key was never written.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the whole value stored under ``key``."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Missing keys are ignored."""
        pass


class ContentProvider(ABC):
    """
    Port for fetching questions matching a topic/difficulty descriptor.

    Implementations:
        - LocalQuestionPool: Filters a curated, in-memory question list.
    """

    @abstractmethod
    async def fetch_question(
        self,
        subject: Subject | None = None,
        chapter: str | None = None,
        difficulty: Difficulty | None = None,
        blooms_level: BloomsLevel | None = None,
    ) -> BankQuestion:
        """
        Return one question matching every descriptor that is not None.

        Raises:
            ContentUnavailableError: Nothing matched.
        """
        pass
