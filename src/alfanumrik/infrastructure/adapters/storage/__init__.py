# Infrastructure Storage Adapters
from .json_store import JsonDirectoryStore
from .memory_store import InMemoryStore

__all__ = ["InMemoryStore", "JsonDirectoryStore"]
