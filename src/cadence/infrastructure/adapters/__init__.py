# Infrastructure Store Adapters Package
from .json_store import JsonFileCardStore
from .memory_store import InMemoryCardStore

__all__ = ["InMemoryCardStore", "JsonFileCardStore"]
