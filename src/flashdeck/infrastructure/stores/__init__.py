# Infrastructure Stores Package
from .json_store import JsonDeckStore
from .memory import MemoryDeckStore

__all__ = ["JsonDeckStore", "MemoryDeckStore"]
