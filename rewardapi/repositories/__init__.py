# Repository layer - Record store backends with Pydantic responses

from .base import BaseRepository
from .store import RecordStore, StoreSession
from .sql_store import SqlRecordStore
from .memory_store import MemoryRecordStore

__all__ = [
    "BaseRepository",
    "RecordStore",
    "StoreSession",
    "SqlRecordStore",
    "MemoryRecordStore",
]
