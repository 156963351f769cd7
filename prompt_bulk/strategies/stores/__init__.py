"""Record store strategies."""

from prompt_bulk.strategies.stores.memory import InMemoryRecordStore
from prompt_bulk.strategies.stores.sql import SQLRecordStore

__all__ = [
    "InMemoryRecordStore",
    "SQLRecordStore",
]
