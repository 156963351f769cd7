"""Concrete strategy implementations."""

from prompt_bulk.strategies.generation import PromptGenerator
from prompt_bulk.strategies.stores import (
    InMemoryRecordStore,
    SQLRecordStore,
)

__all__ = [
    "PromptGenerator",
    "InMemoryRecordStore",
    "SQLRecordStore",
]
