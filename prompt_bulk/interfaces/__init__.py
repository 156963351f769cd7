"""Abstract base classes for storage and generation strategies."""

from prompt_bulk.interfaces.generation import (
    BasePromptGenerator,
    GenerationError,
    GenerationResult,
    NotFoundError,
    ValidationError,
    VariableSource,
)
from prompt_bulk.interfaces.store import (
    BasePresetStore,
    BasePromptStore,
    BaseRecordStore,
    BaseTemplateStore,
    Page,
    StoreError,
)

__all__ = [
    "BasePromptGenerator",
    "GenerationError",
    "GenerationResult",
    "NotFoundError",
    "ValidationError",
    "VariableSource",
    "BaseTemplateStore",
    "BasePresetStore",
    "BasePromptStore",
    "BaseRecordStore",
    "Page",
    "StoreError",
]
