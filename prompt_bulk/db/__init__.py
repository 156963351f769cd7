"""Database models.

Session management lives in :mod:`prompt_bulk.db.session`.
"""

from prompt_bulk.db.models import (
    GeneratedPrompt,
    PromptStatus,
    Template,
    VariablePreset,
)

__all__ = [
    "Template",
    "VariablePreset",
    "GeneratedPrompt",
    "PromptStatus",
]
