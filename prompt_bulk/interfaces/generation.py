"""Prompt generation interfaces.

Defines the request/result types, the error taxonomy, and the abstract
base class for prompt generation strategies.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from prompt_bulk.db.models import GeneratedPrompt


@dataclass(frozen=True)
class VariableSource:
    """Where the value-lists for a generation request come from.

    Exactly one of the two fields is expected to be non-empty.

    Attributes:
        preset_ids: Ids of variable presets to resolve.
        custom_variables: Ad-hoc mapping from placeholder name to values.
    """

    preset_ids: list[str] = field(default_factory=list)
    custom_variables: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class GenerationResult:
    """Prompts produced by one generation request.

    Attributes:
        prompts: Generated records in template order, then combination order.
        total_count: Number of generated records.
    """

    prompts: list[GeneratedPrompt]
    total_count: int


class GenerationError(Exception):
    """Base exception for generation failures reported to the caller."""

    pass


class ValidationError(GenerationError):
    """Raised when a request is malformed or incomplete.

    Attributes:
        missing: The items (variable names, fields) that are missing or invalid.
    """

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        self.missing = list(missing or [])
        super().__init__(message)


class NotFoundError(GenerationError):
    """Raised when a referenced template or preset does not exist.

    Attributes:
        ids: The ids that could not be resolved.
    """

    def __init__(self, message: str, ids: list[str] | None = None) -> None:
        self.ids = list(ids or [])
        super().__init__(message)


class BasePromptGenerator(ABC):
    """Abstract base class for prompt generation strategies."""

    @abstractmethod
    async def generate(
        self,
        template_ids: list[str],
        source: VariableSource,
    ) -> GenerationResult:
        """Expand templates into every combination of variable values.

        Args:
            template_ids: Ids of the templates to expand.
            source: Preset ids or custom variables supplying value-lists.

        Returns:
            GenerationResult with every generated prompt.

        Raises:
            ValidationError: If the request is incomplete.
            NotFoundError: If no template or a preset cannot be found.
        """
