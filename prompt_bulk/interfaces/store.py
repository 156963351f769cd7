"""Abstract base classes for record storage strategies.

The Strategy Pattern allows different backings (SQL database, in-memory
map) to be used interchangeably. The generation engine depends only on
these interfaces, never on a concrete backing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from prompt_bulk.db.models import GeneratedPrompt, PromptStatus, Template, VariablePreset


@dataclass(frozen=True)
class Page:
    """A page of records.

    Attributes:
        items: Records on this page.
        total: Total number of records matching the query.
    """

    items: list[Any]
    total: int


class StoreError(Exception):
    """Exception raised when a store operation fails."""

    pass


class BaseTemplateStore(ABC):
    """Storage for prompt templates keyed by id."""

    @abstractmethod
    async def get_template(self, template_id: str) -> Template | None:
        """Return the template with the given id, or None if it doesn't exist."""

    @abstractmethod
    async def list_templates(self) -> list[Template]:
        """Return all templates, newest first."""

    @abstractmethod
    async def insert_template(self, template: Template) -> Template:
        """Persist a new template and return it."""

    @abstractmethod
    async def update_template(self, template_id: str, updates: dict[str, Any]) -> Template | None:
        """Apply field updates to a template.

        Args:
            template_id: The template to update.
            updates: Mapping of field name to new value.

        Returns:
            The updated template, or None if it doesn't exist.
        """

    @abstractmethod
    async def delete_template(self, template_id: str) -> bool:
        """Delete a template. Returns True if something was deleted."""


class BasePresetStore(ABC):
    """Storage for variable presets keyed by id."""

    @abstractmethod
    async def get_preset(self, preset_id: str) -> VariablePreset | None:
        """Return the preset with the given id, or None if it doesn't exist."""

    @abstractmethod
    async def list_presets(self) -> list[VariablePreset]:
        """Return all presets, newest first."""

    @abstractmethod
    async def insert_preset(self, preset: VariablePreset) -> VariablePreset:
        """Persist a new preset and return it."""

    @abstractmethod
    async def update_preset(self, preset_id: str, updates: dict[str, Any]) -> VariablePreset | None:
        """Apply field updates to a preset. Returns None if it doesn't exist."""

    @abstractmethod
    async def delete_preset(self, preset_id: str) -> bool:
        """Delete a preset. Returns True if something was deleted."""


class BasePromptStore(ABC):
    """Sink and lookup for generated prompt records."""

    @abstractmethod
    async def insert_prompts(self, prompts: list[GeneratedPrompt]) -> None:
        """Append generated prompt records.

        Raises:
            StoreError: If the records could not be written.
        """

    @abstractmethod
    async def list_prompts(self, offset: int = 0, limit: int | None = None) -> Page:
        """Return generated prompts, newest first.

        Args:
            offset: Number of records to skip.
            limit: Maximum number of records to return. None returns all.
        """

    @abstractmethod
    async def get_prompt(self, prompt_id: str) -> GeneratedPrompt | None:
        """Return a generated prompt, or None if it doesn't exist."""

    @abstractmethod
    async def update_prompt_status(
        self,
        prompt_id: str,
        status: PromptStatus,
        result: str | None = None,
        error: str | None = None,
    ) -> GeneratedPrompt | None:
        """Update the execution status of a generated prompt.

        ``result`` and ``error`` keep their previous value when None.
        Returns None if the prompt doesn't exist.
        """

    @abstractmethod
    async def delete_prompts(self, prompt_ids: list[str]) -> int:
        """Delete the given prompts. Returns how many were deleted."""

    @abstractmethod
    async def delete_all_prompts(self) -> int:
        """Delete every generated prompt. Returns how many were deleted."""


class BaseRecordStore(BaseTemplateStore, BasePresetStore, BasePromptStore):
    """A store that holds templates, presets and generated prompts."""
