"""In-memory record store strategy.

Keeps templates, presets and generated prompts in dicts. Used by the
``memory`` backend and by tests.
"""

import logging
from typing import Any

from prompt_bulk.db.models import GeneratedPrompt, PromptStatus, Template, VariablePreset, utcnow
from prompt_bulk.interfaces.store import BaseRecordStore, Page

logger = logging.getLogger(__name__)


class InMemoryRecordStore(BaseRecordStore):
    """Dict-backed record store.

    Records are kept in insertion order; list operations return newest first.
    """

    def __init__(self) -> None:
        self._templates: dict[str, Template] = {}
        self._presets: dict[str, VariablePreset] = {}
        self._prompts: dict[str, GeneratedPrompt] = {}

    @staticmethod
    def _apply(record: Any, updates: dict[str, Any]) -> None:
        for key, value in updates.items():
            setattr(record, key, value)
        record.updated_at = utcnow()

    # Templates

    async def get_template(self, template_id: str) -> Template | None:
        return self._templates.get(template_id)

    async def list_templates(self) -> list[Template]:
        return sorted(self._templates.values(), key=lambda t: t.created_at, reverse=True)

    async def insert_template(self, template: Template) -> Template:
        self._templates[template.id] = template
        logger.debug(f"Inserted template {template.id}")
        return template

    async def update_template(self, template_id: str, updates: dict[str, Any]) -> Template | None:
        template = self._templates.get(template_id)
        if template is None:
            return None
        self._apply(template, updates)
        return template

    async def delete_template(self, template_id: str) -> bool:
        return self._templates.pop(template_id, None) is not None

    # Presets

    async def get_preset(self, preset_id: str) -> VariablePreset | None:
        return self._presets.get(preset_id)

    async def list_presets(self) -> list[VariablePreset]:
        return sorted(self._presets.values(), key=lambda p: p.created_at, reverse=True)

    async def insert_preset(self, preset: VariablePreset) -> VariablePreset:
        self._presets[preset.id] = preset
        logger.debug(f"Inserted preset {preset.id}")
        return preset

    async def update_preset(self, preset_id: str, updates: dict[str, Any]) -> VariablePreset | None:
        preset = self._presets.get(preset_id)
        if preset is None:
            return None
        self._apply(preset, updates)
        return preset

    async def delete_preset(self, preset_id: str) -> bool:
        return self._presets.pop(preset_id, None) is not None

    # Generated prompts

    async def insert_prompts(self, prompts: list[GeneratedPrompt]) -> None:
        for prompt in prompts:
            self._prompts[prompt.id] = prompt
        logger.debug(f"Inserted {len(prompts)} generated prompts")

    async def list_prompts(self, offset: int = 0, limit: int | None = None) -> Page:
        # Newest batch first; within a batch, generation order
        prompts = sorted(self._prompts.values(), key=lambda p: p.sequence)
        prompts.sort(key=lambda p: p.generated_at, reverse=True)
        end = None if limit is None else offset + limit
        return Page(items=prompts[offset:end], total=len(prompts))

    async def get_prompt(self, prompt_id: str) -> GeneratedPrompt | None:
        return self._prompts.get(prompt_id)

    async def update_prompt_status(
        self,
        prompt_id: str,
        status: PromptStatus,
        result: str | None = None,
        error: str | None = None,
    ) -> GeneratedPrompt | None:
        prompt = self._prompts.get(prompt_id)
        if prompt is None:
            return None
        prompt.status = status
        if result is not None:
            prompt.result = result
        if error is not None:
            prompt.error = error
        return prompt

    async def delete_prompts(self, prompt_ids: list[str]) -> int:
        return sum(1 for prompt_id in prompt_ids if self._prompts.pop(prompt_id, None) is not None)

    async def delete_all_prompts(self) -> int:
        count = len(self._prompts)
        self._prompts.clear()
        return count
