"""SQL record store strategy.

Persists templates, presets and generated prompts through SQLModel on an
async SQLAlchemy session.
"""

import logging
from typing import Any

from sqlalchemy import delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from prompt_bulk.db.models import GeneratedPrompt, PromptStatus, Template, VariablePreset, utcnow
from prompt_bulk.interfaces.store import BaseRecordStore, Page, StoreError

logger = logging.getLogger(__name__)


class SQLRecordStore(BaseRecordStore):
    """Record store backed by a SQL database.

    Each write commits immediately; the session is owned by the caller.

    Args:
        session: The async session to run queries on.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _commit(self, action: str) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Database error while trying to {action}: {e}", exc_info=True)
            await self._session.rollback()
            raise StoreError(f"Failed to {action}") from e

    async def _update(self, model: type, record_id: str, updates: dict[str, Any]) -> Any:
        record = await self._session.get(model, record_id)
        if record is None:
            return None
        for key, value in updates.items():
            setattr(record, key, value)
        record.updated_at = utcnow()
        await self._commit(f"update {model.__tablename__} {record_id}")
        await self._session.refresh(record)
        return record

    async def _delete(self, model: type, record_id: str) -> bool:
        record = await self._session.get(model, record_id)
        if record is None:
            return False
        await self._session.delete(record)
        await self._commit(f"delete {model.__tablename__} {record_id}")
        return True

    # Templates

    async def get_template(self, template_id: str) -> Template | None:
        return await self._session.get(Template, template_id)

    async def list_templates(self) -> list[Template]:
        result = await self._session.execute(select(Template).order_by(Template.created_at.desc()))
        return list(result.scalars().all())

    async def insert_template(self, template: Template) -> Template:
        self._session.add(template)
        await self._commit("insert template")
        await self._session.refresh(template)
        return template

    async def update_template(self, template_id: str, updates: dict[str, Any]) -> Template | None:
        return await self._update(Template, template_id, updates)

    async def delete_template(self, template_id: str) -> bool:
        return await self._delete(Template, template_id)

    # Presets

    async def get_preset(self, preset_id: str) -> VariablePreset | None:
        return await self._session.get(VariablePreset, preset_id)

    async def list_presets(self) -> list[VariablePreset]:
        result = await self._session.execute(
            select(VariablePreset).order_by(VariablePreset.created_at.desc())
        )
        return list(result.scalars().all())

    async def insert_preset(self, preset: VariablePreset) -> VariablePreset:
        self._session.add(preset)
        await self._commit("insert variable preset")
        await self._session.refresh(preset)
        return preset

    async def update_preset(self, preset_id: str, updates: dict[str, Any]) -> VariablePreset | None:
        return await self._update(VariablePreset, preset_id, updates)

    async def delete_preset(self, preset_id: str) -> bool:
        return await self._delete(VariablePreset, preset_id)

    # Generated prompts

    async def insert_prompts(self, prompts: list[GeneratedPrompt]) -> None:
        self._session.add_all(prompts)
        await self._commit(f"insert {len(prompts)} generated prompts")
        logger.info(f"Stored {len(prompts)} generated prompts")

    async def list_prompts(self, offset: int = 0, limit: int | None = None) -> Page:
        count_result = await self._session.execute(select(func.count()).select_from(GeneratedPrompt))
        total = count_result.scalar_one() or 0

        query = (
            select(GeneratedPrompt)
            .order_by(GeneratedPrompt.generated_at.desc(), GeneratedPrompt.sequence.asc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self._session.execute(query)
        return Page(items=list(result.scalars().all()), total=total)

    async def get_prompt(self, prompt_id: str) -> GeneratedPrompt | None:
        return await self._session.get(GeneratedPrompt, prompt_id)

    async def update_prompt_status(
        self,
        prompt_id: str,
        status: PromptStatus,
        result: str | None = None,
        error: str | None = None,
    ) -> GeneratedPrompt | None:
        prompt = await self._session.get(GeneratedPrompt, prompt_id)
        if prompt is None:
            return None
        prompt.status = status
        if result is not None:
            prompt.result = result
        if error is not None:
            prompt.error = error
        await self._commit(f"update status of prompt {prompt_id}")
        await self._session.refresh(prompt)
        return prompt

    async def delete_prompts(self, prompt_ids: list[str]) -> int:
        if not prompt_ids:
            return 0
        result = await self._session.execute(
            delete(GeneratedPrompt).where(GeneratedPrompt.id.in_(prompt_ids))
        )
        await self._commit(f"delete {len(prompt_ids)} generated prompts")
        return result.rowcount or 0

    async def delete_all_prompts(self) -> int:
        result = await self._session.execute(delete(GeneratedPrompt))
        await self._commit("delete all generated prompts")
        return result.rowcount or 0
