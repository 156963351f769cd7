"""Unit tests for the SQL record store on a temporary SQLite database."""

import asyncio
import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from prompt_bulk.api.schemas import GeneratedPromptResponse
from prompt_bulk.db.models import GeneratedPrompt, PromptStatus
from prompt_bulk.interfaces.generation import VariableSource
from prompt_bulk.strategies.generation import PromptGenerator, export_prompts
from prompt_bulk.strategies.stores import InMemoryRecordStore, SQLRecordStore


@pytest.fixture
def database_url(tmp_path):
    """URL of a throwaway SQLite database."""
    return f"sqlite+aiosqlite:///{tmp_path / 'records.db'}"


def run_with_store(database_url, scenario):
    """Create the schema, run ``scenario(store)`` on one session, then dispose."""

    async def runner():
        engine = create_async_engine(database_url)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

            session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
            async with session_maker() as session:
                return await scenario(SQLRecordStore(session))
        finally:
            await engine.dispose()

    return asyncio.run(runner())


def _prompt(prompt_id: str, minute: int) -> GeneratedPrompt:
    return GeneratedPrompt(
        id=prompt_id,
        template_id="T1",
        template_name="Cats",
        content=f"prompt {prompt_id}",
        variables={"style": prompt_id},
        generated_at=datetime.datetime(2024, 5, 1, 12, minute, tzinfo=datetime.timezone.utc),
    )


class TestSQLRecordStore:
    """Test suite for SQLRecordStore."""

    def test_template_round_trip(self, database_url, make_template):
        """Test that JSON columns and timestamps survive storage."""

        async def scenario(store):
            await store.insert_template(
                make_template("T1", "A {{style}} cat", tags=["pets"], variables=["style"])
            )
            await store.insert_template(make_template("T2", "A dog"))

            template = await store.get_template("T1")
            assert template.variables == ["style"]
            assert template.tags == ["pets"]
            assert (await store.get_template("T2")).variables is None
            assert {t.id for t in await store.list_templates()} == {"T1", "T2"}

            updated = await store.update_template("T1", {"content": "A {{size}} cat", "variables": ["size"]})
            assert updated.variables == ["size"]
            assert await store.update_template("missing", {"name": "x"}) is None

            assert await store.delete_template("T2") is True
            assert await store.delete_template("T2") is False

        run_with_store(database_url, scenario)

    def test_preset_round_trip(self, database_url, make_preset):
        """Test preset insert, update and delete."""

        async def scenario(store):
            await store.insert_preset(make_preset("P1", "style", "fluffy;sleek"))
            updated = await store.update_preset("P1", {"values": "round"})
            assert updated.values == "round"
            assert [p.id for p in await store.list_presets()] == ["P1"]
            assert await store.delete_preset("P1") is True
            assert await store.get_preset("P1") is None

        run_with_store(database_url, scenario)

    def test_prompts(self, database_url):
        """Test prompt listing, status updates and deletion."""

        async def scenario(store):
            await store.insert_prompts([_prompt("old", 0), _prompt("mid", 1), _prompt("new", 2)])

            page = await store.list_prompts(offset=0, limit=2)
            assert [p.id for p in page.items] == ["new", "mid"]
            assert page.total == 3

            prompt = await store.update_prompt_status("mid", PromptStatus.COMPLETED, result="ok")
            assert prompt.status == PromptStatus.COMPLETED
            assert prompt.result == "ok"
            assert prompt.variables == {"style": "mid"}
            assert await store.update_prompt_status("missing", PromptStatus.FAILED) is None

            assert await store.delete_prompts(["old", "missing"]) == 1
            assert await store.delete_prompts([]) == 0
            assert await store.delete_all_prompts() == 2
            assert (await store.list_prompts()).total == 0

        run_with_store(database_url, scenario)

    def test_generated_batch_listed_in_generation_order(self, database_url, make_template):
        """Test that prompts sharing one timestamp come back in combination order."""

        async def generate_batch():
            templates = InMemoryRecordStore()
            await templates.insert_template(make_template("T1", "{{x}}"))
            generator = PromptGenerator(template_store=templates, preset_store=templates)
            source = VariableSource(custom_variables={"x": ["a", "b", "c", "d"]})
            return await generator.generate(["T1"], source)

        result = asyncio.run(generate_batch())
        assert len({p.generated_at for p in result.prompts}) == 1

        async def scenario(store):
            await store.insert_prompts(result.prompts)
            first_page = await store.list_prompts(offset=0, limit=2)
            second_page = await store.list_prompts(offset=2, limit=2)
            return [p.content for p in first_page.items + second_page.items]

        assert run_with_store(database_url, scenario) == ["a", "b", "c", "d"]

    def test_newer_batch_listed_first(self, database_url):
        """Test that batch order wins over position within a batch."""
        older = [_prompt("old-0", 0), _prompt("old-1", 0)]
        newer = [_prompt("new-0", 5), _prompt("new-1", 5)]
        for batch in (older, newer):
            for index, prompt in enumerate(batch):
                prompt.sequence = index

        async def scenario(store):
            await store.insert_prompts(newer + older)
            return [p.id for p in (await store.list_prompts()).items]

        assert run_with_store(database_url, scenario) == ["new-0", "new-1", "old-0", "old-1"]

    def test_timestamps_read_back_in_utc(self, database_url):
        """Test that responses and exports carry UTC offsets on SQLite."""

        async def insert(store):
            await store.insert_prompts([_prompt("p1", 0)])

        async def fetch(store):
            return await store.get_prompt("p1")

        # A second session reads the row back from the database
        run_with_store(database_url, insert)
        prompt = run_with_store(database_url, fetch)

        response = GeneratedPromptResponse.model_validate(prompt)
        assert response.generated_at == datetime.datetime(2024, 5, 1, 12, 0, tzinfo=datetime.timezone.utc)
        assert response.generated_at.utcoffset() == datetime.timedelta(0)
        assert prompt.to_export_dict()["generatedAt"] == "2024-05-01T12:00:00+00:00"
        body, _, _ = export_prompts([prompt], "csv")
        assert "2024-05-01T12:00:00+00:00" in body
