"""Unit tests for the in-memory record store."""

import asyncio
import datetime

from prompt_bulk.db.models import GeneratedPrompt, PromptStatus


def _prompt(prompt_id: str, minute: int) -> GeneratedPrompt:
    return GeneratedPrompt(
        id=prompt_id,
        template_id="T1",
        template_name="Cats",
        content=f"prompt {prompt_id}",
        variables={},
        generated_at=datetime.datetime(2024, 5, 1, 12, minute, tzinfo=datetime.timezone.utc),
    )


# =============================================================================
# Template and Preset Tests
# =============================================================================


class TestInMemoryRecords:
    """Test suite for template and preset records."""

    def test_template_crud(self, store, make_template):
        """Test insert, get, update and delete of a template."""

        async def run_test():
            template = await store.insert_template(make_template("T1", "A {{x}}"))
            before = template.updated_at

            updated = await store.update_template("T1", {"name": "Renamed"})
            assert updated.name == "Renamed"
            assert updated.updated_at >= before
            assert (await store.get_template("T1")).name == "Renamed"

            assert await store.delete_template("T1") is True
            assert await store.delete_template("T1") is False
            assert await store.get_template("T1") is None

        asyncio.run(run_test())

    def test_update_missing_returns_none(self, store):
        """Test that updating an unknown record is reported as None."""

        async def run_test():
            assert await store.update_template("nope", {"name": "x"}) is None
            assert await store.update_preset("nope", {"name": "x"}) is None

        asyncio.run(run_test())

    def test_preset_crud(self, store, make_preset):
        """Test insert, list and delete of presets."""

        async def run_test():
            await store.insert_preset(make_preset("P1", "style", "a;b"))
            await store.insert_preset(make_preset("P2", "city", "x"))
            assert {p.id for p in await store.list_presets()} == {"P1", "P2"}
            assert await store.delete_preset("P1") is True
            assert [p.id for p in await store.list_presets()] == ["P2"]

        asyncio.run(run_test())


# =============================================================================
# Generated Prompt Tests
# =============================================================================


class TestInMemoryPrompts:
    """Test suite for generated prompt records."""

    def test_list_newest_first_with_pagination(self, store):
        """Test ordering, offset and limit of the prompt listing."""

        async def run_test():
            await store.insert_prompts([_prompt("old", 0), _prompt("mid", 1), _prompt("new", 2)])

            page = await store.list_prompts()
            assert [p.id for p in page.items] == ["new", "mid", "old"]
            assert page.total == 3

            page = await store.list_prompts(offset=1, limit=1)
            assert [p.id for p in page.items] == ["mid"]
            assert page.total == 3

        asyncio.run(run_test())

    def test_batch_keeps_generation_order(self, store):
        """Test that prompts sharing a timestamp keep their insertion order."""

        async def run_test():
            await store.insert_prompts([_prompt("a", 0), _prompt("b", 0), _prompt("c", 0)])
            return await store.list_prompts()

        assert [p.id for p in asyncio.run(run_test()).items] == ["a", "b", "c"]

    def test_batch_sorted_by_sequence(self, store):
        """Test that position within a batch decides order, not insertion order."""
        batch = [_prompt("first", 0), _prompt("second", 0), _prompt("third", 0)]
        for index, prompt in enumerate(batch):
            prompt.sequence = index

        async def run_test():
            await store.insert_prompts(list(reversed(batch)))
            return await store.list_prompts()

        assert [p.id for p in asyncio.run(run_test()).items] == ["first", "second", "third"]

    def test_update_status(self, store):
        """Test status transitions keep earlier results."""

        async def run_test():
            await store.insert_prompts([_prompt("p1", 0)])
            await store.update_prompt_status("p1", PromptStatus.COMPLETED, result="done")
            prompt = await store.update_prompt_status("p1", PromptStatus.FAILED, error="boom")
            assert prompt.status == PromptStatus.FAILED
            assert prompt.result == "done"
            assert prompt.error == "boom"
            assert await store.update_prompt_status("nope", PromptStatus.FAILED) is None

        asyncio.run(run_test())

    def test_delete(self, store):
        """Test deleting selected and all prompts."""

        async def run_test():
            await store.insert_prompts([_prompt("a", 0), _prompt("b", 1), _prompt("c", 2)])
            assert await store.delete_prompts(["a", "missing"]) == 1
            assert await store.delete_all_prompts() == 2
            assert (await store.list_prompts()).total == 0

        asyncio.run(run_test())
