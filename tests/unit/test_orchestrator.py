"""Unit tests for the prompt generator."""

import asyncio

import pytest
import structlog
from structlog.testing import capture_logs

from prompt_bulk.db.models import PromptStatus
from prompt_bulk.interfaces.generation import NotFoundError, ValidationError, VariableSource
from prompt_bulk.strategies.generation import PromptGenerator, orchestrator


class TestPromptGenerator:
    """Test suite for PromptGenerator."""

    @pytest.fixture
    def generator(self, store):
        """Create a generator reading templates and presets from one store."""
        return PromptGenerator(template_store=store, preset_store=store)

    @pytest.fixture
    def seeded(self, store, make_template, make_preset):
        """Seed two templates and a style preset."""

        async def seed():
            await store.insert_template(make_template("T1", "A {{style}} cat", name="Cats"))
            await store.insert_template(make_template("T2", "A dog", name="Dogs"))
            await store.insert_template(make_template("T3", "Weather in {{city}}", name="Weather"))
            await store.insert_preset(make_preset("P1", "style", "fluffy;sleek"))

        asyncio.run(seed())
        return store

    # =========================================================================
    # Expansion Tests
    # =========================================================================

    def test_expands_templates_in_order(self, generator, seeded):
        """Test template order, then combination order, with a variable-free template."""
        result = asyncio.run(generator.generate(["T1", "T2"], VariableSource(preset_ids=["P1"])))

        assert result.total_count == 3
        assert [p.content for p in result.prompts] == ["A fluffy cat", "A sleek cat", "A dog"]
        assert [p.template_id for p in result.prompts] == ["T1", "T1", "T2"]
        assert [p.template_name for p in result.prompts] == ["Cats", "Cats", "Dogs"]
        assert result.prompts[0].variables == {"style": "fluffy"}
        assert result.prompts[2].variables == {}

    def test_records_are_pending_with_unique_ids(self, generator, seeded):
        """Test that every record starts pending with its own id."""
        result = asyncio.run(generator.generate(["T1", "T2"], VariableSource(preset_ids=["P1"])))

        assert all(p.status == PromptStatus.PENDING for p in result.prompts)
        assert all(p.result is None and p.error is None for p in result.prompts)
        assert len({p.id for p in result.prompts}) == 3

    def test_custom_variables(self, generator, seeded):
        """Test expansion from ad-hoc custom values."""
        source = VariableSource(custom_variables={"city": ["Paris", "Rome"]})
        result = asyncio.run(generator.generate(["T3"], source))

        assert [p.content for p in result.prompts] == ["Weather in Paris", "Weather in Rome"]

    def test_does_not_persist(self, generator, seeded):
        """Test that generating leaves the prompt store untouched."""
        asyncio.run(generator.generate(["T1"], VariableSource(preset_ids=["P1"])))

        page = asyncio.run(seeded.list_prompts())
        assert page.total == 0

    # =========================================================================
    # Template Resolution Tests
    # =========================================================================

    def test_unknown_templates_skipped(self, generator, seeded):
        """Test that unknown template ids are dropped when others resolve."""
        result = asyncio.run(generator.generate(["nope", "T2"], VariableSource(preset_ids=["P1"])))

        assert [p.content for p in result.prompts] == ["A dog"]

    def test_all_templates_unknown(self, generator, seeded):
        """Test that no resolvable template is a not-found error."""
        with pytest.raises(NotFoundError, match="No valid templates found"):
            asyncio.run(generator.generate(["x", "y"], VariableSource(preset_ids=["P1"])))

    def test_empty_template_ids(self, generator, seeded):
        """Test that an empty template list is rejected."""
        with pytest.raises(ValidationError):
            asyncio.run(generator.generate([], VariableSource(preset_ids=["P1"])))

    # =========================================================================
    # Validation Tests
    # =========================================================================

    @pytest.mark.parametrize(
        "source",
        [
            VariableSource(preset_ids=["P1"]),
            VariableSource(custom_variables={"style": ["x"]}),
            VariableSource(custom_variables={"style": ["x"], "city": []}),
            VariableSource(custom_variables={"style": ["x"], "city": [" ", ""]}),
        ],
        ids=["preset", "absent", "empty-list", "blank-values"],
    )
    def test_missing_variable_names_template_and_variable(self, generator, seeded, source):
        """Test that a template lacking values fails the whole request with no records."""
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(generator.generate(["T1", "T3"], source))

        assert exc_info.value.missing == ["city"]
        assert "Weather" in str(exc_info.value)
        assert "city" in str(exc_info.value)
        assert asyncio.run(seeded.list_prompts()).total == 0

    def test_missing_preset(self, generator, seeded):
        """Test that an unknown preset id fails even when templates resolve."""
        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(generator.generate(["T1"], VariableSource(preset_ids=["P1", "P9"])))

        assert exc_info.value.ids == ["P9"]

    def test_stored_variables_used(self, store, generator, make_template):
        """Test that only the stored variables are substituted."""

        async def run_test():
            await store.insert_template(make_template("T9", "{{a}} {{b}}", variables=["a"]))
            return await generator.generate(["T9"], VariableSource(custom_variables={"a": ["1"]}))

        result = asyncio.run(run_test())
        assert [p.content for p in result.prompts] == ["1 {{b}}"]

    # =========================================================================
    # Limit Tests
    # =========================================================================

    def test_max_prompts_enforced(self, store, seeded):
        """Test that requests above the cap are rejected before building records."""
        generator = PromptGenerator(template_store=store, preset_store=store, max_prompts=2)
        source = VariableSource(custom_variables={"style": ["a", "b", "c"]})

        with pytest.raises(ValidationError, match="above the limit of 2"):
            asyncio.run(generator.generate(["T1"], source))

    def test_at_cap_allowed(self, store, seeded):
        """Test that a request exactly at the cap succeeds."""
        generator = PromptGenerator(template_store=store, preset_store=store, max_prompts=3)
        result = asyncio.run(generator.generate(["T1", "T2"], VariableSource(preset_ids=["P1"])))

        assert result.total_count == 3

    # =========================================================================
    # Logging Tests
    # =========================================================================

    def test_emits_structured_events(self, store, seeded, monkeypatch):
        """Test skipped templates, large requests and completion are logged as events."""
        generator = PromptGenerator(template_store=store, preset_store=store, warn_threshold=2)

        with capture_logs() as events:
            # Fresh proxy so an earlier cached logger doesn't bypass the capture
            monkeypatch.setattr(orchestrator, "logger", structlog.get_logger(orchestrator.__name__))
            asyncio.run(generator.generate(["nope", "T1", "T2"], VariableSource(preset_ids=["P1"])))

        by_name = {event["event"]: event for event in events}
        assert by_name["template_skipped"]["template_id"] == "nope"
        assert by_name["template_skipped"]["log_level"] == "warning"
        assert by_name["large_generation_request"]["prompts"] == 3
        assert by_name["generation_completed"]["prompts"] == 3
        assert by_name["generation_completed"]["templates"] == 2
