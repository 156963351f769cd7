"""Prompt generator strategy.

Expands templates into the cartesian product of their variable values:
loads templates, resolves presets or custom variables into value-lists,
checks every template has the values it needs, then enumerates and
substitutes each combination.
"""

import structlog

from prompt_bulk.db.models import GeneratedPrompt, PromptStatus, Template, utcnow
from prompt_bulk.interfaces.generation import (
    BasePromptGenerator,
    GenerationResult,
    NotFoundError,
    ValidationError,
    VariableSource,
)
from prompt_bulk.interfaces.store import BasePresetStore, BaseTemplateStore
from prompt_bulk.strategies.generation.combinations import count_combinations, generate_combinations
from prompt_bulk.strategies.generation.placeholders import required_variables
from prompt_bulk.strategies.generation.presets import PresetResolver
from prompt_bulk.strategies.generation.substitution import substitute

logger = structlog.get_logger(__name__)


class PromptGenerator(BasePromptGenerator):
    """Generates prompt records from templates and variable value-lists.

    Stores are injected so tests can pass an in-memory store. The generator
    never persists anything; callers hand the result to a prompt store.

    Generation is eager and runs on the calling thread. A request whose
    product is huge blocks until every record is built, so ``max_prompts``
    should be set for untrusted callers.

    Args:
        template_store: Store used to load templates.
        preset_store: Store used to load variable presets.
        max_prompts: Reject requests producing more prompts than this.
        warn_threshold: Log a warning above this many prompts.
    """

    def __init__(
        self,
        template_store: BaseTemplateStore,
        preset_store: BasePresetStore,
        max_prompts: int | None = None,
        warn_threshold: int | None = None,
    ) -> None:
        self._templates = template_store
        self._resolver = PresetResolver(preset_store)
        self._max_prompts = max_prompts
        self._warn_threshold = warn_threshold

    async def generate(
        self,
        template_ids: list[str],
        source: VariableSource,
    ) -> GenerationResult:
        """Expand templates into every combination of variable values.

        Template ids that don't resolve are skipped; only when none resolve
        is the request rejected. A missing preset, on the other hand, is
        always fatal since it is the only source of its placeholder's values.

        Args:
            template_ids: Ids of the templates to expand, in output order.
            source: Preset ids or custom variables supplying value-lists.

        Returns:
            GenerationResult with records in template order, then combination order.

        Raises:
            ValidationError: If no template ids are given, the variable source
                is invalid, a template lacks values, or the cap is exceeded.
            NotFoundError: If no template resolves or a preset is missing.
        """
        if not template_ids:
            raise ValidationError(
                "templateIds is required and must be a non-empty array",
                missing=["templateIds"],
            )

        logger.info(
            "generation_started",
            templates=len(template_ids),
            presets=len(source.preset_ids),
            custom=len(source.custom_variables),
        )

        templates = await self._load_templates(template_ids)
        value_lists = await self._resolver.resolve(source)

        plan: list[tuple[Template, list[str]]] = []
        for template in templates:
            names = required_variables(template)
            self._check_complete(template, names, value_lists)
            plan.append((template, names))

        total = sum(count_combinations(names, value_lists) for _, names in plan)
        self._check_limits(total)

        generated_at = utcnow()
        prompts: list[GeneratedPrompt] = []
        for template, names in plan:
            for assignment in generate_combinations(names, value_lists):
                prompts.append(
                    GeneratedPrompt(
                        template_id=template.id,
                        template_name=template.name,
                        content=substitute(template.content, assignment),
                        variables=assignment,
                        status=PromptStatus.PENDING,
                        generated_at=generated_at,
                        sequence=len(prompts),
                    )
                )

        logger.info("generation_completed", prompts=len(prompts), templates=len(templates))
        return GenerationResult(prompts=prompts, total_count=len(prompts))

    async def _load_templates(self, template_ids: list[str]) -> list[Template]:
        templates: list[Template] = []
        for template_id in template_ids:
            template = await self._templates.get_template(template_id)
            if template is None:
                logger.warning("template_skipped", template_id=template_id)
                continue
            templates.append(template)

        if not templates:
            raise NotFoundError("No valid templates found", ids=list(template_ids))
        return templates

    @staticmethod
    def _check_complete(
        template: Template,
        names: list[str],
        value_lists: dict[str, list[str]],
    ) -> None:
        missing = [name for name in names if not value_lists.get(name)]
        if missing:
            raise ValidationError(
                f'Template "{template.name}" requires variables that are not provided: '
                f"{', '.join(missing)}",
                missing=missing,
            )

    def _check_limits(self, total: int) -> None:
        if self._max_prompts is not None and total > self._max_prompts:
            raise ValidationError(
                f"Request would generate {total} prompts, above the limit of {self._max_prompts}"
            )
        if self._warn_threshold is not None and total > self._warn_threshold:
            logger.warning("large_generation_request", prompts=total, threshold=self._warn_threshold)
