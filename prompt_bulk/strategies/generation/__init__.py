"""Prompt generation strategies.

Implements placeholder extraction, preset resolution, cartesian expansion
and literal substitution of ``{{name}}`` templates.
"""

from prompt_bulk.strategies.generation.combinations import count_combinations, generate_combinations
from prompt_bulk.strategies.generation.export import EXPORT_FORMATS, export_prompts
from prompt_bulk.strategies.generation.orchestrator import PromptGenerator
from prompt_bulk.strategies.generation.placeholders import (
    PlaceholderUsage,
    extract_template_placeholders,
    extract_variables,
    required_variables,
)
from prompt_bulk.strategies.generation.presets import (
    PresetResolver,
    split_custom_values,
    split_preset_values,
)
from prompt_bulk.strategies.generation.substitution import substitute

__all__ = [
    "PromptGenerator",
    "PresetResolver",
    "PlaceholderUsage",
    "extract_variables",
    "extract_template_placeholders",
    "required_variables",
    "split_preset_values",
    "split_custom_values",
    "generate_combinations",
    "count_combinations",
    "substitute",
    "export_prompts",
    "EXPORT_FORMATS",
]
