"""Placeholder extraction for ``{{name}}`` template tokens."""

import re
from collections.abc import Iterable

from pydantic import BaseModel, Field

from prompt_bulk.db.models import Template

# Two open braces, anything but a closing brace, two close braces
PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


class PlaceholderUsage(BaseModel):
    """A placeholder name and the templates that reference it."""

    name: str
    used_in_templates: int = Field(description="Number of templates using the placeholder")
    template_ids: list[str]
    template_names: list[str]


def extract_variables(text: str) -> list[str]:
    """Return the distinct placeholder names referenced in *text*.

    Names are trimmed and returned in first-occurrence order. Names that
    are empty after trimming are ignored.

    Example::

        extract_variables("Hi {{name}}, you are {{name}} and {{ age }}")
        # => ["name", "age"]
    """
    if not text:
        return []

    seen: set[str] = set()
    names: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(text):
        name = match.group(1).strip()
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    return names


def required_variables(template: Template) -> list[str]:
    """Placeholder names a template needs values for.

    Uses the stored ``variables`` list when present, otherwise extracts
    them from the template content.
    """
    if template.variables is not None:
        return list(template.variables)
    return extract_variables(template.content)


def extract_template_placeholders(templates: Iterable[Template]) -> list[PlaceholderUsage]:
    """Collect every placeholder used across *templates*, sorted by name."""
    usage: dict[str, PlaceholderUsage] = {}
    for template in templates:
        for name in extract_variables(template.content):
            entry = usage.setdefault(
                name,
                PlaceholderUsage(name=name, used_in_templates=0, template_ids=[], template_names=[]),
            )
            entry.used_in_templates += 1
            entry.template_ids.append(template.id)
            entry.template_names.append(template.name)
    return [usage[name] for name in sorted(usage)]
