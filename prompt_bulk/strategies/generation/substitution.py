"""Literal substitution of ``{{name}}`` placeholders."""

import re
from collections.abc import Mapping


def substitute(text: str, assignment: Mapping[str, str]) -> str:
    """Replace every placeholder in *text* with its assigned value.

    ``{{ name }}`` may carry whitespace inside the braces. Names are escaped
    before building the matcher, so ``a.b`` only matches ``{{a.b}}``.
    Values are inserted verbatim and never re-scanned, so a value that
    itself looks like a placeholder stays as written::

        substitute("{{x}} and {{y}}", {"x": "{{y}}", "y": "Z"})
        # => "{{y}} and Z"

    Placeholders without an entry in *assignment* are left untouched.
    """
    if not assignment:
        return text

    names = sorted(assignment, key=len, reverse=True)
    pattern = re.compile(
        r"\{\{\s*(" + "|".join(re.escape(name) for name in names) + r")\s*\}\}"
    )
    # Single pass over the input; the callable keeps values literal
    return pattern.sub(lambda match: assignment[match.group(1)], text)
