"""Export of generated prompts as JSON, CSV or plain text."""

import csv
import io
import json
from typing import Literal

from prompt_bulk.db.models import GeneratedPrompt, PromptStatus, as_utc

ExportFormat = Literal["json", "csv", "txt"]

EXPORT_FORMATS: tuple[str, ...] = ("json", "csv", "txt")

_CSV_HEADERS = ["ID", "Template Name", "Content", "Variables", "Status", "Generated At"]


def _export_json(prompts: list[GeneratedPrompt]) -> str:
    return json.dumps([p.to_export_dict() for p in prompts], indent=2, ensure_ascii=False)


def _export_csv(prompts: list[GeneratedPrompt]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(_CSV_HEADERS)
    for prompt in prompts:
        writer.writerow(
            [
                prompt.id,
                prompt.template_name,
                prompt.content,
                json.dumps(prompt.variables, ensure_ascii=False),
                PromptStatus(prompt.status).value,
                as_utc(prompt.generated_at).isoformat(),
            ]
        )
    return buffer.getvalue()


def _export_txt(prompts: list[GeneratedPrompt]) -> str:
    blocks = []
    for index, prompt in enumerate(prompts, start=1):
        blocks.append(
            f"--- Prompt {index} ---\n"
            f"Template: {prompt.template_name}\n"
            f"Status: {PromptStatus(prompt.status).value}\n"
            f"Variables: {json.dumps(prompt.variables, ensure_ascii=False)}\n"
            f"Content:\n{prompt.content}\n"
        )
    return "\n\n".join(blocks)


def export_prompts(prompts: list[GeneratedPrompt], fmt: str) -> tuple[str, str, str]:
    """Serialize prompts for download.

    Args:
        prompts: Generated prompts to export.
        fmt: One of ``json``, ``csv`` or ``txt``.

    Returns:
        Tuple of (body, content type, filename).

    Raises:
        ValueError: If the format is unknown.
    """
    match fmt:
        case "json":
            return _export_json(prompts), "application/json", "generated-prompts.json"
        case "csv":
            return _export_csv(prompts), "text/csv", "generated-prompts.csv"
        case "txt":
            return _export_txt(prompts), "text/plain", "generated-prompts.txt"
        case _:
            raise ValueError(
                f"Unknown export format: {fmt}. Valid options: {', '.join(EXPORT_FORMATS)}"
            )
