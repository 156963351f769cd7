"""Database models using SQLModel.

Defines the core records of the prompt bulk service:
- Template: Text with {{placeholder}} tokens
- VariablePreset: A placeholder bound to a semicolon-delimited value list
- GeneratedPrompt: One template expanded with one variable assignment
"""

import datetime
import enum
import uuid
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Text
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """Attach UTC to naive datetimes, which SQLite returns for timezone columns."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


class PromptStatus(str, enum.Enum):
    """Execution status of a generated prompt.

    Generated prompts start as PENDING. An external execution stage moves them:
    PENDING -> EXECUTING -> COMPLETED
                     |
                     v
                   FAILED
    """

    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


# =============================================================================
# Shared Models
# =============================================================================


class TemplateBase(SQLModel):
    """Base template fields."""

    name: str = Field(min_length=1, max_length=255, index=True)
    description: str = Field(default="", max_length=2048)
    content: str = Field(sa_type=Text)
    category: str = Field(default="general", max_length=100, index=True)
    tags: list[str] = Field(default_factory=list, sa_type=JSON)


class VariablePresetBase(SQLModel):
    """Base variable preset fields."""

    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=2048)
    tags: list[str] = Field(default_factory=list, sa_type=JSON)
    placeholder: str = Field(min_length=1, max_length=255, index=True)
    values: str = Field(sa_type=Text)


class GeneratedPromptBase(SQLModel):
    """Base generated prompt fields."""

    template_id: str = Field(max_length=64, index=True)
    template_name: str = Field(max_length=255)
    content: str = Field(sa_type=Text)
    variables: dict[str, str] = Field(default_factory=dict, sa_type=JSON)
    status: PromptStatus = Field(default=PromptStatus.PENDING)
    result: str | None = Field(default=None, sa_type=Text)
    error: str | None = Field(default=None, sa_type=Text)


# =============================================================================
# Database Models
# =============================================================================


class Template(TemplateBase, table=True):
    """A prompt template.

    ``variables`` caches the placeholder names extracted from ``content``
    and is recomputed whenever the content changes.
    """

    __tablename__ = "templates"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    variables: list[str] | None = Field(default=None, sa_type=JSON)
    created_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class VariablePreset(VariablePresetBase, table=True):
    """A reusable binding of one placeholder to a list of candidate values."""

    __tablename__ = "variable_presets"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    created_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class GeneratedPrompt(GeneratedPromptBase, table=True):
    """One template expanded with one variable assignment.

    Content is immutable after creation; status, result and error are
    updated by the execution stage.
    """

    __tablename__ = "generated_prompts"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    generated_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    # Position within the generated batch; breaks ties between equal timestamps
    sequence: int = Field(default=0)

    def to_export_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict using the public field names."""
        return {
            "id": self.id,
            "templateId": self.template_id,
            "templateName": self.template_name,
            "content": self.content,
            "variables": dict(self.variables),
            "status": PromptStatus(self.status).value,
            "generatedAt": as_utc(self.generated_at).isoformat(),
            "result": self.result,
            "error": self.error,
        }
