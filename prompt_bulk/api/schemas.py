"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization. Fields are
snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from prompt_bulk.db.models import PromptStatus, as_utc
from prompt_bulk.interfaces.generation import VariableSource
from prompt_bulk.strategies.generation import split_custom_values

# Timestamps always leave the API in UTC, whatever the backend returns
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Template Schemas
# =============================================================================


class TemplateCreate(CamelModel):
    """Request schema for creating a template."""

    name: str = Field(min_length=1, max_length=255, description="Template name")
    description: str = Field(default="", max_length=2048)
    content: str = Field(min_length=1, description="Text with {{placeholder}} tokens")
    category: str = Field(default="general", max_length=100)
    tags: list[str] = Field(default_factory=list)


class TemplateUpdate(CamelModel):
    """Request schema for updating a template. Omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2048)
    content: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, max_length=100)
    tags: list[str] | None = None


class TemplateDuplicate(CamelModel):
    """Request schema for duplicating a template."""

    name: str | None = Field(default=None, description="Name of the copy")


class TemplateResponse(CamelModel):
    """Response schema for a template."""

    id: str
    name: str
    description: str
    content: str
    variables: list[str] | None
    category: str
    tags: list[str]
    created_at: UtcDatetime
    updated_at: UtcDatetime


class TemplateListResponse(CamelModel):
    """Response for listing templates."""

    templates: list[TemplateResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# =============================================================================
# Variable Preset Schemas
# =============================================================================


class VariablePresetCreate(CamelModel):
    """Request schema for creating a variable preset."""

    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=2048)
    tags: list[str] = Field(default_factory=list)
    placeholder: str = Field(min_length=1, max_length=255, description="Template placeholder name")
    values: str = Field(min_length=1, description="Semicolon-separated values")


class VariablePresetUpdate(CamelModel):
    """Request schema for updating a variable preset. Omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2048)
    tags: list[str] | None = None
    placeholder: str | None = Field(default=None, min_length=1, max_length=255)
    values: str | None = Field(default=None, min_length=1)


class VariablePresetDuplicate(CamelModel):
    """Request schema for duplicating a variable preset."""

    include_values: bool = Field(default=True, description="Copy the value list as well")


class VariablePresetResponse(CamelModel):
    """Response schema for a variable preset."""

    id: str
    name: str
    description: str
    tags: list[str]
    placeholder: str
    values: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


class VariablePresetListResponse(CamelModel):
    """Response for listing variable presets."""

    presets: list[VariablePresetResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class PlaceholderUsageResponse(CamelModel):
    """A placeholder and the templates that reference it."""

    name: str
    used_in_templates: int
    template_ids: list[str]
    template_names: list[str]


# =============================================================================
# Generation Schemas
# =============================================================================


class GenerationRequest(CamelModel):
    """Request to expand templates into prompts.

    Exactly one of ``variable_preset_ids`` or ``custom_variables`` must be
    supplied. Custom values may be given as a list or as one
    comma-separated string.
    """

    template_ids: list[str] = Field(default_factory=list)
    variable_preset_ids: list[str] | None = None
    custom_variables: dict[str, list[str] | str] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "templateIds": ["5b1f0c2e-4c61-4f5e-9a43-0d5c2b1e7a10"],
                "customVariables": {"style": ["fluffy", "sleek"], "animal": "cat, dog"},
            }
        }
    )

    def to_source(self) -> VariableSource:
        """Convert the request's variable fields into a VariableSource."""
        custom: dict[str, list[str]] = {}
        for name, values in (self.custom_variables or {}).items():
            custom[name] = split_custom_values(values) if isinstance(values, str) else list(values)
        return VariableSource(
            preset_ids=list(self.variable_preset_ids or []),
            custom_variables=custom,
        )


class GeneratedPromptResponse(CamelModel):
    """Response schema for a generated prompt."""

    id: str
    template_id: str
    template_name: str
    content: str
    variables: dict[str, str]
    status: PromptStatus
    generated_at: UtcDatetime
    result: str | None = None
    error: str | None = None


class GenerationResponse(CamelModel):
    """Response for a generation request or a prompt listing."""

    prompts: list[GeneratedPromptResponse]
    total_count: int


class PromptStatusUpdate(CamelModel):
    """Request to record the outcome of executing a generated prompt."""

    status: PromptStatus
    result: str | None = None
    error: str | None = None


class DeletePromptsRequest(CamelModel):
    """Request to delete generated prompts by id."""

    ids: list[str] = Field(min_length=1, description="Ids of the prompts to delete")


class DeleteResponse(CamelModel):
    """Response for delete operations."""

    deleted_count: int
    message: str


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")
