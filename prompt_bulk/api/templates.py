"""Template management API routes.

Handles CRUD operations for prompt templates. Placeholder names are
extracted from the content on create and re-extracted on every content
update.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from prompt_bulk.api.deps import Pagination, get_store
from prompt_bulk.api.schemas import (
    TemplateCreate,
    TemplateDuplicate,
    TemplateListResponse,
    TemplateResponse,
    TemplateUpdate,
)
from prompt_bulk.db.models import Template
from prompt_bulk.interfaces.store import BaseRecordStore
from prompt_bulk.strategies.generation import extract_variables, required_variables

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/templates", tags=["templates"])


async def _get_or_404(store: BaseRecordStore, template_id: str) -> Template:
    template = await store.get_template(template_id)
    if template is None:
        logger.warning(f"Template not found: {template_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found",
        )
    return template


def _require_text(**fields: str) -> None:
    blank = [key for key, value in fields.items() if not value]
    if blank:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{' and '.join(blank).capitalize()} must be non-empty strings",
        )


async def _require_unique_name(store: BaseRecordStore, name: str, template_id: str | None = None) -> None:
    existing = await store.list_templates()
    if any(t.name == name and t.id != template_id for t in existing):
        logger.warning(f"Template with name '{name}' already exists")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f'Template with name "{name}" already exists',
        )


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    category: str | None = Query(default=None),
    search: str | None = Query(default=None, description="Case-insensitive match on name, description or content"),
    pagination: Pagination = Depends(),
    store: BaseRecordStore = Depends(get_store),
) -> TemplateListResponse:
    """List templates, newest first, optionally filtered by category or search text."""
    templates = await store.list_templates()

    if category:
        templates = [t for t in templates if t.category == category]

    if search:
        needle = search.lower()
        templates = [
            t
            for t in templates
            if needle in t.name.lower()
            or needle in t.description.lower()
            or needle in t.content.lower()
        ]

    total = len(templates)
    return TemplateListResponse(
        templates=[TemplateResponse.model_validate(t) for t in pagination.slice(templates)],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
        total_pages=pagination.total_pages(total),
    )


@router.get("/categories", response_model=dict[str, int])
async def template_categories(
    store: BaseRecordStore = Depends(get_store),
) -> dict[str, int]:
    """Count templates per category."""
    categories: dict[str, int] = {}
    for template in await store.list_templates():
        category = template.category or "general"
        categories[category] = categories.get(category, 0) + 1
    return categories


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> TemplateResponse:
    """Get a template by id."""
    return TemplateResponse.model_validate(await _get_or_404(store, template_id))


@router.get("/{template_id}/variables", response_model=list[str])
async def get_template_variables(
    template_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> list[str]:
    """Get the placeholder names a template requires."""
    return required_variables(await _get_or_404(store, template_id))


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    data: TemplateCreate,
    store: BaseRecordStore = Depends(get_store),
) -> TemplateResponse:
    """Create a template.

    Raises:
        HTTPException: 409 if a template with the same name exists.
    """
    name = data.name.strip()
    content = data.content.strip()
    _require_text(name=name, content=content)
    await _require_unique_name(store, name)

    template = await store.insert_template(
        Template(
            name=name,
            description=data.description.strip(),
            content=content,
            category=data.category.strip() or "general",
            tags=list(data.tags),
            variables=extract_variables(content),
        )
    )
    logger.info(f"Created template {template.id} with variables {template.variables}")
    return TemplateResponse.model_validate(template)


@router.post(
    "/{template_id}/duplicate",
    response_model=TemplateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_template(
    template_id: str,
    data: TemplateDuplicate | None = None,
    store: BaseRecordStore = Depends(get_store),
) -> TemplateResponse:
    """Copy a template under a new name (default ``"<name> (Copy)"``)."""
    original = await _get_or_404(store, template_id)

    template = await store.insert_template(
        Template(
            name=(data.name if data else None) or f"{original.name} (Copy)",
            description=original.description,
            content=original.content,
            category=original.category,
            tags=list(original.tags or []),
            variables=list(required_variables(original)),
        )
    )
    logger.info(f"Duplicated template {template_id} -> {template.id}")
    return TemplateResponse.model_validate(template)


@router.put("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: str,
    data: TemplateUpdate,
    store: BaseRecordStore = Depends(get_store),
) -> TemplateResponse:
    """Update a template. Changing the content re-extracts its variables.

    Raises:
        HTTPException: 400 for a blank name or content, 409 if the new name
            belongs to another template.
    """
    await _get_or_404(store, template_id)

    updates = {
        key: value.strip() if isinstance(value, str) else value
        for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items()
    }
    _require_text(**{key: updates[key] for key in ("name", "content") if key in updates})
    if "name" in updates:
        await _require_unique_name(store, updates["name"], template_id)
    if "content" in updates:
        updates["variables"] = extract_variables(updates["content"])

    template = await store.update_template(template_id, updates)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found",
        )

    logger.info(f"Updated template {template_id}: {sorted(updates)}")
    return TemplateResponse.model_validate(template)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> None:
    """Delete a template."""
    if not await store.delete_template(template_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found",
        )
    logger.info(f"Deleted template {template_id}")
