"""Variable preset API routes.

Handles CRUD operations for variable presets, plus the placeholder
browser and tag listing used when building presets.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from prompt_bulk.api.deps import Pagination, get_store
from prompt_bulk.api.schemas import (
    PlaceholderUsageResponse,
    VariablePresetCreate,
    VariablePresetDuplicate,
    VariablePresetListResponse,
    VariablePresetResponse,
    VariablePresetUpdate,
)
from prompt_bulk.db.models import VariablePreset
from prompt_bulk.interfaces.store import BaseRecordStore
from prompt_bulk.strategies.generation import extract_template_placeholders

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/variable-presets", tags=["variable-presets"])

_NOT_FOUND = "Variable preset not found"


@router.get("", response_model=VariablePresetListResponse)
async def list_presets(
    tag: str | None = Query(default=None),
    placeholder: str | None = Query(default=None),
    pagination: Pagination = Depends(),
    store: BaseRecordStore = Depends(get_store),
) -> VariablePresetListResponse:
    """List presets, optionally filtered by tag or bound placeholder."""
    presets = await store.list_presets()

    if tag:
        presets = [p for p in presets if tag in (p.tags or [])]

    if placeholder:
        presets = [p for p in presets if p.placeholder == placeholder]

    total = len(presets)
    return VariablePresetListResponse(
        presets=[VariablePresetResponse.model_validate(p) for p in pagination.slice(presets)],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
        total_pages=pagination.total_pages(total),
    )


@router.get("/placeholders/all", response_model=list[PlaceholderUsageResponse])
async def list_placeholders(
    store: BaseRecordStore = Depends(get_store),
) -> list[PlaceholderUsageResponse]:
    """List every placeholder used by any template."""
    usages = extract_template_placeholders(await store.list_templates())
    return [PlaceholderUsageResponse.model_validate(u) for u in usages]


@router.get("/tags/all", response_model=list[str])
async def list_tags(
    store: BaseRecordStore = Depends(get_store),
) -> list[str]:
    """List the distinct tags used by presets, sorted."""
    tags: set[str] = set()
    for preset in await store.list_presets():
        tags.update(preset.tags or [])
    return sorted(tags)


@router.get("/{preset_id}", response_model=VariablePresetResponse)
async def get_preset(
    preset_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> VariablePresetResponse:
    """Get a variable preset by id."""
    preset = await store.get_preset(preset_id)
    if preset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return VariablePresetResponse.model_validate(preset)


@router.post("", response_model=VariablePresetResponse, status_code=status.HTTP_201_CREATED)
async def create_preset(
    data: VariablePresetCreate,
    store: BaseRecordStore = Depends(get_store),
) -> VariablePresetResponse:
    """Create a variable preset."""
    preset = await store.insert_preset(
        VariablePreset(
            name=data.name.strip(),
            description=data.description.strip(),
            tags=list(data.tags),
            placeholder=data.placeholder.strip(),
            values=data.values,
        )
    )
    logger.info(f"Created variable preset {preset.id} for placeholder '{preset.placeholder}'")
    return VariablePresetResponse.model_validate(preset)


@router.put("/{preset_id}", response_model=VariablePresetResponse)
async def update_preset(
    preset_id: str,
    data: VariablePresetUpdate,
    store: BaseRecordStore = Depends(get_store),
) -> VariablePresetResponse:
    """Update a variable preset. Omitted fields are left unchanged."""
    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    for key in ("name", "description", "placeholder"):
        if key in updates:
            updates[key] = updates[key].strip()

    preset = await store.update_preset(preset_id, updates)
    if preset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)

    logger.info(f"Updated variable preset {preset_id}: {sorted(updates)}")
    return VariablePresetResponse.model_validate(preset)


@router.delete("/{preset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_preset(
    preset_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> None:
    """Delete a variable preset."""
    if not await store.delete_preset(preset_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    logger.info(f"Deleted variable preset {preset_id}")


@router.post(
    "/{preset_id}/duplicate",
    response_model=VariablePresetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_preset(
    preset_id: str,
    data: VariablePresetDuplicate | None = None,
    store: BaseRecordStore = Depends(get_store),
) -> VariablePresetResponse:
    """Copy a preset as ``"<name> (Copy)"``, optionally without its values."""
    original = await store.get_preset(preset_id)
    if original is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)

    include_values = data.include_values if data else True
    preset = await store.insert_preset(
        VariablePreset(
            name=f"{original.name} (Copy)",
            description=original.description,
            tags=list(original.tags or []),
            placeholder=original.placeholder,
            values=original.values if include_values else "",
        )
    )
    logger.info(f"Duplicated variable preset {preset_id} -> {preset.id}")
    return VariablePresetResponse.model_validate(preset)
