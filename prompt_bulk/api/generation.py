"""Prompt generation API routes.

Expands templates into prompts, stores the results, and manages the
stored prompts (listing, status updates, deletion, export).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from prompt_bulk.api.deps import Pagination, get_generator, get_store
from prompt_bulk.api.schemas import (
    DeletePromptsRequest,
    DeleteResponse,
    GeneratedPromptResponse,
    GenerationRequest,
    GenerationResponse,
    PromptStatusUpdate,
)
from prompt_bulk.interfaces.generation import BasePromptGenerator
from prompt_bulk.interfaces.store import BaseRecordStore
from prompt_bulk.strategies.generation import EXPORT_FORMATS, export_prompts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/generation", tags=["generation"])


@router.post("/generate", response_model=GenerationResponse, status_code=status.HTTP_201_CREATED)
async def generate_prompts(
    request: GenerationRequest,
    generator: BasePromptGenerator = Depends(get_generator),
    store: BaseRecordStore = Depends(get_store),
) -> GenerationResponse:
    """Expand the selected templates into every combination of variable values.

    The generated prompts are stored before they are returned. Nothing is
    stored when generation fails.

    Raises:
        ValidationError: Rendered as 400 by the application error handler.
        NotFoundError: Rendered as 404 by the application error handler.
    """
    result = await generator.generate(request.template_ids, request.to_source())
    await store.insert_prompts(result.prompts)

    logger.info(f"Generated {result.total_count} prompts successfully")
    return GenerationResponse(
        prompts=[GeneratedPromptResponse.model_validate(p) for p in result.prompts],
        total_count=result.total_count,
    )


@router.get("/prompts", response_model=GenerationResponse)
async def list_prompts(
    pagination: Pagination = Depends(),
    store: BaseRecordStore = Depends(get_store),
) -> GenerationResponse:
    """List stored prompts, newest first. ``totalCount`` counts every stored prompt."""
    page = await store.list_prompts(offset=pagination.offset, limit=pagination.page_size)
    return GenerationResponse(
        prompts=[GeneratedPromptResponse.model_validate(p) for p in page.items],
        total_count=page.total,
    )


@router.get("/prompts/{prompt_id}", response_model=GeneratedPromptResponse)
async def get_prompt(
    prompt_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> GeneratedPromptResponse:
    """Get a stored prompt by id, including any recorded result or error."""
    prompt = await store.get_prompt(prompt_id)
    if prompt is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prompt not found")
    return GeneratedPromptResponse.model_validate(prompt)


@router.delete("/prompts", response_model=DeleteResponse)
async def delete_prompts(
    request: DeletePromptsRequest,
    store: BaseRecordStore = Depends(get_store),
) -> DeleteResponse:
    """Delete several prompts by id. Unknown ids are ignored."""
    deleted = await store.delete_prompts(request.ids)
    return DeleteResponse(
        deleted_count=deleted,
        message=f"Deleted {deleted} of {len(request.ids)} prompts successfully",
    )


# Must be registered before /prompts/{prompt_id}
@router.delete("/prompts/all", response_model=DeleteResponse)
async def delete_all_prompts(
    store: BaseRecordStore = Depends(get_store),
) -> DeleteResponse:
    """Delete every stored prompt."""
    deleted = await store.delete_all_prompts()
    logger.info(f"Deleted all {deleted} generated prompts")
    return DeleteResponse(deleted_count=deleted, message=f"Deleted {deleted} prompts successfully")


@router.delete("/prompts/{prompt_id}", response_model=DeleteResponse)
async def delete_prompt(
    prompt_id: str,
    store: BaseRecordStore = Depends(get_store),
) -> DeleteResponse:
    """Delete a single prompt."""
    if not await store.delete_prompts([prompt_id]):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prompt not found")
    return DeleteResponse(deleted_count=1, message="Prompt deleted successfully")


@router.patch("/prompts/{prompt_id}/status", response_model=GeneratedPromptResponse)
async def update_prompt_status(
    prompt_id: str,
    update: PromptStatusUpdate,
    store: BaseRecordStore = Depends(get_store),
) -> GeneratedPromptResponse:
    """Record the execution status, result or error of a prompt."""
    prompt = await store.update_prompt_status(
        prompt_id,
        status=update.status,
        result=update.result,
        error=update.error,
    )
    if prompt is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prompt not found")

    logger.info(f"Prompt {prompt_id} status -> {update.status.value}")
    return GeneratedPromptResponse.model_validate(prompt)


@router.get("/export")
async def export_generated_prompts(
    format: str = Query(default="json", description="json, csv or txt"),
    store: BaseRecordStore = Depends(get_store),
) -> Response:
    """Download every stored prompt as JSON, CSV or plain text."""
    if format not in EXPORT_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Format must be one of: {', '.join(EXPORT_FORMATS)}",
        )

    page = await store.list_prompts()
    body, content_type, filename = export_prompts(page.items, format)
    return Response(
        content=body,
        media_type=content_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
