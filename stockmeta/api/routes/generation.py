"""Stateless one-shot title/keyword generation endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from stockmeta.api.uploads import read_uploaded_image
from stockmeta.core.config import Settings, get_settings
from stockmeta.deps import get_generation_workflow
from stockmeta.schemas.generation import GenerationResult
from stockmeta.services.generation import ContentGenerationWorkflow

router = APIRouter(tags=["generation"])


@router.post(
    "/generate",
    response_model=GenerationResult,
    summary="Generate a stock-photo title and keywords for one image",
)
async def generate_metadata(
    image: UploadFile = File(..., description="Image to describe"),
    settings: Settings = Depends(get_settings),
    workflow: ContentGenerationWorkflow = Depends(get_generation_workflow),
) -> GenerationResult:
    """Return the generated title and keywords.

    Generation failures are reported in ``error`` alongside the fallback
    placeholders rather than as HTTP errors.
    """

    encoded = await read_uploaded_image(image, settings=settings)
    return await workflow.generate(encoded)
