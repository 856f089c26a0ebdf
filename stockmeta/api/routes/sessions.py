"""Session endpoints backing the single-page UI."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from stockmeta.api.uploads import read_uploaded_image
from stockmeta.core.config import Settings, get_settings
from stockmeta.deps import get_generation_workflow, get_session_store
from stockmeta.schemas.generation import SessionState
from stockmeta.services.generation import ContentGenerationWorkflow
from stockmeta.services.sessions import (
    GenerationInProgressError,
    GenerationSession,
    SessionNotFoundError,
    SessionStore,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_session(store: SessionStore, session_id: str) -> GenerationSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post(
    "",
    response_model=SessionState,
    status_code=status.HTTP_201_CREATED,
    summary="Start a new upload/generate session",
)
async def create_session(
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    return store.create().snapshot()


@router.get("/{session_id}", response_model=SessionState)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    return _get_session(store, session_id).snapshot()


@router.put(
    "/{session_id}/image",
    response_model=SessionState,
    summary="Select an image, clearing the previous title and keywords",
)
async def select_image(
    session_id: str,
    image: UploadFile = File(..., description="Image to describe"),
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = _get_session(store, session_id)
    encoded = await read_uploaded_image(image, settings=settings)
    return session.select_image(encoded)


@router.post(
    "/{session_id}/generate",
    response_model=SessionState,
    summary="Generate a title and keywords for the selected image",
)
async def generate_for_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    workflow: ContentGenerationWorkflow = Depends(get_generation_workflow),
) -> SessionState:
    session = _get_session(store, session_id)
    try:
        return await session.generate(workflow)
    except GenerationInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    store.discard(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
