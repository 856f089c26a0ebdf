"""FastAPI dependency helpers."""
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from stockmeta.core.config import Settings, get_settings
from stockmeta.services.generation import ContentGenerationWorkflow
from stockmeta.services.sessions import SessionStore


@lru_cache
def _create_session_store(max_count: int) -> SessionStore:
    return SessionStore(max_count)


def get_session_store(settings: Settings = Depends(get_settings)) -> SessionStore:
    """Return the process-wide session store."""

    return _create_session_store(settings.session_max_count)


def get_generation_workflow(
    settings: Settings = Depends(get_settings),
) -> ContentGenerationWorkflow:
    """Provide a generation workflow bound to the current settings."""

    return ContentGenerationWorkflow(settings)
