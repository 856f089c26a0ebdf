"""Schemas for the title/keyword generation workflow."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SessionStatus = Literal["idle", "generating"]


class GenerationResult(BaseModel):
    title: str = Field(default="", description="Generated stock-photo title")
    keywords: str = Field(
        default="", description="Comma separated single-word keywords"
    )
    error: str | None = Field(
        default=None, description="Human-readable message for the last failure"
    )


class SessionState(BaseModel):
    session_id: str
    status: SessionStatus = "idle"
    has_image: bool = False
    image: str | None = Field(
        default=None,
        description="Selected image as a data URI, only returned by the upload",
    )
    title: str = ""
    keywords: str = ""
    error: str | None = None
