"""Per-browser transient state for the upload → generate → copy cycle."""
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Protocol
from uuid import uuid4

from stockmeta.schemas.generation import GenerationResult, SessionState, SessionStatus
from stockmeta.services.generation import MISSING_IMAGE_MESSAGE
from stockmeta.services.images import EncodedImage

logger = logging.getLogger(__name__)


class SessionNotFoundError(LookupError):
    """Raised when a session id is unknown or has been evicted."""


class GenerationInProgressError(RuntimeError):
    """Raised when generation is requested while one is still running."""


class Workflow(Protocol):
    async def generate(self, image: EncodedImage | None) -> GenerationResult: ...


class GenerationSession:
    """Selected image plus the latest title, keywords and error message."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self.image: EncodedImage | None = None
        self.title = ""
        self.keywords = ""
        self.error: str | None = None
        self.status: SessionStatus = "idle"

    def select_image(self, image: EncodedImage) -> SessionState:
        self.image = image
        self.title = ""
        self.keywords = ""
        self.error = None
        return self.snapshot(include_image=True)

    async def generate(self, workflow: Workflow) -> SessionState:
        if self.status == "generating":
            raise GenerationInProgressError("A generation is already in progress")

        image = self.image
        if image is None:
            self.error = MISSING_IMAGE_MESSAGE
            return self.snapshot()

        self.status = "generating"
        self.error = None
        try:
            result = await workflow.generate(image)
        finally:
            self.status = "idle"

        if self.image is not image:
            logger.info(
                "Discarding result for a replaced image",
                extra={"session_id": self.session_id},
            )
            return self.snapshot()

        self.title = result.title
        self.keywords = result.keywords
        self.error = result.error
        return self.snapshot()

    def snapshot(self, *, include_image: bool = False) -> SessionState:
        """Current state; the image data URI is only echoed when asked for."""

        return SessionState(
            session_id=self.session_id,
            status=self.status,
            has_image=self.image is not None,
            image=self.image.to_data_uri() if include_image and self.image else None,
            title=self.title,
            keywords=self.keywords,
            error=self.error,
        )


class SessionStore:
    """In-memory sessions, oldest evicted once ``max_count`` is reached."""

    def __init__(self, max_count: int) -> None:
        self._max_count = max(1, max_count)
        self._sessions: OrderedDict[str, GenerationSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> GenerationSession:
        while len(self._sessions) >= self._max_count:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted session", extra={"session_id": evicted})
        session = GenerationSession(uuid4().hex)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> GenerationSession:
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(f"Session {session_id} not found") from None
        self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)


__all__ = [
    "GenerationInProgressError",
    "GenerationSession",
    "SessionNotFoundError",
    "SessionStore",
]
