"""Workflow turning one image into a stock-photo title and keyword list."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Literal
from uuid import uuid4

import httpx

from stockmeta.core.config import Settings
from stockmeta.schemas.generation import GenerationResult
from stockmeta.services.gemini_client import (
    MISSING_CREDENTIAL_MESSAGE,
    GeminiClient,
    GeminiConfigurationError,
    GeminiError,
    async_gemini_client,
)
from stockmeta.services.images import EncodedImage
from stockmeta.services.keywords import normalize_keywords

logger = logging.getLogger(__name__)

TITLE_FALLBACK = "Could not generate title."
KEYWORDS_FALLBACK = "Could not generate keywords."
MISSING_IMAGE_MESSAGE = "Please upload an image first to generate content."

Kind = Literal["title", "keywords"]


def api_error_message(exc: BaseException) -> str:
    return f"API Error: {exc}. Please check your API Key and network."


@dataclass(slots=True)
class _Outcome:
    text: str | None = None
    error: str | None = None


class ContentGenerationWorkflow:
    """Ask Gemini for a title and for keywords describing one image."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def generate(self, image: EncodedImage | None) -> GenerationResult:
        if image is None:
            logger.info("Generation requested without an image")
            return GenerationResult(error=MISSING_IMAGE_MESSAGE)

        if not self._settings.gemini_api_key:
            logger.warning("Gemini credential missing; skipping generation")
            return GenerationResult(
                title=TITLE_FALLBACK,
                keywords=KEYWORDS_FALLBACK,
                error=MISSING_CREDENTIAL_MESSAGE,
            )

        request_id = uuid4().hex
        started_at = time.perf_counter()
        logger.info(
            "Starting title/keyword generation",
            extra={
                "request_id": request_id,
                "model": self._settings.gemini_model,
                "media_type": image.media_type,
            },
        )

        try:
            async with async_gemini_client(
                self._settings, transport=self._transport
            ) as client:
                title, keywords = await asyncio.gather(
                    self._generate_text(
                        client,
                        prompt=self._settings.title_prompt,
                        image=image,
                        kind="title",
                        request_id=request_id,
                    ),
                    self._generate_text(
                        client,
                        prompt=self._settings.keyword_prompt,
                        image=image,
                        kind="keywords",
                        request_id=request_id,
                        postprocess=self._normalize_keywords,
                    ),
                )
        except GeminiConfigurationError as exc:
            return GenerationResult(
                title=TITLE_FALLBACK, keywords=KEYWORDS_FALLBACK, error=str(exc)
            )

        result = GenerationResult(
            title=title.text if title.text is not None else TITLE_FALLBACK,
            keywords=(
                keywords.text if keywords.text is not None else KEYWORDS_FALLBACK
            ),
            # Request order is title then keywords; the later failure is reported
            error=keywords.error or title.error,
        )
        logger.info(
            "Title/keyword generation completed",
            extra={
                "request_id": request_id,
                "title_ok": title.error is None,
                "keywords_ok": keywords.error is None,
                "duration_ms": (time.perf_counter() - started_at) * 1000,
            },
        )
        return result

    def _normalize_keywords(self, text: str) -> str:
        return normalize_keywords(text, limit=self._settings.keyword_limit)

    async def _generate_text(
        self,
        client: GeminiClient,
        *,
        prompt: str,
        image: EncodedImage,
        kind: Kind,
        request_id: str,
        postprocess: Callable[[str], str] | None = None,
    ) -> _Outcome:
        logger.debug(
            "Submitting %s request to Gemini",
            kind,
            extra={"request_id": request_id, "operation": kind},
        )
        try:
            text = await client.generate_text(prompt, image)
        except GeminiError as exc:
            logger.exception(
                "Gemini %s generation failed",
                kind,
                extra={"request_id": request_id, "operation": kind},
            )
            return _Outcome(error=api_error_message(exc))

        if not text:
            # Blank text falls back without an error message
            return _Outcome()
        if postprocess is not None:
            text = postprocess(text)
        return _Outcome(text=text)


__all__ = [
    "ContentGenerationWorkflow",
    "KEYWORDS_FALLBACK",
    "MISSING_CREDENTIAL_MESSAGE",
    "MISSING_IMAGE_MESSAGE",
    "TITLE_FALLBACK",
]
