"""Helpers for calling the Gemini ``generateContent`` REST endpoint."""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from stockmeta.core.config import Settings
from stockmeta.services.images import EncodedImage

logger = logging.getLogger(__name__)

NO_CONTENT_MESSAGE = "No content received from API."
MISSING_CREDENTIAL_MESSAGE = (
    "API Key is not configured. Please set GEMINI_API_KEY in your environment "
    "variables."
)


class GeminiError(RuntimeError):
    """Base class for failures while talking to Gemini."""


class GeminiConfigurationError(GeminiError):
    """Raised when the Gemini credential is not configured."""


class GeminiTransportError(GeminiError):
    """Raised on network failures or undecodable responses."""


class GeminiServiceError(GeminiError):
    """Raised when Gemini reports an error or returns no usable candidate."""


class GeminiClient:
    """Send one prompt plus one inline image and return the generated text."""

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        if not settings.gemini_api_key:
            raise GeminiConfigurationError(MISSING_CREDENTIAL_MESSAGE)
        self._http = http
        self._settings = settings

    @property
    def endpoint(self) -> str:
        base_url = self._settings.gemini_base_url.rstrip("/")
        return f"{base_url}/models/{self._settings.gemini_model}:generateContent"

    def build_payload(self, prompt: str, image: EncodedImage) -> dict[str, Any]:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": prompt},
                        {
                            "inlineData": {
                                "mimeType": self._settings.gemini_inline_mime_type,
                                "data": image.payload,
                            }
                        },
                    ],
                }
            ]
        }

    async def generate_text(self, prompt: str, image: EncodedImage) -> str:
        try:
            response = await self._http.post(
                self.endpoint,
                params={"key": self._settings.gemini_api_key},
                json=self.build_payload(prompt, image),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GeminiTransportError(str(exc) or exc.__class__.__name__) from exc

        try:
            result = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise GeminiTransportError(
                f"Undecodable response (HTTP {response.status_code})"
            ) from exc

        logger.debug(
            "Gemini responded",
            extra={
                "model": self._settings.gemini_model,
                "status_code": response.status_code,
            },
        )
        return extract_text(result)


def extract_text(result: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` or raise ``GeminiServiceError``."""

    if not isinstance(result, dict):
        raise GeminiServiceError(NO_CONTENT_MESSAGE)

    try:
        text = result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        text = None

    if isinstance(text, str):
        return text

    error = result.get("error")
    if isinstance(error, dict) and error.get("message"):
        raise GeminiServiceError(str(error["message"]))
    raise GeminiServiceError(NO_CONTENT_MESSAGE)


@asynccontextmanager
async def async_gemini_client(
    settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
) -> AsyncIterator[GeminiClient]:
    """Yield a `GeminiClient` configured from settings and ensure cleanup."""

    # None disables httpx's 5s default; no timeout unless configured
    http = httpx.AsyncClient(
        transport=transport, timeout=settings.gemini_request_timeout
    )
    try:
        yield GeminiClient(http, settings)
    finally:
        await http.aclose()
