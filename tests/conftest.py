from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from stockmeta.core.config import DEFAULT_TITLE_PROMPT


@pytest.fixture
def anyio_backend() -> str:
    """Force anyio-based tests to run with asyncio backend only."""

    return "asyncio"


def candidate(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeGemini:
    """`httpx.MockTransport` answering title and keyword prompts separately.

    Each response may be a JSON-able dict, raw ``bytes`` or an exception
    instance to raise from the transport.
    """

    candidate = staticmethod(candidate)

    def __init__(self) -> None:
        self.title_response: Any = candidate("Golden hour over a quiet harbor.")
        self.keyword_response: Any = candidate("harbor, sunset, boats, calm, water")
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        prompt = body["contents"][0]["parts"][0]["text"]
        response = (
            self.title_response if prompt == DEFAULT_TITLE_PROMPT else self.keyword_response
        )
        if isinstance(response, Exception):
            raise response
        if isinstance(response, bytes):
            return httpx.Response(200, content=response)
        return httpx.Response(200, json=response)


@pytest.fixture
def fake_gemini() -> FakeGemini:
    return FakeGemini()
