"""Tests for per-session upload/generate state."""
from __future__ import annotations

import asyncio

import pytest

pytestmark = pytest.mark.anyio("asyncio")

from stockmeta.schemas.generation import GenerationResult
from stockmeta.services.generation import MISSING_IMAGE_MESSAGE
from stockmeta.services.images import EncodedImage
from stockmeta.services.sessions import (
    GenerationInProgressError,
    GenerationSession,
    SessionNotFoundError,
    SessionStore,
)

FIRST = EncodedImage.from_bytes(b"first", "image/png")
SECOND = EncodedImage.from_bytes(b"second", "image/jpeg")


class _StubWorkflow:
    def __init__(self, result: GenerationResult) -> None:
        self.result = result
        self.images: list[EncodedImage | None] = []

    async def generate(self, image: EncodedImage | None) -> GenerationResult:
        self.images.append(image)
        return self.result


class _BlockingWorkflow:
    def __init__(self) -> None:
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, image: EncodedImage | None) -> GenerationResult:
        self.started.set()
        await self.release.wait()
        return GenerationResult(title="late title", keywords="late")


async def test_new_upload_clears_previous_results() -> None:
    session = GenerationSession("s1")
    session.select_image(FIRST)
    await session.generate(_StubWorkflow(GenerationResult(title="Sunset", keywords="sun, sea")))
    assert session.title == "Sunset"

    state = session.select_image(SECOND)

    assert state.title == ""
    assert state.keywords == ""
    assert state.error is None
    assert state.image == SECOND.to_data_uri()


async def test_generate_without_image_sets_error_only() -> None:
    workflow = _StubWorkflow(GenerationResult(title="unused"))
    session = GenerationSession("s1")

    state = await session.generate(workflow)

    assert state.error == MISSING_IMAGE_MESSAGE
    assert state.status == "idle"
    assert workflow.images == []


async def test_generate_clears_previous_error() -> None:
    session = GenerationSession("s1")
    session.select_image(FIRST)
    session.error = "API Error: boom. Please check your API Key and network."

    state = await session.generate(_StubWorkflow(GenerationResult(title="T", keywords="k")))

    assert state.error is None
    assert state.title == "T"


async def test_reentrant_generate_is_rejected() -> None:
    workflow = _BlockingWorkflow()
    session = GenerationSession("s1")
    session.select_image(FIRST)

    task = asyncio.create_task(session.generate(workflow))
    await workflow.started.wait()
    assert session.snapshot().status == "generating"

    with pytest.raises(GenerationInProgressError):
        await session.generate(workflow)

    workflow.release.set()
    state = await task
    assert state.status == "idle"
    assert state.title == "late title"


async def test_result_for_replaced_image_is_discarded() -> None:
    workflow = _BlockingWorkflow()
    session = GenerationSession("s1")
    session.select_image(FIRST)

    task = asyncio.create_task(session.generate(workflow))
    await workflow.started.wait()
    session.select_image(SECOND)
    workflow.release.set()
    state = await task

    assert state.title == ""
    assert state.keywords == ""


async def test_store_evicts_oldest_and_reports_unknown() -> None:
    store = SessionStore(max_count=2)
    first = store.create()
    second = store.create()
    store.get(first.session_id)
    third = store.create()

    assert len(store) == 2
    assert store.get(first.session_id) is first
    assert store.get(third.session_id) is third
    with pytest.raises(SessionNotFoundError):
        store.get(second.session_id)

    store.discard(first.session_id)
    with pytest.raises(SessionNotFoundError):
        store.get(first.session_id)


async def test_only_upload_response_carries_image_data() -> None:
    session = GenerationSession("s1")

    uploaded = session.select_image(FIRST)
    generated = await session.generate(
        _StubWorkflow(GenerationResult(title="T", keywords="k"))
    )

    assert uploaded.image == FIRST.to_data_uri()
    assert generated.image is None
    assert generated.has_image is True
    assert session.snapshot().image is None
