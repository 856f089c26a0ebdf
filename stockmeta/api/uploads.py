"""Validation and chunked reading of uploaded image files."""
from __future__ import annotations

import mimetypes

from fastapi import HTTPException, UploadFile, status

from stockmeta.core.config import Settings
from stockmeta.services.images import EncodedImage, InvalidImageError

UPLOAD_READ_CHUNK_SIZE = 64 * 1024  # 64 KiB per chunk


async def read_uploaded_image(file: UploadFile, *, settings: Settings) -> EncodedImage:
    """Validate an upload and return it as an `EncodedImage`."""

    filename = file.filename or "uploaded-image"
    content_type = _resolve_content_type(file)
    if not content_type or not any(
        content_type.startswith(prefix)
        for prefix in settings.upload_allowed_mime_prefixes
    ):
        await file.close()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File {filename} is not a supported image format",
        )

    data = await _read_upload_bytes(file, limit=settings.upload_max_bytes)
    try:
        return EncodedImage.from_bytes(data, content_type)
    except InvalidImageError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File {filename} is empty",
        ) from exc


def _resolve_content_type(file: UploadFile) -> str | None:
    if file.content_type and file.content_type != "application/octet-stream":
        return file.content_type
    guessed_type, _ = mimetypes.guess_type(file.filename or "")
    return guessed_type or file.content_type


async def _read_upload_bytes(file: UploadFile, *, limit: int) -> bytes:
    total = 0
    chunks: list[bytes] = []
    try:
        while True:
            remaining = limit - total
            # Read one byte past the limit so oversized files are detected
            chunk = await file.read(min(UPLOAD_READ_CHUNK_SIZE, remaining + 1))
            if not chunk:
                break

            total += len(chunk)
            if total > limit:
                raise _payload_too_large(limit)
            chunks.append(chunk)
    finally:
        await file.close()

    return b"".join(chunks)


def _payload_too_large(limit: int) -> HTTPException:
    size_mb = limit / (1024 * 1024)
    if size_mb.is_integer():
        size_label = f"{int(size_mb)}MB"
    else:
        size_label = f"{size_mb:.1f}MB"
    return HTTPException(
        status_code=413,
        detail=f"Image must not exceed {size_label}",
    )
