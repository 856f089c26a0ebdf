"""Post-processing for keyword text returned by Gemini."""
from __future__ import annotations

from typing import List

DEFAULT_KEYWORD_LIMIT = 45
KEYWORD_SEPARATOR = ", "


def split_keywords(text: str, *, limit: int = DEFAULT_KEYWORD_LIMIT) -> List[str]:
    """Return at most ``limit`` single-word keywords from comma separated text."""

    keywords: List[str] = []
    if limit <= 0:
        return keywords
    for piece in text.split(","):
        keyword = piece.strip()
        # str.split() with no argument splits on any whitespace run
        if not keyword or len(keyword.split()) != 1:
            continue
        keywords.append(keyword)
        if len(keywords) >= limit:
            break
    return keywords


def normalize_keywords(text: str, *, limit: int = DEFAULT_KEYWORD_LIMIT) -> str:
    return KEYWORD_SEPARATOR.join(split_keywords(text, limit=limit))


__all__ = ["DEFAULT_KEYWORD_LIMIT", "normalize_keywords", "split_keywords"]
