"""Application-wide settings and Gemini client configuration helpers."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TITLE_PROMPT = (
    "Generate a trendy, concise, and descriptive title for the following image, "
    "suitable for Adobe Stock. The title must be a single sentence, engaging, "
    "avoid trademarks or offensive content, and accurately reflect the main "
    "subject and mood."
)

DEFAULT_KEYWORD_PROMPT = (
    "Generate exactly 45 highly relevant, single-word keywords for the following "
    "image. Each keyword should be separated by a comma. Do not include any "
    "numbers, special characters, or phrases, only single words."
)


class Settings(BaseSettings):
    """Global application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    gemini_api_key: Optional[str] = Field(default=None)
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta"
    )
    gemini_model: str = Field(default="gemini-2.0-flash")
    # Declared for every inline image regardless of the uploaded file type
    gemini_inline_mime_type: str = Field(default="image/jpeg")
    gemini_request_timeout: Optional[float] = Field(default=None)
    title_prompt: str = Field(default=DEFAULT_TITLE_PROMPT)
    keyword_prompt: str = Field(default=DEFAULT_KEYWORD_PROMPT)
    keyword_limit: int = Field(default=45, ge=1)
    upload_allowed_mime_prefixes: tuple[str, ...] = Field(default=("image/",))
    upload_max_bytes: int = Field(default=10 * 1024 * 1024)
    session_max_count: int = Field(default=1000, ge=1)
    log_level: str = Field(default="INFO")
    cors_allow_origins: list[str] = Field(default=["*"])


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
