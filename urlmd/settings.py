"""Runtime configuration for urlmd.

Every value has a default, can be overridden from the environment through
:meth:`Settings.from_env`, and can be overridden again by keyword when
constructing :class:`Settings` directly (the CLI does this for its flags).
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

# Non-browser UA: sites answer it with plain, crawler-friendly markup
DEFAULT_USER_AGENT = "curl/7.68.0"

# Serves server-rendered HTML (with OG tags) for twitter.com / x.com posts
DEFAULT_TWITTER_MIRROR_HOST = "fxtwitter.com"

DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_METADATA_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_CAPTION_LANGUAGES: tuple[str, ...] = ("en",)

_ENV_PREFIX = "URLMD_"


class Settings(BaseModel):
    """Immutable configuration shared by one or more pipeline invocations."""

    model_config = {"frozen": True}

    user_agent: str = DEFAULT_USER_AGENT
    twitter_mirror_host: str = DEFAULT_TWITTER_MIRROR_HOST
    fetch_timeout: float = Field(default=DEFAULT_FETCH_TIMEOUT, gt=0)
    metadata_timeout: float = Field(default=DEFAULT_METADATA_TIMEOUT, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    caption_languages: tuple[str, ...] = DEFAULT_CAPTION_LANGUAGES
    min_readable_score: float = Field(default=0.0, ge=0)

    @field_validator("user_agent", "twitter_mirror_host", mode="before")
    @classmethod
    def strip_str(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("caption_languages", mode="before")
    @classmethod
    def split_languages(cls, v: Any) -> Any:
        if isinstance(v, str):
            return tuple(lang.strip() for lang in v.split(",") if lang.strip())
        return v

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from ``URLMD_*`` environment variables.

        Keyword *overrides* whose value is not ``None`` win over the
        environment.
        """
        values: dict[str, Any] = {}
        env_map = {
            "user_agent": "USER_AGENT",
            "twitter_mirror_host": "TWITTER_MIRROR",
            "fetch_timeout": "FETCH_TIMEOUT",
            "metadata_timeout": "METADATA_TIMEOUT",
            "max_retries": "MAX_RETRIES",
            "caption_languages": "CAPTION_LANGUAGES",
        }
        for field, suffix in env_map.items():
            raw = os.getenv(_ENV_PREFIX + suffix)
            if raw:
                values[field] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
