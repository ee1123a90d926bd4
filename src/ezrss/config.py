"""Configuration loading for ezrss."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_HOST = "ezrss.it"
DEFAULT_USER_AGENT = "ezrss-python/0.1"


class SearchOptions(BaseModel):
    ssl: bool = False
    exact: bool = False
    max_concurrency: int = Field(default=20, ge=1)
    timeout_s: float | None = None
    host: str = DEFAULT_HOST
    user_agent: str = DEFAULT_USER_AGENT
    parse_errors: Literal["raise", "record"] = "raise"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_config(env_path: str | Path | None = None) -> SearchOptions:
    """Load search options from environment variables (.env file)."""
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    return SearchOptions(
        ssl=_env_bool("EZRSS_SSL", False),
        exact=_env_bool("EZRSS_EXACT", False),
        max_concurrency=os.getenv("EZRSS_MAX_CONCURRENCY", "20"),
        timeout_s=os.getenv("EZRSS_TIMEOUT_S") or None,
        host=os.getenv("EZRSS_HOST", DEFAULT_HOST),
        user_agent=os.getenv("EZRSS_USER_AGENT", DEFAULT_USER_AGENT),
        parse_errors=os.getenv("EZRSS_PARSE_ERRORS", "raise"),
    )
