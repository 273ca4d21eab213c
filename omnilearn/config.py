from __future__ import annotations

import os
from pathlib import Path

DEFAULT_STORAGE_KEY = "omniLearnCourses"
DEFAULT_IMAGE_CACHE_TTL = 60 * 60


def env(name: str, default: str | None = None) -> str | None:
    val = os.environ.get(name)
    if val is None or val.strip() == "":
        return default
    return val


def data_dir() -> Path | None:
    """Directory for the durable course blob, or None for in-memory storage."""
    raw = env("OMNILEARN_DATA_DIR")
    return Path(raw).expanduser() if raw else None


def storage_key() -> str:
    return env("OMNILEARN_STORAGE_KEY", DEFAULT_STORAGE_KEY) or DEFAULT_STORAGE_KEY


def image_cache_ttl() -> int:
    raw = env("OMNILEARN_IMAGE_CACHE_TTL")
    if raw is None:
        return DEFAULT_IMAGE_CACHE_TTL
    try:
        return max(0, int(raw))
    except ValueError:
        return DEFAULT_IMAGE_CACHE_TTL


def port() -> int:
    return int(env("PORT", "8080") or "8080")
