"""
Forward-only migration of persisted course records.

Records are stored without a version stamp, so every step runs on every load
and each step must be idempotent. Steps are listed in the order the schema
changed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from omnilearn.schemas import DEFAULT_COUNT, LessonImage, clamp_count

logger = logging.getLogger(__name__)

Record = dict[str, Any]


def _drop_legacy_images(record: Record) -> Record:
    """v1: images used to be stored as bare strings; keep only {url, sourceUrl, ...} objects."""
    raw = record.get("imageCache")
    kept: dict[str, Any] = {}
    if isinstance(raw, dict):
        for lesson, value in raw.items():
            image = _image_entry(value)
            if image is None:
                logger.debug("Dropping legacy image entry for lesson %r", lesson)
            else:
                kept[lesson] = image
    return {**record, "imageCache": kept}


def _image_entry(value: Any) -> Record | None:
    if not isinstance(value, dict):
        return None
    if not (_non_empty_str(value.get("url")) and _non_empty_str(value.get("sourceUrl"))):
        return None
    # Attribution is optional; older writers stored null for unknown fields.
    entry = {**value}
    for key in ("title", "author", "license"):
        if entry.get(key) is None:
            entry[key] = ""
    try:
        return LessonImage.model_validate(entry).model_dump()
    except ValidationError:
        return None


def _backfill_counts(record: Record) -> Record:
    """v2: subtopicCount/lessonCount were added; older courses were generated with 10 of each."""
    out = dict(record)
    for key in ("subtopicCount", "lessonCount"):
        value = _as_int(out.get(key))
        out[key] = DEFAULT_COUNT if not value else clamp_count(value)
    return out


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None


MIGRATIONS: tuple[tuple[int, Callable[[Record], Record]], ...] = (
    (1, _drop_legacy_images),
    (2, _backfill_counts),
)
SCHEMA_VERSION = MIGRATIONS[-1][0]


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def migrate_course(record: Record) -> Record:
    """Return a migrated copy of one persisted course record."""
    out = dict(record)
    for _version, step in MIGRATIONS:
        out = step(out)
    return out


def migrate_courses(records: list[Any]) -> list[Record]:
    """Migrate every record; entries that are not objects cannot be courses and are skipped."""
    migrated: list[Record] = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning("Skipping persisted course entry of type %s", type(record).__name__)
            continue
        migrated.append(migrate_course(record))
    return migrated
