"""
utils.py
--------------------
Pure helper utilities shared across providers.
No heavy dependencies — only stdlib + constants.
"""

import logging
import re
from collections.abc import Iterable
from datetime import datetime, timezone

from .constants import SVG_SUFFIX, _NAME_STRIP_RE, _WHITESPACE_RE

logger = logging.getLogger(__name__)


def normalize_name(title: str) -> str:
    """Canonicalize a display title: 'Next.js' → 'nextjs', 'Visual Studio' → 'visual-studio'."""
    name = _WHITESPACE_RE.sub("-", title.lower())
    return _NAME_STRIP_RE.sub("", name)


def name_from_filename(filename: str) -> str | None:
    """Return the component name for an SVG filename, or None for other files.

    The name is the filename minus its extension, unchanged otherwise.
    """
    if not filename.lower().endswith(SVG_SUFFIX):
        return None
    stem = filename[: -len(SVG_SUFFIX)]
    return stem or None


def byte_size(content: str) -> int:
    """UTF-8 byte length of *content*."""
    return len(content.encode("utf-8"))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_tag_list(value: object) -> list[str]:
    """Coerce a catalog ``category`` field (string, list, or missing) to a tag list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(tag) for tag in value if isinstance(tag, str) and tag.strip()]
    return []


def matches_query(query: str, *fields: str | None) -> bool:
    """Case-insensitive substring match of *query* against any of *fields*."""
    needle = query.lower()
    return any(field is not None and needle in field.lower() for field in fields)


def compile_search_pattern(pattern: str) -> re.Pattern[str]:
    """Compile *pattern* case-insensitively, falling back to a literal match."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.warning("Invalid search pattern %r (%s); matching it literally", pattern, exc)
        return re.compile(re.escape(pattern), re.IGNORECASE)


def count_tags(tag_lists: Iterable[Iterable[str]]) -> list[tuple[str, int]]:
    """Aggregate tags across components.

    Returns (tag, count) pairs sorted by count descending, then tag name.
    """
    counts: dict[str, int] = {}
    for tags in tag_lists:
        for tag in tags:
            counts[tag] = counts.get(tag, 0) + 1
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))
