"""Bundled component index: tolerant loading and regeneration from the GitHub listing."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx
from pydantic import ValidationError

from .exceptions import IndexLoadError
from .models import ComponentIndex, IndexEntry, IndexMetadata
from .providers.github import GitHubProvider
from .utils import utc_now

__all__ = [
    "generate_component_index",
    "load_component_index",
    "parse_component_index",
    "regenerate",
    "write_component_index",
]

logger = logging.getLogger(__name__)


def parse_component_index(raw: str) -> ComponentIndex:
    """Parse index JSON text.

    Raises:
        IndexLoadError: If the text is not valid JSON or does not match the schema.
    """
    try:
        return ComponentIndex.model_validate(json.loads(raw))
    except json.JSONDecodeError as exc:
        raise IndexLoadError(f"Index is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        raise IndexLoadError(f"Index does not match the expected schema: {exc}") from exc


def load_component_index(path: Path | None) -> ComponentIndex | None:
    """Return the bundled index at *path*, or None when absent or malformed."""
    if path is None:
        return None
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("Component index not found at %s, falling back to live enumeration", path)
        return None
    except OSError as exc:
        logger.warning("Could not read component index %s: %s", path, exc)
        return None
    try:
        index = parse_component_index(raw)
    except IndexLoadError as exc:
        logger.warning("Ignoring malformed component index %s: %s", path, exc)
        return None
    logger.debug("Loaded component index with %d entries", len(index.components))
    return index


async def generate_component_index(provider: GitHubProvider) -> ComponentIndex:
    """Build a fresh index from the provider's repository listing.

    Raises:
        SourceUnavailableError: If the listing cannot be fetched.
    """
    entries = await provider.fetch_listing()
    components = [
        IndexEntry(
            name=entry.name,
            size=entry.size,
            download_location=entry.location,
            content_hash=entry.content_hash,
        )
        for entry in sorted(entries, key=lambda item: item.name)
    ]
    metadata = IndexMetadata(
        total=len(components),
        generated=utc_now(),
        repository=provider.repo,
        branch=provider.branch,
    )
    return ComponentIndex(metadata=metadata, components=components)


def write_component_index(index: ComponentIndex, path: Path) -> None:
    """Write *index* as pretty-printed JSON using the published field names."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = index.model_dump(mode="json", by_alias=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


async def regenerate(repo: str, branch: str, components_path: str, output: Path, timeout: float) -> ComponentIndex:
    """Fetch the listing with a short-lived client and write the index to *output*."""
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        provider = GitHubProvider(client, repo=repo, branch=branch, path=components_path)
        index = await generate_component_index(provider)
    write_component_index(index, output)
    return index
