"""GitHub repository provider.

Enumeration reads the repository's contents listing (one request, metadata
only); SVG content is downloaded per component the first time it is needed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from ..constants import (
    DEFAULT_GITHUB_BRANCH,
    DEFAULT_GITHUB_PATH,
    DEFAULT_GITHUB_REPO,
    DEFAULT_MAX_CONCURRENCY,
    GITHUB_API_URL,
    GITHUB_RAW_URL,
    SVG_SUFFIX,
    SourceKey,
)
from ..exceptions import SourceUnavailableError
from ..models import Component
from ..utils import name_from_filename
from .base import ComponentSet, fetch_json, fetch_text, merge_settled, settle_all

__all__ = ["GitHubProvider", "ListingEntry"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ListingEntry:
    """One ``.svg`` file from the contents listing."""

    name: str
    location: str
    size: int
    content_hash: str | None

    def to_component(self) -> Component:
        return Component(
            name=self.name,
            location=self.location,
            content_hash=self.content_hash,
            source=SourceKey.GITHUB,
        )


def _parse_listing(payload: Any) -> list[ListingEntry]:
    """Keep file entries with an SVG name and a download URL."""
    if not isinstance(payload, list):
        raise SourceUnavailableError(SourceKey.GITHUB, "contents listing is not a list")
    entries: list[ListingEntry] = []
    for item in payload:
        if not isinstance(item, dict) or item.get("type", "file") != "file":
            continue
        name = name_from_filename(str(item.get("name", "")))
        download_url = item.get("download_url")
        if name is None or not download_url:
            continue
        size = item.get("size")
        entries.append(
            ListingEntry(
                name=name,
                location=str(download_url),
                size=size if isinstance(size, int) and size >= 0 else 0,
                content_hash=item.get("sha"),
            )
        )
    return entries


class GitHubProvider:
    """Components stored as ``<name>.svg`` files in a GitHub repository directory.

    Args:
        client:          Shared HTTP client (timeouts come from here).
        repo:            ``owner/name`` of the repository.
        branch:          Branch used when deriving raw-file URLs.
        path:            Directory inside the repository.
        max_concurrency: Upper bound on concurrent downloads in ``load_many``.
    """

    key = SourceKey.GITHUB

    def __init__(
        self,
        client: httpx.AsyncClient,
        repo: str = DEFAULT_GITHUB_REPO,
        branch: str = DEFAULT_GITHUB_BRANCH,
        path: str = DEFAULT_GITHUB_PATH,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._client = client
        self.repo = repo
        self.branch = branch
        self.path = path.strip("/")
        self._max_concurrency = max_concurrency
        self._loaded = False
        self.components = ComponentSet()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def listing_url(self) -> str:
        return f"{GITHUB_API_URL}/repos/{self.repo}/contents/{self.path}?ref={self.branch}"

    def raw_url(self, name: str) -> str:
        return f"{GITHUB_RAW_URL}/{self.repo}/{self.branch}/{self.path}/{name}{SVG_SUFFIX}"

    def canonical_name(self, name: str) -> str:
        # Names are filenames; they are matched byte for byte.
        return name

    # ── Enumeration ───────────────────────────────────────────────────────────

    async def fetch_listing(self) -> list[ListingEntry]:
        """Return the SVG entries of the repository directory.

        Raises:
            SourceUnavailableError: If the listing cannot be fetched or parsed.
        """
        payload = await fetch_json(self._client, self.listing_url, self.key)
        return _parse_listing(payload)

    async def load_all(self, *, with_content: bool = False) -> None:
        """Enumerate the listing once; optionally download every component's content.

        Raises:
            SourceUnavailableError: If the listing cannot be fetched.
        """
        if not self._loaded:
            entries = await self.fetch_listing()
            for entry in entries:
                held = self.components.get(entry.name)
                if held is not None and not held.is_lazy:
                    continue
                self.components.store(entry.to_component())
            self._loaded = True
            logger.info("Loaded %d components from GitHub (%s)", len(entries), self.repo)

        if with_content:
            lazy = [component.name for component in self.components.values() if component.is_lazy]
            if lazy:
                await self.load_many(lazy)

    # ── Single-item fetch ─────────────────────────────────────────────────────

    async def _fetch(self, name: str, known: Component | None) -> Component | None:
        url = known.location if known is not None else self.raw_url(name)
        logger.debug("Fetching %s from %s", name, url)
        content = await fetch_text(self._client, url, self.key)
        if content is None:
            logger.warning("Component '%s' not found on GitHub", name)
            return None
        if known is not None:
            return known.with_content(content)
        return Component(name=name, location=url, source=self.key).with_content(content)

    async def load_one(self, name: str, known: Component | None = None) -> Component | None:
        """Download one component; None if the repository has no such file.

        Raises:
            SourceUnavailableError: On transport failure or an unexpected status.
        """
        component = await self._fetch(name, known)
        if component is not None:
            self.components.store(component)
        return component

    async def load_many(
        self, names: Sequence[str], known: Mapping[str, Component] | None = None
    ) -> list[Component]:
        """Download several components concurrently; failures are logged and skipped."""
        calls = [
            (lambda n=name: self._fetch(n, self.components.known(n, known)))
            for name in names
        ]
        outcomes = await settle_all(calls, self._max_concurrency)
        return merge_settled(self.components, self.key, names, outcomes)
