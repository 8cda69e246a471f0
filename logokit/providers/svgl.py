"""SVGL curated catalog provider.

The catalog endpoint returns every logo's metadata in one response. Names are
canonicalized from titles; routes are either a single URL or a
``{"light": ..., "dark": ...}`` pair, in which case the light variant is used.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from ..constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_SVGL_URL, SourceKey
from ..exceptions import SourceUnavailableError
from ..models import Component
from ..utils import as_tag_list, normalize_name
from .base import ComponentSet, fetch_json, fetch_text, merge_settled, settle_all

__all__ = ["SvglProvider", "extract_routes"]

logger = logging.getLogger(__name__)


def extract_routes(route: Any) -> tuple[str | None, str | None]:
    """Return (default_location, dark_location) for a catalog ``route`` value.

    Examples
    --------
    "https://svgl.app/library/vercel.svg"         → (that url, None)
    {"light": "…/a-light.svg", "dark": "…/a.svg"}  → (light url, dark url)
    anything else                                  → (None, None)
    """
    if isinstance(route, str) and route:
        return route, None
    if isinstance(route, dict):
        light = route.get("light")
        dark = route.get("dark")
        if isinstance(light, str) and light:
            return light, dark if isinstance(dark, str) and dark else None
    return None, None


def _record_to_component(record: Any) -> Component | None:
    if not isinstance(record, dict):
        return None
    title = record.get("title")
    if not isinstance(title, str):
        return None
    name = normalize_name(title)
    location, dark_location = extract_routes(record.get("route"))
    if not name or location is None:
        return None
    brand_url = record.get("url")
    return Component(
        name=name,
        title=title,
        category=as_tag_list(record.get("category")),
        location=location,
        dark_location=dark_location,
        brand_url=brand_url if isinstance(brand_url, str) else None,
        catalog_id=record.get("id"),
        source=SourceKey.SVGL,
    )


class SvglProvider:
    """Logos from the SVGL catalog API.

    Args:
        client:          Shared HTTP client.
        url:             Catalog endpoint returning the full record list.
        max_concurrency: Upper bound on concurrent downloads in ``load_many``.
    """

    key = SourceKey.SVGL

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str = DEFAULT_SVGL_URL,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._client = client
        self.url = url
        self._max_concurrency = max_concurrency
        self._loaded = False
        self.components = ComponentSet()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def canonical_name(self, name: str) -> str:
        return normalize_name(name)

    async def load_all(self) -> None:
        """Fetch the catalog once and record metadata for every usable entry.

        Raises:
            SourceUnavailableError: If the catalog cannot be fetched or is not a list.
        """
        if self._loaded:
            return
        payload = await fetch_json(self._client, self.url, self.key)
        if not isinstance(payload, list):
            raise SourceUnavailableError(self.key, "catalog response is not a list")

        skipped = 0
        for record in payload:
            component = _record_to_component(record)
            if component is None:
                skipped += 1
                continue
            held = self.components.get(component.name)
            if held is not None and not held.is_lazy and held.location == component.location:
                continue
            self.components.store(component)

        self._loaded = True
        if skipped:
            logger.debug("Skipped %d catalog entries without a usable title or route", skipped)
        logger.info("Loaded %d components from SVGL", len(self.components))

    async def _fetch(self, name: str, known: Component | None) -> Component | None:
        if known is None:
            return None
        logger.debug("Fetching %s from %s", name, known.location)
        content = await fetch_text(self._client, known.location, self.key)
        if content is None:
            logger.warning("SVG for '%s' is missing at %s", name, known.location)
            return None
        return known.with_content(content)

    async def load_one(self, name: str, known: Component | None = None) -> Component | None:
        """Download one logo; its location comes from *known* or the catalog.

        Raises:
            SourceUnavailableError: If the catalog or the SVG cannot be fetched.
        """
        if known is None:
            known = self.components.get(name)
        if known is None and not self._loaded:
            await self.load_all()
            known = self.components.get(name)
        component = await self._fetch(name, known)
        if component is not None:
            self.components.store(component)
        return component

    async def load_many(
        self, names: Sequence[str], known: Mapping[str, Component] | None = None
    ) -> list[Component]:
        """Download several logos concurrently; failures are logged and skipped."""
        calls = [
            (lambda n=name: self._fetch(n, self.components.known(n, known)))
            for name in names
        ]
        outcomes = await settle_all(calls, self._max_concurrency)
        return merge_settled(self.components, self.key, names, outcomes)
