"""Source selector and uniform facade over the providers.

``LogoRegistry`` owns no data itself: it picks the active provider, answers
cheap questions from the bundled index when that index was built from the
active source, and walks an explicit fallback chain when a source is down.

Usage:
    async with build_registry(RegistrySettings.from_env()) as registry:
        registry.configure("svgl")
        component = await registry.get_component("Next.js")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import TracebackType

import httpx

from .component_index import load_component_index
from .config import RegistrySettings, parse_source
from .constants import BUNDLED_INDEX_LABEL, DEFAULT_SOURCE, FALLBACK_ORDER, SourceKey
from .exceptions import ConfigError, SourceUnavailableError
from .models import CategoryCount, Component, ComponentIndex, RegistryStats
from .providers import GitHubProvider, LocalProvider, Provider, SvglProvider

__all__ = ["LogoRegistry", "build_registry"]

logger = logging.getLogger(__name__)


class LogoRegistry:
    """Uniform access to whichever provider is active.

    Args:
        providers: Every known provider keyed by its source.
        source:    Initially active source.
        index:     Prebuilt index, or None when absent/malformed.
        fallback:  When True, an unavailable source hands over to the next one
                   in ``FALLBACK_ORDER``.
        client:    HTTP client owned by this registry; closed by ``aclose``.
    """

    def __init__(
        self,
        providers: Mapping[SourceKey, Provider],
        source: str | SourceKey = DEFAULT_SOURCE,
        index: ComponentIndex | None = None,
        *,
        fallback: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._providers: dict[SourceKey, Provider] = dict(providers)
        self._index = index
        self._fallback = fallback
        self._client = client
        self._unavailable: set[SourceKey] = set()
        self._source = self._checked_source(source)

    async def __aenter__(self) -> LogoRegistry:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ── Configuration ─────────────────────────────────────────────────────────

    def _checked_source(self, source: str | SourceKey) -> SourceKey:
        key = parse_source(source)
        if key not in self._providers:
            raise ConfigError(f"No provider registered for source '{key}'")
        return key

    def configure(self, source: str | SourceKey) -> None:
        """Switch the active source. Does not load anything."""
        self._source = self._checked_source(source)
        self._unavailable.clear()
        logger.debug("Active source set to %s", self._source)

    @property
    def source(self) -> SourceKey:
        return self._source

    @property
    def index(self) -> ComponentIndex | None:
        return self._index

    @property
    def active_provider(self) -> Provider:
        return self._providers[self._source]

    def provider(self, source: str | SourceKey) -> Provider:
        return self._providers[self._checked_source(source)]

    def fallback_chain(self) -> list[Provider]:
        """Providers tried in order for the active source."""
        if not self._fallback or self._source not in FALLBACK_ORDER:
            return [self.active_provider]
        keys = FALLBACK_ORDER[FALLBACK_ORDER.index(self._source):]
        return [self._providers[key] for key in keys if key in self._providers]

    # ── Index ─────────────────────────────────────────────────────────────────

    def _index_for(self, provider: Provider) -> ComponentIndex | None:
        # The index only speaks for the source it was generated from.
        if self._index is not None and self._index.metadata.source == provider.key:
            return self._index
        return None

    def _index_applies(self) -> bool:
        return self._index_for(self.active_provider) is not None

    # ── Loading ───────────────────────────────────────────────────────────────

    async def _ensure_loaded(self) -> Provider | None:
        """Return the first provider in the chain that has (or now has) enumerated.

        None when every source in the chain is unavailable.
        """
        for provider in self.fallback_chain():
            if provider.is_loaded:
                return provider
            if provider.key in self._unavailable:
                continue
            try:
                await provider.load_all()
            except SourceUnavailableError as exc:
                self._unavailable.add(provider.key)
                logger.warning("%s", exc)
                continue
            if provider.key != self._source:
                logger.warning("Using %s components because %s is unavailable", provider.key, self._source)
            return provider
        logger.warning("No data source available for '%s'; returning no components", self._source)
        return None

    def _known_for(self, provider: Provider, key: str) -> Component | None:
        """Held metadata for *key*, else a metadata-only record from the index."""
        held = provider.components.get(key)
        if held is not None:
            return held
        index = self._index_for(provider)
        entry = index.entry(key) if index is not None else None
        if entry is None:
            return None
        return Component(
            name=entry.name,
            location=entry.download_location,
            content_hash=entry.content_hash,
            source=provider.key,
        )

    async def _resolve(self, provider: Provider, name: str) -> Component | None:
        key = provider.canonical_name(name)
        known = self._known_for(provider, key)
        if known is not None and not known.is_lazy:
            return known
        return await provider.load_one(key, known)

    # ── Facade ────────────────────────────────────────────────────────────────

    async def get_component(self, name: str) -> Component | None:
        """Return the fully-loaded component, or None if no available source has it."""
        for provider in self.fallback_chain():
            try:
                return await self._resolve(provider, name)
            except SourceUnavailableError as exc:
                logger.warning("Could not load '%s': %s", name, exc)
        return None

    async def get_components(self, names: Sequence[str]) -> list[Component]:
        """Found components in request order; missing names are left out."""
        found: list[Component] = []
        for name in names:
            component = await self.get_component(name)
            if component is not None:
                found.append(component)
        return found

    async def preload(self, names: Sequence[str]) -> list[Component]:
        """Download content for *names* concurrently from the answering provider.

        When the bundled index covers the active source, its locations are used
        and the source is not enumerated. Per-item failures are logged and
        skipped; the result holds what loaded.
        """
        if self._index_applies():
            provider = self.active_provider
        else:
            provider = await self._ensure_loaded()
            if provider is None:
                return []
        keys = [provider.canonical_name(name) for name in names]
        known = {key: record for key in keys if (record := self._known_for(provider, key)) is not None}
        pending = list(dict.fromkeys(key for key in keys if key not in known or known[key].is_lazy))
        if pending:
            await provider.load_many(pending, known)
        return [
            component
            for key in keys
            if (component := provider.components.get(key)) is not None and not component.is_lazy
        ]

    async def has_component(self, name: str) -> bool:
        """Membership check: in-memory set, then bundled index, then live enumeration."""
        provider = self.active_provider
        key = provider.canonical_name(name)
        if provider.components.has(key):
            return True
        if self._index_applies() and self._index.has(key):
            return True
        answering = await self._ensure_loaded()
        if answering is None:
            return False
        return answering.components.has(answering.canonical_name(name))

    async def get_available_components(self) -> list[str]:
        """Sorted names; from the bundled index when it covers the active source."""
        if self._index_applies():
            return self._index.names()
        provider = await self._ensure_loaded()
        return provider.components.names() if provider is not None else []

    list_available = get_available_components

    async def search_components(self, query: str, *, regex: bool = False) -> list[str]:
        provider = await self._ensure_loaded()
        if provider is None:
            return []
        if regex:
            return provider.components.search_pattern(query)
        return provider.components.search(query)

    async def get_components_by_category(self, tag: str) -> list[str]:
        provider = await self._ensure_loaded()
        return provider.components.by_category(tag) if provider is not None else []

    async def get_categories(self) -> list[CategoryCount]:
        provider = await self._ensure_loaded()
        return provider.components.categories() if provider is not None else []

    async def get_stats(self) -> RegistryStats:
        """Component count and whether the bundled index or a live source answered."""
        if self._index_applies():
            return RegistryStats(
                total_components=len(self._index.components),
                source=BUNDLED_INDEX_LABEL,
                active_provider=self._source,
                total_size=self.active_provider.components.total_size(),
                unavailable=sorted(self._unavailable),
            )
        provider = await self._ensure_loaded()
        return RegistryStats(
            total_components=provider.components.count() if provider is not None else 0,
            source=provider.key.value if provider is not None else self._source.value,
            active_provider=self._source,
            total_size=provider.components.total_size() if provider is not None else 0,
            unavailable=sorted(self._unavailable),
        )


def build_registry(
    settings: RegistrySettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> LogoRegistry:
    """Construct a registry with all three providers from *settings*.

    When *client* is None a new one is created and closed with the registry;
    an injected client stays open for its owner.
    """
    settings = settings or RegistrySettings()
    owned = client is None
    http = client or httpx.AsyncClient(timeout=settings.timeout, follow_redirects=True)
    providers: dict[SourceKey, Provider] = {
        SourceKey.GITHUB: GitHubProvider(
            http,
            repo=settings.github_repo,
            branch=settings.github_branch,
            path=settings.github_path,
            max_concurrency=settings.max_concurrency,
        ),
        SourceKey.SVGL: SvglProvider(http, url=settings.svgl_url, max_concurrency=settings.max_concurrency),
        SourceKey.LOCAL: LocalProvider(settings.local_dir, max_concurrency=settings.max_concurrency),
    }
    return LogoRegistry(
        providers,
        source=settings.source,
        index=load_component_index(settings.index_path),
        fallback=settings.fallback,
        client=http if owned else None,
    )
