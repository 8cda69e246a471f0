"""Tests for the LogoRegistry source selector / facade."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import GITHUB_LISTING_URL, RAW_BASE, SVGL_URL, FakeRemote, github_entry
from logokit.component_index import load_component_index
from logokit.config import RegistrySettings
from logokit.constants import BUNDLED_INDEX_LABEL, SourceKey
from logokit.exceptions import ConfigError
from logokit.models import Component
from logokit.providers import GitHubProvider, LocalProvider, SvglProvider
from logokit.registry import LogoRegistry, build_registry


class CountingProvider:
    """Wraps a provider and counts enumeration / fetch calls."""

    def __init__(self, inner) -> None:
        self._inner = inner
        self.key = inner.key
        self.components = inner.components
        self.load_all_calls = 0
        self.load_one_calls = 0

    @property
    def is_loaded(self) -> bool:
        return self._inner.is_loaded

    def canonical_name(self, name: str) -> str:
        return self._inner.canonical_name(name)

    async def load_all(self) -> None:
        self.load_all_calls += 1
        await self._inner.load_all()

    async def load_one(self, name: str, known: Component | None = None) -> Component | None:
        self.load_one_calls += 1
        return await self._inner.load_one(name, known)

    async def load_many(self, names, known=None):
        return await self._inner.load_many(names, known)


class CountingIndex:
    """Proxy over a ComponentIndex that records every lookup."""

    def __init__(self, index) -> None:
        self._index = index
        self.metadata = index.metadata
        self.components = index.components
        self.lookups = 0

    def names(self) -> list[str]:
        self.lookups += 1
        return self._index.names()

    def has(self, name: str) -> bool:
        self.lookups += 1
        return self._index.has(name)

    def entry(self, name: str):
        self.lookups += 1
        return self._index.entry(name)


def _registry(remote: FakeRemote, components_dir: Path, index=None, source=SourceKey.GITHUB, fallback=True):
    client = remote.client()
    providers = {
        SourceKey.GITHUB: CountingProvider(GitHubProvider(client, repo="acme/logos")),
        SourceKey.SVGL: CountingProvider(SvglProvider(client)),
        SourceKey.LOCAL: CountingProvider(LocalProvider(components_dir)),
    }
    return LogoRegistry(providers, source=source, index=index, fallback=fallback)


class TestGetComponent:
    """Lazy loading through the facade."""

    @pytest.mark.asyncio
    async def test_lazy_promotion_then_cached(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        await registry.get_available_components()
        assert registry.active_provider.components.get("vercel").is_lazy

        first = await registry.get_component("vercel")
        second = await registry.get_component("vercel")

        assert first is not None and first.size > 0 and first.content is not None
        assert second is first
        assert github_remote.calls[f"{RAW_BASE}/vercel.svg"] == 1
        assert registry.active_provider.load_one_calls == 1

    @pytest.mark.asyncio
    async def test_direct_load_without_enumeration(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        component = await registry.get_component("react")
        assert component is not None
        assert GITHUB_LISTING_URL not in github_remote.calls

    @pytest.mark.asyncio
    async def test_uses_index_location(self, remote: FakeRemote, components_dir: Path, index_file: Path) -> None:
        remote.text(f"{RAW_BASE}/nextjs.svg", "<svg/>")
        registry = _registry(remote, components_dir, index=load_component_index(index_file))

        component = await registry.get_component("nextjs")

        assert component is not None
        assert component.content_hash == "sha-nextjs"
        assert GITHUB_LISTING_URL not in remote.calls

    @pytest.mark.asyncio
    async def test_catalog_title_lookup(self, svgl_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(svgl_remote, components_dir, source=SourceKey.SVGL)

        component = await registry.get_component("Next.js")

        assert component is not None
        assert component.name == "nextjs"
        assert registry.active_provider.components.has("nextjs")
        assert component.location == "https://svgl.app/library/nextjs_icon_light.svg"
        assert component.dark_location == "https://svgl.app/library/nextjs_icon_dark.svg"

    @pytest.mark.asyncio
    async def test_not_found_does_not_fall_back(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        assert await registry.get_component("github") is None
        assert registry.provider("local").load_one_calls == 0

    @pytest.mark.asyncio
    async def test_unavailable_source_falls_back(self, remote: FakeRemote, components_dir: Path) -> None:
        remote.fail(f"{RAW_BASE}/vercel.svg")
        registry = _registry(remote, components_dir)

        component = await registry.get_component("vercel")

        assert component is not None
        assert component.source is SourceKey.LOCAL

    @pytest.mark.asyncio
    async def test_get_components_omits_missing(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        found = await registry.get_components(["react", "missing", "vercel"])
        assert [c.name for c in found] == ["react", "vercel"]


class TestIndexBackedLoading:
    """Downloads that rely on index locations while the listing endpoint is down."""

    @pytest.fixture
    def listing_down(self, remote: FakeRemote) -> FakeRemote:
        remote.json(GITHUB_LISTING_URL, {"message": "API rate limit exceeded"}, status=403)
        remote.text(f"{RAW_BASE}/vercel.svg", "<svg/>")
        return remote

    @pytest.mark.asyncio
    async def test_preload_uses_index_without_listing(
        self, listing_down: FakeRemote, tmp_path: Path, index_file: Path
    ) -> None:
        empty_dir = tmp_path / "empty"
        empty_dir.mkdir()
        registry = _registry(listing_down, empty_dir, index=load_component_index(index_file))

        assert await registry.has_component("vercel")
        loaded = await registry.preload(["vercel"])
        component = await registry.get_component("vercel")

        assert [c.name for c in loaded] == ["vercel"]
        assert component is not None
        assert component.source is SourceKey.GITHUB
        assert component.content_hash == "sha-vercel"
        assert GITHUB_LISTING_URL not in listing_down.calls
        assert listing_down.calls[f"{RAW_BASE}/vercel.svg"] == 1
        assert registry.active_provider.load_all_calls == 0

    @pytest.mark.asyncio
    async def test_failed_listing_does_not_block_single_loads(
        self, listing_down: FakeRemote, tmp_path: Path
    ) -> None:
        empty_dir = tmp_path / "empty"
        empty_dir.mkdir()
        registry = _registry(listing_down, empty_dir)

        assert await registry.search_components("vercel") == []
        stats = await registry.get_stats()
        component = await registry.get_component("vercel")

        assert stats.unavailable == [SourceKey.GITHUB]
        assert component is not None
        assert component.source is SourceKey.GITHUB

    @pytest.mark.asyncio
    async def test_preload_without_index_still_enumerates(
        self, github_remote: FakeRemote, components_dir: Path
    ) -> None:
        registry = _registry(github_remote, components_dir)
        loaded = await registry.preload(["react", "react"])
        assert [c.name for c in loaded] == ["react", "react"]
        assert registry.active_provider.load_all_calls == 1
        assert github_remote.calls[f"{RAW_BASE}/react.svg"] == 1


class TestHasComponent:
    """Existence checks in cost order."""

    @pytest.mark.asyncio
    async def test_in_memory_hit_skips_index_and_live(
        self, github_remote: FakeRemote, components_dir: Path, index_file: Path
    ) -> None:
        index = CountingIndex(load_component_index(index_file))
        registry = _registry(github_remote, components_dir, index=index)
        await registry.get_component("react")
        index.lookups = 0
        calls_before = github_remote.total_calls

        assert await registry.has_component("react")

        assert index.lookups == 0
        assert registry.active_provider.load_all_calls == 0
        assert github_remote.total_calls == calls_before

    @pytest.mark.asyncio
    async def test_index_hit_skips_live(self, remote: FakeRemote, components_dir: Path, index_file: Path) -> None:
        registry = _registry(remote, components_dir, index=load_component_index(index_file))
        assert await registry.has_component("vercel")
        assert remote.total_calls == 0

    @pytest.mark.asyncio
    async def test_fresh_provider_loads_before_answering(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        assert await registry.has_component("react")
        assert not await registry.has_component("angular")
        assert registry.active_provider.load_all_calls == 1

    @pytest.mark.asyncio
    async def test_catalog_membership_by_title(self, svgl_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(svgl_remote, components_dir, source="svgl")
        assert await registry.has_component("PostgreSQL")

    @pytest.mark.asyncio
    async def test_all_sources_down(self, remote: FakeRemote, tmp_path: Path) -> None:
        remote.fail(GITHUB_LISTING_URL)
        registry = _registry(remote, tmp_path / "absent")
        assert not await registry.has_component("vercel")
        assert registry.provider("github").load_all_calls == 1
        assert registry.provider("local").load_all_calls == 1


class TestListing:
    """Index fast path and live enumeration."""

    @pytest.mark.asyncio
    async def test_index_fast_path(self, remote: FakeRemote, components_dir: Path, index_file: Path) -> None:
        registry = _registry(remote, components_dir, index=load_component_index(index_file))

        assert await registry.get_available_components() == ["nextjs", "vercel"]
        assert registry.active_provider.load_all_calls == 0
        assert remote.total_calls == 0

    @pytest.mark.asyncio
    async def test_index_ignored_for_other_source(
        self, svgl_remote: FakeRemote, components_dir: Path, index_file: Path
    ) -> None:
        registry = _registry(svgl_remote, components_dir, index=load_component_index(index_file))
        registry.configure("svgl")

        names = await registry.get_available_components()

        assert names == ["astro", "nextjs", "postgresql"]
        assert registry.active_provider.load_all_calls == 1
        assert svgl_remote.calls[SVGL_URL] == 1

    @pytest.mark.asyncio
    async def test_live_listing_without_index(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        assert await registry.get_available_components() == ["nextjs", "react", "vercel"]

    @pytest.mark.asyncio
    async def test_configure_does_not_load(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        registry.configure(SourceKey.LOCAL)
        registry.configure(SourceKey.GITHUB)
        assert github_remote.total_calls == 0
        assert registry.source is SourceKey.GITHUB

    @pytest.mark.asyncio
    async def test_list_available_alias(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        assert await registry.list_available() == await registry.get_available_components()

    def test_fallback_chain_order(self, remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(remote, components_dir, source="svgl")
        assert [p.key for p in registry.fallback_chain()] == ["svgl", "github", "local"]
        registry.configure("github")
        assert [p.key for p in registry.fallback_chain()] == ["github", "local"]
        registry.configure("local")
        assert [p.key for p in registry.fallback_chain()] == ["local"]

    def test_configure_unknown_source(self, remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(remote, components_dir)
        with pytest.raises(ConfigError):
            registry.configure("npm")


class TestQueries:
    """Search and category delegation."""

    @pytest.mark.asyncio
    async def test_components_by_category(self, svgl_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(svgl_remote, components_dir, source="svgl")
        assert await registry.get_components_by_category("framework") == ["astro", "nextjs"]
        assert await registry.get_components_by_category("FRAMEWORK") == ["astro", "nextjs"]
        assert await registry.get_components_by_category("frame") == []

    @pytest.mark.asyncio
    async def test_categories_sorted_by_count(self, svgl_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(svgl_remote, components_dir, source="svgl")
        categories = await registry.get_categories()
        assert categories[0].name == "framework"
        assert categories[0].count == 2

    @pytest.mark.asyncio
    async def test_search_substring(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        assert await registry.search_components("RE") == ["react"]
        assert await registry.search_components("e") == ["nextjs", "react", "vercel"]

    @pytest.mark.asyncio
    async def test_search_regex(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        assert await registry.search_components("^(next|vercel)", regex=True) == ["nextjs", "vercel"]

    @pytest.mark.asyncio
    async def test_no_fuzzy_matching(self, github_remote: FakeRemote, components_dir: Path) -> None:
        registry = _registry(github_remote, components_dir)
        assert await registry.search_components("raect") == []


class TestFallbackAndStats:
    """Fallback chain and observability."""

    @pytest.mark.asyncio
    async def test_catalog_falls_back_to_github(self, github_remote: FakeRemote, components_dir: Path) -> None:
        github_remote.fail(SVGL_URL)
        registry = _registry(github_remote, components_dir, source="svgl")

        names = await registry.get_available_components()
        stats = await registry.get_stats()

        assert names == ["nextjs", "react", "vercel"]
        assert stats.source == "github"
        assert stats.active_provider is SourceKey.SVGL
        assert stats.unavailable == [SourceKey.SVGL]

    @pytest.mark.asyncio
    async def test_unavailable_source_not_retried(self, github_remote: FakeRemote, components_dir: Path) -> None:
        github_remote.fail(SVGL_URL)
        registry = _registry(github_remote, components_dir, source="svgl")
        await registry.search_components("x")
        await registry.get_categories()
        assert github_remote.calls[SVGL_URL] == 1

    @pytest.mark.asyncio
    async def test_fallback_disabled(self, remote: FakeRemote, components_dir: Path) -> None:
        remote.fail(GITHUB_LISTING_URL)
        registry = _registry(remote, components_dir, fallback=False)

        assert await registry.get_available_components() == []
        assert registry.provider("local").load_all_calls == 0

    @pytest.mark.asyncio
    async def test_local_has_no_fallback(self, github_remote: FakeRemote, tmp_path: Path) -> None:
        registry = _registry(github_remote, tmp_path / "absent", source="local")
        assert await registry.get_available_components() == []
        assert github_remote.total_calls == 0

    @pytest.mark.asyncio
    async def test_stats_from_index(self, remote: FakeRemote, components_dir: Path, index_file: Path) -> None:
        registry = _registry(remote, components_dir, index=load_component_index(index_file))
        stats = await registry.get_stats()
        assert stats.total_components == 2
        assert stats.source == BUNDLED_INDEX_LABEL
        assert remote.total_calls == 0

    @pytest.mark.asyncio
    async def test_stats_reveal_partial_failure(self, remote: FakeRemote, components_dir: Path) -> None:
        remote.json(GITHUB_LISTING_URL, [github_entry("a"), github_entry("b"), github_entry("c")])
        remote.text(f"{RAW_BASE}/a.svg", "<svg/>")
        remote.fail(f"{RAW_BASE}/b.svg")
        remote.text(f"{RAW_BASE}/c.svg", "<svg/>")
        registry = _registry(remote, components_dir)

        loaded = await registry.preload(["a", "b", "c"])
        stats = await registry.get_stats()

        assert [c.name for c in loaded] == ["a", "c"]
        assert stats.source == "github"
        assert stats.total_components == 3
        assert stats.total_size == 12


class TestBuildRegistry:
    @pytest.mark.asyncio
    async def test_build_from_settings(self, github_remote: FakeRemote, components_dir: Path, tmp_path: Path) -> None:
        settings = RegistrySettings(
            github_repo="acme/logos",
            local_dir=components_dir,
            index_path=tmp_path / "missing-index.json",
        )
        client = github_remote.client()
        async with build_registry(settings, client=client) as registry:
            assert registry.index is None
            assert await registry.get_available_components() == ["nextjs", "react", "vercel"]
        assert not client.is_closed

    @pytest.mark.asyncio
    async def test_owned_client_closed(self, tmp_path: Path) -> None:
        registry = build_registry(RegistrySettings(local_dir=tmp_path, index_path=None, source=SourceKey.LOCAL))
        client = registry.provider("github")._client
        await registry.aclose()
        assert client.is_closed
