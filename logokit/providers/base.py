"""Provider contract, the shared in-memory component set, and fan-out helpers.

Every provider owns one ``ComponentSet`` and answers the query half of the
contract (has / names / search / categories) through it, so the three source
kinds only differ in how they enumerate and fetch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import httpx

from ..constants import SourceKey
from ..exceptions import SourceUnavailableError
from ..models import CategoryCount, Component
from ..utils import compile_search_pattern, count_tags, matches_query

__all__ = ["ComponentSet", "Provider", "fetch_json", "fetch_text", "merge_settled", "settle_all"]

logger = logging.getLogger(__name__)


class ComponentSet:
    """Name → Component mapping with the search and category queries every provider shares."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: dict[str, Component] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def store(self, component: Component) -> None:
        # Last write wins; a name never appears twice.
        self._items[component.name] = component

    def get(self, name: str) -> Component | None:
        return self._items.get(name)

    def known(self, name: str, extra: Mapping[str, Component] | None = None) -> Component | None:
        """Metadata for *name* from *extra* when given there, else from this set."""
        if extra is not None and name in extra:
            return extra[name]
        return self._items.get(name)

    def has(self, name: str) -> bool:
        return name in self._items

    def count(self) -> int:
        return len(self._items)

    def values(self) -> list[Component]:
        return list(self._items.values())

    def names(self) -> list[str]:
        return sorted(self._items)

    def total_size(self) -> int:
        return sum(component.size for component in self._items.values())

    def search(self, query: str) -> list[str]:
        """Names whose name, title or any category contains *query*, case-insensitively."""
        return sorted(
            name
            for name, component in self._items.items()
            if matches_query(query, name, component.title, *component.category)
        )

    def search_pattern(self, pattern: str) -> list[str]:
        """Names matching the regular expression *pattern*, case-insensitively."""
        regex = compile_search_pattern(pattern)
        return sorted(name for name in self._items if regex.search(name))

    def by_category(self, tag: str) -> list[str]:
        """Names carrying *tag* (exact match, case-insensitive)."""
        wanted = tag.lower()
        return sorted(
            name
            for name, component in self._items.items()
            if any(cat.lower() == wanted for cat in component.category)
        )

    def categories(self) -> list[CategoryCount]:
        pairs = count_tags(component.category for component in self._items.values())
        return [CategoryCount(name=tag, count=count) for tag, count in pairs]


@runtime_checkable
class Provider(Protocol):
    """Enumerate and fetch components from exactly one data source."""

    key: SourceKey
    components: ComponentSet

    @property
    def is_loaded(self) -> bool: ...

    def canonical_name(self, name: str) -> str: ...

    async def load_all(self) -> None: ...

    async def load_one(self, name: str, known: Component | None = None) -> Component | None: ...

    async def load_many(
        self, names: Sequence[str], known: Mapping[str, Component] | None = None
    ) -> list[Component]: ...


# ── Fan-out ───────────────────────────────────────────────────────────────────


async def settle_all(
    calls: Iterable[Callable[[], Awaitable[Any]]],
    limit: int,
) -> list[Any]:
    """Run *calls* concurrently (at most *limit* at once) and return every outcome.

    Each outcome is either the call's result or the exception it raised; one
    failure never cancels its siblings.
    """
    semaphore = asyncio.Semaphore(limit)

    async def _bounded(call: Callable[[], Awaitable[Any]]) -> Any:
        async with semaphore:
            return await call()

    outcomes = await asyncio.gather(*(_bounded(call) for call in calls), return_exceptions=True)
    for outcome in outcomes:
        # Only ordinary errors are isolated; cancellation and interpreter exits propagate.
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome
    return outcomes


def merge_settled(
    components: ComponentSet,
    source: SourceKey,
    names: Sequence[str],
    outcomes: Sequence[Any],
) -> list[Component]:
    """Apply settled fetch outcomes to *components* one at a time.

    Returns the fetched components in request order; failures and not-found
    results are logged and left out.
    """
    fetched: list[Component] = []
    failures = 0
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, Exception):
            failures += 1
            logger.warning("Failed to load %s from %s: %s", name, source, outcome)
            continue
        if outcome is None:
            logger.debug("%s has no component named %s", source, name)
            continue
        components.store(outcome)
        fetched.append(outcome)
    if failures:
        logger.warning("%d of %d components could not be loaded from %s", failures, len(names), source)
    return fetched


# ── HTTP helpers ──────────────────────────────────────────────────────────────


async def _get(client: httpx.AsyncClient, url: str, source: SourceKey) -> httpx.Response:
    try:
        return await client.get(url)
    except httpx.HTTPError as exc:
        raise SourceUnavailableError(source, f"request to {url} failed: {exc}") from exc


async def fetch_text(client: httpx.AsyncClient, url: str, source: SourceKey) -> str | None:
    """GET *url* as text; None on 404.

    Raises:
        SourceUnavailableError: On transport errors or any other non-2xx status.
    """
    response = await _get(client, url, source)
    if response.status_code == httpx.codes.NOT_FOUND:
        return None
    if not response.is_success:
        raise SourceUnavailableError(source, f"{url} responded with {response.status_code}")
    return response.text


async def fetch_json(client: httpx.AsyncClient, url: str, source: SourceKey) -> Any:
    """GET *url* and decode JSON.

    Raises:
        SourceUnavailableError: On transport errors, any non-2xx status, or invalid JSON.
    """
    response = await _get(client, url, source)
    if not response.is_success:
        raise SourceUnavailableError(source, f"{url} responded with {response.status_code}")
    try:
        return response.json()
    except ValueError as exc:
        raise SourceUnavailableError(source, f"{url} returned invalid JSON: {exc}") from exc
