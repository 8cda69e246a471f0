"""Local filesystem provider: ``*.svg`` files in one directory, read eagerly."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from ..constants import DEFAULT_MAX_CONCURRENCY, SVG_SUFFIX, SourceKey
from ..exceptions import SourceUnavailableError
from ..models import Component
from ..utils import name_from_filename
from .base import ComponentSet, merge_settled, settle_all

__all__ = ["LocalProvider"]

logger = logging.getLogger(__name__)


def _read_component(path: Path, name: str) -> Component:
    content = path.read_text(encoding="utf-8")
    return Component(name=name, location=str(path), source=SourceKey.LOCAL).with_content(content)


class LocalProvider:
    """Components shipped as files in *components_dir*."""

    key = SourceKey.LOCAL

    def __init__(self, components_dir: Path, max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> None:
        self.components_dir = components_dir
        self._max_concurrency = max_concurrency
        self._loaded = False
        self.components = ComponentSet()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def canonical_name(self, name: str) -> str:
        return name

    def _safe_path(self, name: str) -> Path | None:
        """Resolve ``<name>.svg`` inside the components directory (no traversal)."""
        root = self.components_dir.resolve()
        try:
            path = (root / f"{name}{SVG_SUFFIX}").resolve()
            path.relative_to(root)
        except (ValueError, OSError):
            return None
        return path

    def _scan(self) -> list[Component]:
        if not self.components_dir.is_dir():
            raise SourceUnavailableError(self.key, f"directory not found: {self.components_dir}")
        try:
            paths = sorted(self.components_dir.iterdir())
        except OSError as exc:
            raise SourceUnavailableError(self.key, f"cannot list {self.components_dir}: {exc}") from exc

        found: list[Component] = []
        for path in paths:
            name = name_from_filename(path.name)
            if name is None or not path.is_file():
                continue
            try:
                found.append(_read_component(path, name))
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable %s: %s", path, exc)
        return found

    async def load_all(self) -> None:
        """Read every SVG in the directory once.

        Raises:
            SourceUnavailableError: If the directory is missing or unreadable.
        """
        if self._loaded:
            return
        for component in await asyncio.to_thread(self._scan):
            self.components.store(component)
        self._loaded = True
        logger.info("Loaded %d components from %s", len(self.components), self.components_dir)

    def _read(self, name: str, known: Component | None) -> Component | None:
        path = Path(known.location) if known is not None else self._safe_path(name)
        if path is None:
            return None
        try:
            return _read_component(path, name)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailableError(self.key, f"cannot read {path}: {exc}") from exc

    async def load_one(self, name: str, known: Component | None = None) -> Component | None:
        """Read one SVG; None if no such file exists.

        Raises:
            SourceUnavailableError: If the file exists but cannot be read.
        """
        component = await asyncio.to_thread(self._read, name, known)
        if component is not None:
            self.components.store(component)
        return component

    async def load_many(
        self, names: Sequence[str], known: Mapping[str, Component] | None = None
    ) -> list[Component]:
        calls = [
            (lambda n=name: asyncio.to_thread(self._read, n, self.components.known(n, known)))
            for name in names
        ]
        outcomes = await settle_all(calls, self._max_concurrency)
        return merge_settled(self.components, self.key, names, outcomes)
