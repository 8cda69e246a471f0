"""
Package-level path configuration.

Uses a class-based approach so tests and alternative installs can point the
registry at a different bundled index or local component directory.

Usage:
    # Default paths (read-only)
    from logokit.paths import Paths

    index_path = Paths.bundled_index()
    components_dir = Paths.local_components_dir()

    # Custom paths (for testing or alternative configurations)
    Paths.configure(index_path="/custom/component-index.json")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .constants import INDEX_FILENAME


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Immutable path configuration."""

    package_root: Path
    bundled_index: Path
    local_components_dir: Path


class Paths:
    """
    Path configuration manager.

    Provides class-level defaults and methods to override them.
    """

    _package_root: Path = Path(__file__).resolve().parent
    _index_path: Path | None = None
    _components_dir: Path | None = None

    @classmethod
    def configure(
        cls,
        index_path: Path | str | None = None,
        components_dir: Path | str | None = None,
    ) -> None:
        """
        Configure custom paths.

        Args:
            index_path: Custom bundled index file
            components_dir: Custom directory of local SVG components
        """
        if index_path is not None:
            cls._index_path = Path(index_path).resolve()
        if components_dir is not None:
            cls._components_dir = Path(components_dir).resolve()

    @classmethod
    def reset(cls) -> None:
        """Reset to default paths."""
        cls._index_path = None
        cls._components_dir = None

    @classmethod
    def package_root(cls) -> Path:
        """Directory of the installed logokit package."""
        return cls._package_root

    @classmethod
    def bundled_index(cls) -> Path:
        """Prebuilt component index shipped with the package."""
        if cls._index_path is not None:
            return cls._index_path
        return cls._package_root / "data" / INDEX_FILENAME

    @classmethod
    def local_components_dir(cls) -> Path:
        """Directory scanned by the local provider."""
        if cls._components_dir is not None:
            return cls._components_dir
        return cls._package_root / "data" / "components"

    @classmethod
    def get_config(cls) -> PathConfig:
        """Get current path configuration as an immutable dataclass."""
        return PathConfig(
            package_root=cls.package_root(),
            bundled_index=cls.bundled_index(),
            local_components_dir=cls.local_components_dir(),
        )
