"""Registry settings.

Environment:
    LOGOKIT_SOURCE           Active data source (github, svgl, local).
    LOGOKIT_GITHUB_REPO      ``owner/name`` of the repository holding the SVGs.
    LOGOKIT_GITHUB_BRANCH    Branch used for raw-file URLs.
    LOGOKIT_GITHUB_PATH      Directory inside the repository.
    LOGOKIT_SVGL_URL         Catalog endpoint.
    LOGOKIT_LOCAL_DIR        Directory scanned by the local provider.
    LOGOKIT_INDEX_PATH       Bundled index override.
    LOGOKIT_TIMEOUT          HTTP timeout in seconds.
    LOGOKIT_MAX_CONCURRENCY  Upper bound on concurrent per-item fetches.
    LOGOKIT_NO_FALLBACK      Set to 1/true to disable the fallback chain.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .constants import (
    DEFAULT_GITHUB_BRANCH,
    DEFAULT_GITHUB_PATH,
    DEFAULT_GITHUB_REPO,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_SOURCE,
    DEFAULT_SVGL_URL,
    DEFAULT_TIMEOUT,
    SourceKey,
)
from .exceptions import ConfigError
from .paths import Paths

__all__ = ["RegistrySettings", "parse_source"]

_ENV_PREFIX = "LOGOKIT_"
_TRUTHY: frozenset[str] = frozenset({"1", "true", "yes", "on"})


def parse_source(value: str | SourceKey) -> SourceKey:
    """Return the ``SourceKey`` for *value*, case-insensitively."""
    try:
        return SourceKey(str(value).strip().lower())
    except ValueError:
        known = ", ".join(key.value for key in SourceKey)
        raise ConfigError(f"Unknown source '{value}' (expected one of: {known})") from None


def _env(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(_ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _positive_float(raw: str, name: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{_ENV_PREFIX}{name} must be a number, got '{raw}'") from None
    if value <= 0:
        raise ConfigError(f"{_ENV_PREFIX}{name} must be positive")
    return value


def _positive_int(raw: str, name: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{_ENV_PREFIX}{name} must be an integer, got '{raw}'") from None
    if value < 1:
        raise ConfigError(f"{_ENV_PREFIX}{name} must be >= 1")
    return value


@dataclass(frozen=True, slots=True)
class RegistrySettings:
    """Immutable registry configuration."""

    source: SourceKey = DEFAULT_SOURCE
    github_repo: str = DEFAULT_GITHUB_REPO
    github_branch: str = DEFAULT_GITHUB_BRANCH
    github_path: str = DEFAULT_GITHUB_PATH
    svgl_url: str = DEFAULT_SVGL_URL
    local_dir: Path = field(default_factory=Paths.local_components_dir)
    index_path: Path | None = field(default_factory=Paths.bundled_index)
    timeout: float = DEFAULT_TIMEOUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    fallback: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RegistrySettings:
        """Build settings from ``LOGOKIT_*`` variables, defaulting the rest.

        Raises:
            ConfigError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        if (raw := _env(env, "SOURCE")) is not None:
            overrides["source"] = parse_source(raw)
        if (raw := _env(env, "GITHUB_REPO")) is not None:
            if raw.count("/") != 1:
                raise ConfigError(f"{_ENV_PREFIX}GITHUB_REPO must look like owner/name, got '{raw}'")
            overrides["github_repo"] = raw
        if (raw := _env(env, "GITHUB_BRANCH")) is not None:
            overrides["github_branch"] = raw
        if (raw := _env(env, "GITHUB_PATH")) is not None:
            overrides["github_path"] = raw.strip("/")
        if (raw := _env(env, "SVGL_URL")) is not None:
            overrides["svgl_url"] = raw
        if (raw := _env(env, "LOCAL_DIR")) is not None:
            overrides["local_dir"] = Path(raw).expanduser().resolve()
        if (raw := _env(env, "INDEX_PATH")) is not None:
            overrides["index_path"] = Path(raw).expanduser().resolve()
        if (raw := _env(env, "TIMEOUT")) is not None:
            overrides["timeout"] = _positive_float(raw, "TIMEOUT")
        if (raw := _env(env, "MAX_CONCURRENCY")) is not None:
            overrides["max_concurrency"] = _positive_int(raw, "MAX_CONCURRENCY")
        if (raw := _env(env, "NO_FALLBACK")) is not None:
            overrides["fallback"] = raw.lower() not in _TRUTHY

        return cls(**overrides)

    def with_source(self, source: str | SourceKey) -> RegistrySettings:
        """Return a copy with a different active source."""
        return replace(self, source=parse_source(source))
