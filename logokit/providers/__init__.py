"""
providers package - one strategy per data source.

Public API:
    base   - Provider protocol, ComponentSet, fan-out and HTTP helpers
    github - GitHub repository listing + raw downloads
    svgl   - SVGL curated catalog
    local  - Local directory of SVG files
"""

from .base import ComponentSet, Provider
from .github import GitHubProvider
from .local import LocalProvider
from .svgl import SvglProvider

__all__ = [
    "ComponentSet",
    "GitHubProvider",
    "LocalProvider",
    "Provider",
    "SvglProvider",
]
