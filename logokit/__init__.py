"""
logokit package - SVG logo registry and component scaffolding.

Public API:
    registry        - LogoRegistry source selector / facade, build_registry factory
    providers       - GitHub, SVGL and local data sources
    component_index - Bundled index loading and regeneration
    models          - Component, index and stats models
    config          - RegistrySettings (environment-driven)
    generator       - React / Vue component text generation
    project         - Host project files and logos.json tracking
    paths           - Package path constants
"""

from . import (
    component_index,
    config,
    constants,
    exceptions,
    generator,
    models,
    paths,
    project,
    providers,
    registry,
    svg_utils,
    utils,
)
from .registry import LogoRegistry, build_registry

__all__ = [
    "LogoRegistry",
    "build_registry",
    "component_index",
    "config",
    "constants",
    "exceptions",
    "generator",
    "models",
    "paths",
    "project",
    "providers",
    "registry",
    "svg_utils",
    "utils",
]
