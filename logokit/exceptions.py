"""
Custom exceptions for the logo registry.
"""

from __future__ import annotations


class LogoError(Exception):
    """Base exception for registry-related errors."""

    pass


class SourceUnavailableError(LogoError):
    """A data source could not be reached or read."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{source} unavailable: {reason}")


class IndexLoadError(LogoError):
    """The bundled component index is malformed."""

    pass


class ConfigError(LogoError):
    """Invalid configuration value."""

    pass


class TemplateError(LogoError):
    """Error generating component source text."""

    pass


class ProjectError(LogoError):
    """The working directory is not a supported project."""

    pass


class TrackingError(LogoError):
    """Error writing the logos.json tracking file."""

    pass
