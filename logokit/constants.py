"""
constants.py
--------------------
Shared constants for the logo registry:
  - data source keys and fallback order
  - remote endpoint defaults
  - compiled regex patterns
  - SVG cleaning patterns
"""

import re
from enum import StrEnum


class SourceKey(StrEnum):
    GITHUB = "github"
    SVGL = "svgl"
    LOCAL = "local"


# Source the bundled index is generated from; the index answers for no other.
DEFAULT_SOURCE = SourceKey.GITHUB
INDEX_SOURCE = SourceKey.GITHUB

# Catalog falls back to the GitHub listing, which falls back to local files.
FALLBACK_ORDER: tuple[SourceKey, ...] = (
    SourceKey.SVGL,
    SourceKey.GITHUB,
    SourceKey.LOCAL,
)

# Remote endpoints

DEFAULT_GITHUB_REPO = "bhaveshsinghal95182/logos"
DEFAULT_GITHUB_BRANCH = "main"
DEFAULT_GITHUB_PATH = "registry/components"
GITHUB_API_URL = "https://api.github.com"
GITHUB_RAW_URL = "https://raw.githubusercontent.com"
DEFAULT_SVGL_URL = "https://api.svgl.app"

DEFAULT_TIMEOUT = 15.0
DEFAULT_MAX_CONCURRENCY = 8

SVG_SUFFIX = ".svg"
INDEX_FILENAME = "component-index.json"
BUNDLED_INDEX_LABEL = "bundled-index"

# Regex patterns

# Canonical names: whitespace runs become a hyphen, anything else non [a-z0-9-] is dropped
_WHITESPACE_RE = re.compile(r"\s+")
_NAME_STRIP_RE = re.compile(r"[^a-z0-9-]")

# SVG cleaning

# Ordered list of (compiled regex, replacement) applied before templating
_MINIFY_PATTERNS: list[tuple[re.Pattern, str]] = [
    # XML declaration
    (re.compile(r'<\?xml[^?]*\?>\s*\n?'), ''),
    # DOCTYPE declaration (handles quoted system identifiers)
    (re.compile(r'<!DOCTYPE[^[>]*(?:\[[^\]]*\])?\s*>\s*\n?', re.DOTALL), ''),
    # Comments
    (re.compile(r'<!--.*?-->', re.DOTALL), ''),
    # <metadata>...</metadata> block
    (re.compile(r'\s*<metadata\b[^>]*>.*?</metadata>\s*', re.DOTALL), '\n'),
    # Inkscape / sodipodi self-closing elements
    (re.compile(r'\s*<(?:sodipodi|inkscape):[^\s>][^/]*/>\s*', re.DOTALL), ''),
    # Inkscape / sodipodi block elements
    (re.compile(
        r'\s*<(sodipodi|inkscape):[^\s>][^>]*>.*?</\1:[^>]*>\s*', re.DOTALL
    ), ''),
    # Collapse 3+ consecutive blank lines to one
    (re.compile(r'\n{3,}'), '\n\n'),
]

# Hyphenated / namespaced SVG attributes → React prop names
JSX_ATTRIBUTE_MAP: dict[str, str] = {
    "fill-rule":         "fillRule",
    "fill-opacity":      "fillOpacity",
    "clip-rule":         "clipRule",
    "clip-path":         "clipPath",
    "stroke-width":      "strokeWidth",
    "stroke-linecap":    "strokeLinecap",
    "stroke-linejoin":   "strokeLinejoin",
    "stroke-miterlimit": "strokeMiterlimit",
    "stroke-opacity":    "strokeOpacity",
    "stroke-dasharray":  "strokeDasharray",
    "stop-color":        "stopColor",
    "stop-opacity":      "stopOpacity",
    "xmlns:xlink":       "xmlnsXlink",
    "xlink:href":        "xlinkHref",
    "xml:space":         "xmlSpace",
    "class":             "className",
}

# Project detection

SUPPORTED_FRAMEWORKS: frozenset[str] = frozenset({"react", "vue"})
PROJECT_DEPENDENCIES: frozenset[str] = frozenset({"react", "react-dom", "solid-js", "vue"})
PROJECT_CONFIG_FILES: tuple[str, ...] = (
    "vite.config.js",
    "vite.config.ts",
    "next.config.js",
    "next.config.mjs",
    "tsconfig.json",
)
TRACKING_FILENAME = "logos.json"
