"""
svg_utils.py
--------------------
SVG cleaning and JSX attribute conversion used before templating.
"""

import re

from .constants import JSX_ATTRIBUTE_MAP, _MINIFY_PATTERNS

_ATTR_RE = re.compile(
    r'(?<=\s)(' + "|".join(re.escape(attr) for attr in JSX_ATTRIBUTE_MAP) + r')(?=\s*=)'
)


def _minify_svg(content: str) -> str:
    """Strip XML declaration, DOCTYPE, comments, and editor metadata bloat from SVG."""
    for pattern, replacement in _MINIFY_PATTERNS:
        content = pattern.sub(replacement, content)
    return content.strip()


def to_jsx(content: str) -> str:
    """Clean *content* and rename hyphenated attributes to their React prop names."""
    return _ATTR_RE.sub(lambda m: JSX_ATTRIBUTE_MAP[m.group(1)], _minify_svg(content))


def inject_root_attributes(svg: str, attributes: str) -> str:
    """Insert *attributes* right after the first ``<svg`` tag name."""
    return svg.replace("<svg", f"<svg {attributes}", 1)
