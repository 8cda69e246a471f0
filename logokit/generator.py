"""
generator.py
--------------------
Turn a component's SVG into framework source text:
  - React (JSX or TSX function component)
  - Vue single-file component
"""

from __future__ import annotations

import re

from .constants import SUPPORTED_FRAMEWORKS
from .exceptions import TemplateError
from .svg_utils import _minify_svg, inject_root_attributes, to_jsx

__all__ = ["component_identifier", "file_extension", "generate"]

_REACT_ROOT_ATTRS = "className={className} width={width} height={height}"

_VUE_TEMPLATE = """<template>
  <div class="logo-container" :class="className" :style="{{ width: width, height: height }}">
    {svg}
  </div>
</template>

<script setup>
defineProps({{
  className: {{
    type: String,
    default: ''
  }},
  width: {{
    type: [Number, String],
    default: 24
  }},
  height: {{
    type: [Number, String],
    default: 24
  }}
}})
</script>

<style scoped>
.logo-container {{
  display: inline-flex;
  align-items: center;
  justify-content: center;
}}

.logo-container svg {{
  width: 100%;
  height: 100%;
}}
</style>
"""

_TSX_TEMPLATE = """import React from 'react';

interface {ident}LogoProps {{
  className?: string;
  width?: number | string;
  height?: number | string;
}}

export default function {ident}Logo({{ className, width = 24, height = 24 }}: {ident}LogoProps) {{
  return (
    {svg}
  );
}}
"""

_JSX_TEMPLATE = """import React from 'react';

export default function {ident}Logo({{ className, width = 24, height = 24 }}) {{
  return (
    {svg}
  );
}}
"""


def component_identifier(name: str) -> str:
    """'next-js' → 'NextJs', '1password' → 'Logo1password'."""
    words = [w for w in re.split(r"[^A-Za-z0-9]+", name) if w]
    ident = "".join(w[0].upper() + w[1:] for w in words)
    if not ident:
        raise TemplateError(f"Cannot derive a component identifier from '{name}'")
    if ident[0].isdigit():
        ident = "Logo" + ident
    return ident


def file_extension(framework: str, typescript: bool) -> str:
    if framework == "vue":
        return "vue"
    return "tsx" if typescript else "jsx"


def generate(name: str, svg: str, framework: str = "react", typescript: bool = False) -> str:
    """Return the component source for *svg*.

    Raises:
        TemplateError: For an unsupported framework.
    """
    if framework not in SUPPORTED_FRAMEWORKS:
        known = ", ".join(sorted(SUPPORTED_FRAMEWORKS))
        raise TemplateError(f"Unsupported framework '{framework}' (expected one of: {known})")

    if framework == "vue":
        return _VUE_TEMPLATE.format(svg=_minify_svg(svg))

    markup = inject_root_attributes(to_jsx(svg), _REACT_ROOT_ATTRS)
    template = _TSX_TEMPLATE if typescript else _JSX_TEMPLATE
    return template.format(ident=component_identifier(name), svg=markup)
