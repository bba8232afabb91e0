"""
Changelog output formats.

Each renderer turns a ChangeLog into deterministic text. Renderers are
looked up by format token, which is also the output file extension:

- **txt**: Plain text with styled banners (coloured on a terminal)
- **md**: Markdown with inline-styled headings
- **html**: Standalone HTML page, one table per bucket
- **rtf**: Rich Text Format document

Usage::

    from changeloggen.formats import get_renderer, RenderOptions

    renderer = get_renderer('md')
    renderer.write(changelog, RenderOptions(), sys.stdout)
"""

from typing import Dict, Type

from .base import (
    Palette,
    Renderer,
    RenderOptions,
    StyledLine,
    TERMINAL_STYLES,
    format_long_date,
)
from .html import HtmlRenderer
from .markdown import MarkdownRenderer
from .rtf import RtfRenderer, escape_rtf
from .text import TextRenderer

FORMATS: Dict[str, Type[Renderer]] = {
    renderer.name: renderer
    for renderer in (TextRenderer, MarkdownRenderer, HtmlRenderer, RtfRenderer)
}


def get_renderer(fmt: str) -> Renderer:
    """Return a renderer instance for a format token (case-insensitive)."""
    try:
        return FORMATS[fmt.lower()]()
    except KeyError:
        raise ValueError(f"Unknown format: {fmt}") from None


__all__ = [
    'FORMATS',
    'get_renderer',
    'Palette',
    'Renderer',
    'RenderOptions',
    'StyledLine',
    'TERMINAL_STYLES',
    'format_long_date',
    'escape_rtf',
    'HtmlRenderer',
    'MarkdownRenderer',
    'RtfRenderer',
    'TextRenderer',
]
