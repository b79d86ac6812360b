"""Table of contents rendering for parsed headers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TextIO

from .config import ConfigError
from .constants import ALTERNATING_BULLETS, DEFAULT_INDENT_WIDTH, NUMBERS_MARKER
from .models import AlternatingBullets, Custom, Header, Numbers, Style


def bullet_for(style: Style, depth: int) -> str:
    """Return the list marker used by `style` at nesting `depth`.

    Raises:
        TypeError: If `style` is not one of the known style variants.

    Examples:
        bullet_for(AlternatingBullets(), 4)  # "*"
        bullet_for(Custom("-"), 4)  # "-"
    """
    if isinstance(style, Numbers):
        return NUMBERS_MARKER
    if isinstance(style, AlternatingBullets):
        return ALTERNATING_BULLETS[depth % len(ALTERNATING_BULLETS)]
    if isinstance(style, Custom):
        return style.glyph
    raise TypeError(f"Unsupported TOC style: {style!r}")


def render_entries(
    headers: Iterable[Header], style: Style, indent_width: int = DEFAULT_INDENT_WIDTH
) -> Iterator[str]:
    """Yield one formatted TOC line per header, each ending with a newline.

    Nesting depth is measured from the level of the first header; later
    headers above that level are rendered at depth zero.

    Args:
        headers: Headers in document order.
        style: List style deciding the marker of each entry.
        indent_width: Spaces per nesting level.

    Yields:
        str: Lines such as ``"  * [Intro](#intro)\\n"``.

    Raises:
        ConfigError: If `indent_width` is lower than 1.
        TypeError: If `style` is not a known style variant.
    """
    if isinstance(indent_width, bool) or not isinstance(indent_width, int) or indent_width < 1:
        raise ConfigError(f"indent_width must be a positive integer, got {indent_width!r}")

    base_level = None
    for header in headers:
        if base_level is None:
            base_level = header.level
        depth = max(header.level - base_level, 0)
        yield f"{' ' * (indent_width * depth)}{bullet_for(style, depth)} {header}\n"


def format_toc(
    headers: Iterable[Header], style: Style, indent_width: int = DEFAULT_INDENT_WIDTH
) -> str:
    """Render the complete TOC block as a string.

    Examples:
        format_toc(headers("# A\\n## B\\n"), AlternatingBullets())  # "- [A](#a)\\n  * [B](#b)\\n"
        format_toc([], Numbers())  # ""
    """
    return "".join(render_entries(headers, style, indent_width))


def write_toc(
    headers: Iterable[Header],
    destination: TextIO,
    style: Style,
    indent_width: int = DEFAULT_INDENT_WIDTH,
) -> None:
    """Stream the TOC to `destination` one line at a time.

    Errors raised by ``destination.write`` propagate unchanged.
    """
    for line in render_entries(headers, style, indent_width):
        destination.write(line)
