"""Data models for md-toc."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Union

from .constants import MAX_HEADER_LEVEL, MIN_HEADER_LEVEL


class ParserState(Enum):
    """Parser states used while scanning Markdown content.

    Attributes:
        NORMAL: Default state for regular text.
        IN_FENCED_CODE: Inside a fenced code block.
    """

    NORMAL = auto()
    IN_FENCED_CODE = auto()


@dataclass
class ParserContext:
    """Encapsulate parser state while walking Markdown text.

    Attributes:
        state: Current parser state.
        fence_char: Fence character that opened a fenced code block, if any.
        fence_length: Number of fence characters that opened the block.
        fence_indent_columns: Indentation width preceding the opening fence.
        fence_line: One-based line number of the opening fence, if any.
    """

    state: ParserState = ParserState.NORMAL
    fence_char: str | None = None
    fence_length: int = 0
    fence_indent_columns: int = 0
    fence_line: int | None = None


class WriterState(Enum):
    """Positions of the document writer relative to the TOC markers."""

    BEFORE_MARKER = auto()
    INSIDE_MARKERS = auto()
    AFTER_MARKER = auto()


@dataclass(frozen=True)
class Header:
    """A heading entry from a parsed Markdown document.

    Headers are produced by iterating `md_toc.headers.headers`. The anchor is
    computed once at scan time and never changes under level transforms.

    Attributes:
        level: Heading level, from 1 to 6.
        title: Normalized display title (inline Markdown kept).
        anchor: URL fragment without the leading ``#``.

    Examples:
        Header(level=2, title="Intro", anchor="intro").promote().level  # 1
        str(Header(level=1, title="Intro", anchor="intro"))  # "[Intro](#intro)"
    """

    level: int
    title: str
    anchor: str

    def __post_init__(self):
        if isinstance(self.level, bool) or not isinstance(self.level, int):
            raise ValueError(f"Header level must be an integer, got {self.level!r}")
        if not MIN_HEADER_LEVEL <= self.level <= MAX_HEADER_LEVEL:
            raise ValueError(
                f"Header level must be between {MIN_HEADER_LEVEL} and {MAX_HEADER_LEVEL}, "
                f"got {self.level}"
            )

    def __str__(self) -> str:
        return f"[{self.title}](#{self.anchor})"

    def promote(self) -> Header:
        """Return a copy one level higher in the hierarchy, floored at level 1."""
        return replace(self, level=max(self.level - 1, MIN_HEADER_LEVEL))

    def demote(self) -> Header:
        """Return a copy one level lower in the hierarchy, capped at level 6."""
        return replace(self, level=min(self.level + 1, MAX_HEADER_LEVEL))

    def into_title(self) -> str:
        """Return the display title, for use as ``map(Header.into_title, headers)``."""
        return self.title

    def into_anchor(self) -> str:
        """Return the anchor without the leading ``#``."""
        return self.anchor


@dataclass(frozen=True)
class Numbers:
    """Ordered list style; every entry uses the ``1.`` marker."""


@dataclass(frozen=True)
class AlternatingBullets:
    """Bullet style cycling through ``-``, ``*`` and ``+`` by nesting depth."""


@dataclass(frozen=True)
class Custom:
    """Bullet style repeating a single user-supplied glyph at every depth.

    Attributes:
        glyph: Bullet string placed before each entry.
    """

    glyph: str


Style = Union[Numbers, AlternatingBullets, Custom]
