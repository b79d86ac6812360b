"""Lazy sequence of headers with unique anchors."""

from __future__ import annotations

from collections.abc import Iterator

from .models import Header
from .parser import HeadingScanner
from .slugify import AnchorSlugger, titleize


class Headers:
    """Single-pass iterator of `Header` values for one Markdown document.

    The sequence owns the anchor disambiguation table for the duration of the
    pass, so anchors depend on every header produced before them. Once
    exhausted it stays exhausted; build a new sequence to scan again.

    Args:
        content: Full Markdown document.
        setext: Whether Setext headings are recognized.

    Examples:
        [h.anchor for h in Headers("# A\\n# A\\n")]  # ["a", "a-1"]
    """

    def __init__(self, content: str, setext: bool = False):
        self._scanner = HeadingScanner(content, setext=setext)
        self._headings = iter(self._scanner)
        self._slugger = AnchorSlugger()

    def __iter__(self) -> Iterator[Header]:
        return self

    def __next__(self) -> Header:
        level, raw_title = next(self._headings)
        return Header(level=level, title=titleize(raw_title), anchor=self._slugger.slug(raw_title))

    @property
    def unclosed_fence_line(self) -> int | None:
        """Line of a fence left open at the end of the document, once exhausted."""
        return self._scanner.unclosed_fence_line


def headers(content: str, setext: bool = False) -> Headers:
    """Return the lazy header sequence for `content`.

    Examples:
        [h.title for h in headers("# Title\\n## Intro\\n") if h.level == 2]  # ["Intro"]
    """
    return Headers(content, setext=setext)
