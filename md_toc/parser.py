"""Markdown heading scanner."""

from __future__ import annotations

from collections.abc import Iterator

from .constants import (
    ATX_CLOSING_SEQUENCE_PATTERN,
    ATX_HEADING_PATTERN,
    BLOCK_START_PATTERN,
    BYTE_ORDER_MARK,
    CLOSING_FENCE_MAX_INDENT,
    CODE_FENCE_PATTERN,
    INDENTED_CODE_COLUMNS,
    SETEXT_UNDERLINE_PATTERN,
)
from .models import ParserContext, ParserState


def strip_line_ending(line: str) -> str:
    """Remove a trailing ``\\n``, ``\\r\\n`` or ``\\r`` from a line."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def split_lines(content: str) -> list[str]:
    """Split content into lines that keep their line endings.

    Only ``\\n``, ``\\r\\n`` and ``\\r`` terminate a line, so joining the
    result always reproduces `content` exactly.

    Examples:
        split_lines("a\\r\\nb")  # ["a\\r\\n", "b"]
    """
    lines = []
    start = 0
    length = len(content)
    i = 0
    while i < length:
        character = content[i]
        if character == "\n":
            lines.append(content[start : i + 1])
            start = i + 1
        elif character == "\r":
            end = i + 2 if i + 1 < length and content[i + 1] == "\n" else i + 1
            lines.append(content[start:end])
            start = end
            i = end - 1
        i += 1
    if start < length:
        lines.append(content[start:])
    return lines


def _leading_whitespace_columns(line: str) -> int:
    """Compute the column width of leading whitespace.

    Tabs advance to the next multiple of four columns to match Markdown
    indentation rules.

    Examples:
        _leading_whitespace_columns("    text")  # 4
        _leading_whitespace_columns("\\ttext")  # 4
    """
    columns = 0
    for character in line:
        if character == " ":
            columns += 1
            continue
        if character == "\t":
            columns += 4 - (columns % 4)
            continue
        break
    return columns


def _try_open_fence(ctx: ParserContext, line: str, line_number: int = 0) -> bool:
    """Detect the start of a fenced code block.

    Args:
        ctx: Parser context to update when a fence opens.
        line: Current line being scanned.
        line_number: One-based number of the line, recorded on the context.

    Returns:
        bool: True when the line begins a fence and the context is updated.

    Examples:
        _try_open_fence(ParserContext(), "```python\\n")  # True
    """
    if ctx.state is not ParserState.NORMAL:
        return False

    fence_match = CODE_FENCE_PATTERN.match(line)
    if not fence_match:
        return False

    indent_columns = _leading_whitespace_columns(fence_match.group("indent") or "")
    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    fence_sequence = fence_match.group("fence")
    # Backtick fences cannot carry backticks in their info string
    if fence_sequence[0] == "`" and "`" in fence_match.group("info"):
        return False

    ctx.state = ParserState.IN_FENCED_CODE
    ctx.fence_char = fence_sequence[0]
    ctx.fence_length = len(fence_sequence)
    ctx.fence_indent_columns = indent_columns
    ctx.fence_line = line_number
    return True


def _try_close_fence(ctx: ParserContext, line: str) -> bool:
    """Attempt to close the active fenced code block.

    A closing fence uses the opening character, is at least as long as the
    opening run, is indented at most three columns and carries nothing but
    whitespace after the run.

    Examples:
        ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="`", fence_length=3)
        _try_close_fence(ctx, "```\\n")  # True
    """
    if ctx.state is not ParserState.IN_FENCED_CODE or ctx.fence_char is None:
        return False

    indent_columns = _leading_whitespace_columns(line)
    stripped_line = line.lstrip(" \t")
    if not stripped_line or stripped_line[0] != ctx.fence_char:
        return False

    fence_run_length = len(stripped_line) - len(stripped_line.lstrip(ctx.fence_char))
    if fence_run_length < ctx.fence_length:
        return False

    if stripped_line[fence_run_length:].strip():
        return False

    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    ctx.state = ParserState.NORMAL
    ctx.fence_char = None
    ctx.fence_length = 0
    ctx.fence_indent_columns = 0
    ctx.fence_line = None
    return True


def classify_lines(
    lines: list[str], ctx: ParserContext | None = None
) -> Iterator[tuple[str, bool]]:
    """Pair each line with whether it belongs to a fenced code block.

    Opening and closing fence lines count as code. When a fence is never
    closed, every remaining line is reported as code and `ctx` is left in the
    `ParserState.IN_FENCED_CODE` state with `fence_line` set.

    Args:
        lines: Document lines, with or without line endings.
        ctx: Optional context to drive; a fresh one is used when omitted.

    Yields:
        tuple[str, bool]: The line and True when it is inside a code fence.
    """
    ctx = ctx if ctx is not None else ParserContext()

    for line_number, line in enumerate(lines, start=1):
        if ctx.state is ParserState.IN_FENCED_CODE:
            _try_close_fence(ctx, line)
            yield line, True
            continue

        if _try_open_fence(ctx, line, line_number):
            yield line, True
            continue

        yield line, False


def parse_atx_heading(line: str) -> tuple[int, str] | None:
    """Parse a single ATX heading line.

    Args:
        line: Line without its line ending.

    Returns:
        tuple[int, str] | None: Heading level and trimmed title, or None when
            the line is not an ATX heading.

    Examples:
        parse_atx_heading("## Install ##")  # (2, "Install")
        parse_atx_heading("#hashtag")  # None
        parse_atx_heading("#")  # (1, "")
    """
    heading_match = ATX_HEADING_PATTERN.match(line)
    if not heading_match:
        return None

    level = len(heading_match.group("hashes"))
    title = (heading_match.group("title") or "").strip()
    title = ATX_CLOSING_SEQUENCE_PATTERN.sub("", title).strip()
    return level, title


class HeadingScanner:
    """Lazily scan a Markdown document for headings.

    Iterating the scanner yields ``(level, raw_title)`` pairs in document
    order. Headings inside fenced code blocks are skipped. A fence that is
    never closed hides the remainder of the document; the line number of its
    opening fence is then available as `unclosed_fence_line` once the scan is
    complete.

    Args:
        content: Full Markdown document.
        setext: Whether to recognize Setext headings (underlined with ``=`` or
            ``-``).

    Examples:
        list(HeadingScanner("# Title\\n## Intro\\n"))  # [(1, "Title"), (2, "Intro")]
    """

    def __init__(self, content: str, setext: bool = False):
        self.content = content.removeprefix(BYTE_ORDER_MARK)
        self.setext = setext
        self.unclosed_fence_line: int | None = None

    def __iter__(self) -> Iterator[tuple[int, str]]:
        ctx = ParserContext()
        paragraph: list[str] = []

        for raw_line, in_code in classify_lines(split_lines(self.content), ctx):
            line = strip_line_ending(raw_line)

            if in_code:
                paragraph.clear()
                continue

            heading = parse_atx_heading(line)
            if heading is not None:
                paragraph.clear()
                yield heading
                continue

            if not self.setext:
                continue

            underline = SETEXT_UNDERLINE_PATTERN.match(line)
            if underline and paragraph:
                level = 1 if underline.group("underline")[0] == "=" else 2
                yield level, " ".join(paragraph)
                paragraph.clear()
                continue

            if not line.strip() or underline or BLOCK_START_PATTERN.match(line):
                paragraph.clear()
            elif paragraph or _leading_whitespace_columns(line) < INDENTED_CODE_COLUMNS:
                paragraph.append(line.strip())

        if ctx.state is ParserState.IN_FENCED_CODE:
            self.unclosed_fence_line = ctx.fence_line


def scan_headings(content: str, setext: bool = False) -> Iterator[tuple[int, str]]:
    """Yield ``(level, raw_title)`` for each heading outside code fences.

    Examples:
        list(scan_headings("```\\n# Not a heading\\n```\\n"))  # []
    """
    return iter(HeadingScanner(content, setext=setext))
