"""Injection of a generated table of contents between document markers."""

from __future__ import annotations

import io
from collections.abc import Iterable, Iterator
from typing import TextIO

from .config import TocConfig, normalize_config, resolve_style, validate_config
from .constants import BYTE_ORDER_MARK, MIN_HEADER_LEVEL
from .exceptions import MissingMarkerError, WriteFailureError
from .generator import format_toc
from .headers import Headers
from .models import Header, WriterState
from .parser import classify_lines, split_lines, strip_line_ending


def select_headers(headers: Iterable[Header], config: TocConfig) -> Iterator[Header]:
    """Lazily keep the headers whose level lies within the configured range.

    Anchors are assigned before filtering, so they match the full document.
    With ``skip_title`` set, level 1 headers are dropped and the others are
    promoted one level, so ``# Title\\n## Intro`` lists only ``Intro``.
    """
    for header in headers:
        if not config.min_level <= header.level <= config.max_level:
            continue
        if config.skip_title:
            if header.level == MIN_HEADER_LEVEL:
                continue
            header = header.promote()
        yield header


def locate_markers(lines: list[str], config: TocConfig) -> tuple[int | None, int | None]:
    """Find the start marker and the first stop marker after it.

    Only whole lines equal to a marker (line ending excluded) count, and lines
    inside fenced code blocks are ignored.

    Returns:
        tuple[int | None, int | None]: Zero-based indexes of the start and stop
            marker lines, None when a marker is absent.

    Examples:
        locate_markers(["<!-- toc -->\\n", "<!-- tocstop -->\\n"], TocConfig())  # (0, 1)
    """
    start_index = None
    for index, (line, in_code) in enumerate(classify_lines(lines)):
        if in_code:
            continue
        text = strip_line_ending(line)
        if start_index is None:
            if text == config.start_marker:
                start_index = index
        elif text == config.stop_marker:
            return start_index, index
    return start_index, None


def _line_ending(line: str) -> str:
    return line[len(strip_line_ending(line)) :]


def _emit(destination: TextIO, text: str) -> None:
    try:
        destination.write(text)
    except (OSError, ValueError) as error:
        raise WriteFailureError(f"Failed to write document: {error}") from error


def write_document(
    source: str,
    destination: TextIO,
    config: TocConfig | None = None,
    headers: Iterable[Header] | None = None,
) -> None:
    """Write `source` to `destination` with a fresh TOC between its markers.

    Lines before the start marker and after the stop marker are copied
    verbatim. Everything between the markers is replaced by a blank line,
    the generated TOC and another blank line. When no stop marker follows the
    start marker, the TOC is inserted right after the start marker, a stop
    marker line is added (unless ``insert_stop_marker`` is disabled) and the
    rest of the document is kept. Running the writer on its own output gives
    the same output.

    Args:
        source: Full Markdown document.
        destination: Object with a ``write(str)`` method.
        config: Markers, style and level range. Defaults to a new `TocConfig`.
        headers: Headers to render instead of those scanned from `source`.

    Raises:
        ConfigError: If the configuration fails validation.
        MissingMarkerError: If `source` has no start marker line; nothing is
            written in that case.
        WriteFailureError: If `destination` rejects a write.

    Examples:
        write_document("<!-- toc -->\\n# A\\n", sys.stdout)
    """
    config = normalize_config(config or TocConfig())
    validate_config(config)
    style = resolve_style(config)

    # A byte-order mark is kept in the output but never part of a marker line
    body = source.removeprefix(BYTE_ORDER_MARK)
    lines = split_lines(body)
    start_index, stop_index = locate_markers(lines, config)
    if start_index is None:
        raise MissingMarkerError(config.start_marker)

    if headers is None:
        headers = select_headers(Headers(source, setext=config.setext), config)

    ending = _line_ending(lines[start_index]) or "\n"
    toc = format_toc(headers, style, config.indent_width).replace("\n", ending)

    if len(body) != len(source):
        _emit(destination, BYTE_ORDER_MARK)

    state = WriterState.BEFORE_MARKER
    for index, line in enumerate(lines):
        if state is WriterState.BEFORE_MARKER:
            if index != start_index:
                _emit(destination, line)
                continue
            _emit(destination, strip_line_ending(line) + ending)
            _emit(destination, ending + toc + ending)
            if stop_index is not None:
                state = WriterState.INSIDE_MARKERS
                continue
            if config.insert_stop_marker:
                _emit(destination, config.stop_marker + ending)
            state = WriterState.AFTER_MARKER
        elif state is WriterState.INSIDE_MARKERS:
            if index == stop_index:
                _emit(destination, line)
                state = WriterState.AFTER_MARKER
        else:
            _emit(destination, line)


def render_document(
    source: str,
    config: TocConfig | None = None,
    headers: Iterable[Header] | None = None,
) -> str:
    """Return `source` with a fresh TOC between its markers.

    Raises:
        ConfigError: If the configuration fails validation.
        MissingMarkerError: If `source` has no start marker line.
    """
    buffer = io.StringIO()
    write_document(source, buffer, config=config, headers=headers)
    return buffer.getvalue()
