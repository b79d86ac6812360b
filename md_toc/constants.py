"""Constants used across the md-toc package."""

from __future__ import annotations

import re

# TOC markers
DEFAULT_START_MARKER = "<!-- toc -->"
DEFAULT_STOP_MARKER = "<!-- tocstop -->"

# Input
BYTE_ORDER_MARK = "\ufeff"

# Formatting
DEFAULT_INDENT_WIDTH = 2
ALTERNATING_BULLETS = ("-", "*", "+")
NUMBERS_MARKER = "1."
MIN_HEADER_LEVEL = 1
MAX_HEADER_LEVEL = 6

# Limits
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

# Markdown patterns
ATX_HEADING_PATTERN = re.compile(r"^ {0,3}(?P<hashes>#{1,6})(?:[ \t]+(?P<title>.*?))?[ \t]*$")
ATX_CLOSING_SEQUENCE_PATTERN = re.compile(r"(?:^|[ \t]+)#+$")
SETEXT_UNDERLINE_PATTERN = re.compile(r"^ {0,3}(?P<underline>=+|-+)[ \t]*$")
BLOCK_START_PATTERN = re.compile(r"^ {0,3}(?:[-+*][ \t]|\d{1,9}[.)][ \t]|>|<)")
CODE_FENCE_PATTERN = re.compile(r"^(?P<indent>\s{0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CLOSING_FENCE_MAX_INDENT = 3
INDENTED_CODE_COLUMNS = 4

# Inline markup patterns
HTML_TAG_PATTERN = re.compile(r"</?[A-Za-z][^>]*>")
UNDERSCORE_EMPHASIS_PATTERN = re.compile(r"(?<!\w)(_{1,2})(?=[^\s_])(.+?)(?<=[^\s_])\1(?!\w)")
