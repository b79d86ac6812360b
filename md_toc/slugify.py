"""Slug generation for markdown headers."""

from __future__ import annotations

import unicodedata

from .constants import HTML_TAG_PATTERN, UNDERSCORE_EMPHASIS_PATTERN

# Letters, marks, numbers and connector punctuation (``_``) survive in slugs
_KEPT_CATEGORIES = ("L", "M", "N", "Pc")
_CODE_PLACEHOLDER = "\x00{}\x00"


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether a character is escaped by preceding backslashes.

    Counts consecutive backslashes immediately before `pos`; an odd count marks
    the character as escaped.

    Examples:
        is_escaped("\\\\*", 2)  # False, two backslashes
        is_escaped("\\*", 1)  # True, one backslash
    """
    backslash_count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        backslash_count += 1
        i -= 1
    return backslash_count % 2 == 1


def find_inline_code_spans(text: str) -> list[tuple[int, int, int]]:
    """Locate inline code spans using CommonMark-style backticks.

    A span opens with an unescaped backtick run and closes with the next run
    of exactly the same length. An opening run without a match is literal
    text and scanning resumes right after it.

    Args:
        text: The text to scan for inline code spans.

    Returns:
        list[tuple[int, int, int]]: Start (inclusive), end (exclusive) and
            delimiter length of each span.

    Examples:
        find_inline_code_spans("`code`")  # [(0, 6, 1)]
        find_inline_code_spans("``more`` text")  # [(0, 8, 2)]
    """
    spans = []
    i = 0

    while i < len(text):
        if text[i] != "`" or is_escaped(text, i):
            i += 1
            continue

        start = i
        while i < len(text) and text[i] == "`":
            i += 1
        delimiter = i - start

        j = i
        closed_at = None
        while j < len(text):
            if text[j] != "`":
                j += 1
                continue
            run_start = j
            while j < len(text) and text[j] == "`":
                j += 1
            if j - run_start == delimiter:
                closed_at = j
                break

        if closed_at is not None:
            spans.append((start, closed_at, delimiter))
            i = closed_at

    return spans


def _code_span_content(text: str, start: int, end: int, delimiter: int) -> str:
    content = text[start + delimiter : end - delimiter]
    # One space of padding on both sides is not part of the content
    if len(content) > 2 and content[0] == " " and content[-1] == " " and content.strip():
        content = content[1:-1]
    return content


def _find_closing(text: str, start: int, opener: str, closer: str) -> int | None:
    """Return the index just past the bracket closing the one at `start`."""
    depth = 0
    i = start
    while i < len(text):
        character = text[i]
        if character == "\\":
            i += 2
            continue
        if character == opener:
            depth += 1
        elif character == closer:
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None


def _link_target_end(text: str, pos: int) -> int | None:
    """Return the index just past a link destination starting at `pos`."""
    if text.startswith("(<", pos):
        close = text.find(">", pos + 2)
        if close == -1:
            return None
        k = close + 1
        while k < len(text) and text[k] in " \t":
            k += 1
        return k + 1 if k < len(text) and text[k] == ")" else None
    if text.startswith("(", pos):
        return _find_closing(text, pos, "(", ")")
    if text.startswith("[", pos):
        return _find_closing(text, pos, "[", "]")
    return None


def strip_markdown_links(text: str) -> str:
    r"""Replace inline, reference and image links with their visible text.

    Nested brackets, parentheses inside URLs, angle-bracket destinations and
    links wrapped around images (badges) are handled. Escaped brackets and
    escaped image markers (``\!``) stay literal.

    Examples:
        strip_markdown_links("[title](https://example.com)")  # "title"
        strip_markdown_links("See [docs][ref] now")  # "See docs now"
        strip_markdown_links("[![badge](img.svg)](ci)")  # "badge"
    """
    result = []
    i = 0

    while i < len(text):
        if text[i] == "[" and not is_escaped(text, i):
            label_end = _find_closing(text, i, "[", "]")
            target_end = _link_target_end(text, label_end) if label_end is not None else None
            if target_end is not None:
                if i > 0 and text[i - 1] == "!" and not is_escaped(text, i - 1):
                    result.pop()
                result.append(strip_markdown_links(text[i + 1 : label_end - 1]))
                i = target_end
                continue
        result.append(text[i])
        i += 1

    return "".join(result)


def strip_inline_markup(text: str) -> str:
    """Remove inline Markdown and HTML markup while keeping visible text.

    Code spans lose their backticks but their content is left untouched.
    Outside code spans, links and images keep only their text, ``_``/``__``
    emphasis pairs are unwrapped and HTML tags are removed.

    Examples:
        strip_inline_markup("Use `[link](url)` and [docs](x)")  # "Use [link](url) and docs"
        strip_inline_markup("_x_ test <sup>2</sup>")  # "x test 2"
    """
    code_contents = []
    parts = []
    offset = 0

    for start, end, delimiter in find_inline_code_spans(text):
        parts.append(text[offset:start])
        parts.append(_CODE_PLACEHOLDER.format(len(code_contents)))
        code_contents.append(_code_span_content(text, start, end, delimiter))
        offset = end
    parts.append(text[offset:])

    stripped = strip_markdown_links("".join(parts))
    stripped = HTML_TAG_PATTERN.sub("", stripped)
    stripped = UNDERSCORE_EMPHASIS_PATTERN.sub(r"\2", stripped)

    for index, content in enumerate(code_contents):
        stripped = stripped.replace(_CODE_PLACEHOLDER.format(index), content)

    return stripped


def titleize(title: str) -> str:
    """Normalize a raw heading title for display.

    HTML tags outside code spans are removed and whitespace runs collapse to
    a single space. Markdown syntax is preserved.

    Examples:
        titleize("<blink>A   Title</blink>")  # "A Title"
        titleize("Use `<div>`")  # "Use `<div>`"
    """
    parts = []
    offset = 0
    for start, end, _ in find_inline_code_spans(title):
        parts.append(HTML_TAG_PATTERN.sub("", title[offset:start]))
        parts.append(title[start:end])
        offset = end
    parts.append(HTML_TAG_PATTERN.sub("", title[offset:]))

    return " ".join("".join(parts).split())


def generate_slug(title: str) -> str:
    """Generate a GitHub-style base slug from a Markdown header title.

    The title is lowercased, stripped of inline markup, reduced to Unicode
    letters, marks, digits, spaces, hyphens and underscores, and every space
    becomes a hyphen. Consecutive hyphens are kept as they are.

    Args:
        title: The header text to convert into a slug.

    Returns:
        str: Slug suitable for anchor links; may be empty.

    Examples:
        generate_slug("Hello World")  # "hello-world"
        generate_slug("Foo & Bar")  # "foo--bar"
        generate_slug("Русский")  # "русский"
    """
    text = strip_inline_markup(title.lower())
    kept = (
        character
        for character in text
        if character in " -" or unicodedata.category(character).startswith(_KEPT_CATEGORIES)
    )
    return "".join(kept).replace(" ", "-")


class AnchorSlugger:
    """Disambiguation table turning titles into unique anchors.

    Maps each emitted slug to the number of times its base has been reused.
    The first occurrence of a base slug is returned as is; the Nth occurrence
    gets the ``-{N-1}`` suffix. Suffixed slugs are recorded too, so a title
    whose own slug equals an earlier suffixed one keeps counting, as GitHub
    does.

    Examples:
        slugger = AnchorSlugger()
        [slugger.slug(t) for t in ("Foo", "Foo", "Foo 1")]  # ["foo", "foo-1", "foo-1-1"]
    """

    def __init__(self):
        self.occurrences: dict[str, int] = {}

    def slug(self, title: str) -> str:
        """Return the unique anchor for `title` and record it."""
        return self.unique(generate_slug(title))

    def unique(self, base: str) -> str:
        """Return `base`, suffixed when needed to avoid earlier anchors."""
        candidate = base
        while candidate in self.occurrences:
            self.occurrences[base] += 1
            candidate = f"{base}-{self.occurrences[base]}"
        self.occurrences[candidate] = 0
        return candidate
