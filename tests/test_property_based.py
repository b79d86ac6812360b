from __future__ import annotations

import re
import string

from hypothesis import assume, given
from hypothesis import strategies as st

from md_toc.constants import CLOSING_FENCE_MAX_INDENT
from md_toc.generator import format_toc
from md_toc.headers import headers
from md_toc.models import AlternatingBullets, Header, Numbers, ParserContext, ParserState
from md_toc.parser import _try_close_fence, _try_open_fence, scan_headings, split_lines
from md_toc.slugify import AnchorSlugger, generate_slug
from md_toc.writer import render_document

title_strategy = st.text(
    alphabet=string.ascii_letters + string.digits + " _-",
    min_size=1,
    max_size=32,
).filter(lambda title: title.strip())

heading_strategy = st.lists(
    st.tuples(st.integers(min_value=1, max_value=6), title_strategy), min_size=1, max_size=20
)


def _document(data: list[tuple[int, str]]) -> str:
    return "".join(f"{'#' * level} {title}\n" for level, title in data)


@given(st.text())
def test_generate_slug_has_no_spaces_and_is_lowercase(title: str):
    slug = generate_slug(title)

    assert " " not in slug
    assert slug == slug.lower()


@given(st.text(alphabet=string.ascii_letters + string.digits + " -", max_size=32))
def test_generate_slug_is_idempotent_without_markup(title: str):
    slug = generate_slug(title)

    assert generate_slug(slug) == slug


@given(st.lists(title_strategy, min_size=1, max_size=30))
def test_all_generated_anchors_are_unique(titles: list[str]):
    """Property: All anchors in a document must be unique, even with duplicate headers."""
    slugger = AnchorSlugger()

    anchors = [slugger.slug(title) for title in titles]

    assert len(anchors) == len(set(anchors)), f"Found duplicate anchors: {anchors}"


@given(title_strategy, st.integers(min_value=1, max_value=15))
def test_repeated_title_is_numbered_sequentially(title: str, repeats: int):
    base = generate_slug(title.strip())

    anchors = [header.anchor for header in headers(f"## {title}\n" * repeats)]

    assert anchors == [base] + [f"{base}-{n}" for n in range(1, repeats)]


@given(heading_strategy)
def test_formatter_emits_one_line_per_header(data):
    toc = format_toc(headers(_document(data)), AlternatingBullets())

    assert len(toc.splitlines()) == len(data)
    assert toc.endswith("\n")


@given(heading_strategy)
def test_promote_keeps_title_and_anchor(data):
    for header in headers(_document(data)):
        promoted = header.promote()
        assert promoted.level == max(header.level - 1, 1)
        assert (promoted.title, promoted.anchor) == (header.title, header.anchor)


@given(heading_strategy, st.text(alphabet=string.ascii_letters + " \n", max_size=80))
def test_document_writer_is_idempotent(data, prose: str):
    source = f"{prose}\n<!-- toc -->\n{_document(data)}"

    once = render_document(source)

    assert render_document(once) == once


@given(heading_strategy)
def test_toc_links_match_header_anchors(data):
    content = _document(data)
    expected = [header.anchor for header in headers(content)]

    toc = format_toc(headers(content), Numbers())

    assert re.findall(r"\]\(#([^)]*)\)$", toc, flags=re.MULTILINE) == expected


@given(st.text(max_size=200))
def test_scanning_is_deterministic(content: str):
    assert list(scan_headings(content)) == list(scan_headings(content))


@given(st.text(max_size=200))
def test_split_lines_round_trips(content: str):
    assert "".join(split_lines(content)) == content


@given(
    st.integers(min_value=0, max_value=3),
    st.sampled_from(["`", "~"]),
    st.integers(min_value=3, max_value=10),
    st.integers(min_value=0, max_value=3),
)
def test_parser_context_resets_after_fence_cycle(
    indent_columns: int, fence_char: str, fence_length: int, additional_indent: int
):
    ctx = ParserContext()

    open_line = f"{' ' * indent_columns}{fence_char * fence_length}"
    close_line = f"{' ' * (indent_columns + additional_indent)}{fence_char * (fence_length + 1)}"
    assume(indent_columns + additional_indent <= CLOSING_FENCE_MAX_INDENT)

    assert _try_open_fence(ctx, open_line) is True
    assert ctx.state is ParserState.IN_FENCED_CODE

    assert _try_close_fence(ctx, close_line) is True
    assert ctx.state is ParserState.NORMAL
    assert ctx.fence_char is None
    assert ctx.fence_length == 0


@given(st.sampled_from([Header(1, "A", "a"), Header(6, "F", "f")]))
def test_demote_never_exceeds_level_six(header: Header):
    assert 1 <= header.demote().level <= 6
