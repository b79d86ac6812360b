from __future__ import annotations

import textwrap

from md_toc.headers import Headers, headers
from md_toc.models import Header

SAMPLE = "# Title\n## Introduction\n## Body\n### Detail\n### Detail\n## Conclusion"


def test_headers_combine_levels_titles_and_anchors():
    content = textwrap.dedent(
        """
        # Title

        ## Intro
        ## Body
        ### Detail
        ### Detail
        ## Conclusion
        """
    )

    assert list(headers(content)) == [
        Header(1, "Title", "title"),
        Header(2, "Intro", "intro"),
        Header(2, "Body", "body"),
        Header(3, "Detail", "detail"),
        Header(3, "Detail", "detail-1"),
        Header(2, "Conclusion", "conclusion"),
    ]


def test_filtering_by_level_keeps_document_order():
    level_two = [header.title for header in headers(SAMPLE) if header.level == 2]

    assert level_two == ["Introduction", "Body", "Conclusion"]


def test_promoted_headers_keep_titles_and_anchors():
    promoted = [header.promote() for header in headers(SAMPLE)]

    assert [header.level for header in promoted] == [1, 1, 1, 2, 2, 1]
    assert [header.anchor for header in promoted] == [
        "title",
        "introduction",
        "body",
        "detail",
        "detail-1",
        "conclusion",
    ]


def test_unique_titles_get_unsuffixed_anchors():
    content = "# Alpha\n## Beta\n### Gamma\n"

    assert list(map(Header.into_anchor, headers(content))) == ["alpha", "beta", "gamma"]


def test_repeated_titles_are_numbered_in_order():
    content = "## Setup\n" * 4

    assert [header.anchor for header in headers(content)] == [
        "setup",
        "setup-1",
        "setup-2",
        "setup-3",
    ]


def test_display_title_keeps_markdown_and_drops_html():
    [header] = headers("## Using `git` <em>quickly</em>\n")

    assert header.title == "Using `git` quickly"
    assert header.anchor == "using-git-quickly"


def test_headers_is_single_pass():
    sequence = Headers("# One\n# Two\n")

    assert iter(sequence) is sequence
    assert len(list(sequence)) == 2
    assert list(sequence) == []


def test_each_sequence_owns_its_anchor_table():
    content = "# Same\n"

    assert [h.anchor for h in headers(content)] == ["same"]
    assert [h.anchor for h in headers(content)] == ["same"]


def test_headings_in_code_fences_produce_no_headers():
    content = "# Real\n```\n# Fake\n```\n"

    assert list(map(Header.into_title, headers(content))) == ["Real"]


def test_unclosed_fence_line_is_reported_after_exhaustion():
    sequence = Headers("# Real\n~~~\n# Hidden\n")

    assert [header.title for header in sequence] == ["Real"]
    assert sequence.unclosed_fence_line == 2


def test_setext_headers_get_anchors():
    sequence = headers("Overview\n========\n\n## Overview\n", setext=True)

    assert [(h.level, h.anchor) for h in sequence] == [(1, "overview"), (2, "overview-1")]
