from __future__ import annotations

import io
import textwrap

import pytest

from md_toc.config import ConfigError, TocConfig
from md_toc.exceptions import MissingMarkerError, WriteFailureError
from md_toc.headers import headers
from md_toc.models import Header
from md_toc.writer import locate_markers, render_document, select_headers, write_document


def _doc(content: str) -> str:
    return textwrap.dedent(content).lstrip()


def test_toc_replaces_region_between_markers():
    source = _doc(
        """
        # Project

        <!-- toc -->
        - [Stale](#stale)
        <!-- tocstop -->

        ## Install
        ## Usage
        """
    )

    assert render_document(source) == _doc(
        """
        # Project

        <!-- toc -->

        - [Project](#project)
          * [Install](#install)
          * [Usage](#usage)

        <!-- tocstop -->

        ## Install
        ## Usage
        """
    )


def test_rendering_is_idempotent():
    source = "# A\n<!-- toc -->\n<!-- tocstop -->\n## B\n### B\n"

    once = render_document(source)

    assert render_document(once) == once


def test_missing_stop_marker_inserts_after_start_marker():
    source = "# Title\n<!-- toc -->\nIntro text.\n## Section\n"

    result = render_document(source)

    assert result == (
        "# Title\n"
        "<!-- toc -->\n"
        "\n"
        "- [Title](#title)\n"
        "  * [Section](#section)\n"
        "\n"
        "<!-- tocstop -->\n"
        "Intro text.\n"
        "## Section\n"
    )
    assert render_document(result) == result


def test_missing_stop_marker_without_inserting_one():
    source = "<!-- toc -->\n# A\n"

    result = render_document(source, TocConfig(insert_stop_marker=False))

    assert result == "<!-- toc -->\n\n- [A](#a)\n\n# A\n"


def test_start_marker_on_last_line_gets_line_ending():
    assert render_document("# A\n<!-- toc -->") == (
        "# A\n<!-- toc -->\n\n- [A](#a)\n\n<!-- tocstop -->\n"
    )


def test_missing_start_marker_writes_nothing():
    destination = io.StringIO()

    with pytest.raises(MissingMarkerError) as excinfo:
        write_document("# A\n<!-- tocstop -->\n", destination)

    assert excinfo.value.marker == "<!-- toc -->"
    assert isinstance(excinfo.value, ValueError)
    assert destination.getvalue() == ""


def test_markers_must_match_whole_line():
    with pytest.raises(MissingMarkerError):
        render_document("Text <!-- toc --> inline\n  <!-- toc -->\n# A\n")


def test_markers_inside_code_fences_are_ignored():
    source = _doc(
        """
        ```markdown
        <!-- toc -->
        <!-- tocstop -->
        ```
        <!-- toc -->
        <!-- tocstop -->
        # Real
        """
    )

    result = render_document(source)

    assert result.startswith(
        "```markdown\n<!-- toc -->\n<!-- tocstop -->\n```\n<!-- toc -->\n\n- [Real](#real)\n"
    )
    assert result.endswith("\n<!-- tocstop -->\n# Real\n")


def test_only_marker_inside_fence_raises():
    with pytest.raises(MissingMarkerError):
        render_document("```\n<!-- toc -->\n```\n# A\n")


def test_content_after_stop_marker_is_preserved_verbatim():
    source = "<!-- toc -->\n<!-- tocstop -->\ntrailing  spaces  \r\n\nno newline"

    result = render_document(source)

    assert result.endswith("<!-- tocstop -->\ntrailing  spaces  \r\n\nno newline")


def test_crlf_documents_keep_crlf_line_endings():
    source = "# A\r\n<!-- toc -->\r\n<!-- tocstop -->\r\n## B\r\n"

    result = render_document(source)

    assert result == (
        "# A\r\n<!-- toc -->\r\n\r\n- [A](#a)\r\n  * [B](#b)\r\n\r\n<!-- tocstop -->\r\n## B\r\n"
    )
    assert render_document(result) == result


def test_custom_markers_and_style():
    config = TocConfig(start_marker="[[toc]]", stop_marker="[[/toc]]", style="numbers")

    result = render_document("[[toc]]\n[[/toc]]\n# A\n## B\n", config)

    assert result == "[[toc]]\n\n1. [A](#a)\n  1. [B](#b)\n\n[[/toc]]\n# A\n## B\n"


def test_level_range_filters_headers_but_keeps_anchors():
    source = "<!-- toc -->\n# Title\n## Part\n### Part\n#### Part\n"
    config = TocConfig(min_level=2, max_level=3, style="dashes")

    result = render_document(source, config)

    assert "- [Part](#part)\n  - [Part](#part-1)\n" in result
    assert "(#title)" not in result
    assert "(#part-2)" not in result


def test_toc_is_built_from_entire_source():
    source = "# Before\n<!-- toc -->\n<!-- tocstop -->\n# After\n"

    result = render_document(source)

    assert "- [Before](#before)\n- [After](#after)\n" in result


def test_caller_supplied_headers_are_used():
    supplied = [Header(2, "Custom", "custom-anchor")]

    result = render_document("<!-- toc -->\n# Ignored\n", headers=supplied)

    assert "- [Custom](#custom-anchor)\n" in result
    assert "(#ignored)" not in result


def test_empty_toc_still_writes_marker_block():
    assert render_document("<!-- toc -->\n<!-- tocstop -->\n") == (
        "<!-- toc -->\n\n\n<!-- tocstop -->\n"
    )


def test_write_failure_is_wrapped():
    class _FailingStream:
        def __init__(self):
            self.writes = 0

        def write(self, text: str) -> int:
            self.writes += 1
            raise OSError("device unavailable")

    destination = _FailingStream()

    with pytest.raises(WriteFailureError) as excinfo:
        write_document("<!-- toc -->\n# A\n", destination)

    assert isinstance(excinfo.value.__cause__, OSError)
    assert destination.writes == 1


def test_write_to_closed_stream_is_wrapped():
    destination = io.StringIO()
    destination.close()

    with pytest.raises(WriteFailureError):
        write_document("<!-- toc -->\n# A\n", destination)


def test_invalid_config_is_rejected_before_writing():
    destination = io.StringIO()

    with pytest.raises(ConfigError):
        write_document("<!-- toc -->\n", destination, TocConfig(min_level=4, max_level=2))

    assert destination.getvalue() == ""


def test_locate_markers_returns_indexes():
    lines = ["intro\n", "<!-- toc -->\n", "x\n", "<!-- tocstop -->\n", "<!-- tocstop -->\n"]

    assert locate_markers(lines, TocConfig()) == (1, 3)
    assert locate_markers(lines[:3], TocConfig()) == (1, None)
    assert locate_markers(lines[3:], TocConfig()) == (None, None)


def test_skip_title_lists_promoted_sections():
    source = "<!-- toc -->\n<!-- tocstop -->\n# Title\n## Intro\n"

    result = render_document(source, TocConfig(skip_title=True))

    assert result == "<!-- toc -->\n\n- [Intro](#intro)\n\n<!-- tocstop -->\n# Title\n## Intro\n"


def test_select_headers_skips_title_and_promotes():
    config = TocConfig(skip_title=True)

    selected = list(select_headers(headers("# Title\n## Intro\n### Detail\n# Appendix\n"), config))

    assert selected == [Header(1, "Intro", "intro"), Header(2, "Detail", "detail")]


def test_level_range_applies_before_promotion():
    config = TocConfig(skip_title=True, min_level=3)

    selected = list(select_headers(headers("## Part\n### Detail\n"), config))

    assert selected == [Header(2, "Detail", "detail")]


@pytest.mark.parametrize("bullet", ["#", "##", " #", "```", "~~~~"])
def test_bullets_that_change_document_structure_are_rejected(bullet: str):
    source = "<!-- toc -->\n<!-- tocstop -->\n# A\n"

    with pytest.raises(ConfigError):
        render_document(source, TocConfig(style="custom", bullet=bullet))


@pytest.mark.parametrize("bullet", ["#!", "``", "~", ">", "1)"])
def test_custom_bullet_output_is_stable(bullet: str):
    source = "<!-- toc -->\n<!-- tocstop -->\n# A\n## B\n"
    config = TocConfig(style="custom", bullet=bullet)

    once = render_document(source, config)

    assert render_document(once, config) == once
    assert f"{bullet} [A](#a)\n" in once


def test_byte_order_mark_before_start_marker_is_kept():
    source = "\ufeff<!-- toc -->\n<!-- tocstop -->\n# A\n"

    result = render_document(source)

    assert result == "\ufeff<!-- toc -->\n\n- [A](#a)\n\n<!-- tocstop -->\n# A\n"
    assert render_document(result) == result
