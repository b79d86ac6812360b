"""
Generates a table of contents for a Markdown document.

The TOC is written between the start and stop markers of the document and the
result is printed, saved to another file, or written back in place.
"""

from __future__ import annotations

import difflib
import os
from pathlib import Path

import click

from . import __version__
from .config import STYLE_ALIASES, STYLE_CHOICES, ConfigError, build_config, resolve_style
from .exceptions import MissingMarkerError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    read_document,
    write_atomically,
)
from .generator import format_toc
from .headers import Headers
from .writer import render_document, select_headers

__all__ = ["cli"]


def _echo_progress(verbose: int, message: str, level: int = 1) -> None:
    """Print a progress message to standard error when ``-v`` is given often enough."""
    if verbose >= level:
        click.echo(message, err=True)


def _read_input(
    input_file: Path | None, max_file_size: int, verbose: int = 0
) -> tuple[str, os.stat_result | None]:
    if input_file is None:
        _echo_progress(verbose, "Reading document from standard input", level=2)
        return click.get_text_stream("stdin").read(), None

    try:
        max_size = get_max_file_size(default=max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = collect_file_stat(input_file)
        enforce_file_size(initial_stat, max_size, input_file)
        content = read_document(input_file)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    _echo_progress(verbose, f"Read {len(content)} characters from {input_file}")
    return content, initial_stat


def _report_diff(original: str, updated: str, name: str) -> None:
    diff = difflib.unified_diff(
        original.splitlines(keepends=True),
        updated.splitlines(keepends=True),
        fromfile=name,
        tofile=f"{name} (updated)",
    )
    click.echo("".join(diff), err=True, nl=False)


@click.command()
@click.version_option(version=__version__, prog_name="md-toc")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the result to this file instead of standard output.",
)
@click.option("-i", "--in-place", is_flag=True, help="Rewrite INPUT with the updated TOC.")
@click.option("--check", is_flag=True, help="Exit with status 1 when the TOC is out of date.")
@click.option(
    "-s",
    "--style",
    type=click.Choice([*STYLE_CHOICES, *STYLE_ALIASES]),
    help="List style of the TOC entries.",
)
@click.option("--bullet", help="Bullet glyph for the custom style.")
@click.option("-b", "--start-marker", help="Line after which the TOC is placed.")
@click.option("-e", "--stop-marker", help="Line that ends the TOC.")
@click.option("--indent-width", type=int, help="Spaces per nesting level.")
@click.option("--min-level", type=int, help="Minimum header level.")
@click.option("--max-level", type=int, help="Maximum header level.")
@click.option("--setext/--no-setext", default=None, help="Recognize underlined headings.")
@click.option(
    "--skip-title/--keep-title",
    default=None,
    help="Leave out level 1 headers and promote the others one level.",
)
@click.option("--toc-only", is_flag=True, help="Print only the generated TOC.")
@click.option(
    "-v", "--verbose", count=True, help="Report progress on standard error; repeat for detail."
)
@click.argument(
    "input_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def cli(
    input_file: Path | None,
    output: Path | None = None,
    in_place: bool = False,
    check: bool = False,
    style: str | None = None,
    bullet: str | None = None,
    start_marker: str | None = None,
    stop_marker: str | None = None,
    indent_width: int | None = None,
    min_level: int | None = None,
    max_level: int | None = None,
    setext: bool | None = None,
    skip_title: bool | None = None,
    toc_only: bool = False,
    verbose: int = 0,
):
    """
    Generate or update the table of contents of a Markdown document.

    INPUT is read from standard input when omitted. The TOC replaces whatever
    sits between the start marker and the stop marker.

    Raises:
        click.UsageError: If incompatible options are combined.
        click.BadParameter: If configuration values are invalid.
        click.ClickException: If the document cannot be read or written, or
            has no start marker.

    Examples:
        md-toc README.md --in-place --style numbers
        md-toc --check docs/guide.md
    """
    if output is not None and in_place:
        raise click.UsageError("--output and --in-place are mutually exclusive.")
    if check and (output is not None or in_place):
        raise click.UsageError("--check cannot be combined with --output or --in-place.")
    if toc_only and (in_place or check):
        raise click.UsageError("--toc-only cannot be combined with --in-place or --check.")
    if in_place and input_file is None:
        raise click.UsageError("--in-place requires an INPUT file.")

    search_path = input_file.parent if input_file is not None else Path.cwd()
    try:
        config = build_config(
            search_path,
            style=style,
            bullet=bullet,
            start_marker=start_marker,
            stop_marker=stop_marker,
            indent_width=indent_width,
            min_level=min_level,
            max_level=max_level,
            setext=setext,
            skip_title=skip_title,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error
    _echo_progress(verbose, f"Using configuration: {config}", level=2)

    content, initial_stat = _read_input(input_file, config.max_file_size, verbose)

    sequence = Headers(content, setext=config.setext)
    selected = select_headers(sequence, config)
    if toc_only:
        result = format_toc(selected, resolve_style(config), config.indent_width)
    else:
        try:
            result = render_document(content, config, headers=selected)
        except MissingMarkerError as error:
            raise click.ClickException(str(error)) from error

    if sequence.unclosed_fence_line is not None:
        click.echo(
            f"Warning: code fence opened on line {sequence.unclosed_fence_line} "
            "is never closed; later headings are ignored",
            err=True,
        )

    name = str(input_file) if input_file is not None else "<stdin>"

    if check:
        if result != content:
            _report_diff(content, result, name)
            raise click.ClickException(f"Table of contents in {name} is out of date.")
        _echo_progress(verbose, f"Table of contents in {name} is up to date")
        return

    if in_place:
        if result == content:
            _echo_progress(verbose, f"Table of contents in {name} is already up to date")
            return
        try:
            write_atomically(
                input_file,
                result,
                initial_stat,
                warn=lambda message: click.echo(message, err=True),
            )
        except IOError as error:
            raise click.ClickException(str(error)) from error
        _echo_progress(verbose, f"Updated table of contents in {name}")
        return

    if output is not None:
        try:
            with open(output, "w", encoding="UTF-8", newline="") as stream:
                stream.write(result)
        except OSError as error:
            raise click.ClickException(f"Failed to write {output}: {error}") from error
        _echo_progress(verbose, f"Wrote {output}")
        return

    click.echo(result, nl=False)


if __name__ == "__main__":
    cli()
