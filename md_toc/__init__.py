"""
md-toc: Table of Contents generator for Markdown documents.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    md-toc README.md --in-place

Library Usage:
    from pathlib import Path
    from md_toc import AlternatingBullets, format_toc, headers, render_document

    content = Path("README.md").read_text()
    toc_text = format_toc(headers(content), AlternatingBullets())
    updated = render_document(content)
"""

__version__ = "0.1.0"

from .config import ConfigError, TocConfig, build_config, load_config, resolve_style
from .exceptions import MissingMarkerError, TocError, WriteFailureError
from .generator import format_toc, render_entries, write_toc
from .headers import Headers, headers
from .models import AlternatingBullets, Custom, Header, Numbers, Style
from .parser import HeadingScanner, scan_headings
from .slugify import AnchorSlugger, generate_slug, titleize
from .writer import render_document, write_document

__all__ = [
    # Core functionality
    "headers",
    "format_toc",
    "render_entries",
    "write_toc",
    "render_document",
    "write_document",
    "scan_headings",
    "generate_slug",
    "titleize",
    # Data models
    "AnchorSlugger",
    "Header",
    "Headers",
    "HeadingScanner",
    "Style",
    "Numbers",
    "AlternatingBullets",
    "Custom",
    # Configuration
    "TocConfig",
    "build_config",
    "load_config",
    "resolve_style",
    # Exceptions
    "ConfigError",
    "MissingMarkerError",
    "TocError",
    "WriteFailureError",
    # Version
    "__version__",
]
