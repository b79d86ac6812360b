"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import (
    CODE_FENCE_PATTERN,
    DEFAULT_INDENT_WIDTH,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_START_MARKER,
    DEFAULT_STOP_MARKER,
    MAX_HEADER_LEVEL,
    MIN_HEADER_LEVEL,
)
from .models import AlternatingBullets, Custom, Numbers, Style
from .parser import parse_atx_heading

STYLE_CHOICES = ("alternating", "numbers", "custom")
STYLE_ALIASES = {"dashes": "-", "asterisks": "*", "pluses": "+"}


@dataclass
class TocConfig:
    """Configuration for generating Markdown tables of contents.

    Attributes:
        start_marker: Line after which the generated TOC is placed.
        stop_marker: Line that ends the generated TOC.
        style: List style, one of ``"alternating"``, ``"numbers"`` or
            ``"custom"``, or the aliases ``"dashes"``, ``"asterisks"`` and
            ``"pluses"``.
        bullet: Bullet glyph used by the ``"custom"`` style.
        indent_width: Number of spaces per nesting level.
        min_level: Smallest header level to include.
        max_level: Largest header level to include.
        setext: Whether Setext (underlined) headings are recognized.
        insert_stop_marker: Whether a missing stop marker is written after the TOC.
        skip_title: Whether level 1 headers are left out and the remaining
            headers are promoted one level.
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        TocConfig(style="numbers", min_level=2)
    """

    # TOC markers
    start_marker: str = DEFAULT_START_MARKER
    stop_marker: str = DEFAULT_STOP_MARKER
    insert_stop_marker: bool = True

    # Header levels
    min_level: int = MIN_HEADER_LEVEL
    max_level: int = MAX_HEADER_LEVEL
    setext: bool = False
    skip_title: bool = False

    # Formatting
    style: str = "alternating"
    bullet: str | None = None
    indent_width: int = DEFAULT_INDENT_WIDTH

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_level` must be >= `min_level`")
    """


def load_config(search_path: Path) -> TocConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.md-toc]`` table from `pyproject.toml` and the ``[md-toc]`` or
    ``[tool.md-toc]`` table from `.md-toc.toml` when present. Returns default
    values when no configuration is found. TOML files that cannot be read or
    decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        TocConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a matching table is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "md-toc")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".md-toc.toml",
            table_paths=[("md-toc",), ("tool", "md-toc")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return TocConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> TocConfig | None:
    if not config_file.is_file():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> TocConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    # TOML keys use dashes, dataclass fields use underscores
    fields = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return TocConfig(**fields)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: TocConfig) -> TocConfig:
    """Resolve style aliases into the ``"custom"`` style with a fixed bullet."""
    if isinstance(config.style, str) and config.style in STYLE_ALIASES:
        return replace(config, style="custom", bullet=STYLE_ALIASES[config.style])
    return config


def validate_config(config: TocConfig) -> None:
    """Validate a `TocConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If header levels are inconsistent, markers are empty or
            span several lines, the style is unknown, or numeric values are not
            positive integers.

    Examples:
        validate_config(TocConfig(min_level=1, max_level=3))
    """
    config = normalize_config(config)

    _ensure_integers(
        {
            "min_level": config.min_level,
            "max_level": config.max_level,
            "indent_width": config.indent_width,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_booleans(
        {
            "setext": config.setext,
            "insert_stop_marker": config.insert_stop_marker,
            "skip_title": config.skip_title,
        }
    )

    if config.min_level < MIN_HEADER_LEVEL:
        raise ConfigError(f"`min_level` must be >= {MIN_HEADER_LEVEL}")
    if config.max_level < config.min_level:
        raise ConfigError("`max_level` must be >= `min_level`")
    if config.max_level > MAX_HEADER_LEVEL:
        raise ConfigError(f"`max_level` must be <= {MAX_HEADER_LEVEL}")

    _ensure_single_line({"start_marker": config.start_marker, "stop_marker": config.stop_marker})
    if config.start_marker == config.stop_marker:
        raise ConfigError("`start_marker` and `stop_marker` must differ")

    if config.style not in STYLE_CHOICES:
        choices = ", ".join((*STYLE_CHOICES, *STYLE_ALIASES))
        raise ConfigError(f"`style` must be one of: {choices}")
    if config.style == "custom":
        if config.bullet is None:
            raise ConfigError("`bullet` is required with the custom style")
        _ensure_single_line({"bullet": config.bullet})
        _ensure_inert_bullet(config)

    _ensure_positive(
        {
            "indent_width": config.indent_width,
            "max_file_size": config.max_file_size,
        }
    )


def resolve_style(config: TocConfig) -> Style:
    """Return the formatter style described by `config`.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        resolve_style(TocConfig(style="dashes"))  # Custom(glyph="-")
    """
    config = normalize_config(config)
    validate_config(config)
    if config.style == "numbers":
        return Numbers()
    if config.style == "alternating":
        return AlternatingBullets()
    return Custom(config.bullet)


def apply_overrides(config: TocConfig, **overrides: object) -> TocConfig:
    """Apply override values to a `TocConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        TocConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `TocConfig`.

    Examples:
        updated = apply_overrides(config, style="numbers", min_level=2)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    # A bullet on its own selects the custom style
    if "bullet" in changes and "style" not in changes:
        changes["style"] = "custom"
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> TocConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        TocConfig: Validated configuration ready for rendering.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), min_level=2, style="dashes")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")


def _ensure_single_line(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"`{key}` must not be empty")
        if "\n" in value or "\r" in value:
            raise ConfigError(f"`{key}` must fit on a single line")


def _ensure_inert_bullet(config: TocConfig) -> None:
    # Generated lines are rescanned on the next run and must stay plain list items
    glyph = config.bullet
    sample = f"{glyph} [Title](#title)"
    if parse_atx_heading(sample) is not None:
        raise ConfigError("`bullet` must not start a Markdown heading")
    if CODE_FENCE_PATTERN.match(sample):
        raise ConfigError("`bullet` must not open a fenced code block")
    if glyph.strip() in (config.start_marker, config.stop_marker):
        raise ConfigError("`bullet` must differ from the TOC markers")
