"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

@dataclass
class FormatterConfig:
    """Configuration for formatting DBML documents.

    Attributes:
        indent_unit: String repeated once per nesting level.
        indent_spaces: Number of spaces per nesting level; takes precedence over
            `indent_unit` when set.
        dialect: Grammar identifier handed to the validator.
        separate_blocks: Whether to insert a blank line after each closing brace.
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        FormatterConfig(indent_spaces=4, separate_blocks=False)
    """

    # Rendering
    indent_unit: str = "  "
    indent_spaces: int | None = None
    separate_blocks: bool = True

    # Validation
    dialect: str = "dbmlv2"

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`indent_spaces` must be a positive integer")
    """


# Checked in order in each directory, nearest directory first.
CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", "dbml-format"),)),
    (".dbml-format.toml", (("dbml-format",), ("tool", "dbml-format"))),
)


def load_config(search_path: Path) -> FormatterConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.dbml-format]`` table from `pyproject.toml` and the
    ``[dbml-format]`` or ``[tool.dbml-format]`` table from `.dbml-format.toml`
    when present. Returns default values when no configuration is found. TOML
    files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FormatterConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("schema"))
    """
    start = search_path.resolve()
    for directory in (start, *start.parents):
        for filename, tables in CONFIG_SOURCES:
            found = _find_table(directory / filename, tables)
            if found is not None:
                return normalize_config(_config_from_table(*found))
    return FormatterConfig()


def _find_table(
    config_file: Path, tables: tuple[tuple[str, ...], ...]
) -> tuple[object, str, Path] | None:
    try:
        data = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None

    for keys in tables:
        node: object = data
        for key in keys:
            node = node.get(key) if isinstance(node, dict) else None
        if node is not None:
            return node, ".".join(keys), config_file
    return None


def _config_from_table(table: object, name: str, config_file: Path) -> FormatterConfig:
    if not isinstance(table, dict):
        raise ConfigError(f"Invalid `[{name}]` settings in {config_file}")

    # TOML keys use dashes; dataclass fields use underscores
    settings = {key.replace("-", "_"): value for key, value in table.items()}
    try:
        return FormatterConfig(**settings)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{name}]` settings in {config_file}") from error


def normalize_config(config: FormatterConfig) -> FormatterConfig:
    """Resolve `indent_spaces` into `indent_unit`."""
    if config.indent_spaces is None:
        return config

    _require_positive_int("indent_spaces", config.indent_spaces)
    return replace(config, indent_unit=" " * config.indent_spaces)


def validate_config(config: FormatterConfig) -> None:
    """Validate a `FormatterConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If the indent unit is empty or contains non-whitespace, the
            dialect is empty, `separate_blocks` is not a boolean, or the size
            limit is not a positive integer.
    """
    config = normalize_config(config)

    if not isinstance(config.indent_unit, str) or not config.indent_unit:
        raise ConfigError("`indent_unit` must not be empty")
    if config.indent_unit.strip(" \t"):
        raise ConfigError("`indent_unit` must contain only spaces or tabs")
    if not isinstance(config.dialect, str) or not config.dialect:
        raise ConfigError("`dialect` must not be empty")
    if not isinstance(config.separate_blocks, bool):
        raise ConfigError("`separate_blocks` must be a boolean")

    _require_positive_int("max_file_size", config.max_file_size)


def apply_overrides(config: FormatterConfig, **overrides: object) -> FormatterConfig:
    """Apply override values to a `FormatterConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set
            to None are ignored.

    Returns:
        FormatterConfig: New configuration with the overrides applied, or the
        original configuration when nothing changes.

    Raises:
        TypeError: If an override name is not defined on `FormatterConfig`.
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "indent_unit" in changes and "indent_spaces" not in changes:
        changes["indent_spaces"] = None
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FormatterConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        FormatterConfig: Validated configuration ready for formatting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), indent_spaces=4)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _require_positive_int(name: str, value: object) -> None:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"`{name}` must be a positive integer")
