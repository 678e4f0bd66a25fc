"""Constants used across the dbml-format package."""

from __future__ import annotations

from .config import FormatterConfig

DEFAULT_CONFIG = FormatterConfig()

# Scanner
QUOTE_CHARS = frozenset("`'\"")
ESCAPE_CHAR = "\\"

# Structural tokens
BLOCK_OPEN = "{"
BLOCK_CLOSE = "}"
ATTRIBUTES_OPEN = "["
ATTRIBUTES_CLOSE = "]"

# Rendering defaults
INDENT_UNIT = DEFAULT_CONFIG.indent_unit
DIALECT = DEFAULT_CONFIG.dialect
SUPPORTED_DIALECTS = ("dbmlv2",)
LANGUAGE_ID = "dbml"

# Filesystem
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
DBML_EXTENSIONS = (".dbml",)
