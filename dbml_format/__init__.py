"""
dbml-format: Canonical formatter for DBML schema files.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    dbml-format schema.dbml

Library Usage:
    from pathlib import Path
    from dbml_format import format_document

    content = Path("schema.dbml").read_text()
    formatted = format_document(content, notify=print)
    if formatted is not None:
        Path("schema.dbml").write_text(formatted)
"""

from .config import ConfigError, FormatterConfig
from .exceptions import FormatError, UnsupportedDialectError, ValidationFailedError
from .formatter import format_document, format_text, validate_document
from .host import DocumentFormatter, activate, deactivate
from .models import Diagnostic, Location, Position, TextEdit, TextRange, ValidationResult
from .normalizer import normalize_line
from .validation import CallableValidator, PyDBMLValidator, Validator, render_diagnostic

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "format_document",
    "format_text",
    "validate_document",
    "normalize_line",
    # Validation
    "Validator",
    "PyDBMLValidator",
    "CallableValidator",
    "render_diagnostic",
    # Editor integration
    "DocumentFormatter",
    "activate",
    "deactivate",
    # Data models
    "Diagnostic",
    "Location",
    "Position",
    "TextEdit",
    "TextRange",
    "ValidationResult",
    "FormatterConfig",
    # Exceptions
    "ConfigError",
    "FormatError",
    "UnsupportedDialectError",
    "ValidationFailedError",
    # Version
    "__version__",
]
