import pytest
from click.testing import CliRunner

from dbml_format.models import Diagnostic, Location, Position, ValidationResult
from dbml_format.scanner import iter_scanned


class BraceBalanceValidator:
    """Stub validator that only checks unquoted brace balance."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    def parse(self, text: str, dialect: str) -> ValidationResult:
        self.calls.append((text, dialect))
        depth = 0
        for line_number, line in enumerate(text.split("\n"), start=1):
            for pos, char, quoted in iter_scanned(line):
                if quoted:
                    continue
                if char == "{":
                    depth += 1
                elif char == "}":
                    depth -= 1
                    if depth < 0:
                        return _unbalanced(line_number, pos + 1, "Unexpected '}'")
        if depth:
            lines = text.split("\n")
            return _unbalanced(len(lines), len(lines[-1]) + 1, "Expected '}'")
        return ValidationResult.success()


def _unbalanced(line: int, column: int, message: str) -> ValidationResult:
    position = Position(line=line, column=column)
    diagnostic = Diagnostic(code="1001", message=message, location=Location(position, position))
    return ValidationResult.failure((diagnostic,))


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def brace_validator() -> BraceBalanceValidator:
    """Provides a validator that accepts any brace-balanced text."""
    return BraceBalanceValidator()
