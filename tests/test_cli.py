from __future__ import annotations

import os
import textwrap
from pathlib import Path

import pytest

import dbml_format.cli as cli_module
from dbml_format.cli import cli


@pytest.fixture(autouse=True)
def _stub_validator(monkeypatch, brace_validator):
    monkeypatch.setattr(cli_module, "PyDBMLValidator", lambda: brace_validator)


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_formats_file_in_place(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "schema.dbml",
        """
        Table users{
        id   int [ pk ]
        }
        Table posts {
        id int
        }
        """,
    )

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0, result.output
    assert target.read_text(encoding="utf-8") == (
        "Table users {\n  id int [pk]\n}\n\nTable posts {\n  id int\n}\n"
    )


def test_cli_leaves_formatted_file_untouched(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "schema.dbml", "Table users {\n  id int\n}\n")
    before = os.stat(target).st_mtime_ns

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert os.stat(target).st_mtime_ns == before


def test_cli_stdout_does_not_write(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "schema.dbml", "a{\nx\n}")

    result = cli_runner.invoke(cli, ["--stdout", str(target)])

    assert result.exit_code == 0
    assert result.output == "a {\n  x\n}"
    assert target.read_text(encoding="utf-8") == "a{\nx\n}"


def test_cli_check_reports_changes(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "schema.dbml", "a{\nx\n}\n")

    result = cli_runner.invoke(cli, ["--check", str(target)])

    assert result.exit_code == 1
    assert "Would reformat" in result.output
    assert target.read_text(encoding="utf-8") == "a{\nx\n}\n"


def test_cli_check_passes_on_formatted_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "schema.dbml", "a {\n  x\n}\n")

    result = cli_runner.invoke(cli, ["--check", str(target)])

    assert result.exit_code == 0


def test_cli_reports_syntax_errors_without_writing(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = "Table users {\nid int\n}\n}\n"
    target = _write(tmp_path, "broken.dbml", source)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "Error 1001: Unexpected '}' | Ln 4, Col 1" in result.output
    assert "no changes made" in result.output
    assert target.read_text(encoding="utf-8") == source


def test_cli_options_override_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.dbml-format]
        indent_spaces = 8
        """,
    )
    target = _write(tmp_path, "schema.dbml", "a {\nx\n}\nb {\n}")

    result = cli_runner.invoke(
        cli, ["--stdout", "--indent-spaces", "4", "--no-separate-blocks", str(target)]
    )

    assert result.exit_code == 0
    assert result.output == "a {\n    x\n}\nb {\n}"


def test_cli_uses_config_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.dbml-format]
        indent_unit = "\\t"
        """,
    )
    target = _write(tmp_path, "schema.dbml", "a {\nx\n}")

    result = cli_runner.invoke(cli, ["--stdout", str(target)])

    assert result.output == "a {\n\tx\n}"


def test_cli_rejects_invalid_indent(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "schema.dbml", "a {\n}")

    result = cli_runner.invoke(cli, ["--indent-spaces", "0", str(target)])

    assert result.exit_code != 0
    assert "indent_spaces" in result.output


def test_cli_rejects_non_dbml_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "notes.txt", "a {\n}")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "not a DBML file" in result.output


def test_cli_rejects_files_outside_working_directory(cli_runner, tmp_path, monkeypatch):
    inner = tmp_path / "inner"
    inner.mkdir()
    monkeypatch.chdir(inner)
    target = _write(tmp_path, "schema.dbml", "a {\n}")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "outside of the working directory" in result.output


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_cli_rejects_symlinks(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "source.dbml", "a {\n}")
    link = tmp_path / "alias.dbml"
    try:
        os.symlink(source, link)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    result = cli_runner.invoke(cli, [str(link)])

    assert result.exit_code != 0
    assert "Symlinks" in result.output


def test_cli_enforces_file_size_limit(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DBML_FORMAT_MAX_FILE_SIZE", "10")
    target = _write(tmp_path, "large.dbml", "Table users {\n  id int\n}\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "maximum allowed size" in result.output


def test_cli_rejects_invalid_size_env(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DBML_FORMAT_MAX_FILE_SIZE", "lots")
    target = _write(tmp_path, "schema.dbml", "a {\n}")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "DBML_FORMAT_MAX_FILE_SIZE" in result.output


def test_cli_rejects_invalid_utf8(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "binary.dbml"
    target.write_bytes(b"Table \xff {\n}\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "Invalid UTF-8" in result.output


def test_cli_keeps_crlf_line_endings(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "schema.dbml"
    target.write_bytes(b"a{\r\nx\r\n}\r\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert target.read_bytes() == b"a {\r\n  x\r\n}\r\n"


def test_cli_preserves_permissions(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "schema.dbml", "a{\n}\n")
    target.chmod(0o640)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert oct(target.stat().st_mode & 0o777) == oct(0o640)
