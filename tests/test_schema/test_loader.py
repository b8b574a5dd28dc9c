"""Tests for maru.schema.loader and maru.schema.command_from_source."""

from __future__ import annotations

import io
import shutil
import textwrap
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from maru.exceptions import DocumentLoadError, UnknownFieldError
from maru.models import Command
from maru.schema import command_from_source
from maru.schema.loader import (
    _load_from_file,
    _load_from_stdin,
    _load_from_url,
    load_document,
    parse_content,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# load_document dispatch
# ---------------------------------------------------------------------------


class TestLoadDocument:
    """Test load_document dispatcher routes to the correct loader."""

    @pytest.mark.parametrize("filename", ["app.toml", "app.json", "app.yaml"])
    def test_fixtures_decode_to_the_same_document(
        self, filename: str, app_document: dict
    ) -> None:
        assert load_document(str(FIXTURES_DIR / filename)) == app_document

    def test_loads_from_yml_extension(self, tmp_path: Path) -> None:
        yml_file = tmp_path / "cli.yml"
        yml_file.write_text("name: tool\n", encoding="utf-8")
        assert load_document(str(yml_file)) == {"name": "tool"}

    def test_loads_from_stdin(self) -> None:
        with patch("maru.schema.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO('name = "piped"\n')
            result = load_document("-")
        assert result == {"name": "piped"}

    def test_loads_from_url(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            json={"name": "remote"},
            request=httpx.Request("GET", "https://example.com/cli.json"),
        )
        with patch("maru.schema.loader.httpx.get", return_value=mock_response):
            result = load_document("https://example.com/cli.json")
        assert result == {"name": "remote"}

    def test_unsupported_format_raises(self) -> None:
        with pytest.raises(DocumentLoadError, match="Unsupported format: ini"):
            load_document(str(FIXTURES_DIR / "app.toml"), fmt="ini")

    def test_explicit_format_overrides_extension(self, tmp_path: Path) -> None:
        doc = tmp_path / "cli.json"
        doc.write_text('name = "tool"\n', encoding="utf-8")
        assert load_document(str(doc), fmt="toml") == {"name": "tool"}


# ---------------------------------------------------------------------------
# _load_from_file
# ---------------------------------------------------------------------------


class TestLoadFromFile:
    """Test loading documents from local files."""

    def test_nonexistent_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentLoadError, match="Document not found"):
            _load_from_file(str(tmp_path / "missing.toml"))

    def test_directory_is_not_a_document(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentLoadError, match="Document not found"):
            _load_from_file(str(tmp_path))

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.toml"
        empty.write_text("  \n", encoding="utf-8")
        with pytest.raises(DocumentLoadError, match="Document is empty"):
            _load_from_file(str(empty))

    def test_comment_only_yaml_raises(self, tmp_path: Path) -> None:
        doc = tmp_path / "cli.yaml"
        doc.write_text("# nothing here\n", encoding="utf-8")
        with pytest.raises(DocumentLoadError, match="YAML document is empty"):
            _load_from_file(str(doc))

    @pytest.mark.parametrize("filename", ["app.toml", "app.json", "app.yaml"])
    def test_unknown_suffix_detects_content(
        self, filename: str, tmp_path: Path, app_document: dict
    ) -> None:
        target = tmp_path / "cli.conf"
        shutil.copy(FIXTURES_DIR / filename, target)
        assert _load_from_file(str(target)) == app_document

    def test_invalid_toml_with_toml_suffix(self, tmp_path: Path) -> None:
        doc = tmp_path / "cli.toml"
        doc.write_text("name: app\n", encoding="utf-8")
        with pytest.raises(DocumentLoadError, match="Invalid TOML"):
            _load_from_file(str(doc))


# ---------------------------------------------------------------------------
# _load_from_stdin
# ---------------------------------------------------------------------------


class TestLoadFromStdin:
    """Test loading documents from stdin."""

    def test_reads_yaml_from_stdin(self) -> None:
        content = textwrap.dedent("""\
            name: piped
            args:
              verbose:
                short: v
        """)
        with patch("maru.schema.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(content)
            result = _load_from_stdin()
        assert result == {"name": "piped", "args": {"verbose": {"short": "v"}}}

    def test_format_hint_is_used(self) -> None:
        with patch("maru.schema.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO('{"name": "piped"}')
            result = _load_from_stdin("yaml")
        assert result == {"name": "piped"}

    def test_empty_stdin_raises(self) -> None:
        with patch("maru.schema.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("")
            with pytest.raises(DocumentLoadError, match="No input"):
                _load_from_stdin()

    def test_whitespace_only_stdin_raises(self) -> None:
        with patch("maru.schema.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("   \n\t\n  ")
            with pytest.raises(DocumentLoadError, match="No input"):
                _load_from_stdin()


# ---------------------------------------------------------------------------
# _load_from_url
# ---------------------------------------------------------------------------


class TestLoadFromUrl:
    """Test loading documents from URLs."""

    def test_content_type_selects_decoder(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            text='name = "remote"\n',
            headers={"content-type": "application/toml"},
            request=httpx.Request("GET", "https://example.com/cli"),
        )
        with patch("maru.schema.loader.httpx.get", return_value=mock_response):
            result = _load_from_url("https://example.com/cli")
        assert result == {"name": "remote"}

    def test_url_suffix_selects_decoder(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            text="name: remote\n",
            request=httpx.Request("GET", "https://example.com/cli.yaml"),
        )
        with patch("maru.schema.loader.httpx.get", return_value=mock_response):
            result = _load_from_url("https://example.com/cli.yaml?ref=main")
        assert result == {"name": "remote"}

    def test_http_error_raises(self) -> None:
        mock_response = httpx.Response(
            status_code=404,
            request=httpx.Request("GET", "https://example.com/missing.toml"),
        )
        with patch("maru.schema.loader.httpx.get", return_value=mock_response):
            with pytest.raises(DocumentLoadError, match="HTTP 404"):
                _load_from_url("https://example.com/missing.toml")

    def test_connection_error_raises(self) -> None:
        with patch(
            "maru.schema.loader.httpx.get",
            side_effect=httpx.ConnectError("Connection refused"),
        ):
            with pytest.raises(DocumentLoadError, match="Failed to fetch"):
                _load_from_url("https://unreachable.example.com/cli.toml")


# ---------------------------------------------------------------------------
# parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    """Test content decoding with format detection."""

    def test_detects_json(self) -> None:
        assert parse_content('{"name": "app"}') == {"name": "app"}

    def test_detects_toml(self) -> None:
        assert parse_content('name = "app"\n') == {"name": "app"}

    def test_detects_yaml(self) -> None:
        assert parse_content("name: app\n") == {"name": "app"}

    def test_json_hint_forces_json_only(self) -> None:
        with pytest.raises(DocumentLoadError, match="Invalid JSON"):
            parse_content("name: app", hint="json")

    def test_toml_rejects_duplicate_keys(self) -> None:
        with pytest.raises(DocumentLoadError, match="Invalid TOML"):
            parse_content('name = "a"\nname = "b"\n', hint="toml")

    def test_json_duplicate_keys_last_wins(self) -> None:
        assert parse_content('{"name": "a", "name": "b"}', hint="json") == {"name": "b"}

    def test_undecodable_content_lists_every_attempt(self) -> None:
        with pytest.raises(DocumentLoadError) as exc_info:
            parse_content("name: [unclosed")
        message = str(exc_info.value)
        assert "Failed to parse document as JSON, TOML or YAML" in message
        assert "JSON error" in message
        assert "TOML error" in message
        assert "YAML error" in message

    @pytest.mark.parametrize("hint", ["json", "yaml", ""])
    def test_deep_nesting_is_a_load_error(self, hint: str) -> None:
        depth = 100_000
        with pytest.raises(DocumentLoadError, match="nested too deeply"):
            parse_content("[" * depth + "]" * depth, hint=hint)


# ---------------------------------------------------------------------------
# command_from_source
# ---------------------------------------------------------------------------


class TestCommandFromSource:
    @pytest.mark.parametrize(
        "filename", ["app.toml", "app.json", "app.yaml", "app_sequence.yaml"]
    )
    def test_every_fixture_builds_the_same_tree(
        self, filename: str, app_command: Command
    ) -> None:
        assert command_from_source(str(FIXTURES_DIR / filename)) == app_command

    def test_unknown_field_fixture(self) -> None:
        with pytest.raises(UnknownFieldError) as exc_info:
            command_from_source(str(FIXTURES_DIR / "unknown_field.toml"))
        assert exc_info.value.path == ("subcommands", "build", "colour")

    def test_max_depth_is_forwarded(self) -> None:
        from maru.exceptions import RecursionLimitError

        with pytest.raises(RecursionLimitError):
            command_from_source(str(FIXTURES_DIR / "app.toml"), max_depth=1)
