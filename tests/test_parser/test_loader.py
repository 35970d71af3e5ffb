"""Tests for restdoc.parser.loader."""

from __future__ import annotations

import datetime
import io
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import httpx
import pytest

from restdoc.exceptions import RestDocError, SpecFileNotFoundError
from restdoc.models import Severity
from restdoc.parser.loader import (
    decode_content,
    decode_text,
    format_hint,
    json_compatible,
    load_source,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# load_source dispatch
# ---------------------------------------------------------------------------


class TestLoadSource:
    """Test load_source routes to the correct reader."""

    def test_loads_file_bytes(self) -> None:
        data = load_source(str(FIXTURES_DIR / "contacts.json"))
        assert isinstance(data, bytes)
        assert b'"openapi": "3.0.1"' in data

    def test_loads_from_stdin(self) -> None:
        stdin = SimpleNamespace(buffer=io.BytesIO(b'{"openapi": "3.0.0"}'))
        with patch("restdoc.parser.loader.sys") as mock_sys:
            mock_sys.stdin = stdin
            assert load_source("-") == b'{"openapi": "3.0.0"}'

    def test_loads_from_url(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            content=b'{"openapi": "3.0.0"}',
            request=httpx.Request("GET", "https://example.com/api.json"),
        )
        with patch("restdoc.parser.loader.httpx.get", return_value=mock_response):
            assert load_source("https://example.com/api.json") == b'{"openapi": "3.0.0"}'

    def test_url_http_error_is_not_found(self) -> None:
        mock_response = httpx.Response(
            status_code=404,
            request=httpx.Request("GET", "https://example.com/missing.json"),
        )
        with patch("restdoc.parser.loader.httpx.get", return_value=mock_response):
            with pytest.raises(SpecFileNotFoundError, match="HTTP 404"):
                load_source("https://example.com/missing.json")

    def test_url_connection_error_is_not_found(self) -> None:
        with patch(
            "restdoc.parser.loader.httpx.get",
            side_effect=httpx.ConnectError("connection refused"),
        ):
            with pytest.raises(SpecFileNotFoundError, match="connection refused"):
                load_source("https://example.com/api.json")

    def test_missing_file_raises(self) -> None:
        with pytest.raises(SpecFileNotFoundError, match="not found") as exc_info:
            load_source("/nonexistent/path/to/api.json")
        assert exc_info.value.path == "/nonexistent/path/to/api.json"

    def test_missing_file_is_builtin_file_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_source("/nonexistent/api.json")

    def test_unreadable_file_raises_generic_error(self, tmp_path: Path) -> None:
        target = tmp_path / "api.json"
        target.write_text("{}", encoding="utf-8")
        with patch.object(Path, "read_bytes", side_effect=PermissionError("denied")):
            with pytest.raises(RestDocError, match="Failed to read") as exc_info:
                load_source(str(target))
        assert not isinstance(exc_info.value, SpecFileNotFoundError)


# ---------------------------------------------------------------------------
# format_hint
# ---------------------------------------------------------------------------


class TestFormatHint:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("api.json", "json"),
            ("API.JSON", "json"),
            ("contacts_swagger2.json", "json"),
            ("api.yaml", "yaml"),
            ("api.yml", "yaml"),
            ("https://example.com/api.yaml?raw=1", "yaml"),
            ("api.txt", ""),
            ("", ""),
            (None, ""),
        ],
    )
    def test_hint(self, name, expected) -> None:
        assert format_hint(name) == expected


# ---------------------------------------------------------------------------
# decode_text / decode_content
# ---------------------------------------------------------------------------


class TestDecodeText:
    def test_strips_bom(self) -> None:
        text, diagnostics = decode_text(b"\xef\xbb\xbf{}")
        assert text == "{}"
        assert diagnostics == []

    def test_invalid_utf8_is_error(self) -> None:
        text, diagnostics = decode_text(b"\xff\xfe\xfa")
        assert text is None
        assert len(diagnostics) == 1
        assert diagnostics[0].severity == Severity.ERROR
        assert "UTF-8" in diagnostics[0].message


class TestDecodeContent:
    def test_json_object(self) -> None:
        document, diagnostics = decode_content('{"openapi": "3.0.0"}')
        assert document == {"openapi": "3.0.0"}
        assert diagnostics == []

    def test_yaml_fallback(self) -> None:
        document, diagnostics = decode_content("openapi: 3.0.0\ninfo:\n  title: T\n")
        assert document == {"openapi": "3.0.0", "info": {"title": "T"}}
        assert diagnostics == []

    def test_yaml_hint_skips_json(self) -> None:
        document, _ = decode_content('{"a": 1}', hint="yaml")
        assert document == {"a": 1}

    def test_json_hint_disables_yaml_fallback(self) -> None:
        document, diagnostics = decode_content("openapi: 3.0.0", hint="json")
        assert document is None
        assert len(diagnostics) == 1
        assert diagnostics[0].message.startswith("Invalid JSON")
        assert diagnostics[0].source_location == "line 1, column 1"

    def test_truncated_json_is_error(self) -> None:
        document, diagnostics = decode_content('{"openapi": "3.0.0", "info": {', hint="json")
        assert document is None
        assert diagnostics[0].severity == Severity.ERROR

    def test_invalid_everything_reports_both(self) -> None:
        document, diagnostics = decode_content("{invalid: [unclosed")
        assert document is None
        messages = [d.message for d in diagnostics]
        assert any(m.startswith("Invalid JSON") for m in messages)
        assert any(m.startswith("Invalid YAML") for m in messages)

    def test_empty_is_error(self) -> None:
        document, diagnostics = decode_content("   \n")
        assert document is None
        assert diagnostics[0].message == "Document is empty"

    def test_array_root_is_error(self) -> None:
        document, diagnostics = decode_content("[1, 2]")
        assert document is None
        assert "must be an object" in diagnostics[0].message
        assert diagnostics[0].source_location == "#/"

    def test_scalar_root_is_error(self) -> None:
        document, diagnostics = decode_content("just text")
        assert document is None
        assert "got str" in diagnostics[0].message

    def test_yaml_only_values_become_json(self) -> None:
        text = "x-released: 2021-05-01\nx-codes:\n  404: NotFound\n  true: enabled\n"
        document, diagnostics = decode_content(text, hint="yaml")
        assert diagnostics == []
        assert document == {
            "x-released": "2021-05-01",
            "x-codes": {"404": "NotFound", "true": "enabled"},
        }

    def test_recursive_alias_is_error(self) -> None:
        document, diagnostics = decode_content("a: &loop [*loop]\n", hint="yaml")
        assert document is None
        assert diagnostics[0].message == "Invalid YAML: recursive alias"


class TestJsonCompatible:
    def test_plain_values_unchanged(self) -> None:
        value = {"a": [1, 2.5, None, True, "x"]}
        assert json_compatible(value) == value

    def test_keys_become_json_text(self) -> None:
        assert json_compatible({1: "a", 1.5: "b", None: "c", False: "d"}) == {
            "1": "a",
            "1.5": "b",
            "null": "c",
            "false": "d",
        }

    def test_dates_and_timestamps(self) -> None:
        value = {
            "day": datetime.date(2021, 5, 1),
            "at": datetime.datetime(2022, 3, 4, 5, 6, 7),
        }
        assert json_compatible(value) == {"day": "2021-05-01", "at": "2022-03-04T05:06:07"}

    def test_binary_and_sets(self) -> None:
        assert json_compatible({"blob": b"hi", "tags": {"only"}}) == {
            "blob": "aGk=",
            "tags": ["only"],
        }
