"""Tests for restdoc.parser.gate -- strict/lenient parsing and the version gate."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from restdoc.exceptions import OpenApiParseError, SpecFileNotFoundError, UnsupportedVersionError
from restdoc.exit_codes import EXIT_PARSE_ERROR, EXIT_UNSUPPORTED_VERSION
from restdoc.models import ParsedDocument, Severity, SpecVersion
from restdoc.parser import ParseMode, parse, parse_file

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

BOTH_MODES = pytest.mark.parametrize("mode", [ParseMode.STRICT, ParseMode.LENIENT])


def _fixture(name: str) -> bytes:
    return (FIXTURES_DIR / name).read_bytes()


class TestAccepts30:
    @BOTH_MODES
    def test_contacts_parses(self, mode) -> None:
        document = parse(_fixture("contacts.json"), mode, source_name="contacts.json")
        assert isinstance(document, ParsedDocument)
        assert document.spec_version == SpecVersion.OPENAPI_3_0

    def test_parse_is_deterministic(self) -> None:
        data = _fixture("contacts.json")
        assert parse(data, ParseMode.STRICT) == parse(data, ParseMode.STRICT)

    def test_accepts_text(self) -> None:
        text = _fixture("contacts.json").decode("utf-8")
        assert parse(text, ParseMode.STRICT) is not None

    def test_yaml_by_source_name(self) -> None:
        document = parse(_fixture("pets.yaml"), ParseMode.STRICT, source_name="pets.yaml")
        assert document.info.title == "Pets"

    @BOTH_MODES
    def test_yaml_extension_values(self, mode) -> None:
        document = parse(_fixture("extensions.yaml"), mode, source_name="extensions.yaml")
        assert document.extensions["x-released"] == "2021-05-01"
        assert document.tags[0].extensions["x-since"] == "2020-01-01"

    def test_warnings_logged_but_not_fatal(self, caplog) -> None:
        raw = {
            "openapi": "3.0.0",
            "info": {"title": "T", "version": "1"},
            "paths": {},
        }
        with caplog.at_level(logging.WARNING, logger="restdoc"):
            document = parse(json.dumps(raw), ParseMode.STRICT, source_name="noservers.json")
        assert document is not None
        assert "OpenApi parse warnings" in caplog.text
        assert "noservers.json" in caplog.text


class TestRejectsOtherVersions:
    def test_swagger2_lenient_returns_none(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="restdoc"):
            result = parse(_fixture("simple_swagger2.json"), ParseMode.LENIENT, source_name="s.json")
        assert result is None
        assert "OpenApi version not supported: 2.0" in caplog.text

    def test_swagger2_strict_raises(self) -> None:
        with pytest.raises(UnsupportedVersionError) as exc_info:
            parse(_fixture("simple_swagger2.json"), ParseMode.STRICT, source_name="s.json")
        exc = exc_info.value
        assert isinstance(exc, OpenApiParseError)
        assert exc.exit_code == EXIT_UNSUPPORTED_VERSION
        assert len(exc.errors) >= 1
        assert exc.errors[0].severity == Severity.ERROR
        assert exc.source_name == "s.json"

    @BOTH_MODES
    def test_openapi31_not_accepted(self, mode) -> None:
        if mode == ParseMode.STRICT:
            with pytest.raises(UnsupportedVersionError, match="3.1.0"):
                parse(_fixture("openapi31.json"), mode)
        else:
            assert parse(_fixture("openapi31.json"), mode) is None

    def test_missing_version_field(self) -> None:
        with pytest.raises(UnsupportedVersionError, match="no 'openapi' or 'swagger'"):
            parse('{"info": {}}', ParseMode.STRICT)

    def test_version_hint_in_message(self) -> None:
        with pytest.raises(UnsupportedVersionError, match=r"\(expected 3.0\)"):
            parse(_fixture("simple_swagger2.json"), ParseMode.STRICT, version_hint="3.0")


class TestErrors:
    def test_bad_format_lenient_returns_none(self, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger="restdoc"):
            assert parse(_fixture("bad_format.json"), ParseMode.LENIENT, source_name="b.json") is None
        assert "OpenApi parse errors" in caplog.text

    def test_bad_format_strict_raises(self) -> None:
        with pytest.raises(OpenApiParseError) as exc_info:
            parse(_fixture("bad_format.json"), ParseMode.STRICT, source_name="b.json")
        assert not isinstance(exc_info.value, UnsupportedVersionError)
        assert exc_info.value.exit_code == EXIT_PARSE_ERROR

    def test_strict_error_carries_all_errors_and_warnings(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "info": {"title": "T"},
            "paths": {"/a": {"get": {"operationId": "a"}}},
        }
        with pytest.raises(OpenApiParseError) as exc_info:
            parse(json.dumps(raw), ParseMode.STRICT)
        exc = exc_info.value
        assert [e.message for e in exc.errors] == [
            "version is a REQUIRED field",
            "responses is a REQUIRED field",
        ]
        assert [w.source_location for w in exc.warnings] == ["#/servers"]
        assert str(exc).splitlines() == [str(e) for e in exc.errors]

    def test_broken_30_document(self) -> None:
        with pytest.raises(OpenApiParseError, match="name is a REQUIRED field"):
            parse(_fixture("broken_openapi3.json"), ParseMode.STRICT)
        assert parse(_fixture("broken_openapi3.json"), ParseMode.LENIENT) is None

    def test_non_string_location(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "info": {"title": "T", "version": "1"},
            "servers": [{"url": "https://api.example.com"}],
            "paths": {
                "/a": {
                    "get": {
                        "operationId": "a",
                        "parameters": [{"name": "q", "in": ["query"]}],
                        "responses": {"200": {"description": "OK"}},
                    }
                }
            },
        }
        assert parse(json.dumps(raw), ParseMode.LENIENT) is None
        with pytest.raises(OpenApiParseError, match="not a valid parameter location"):
            parse(json.dumps(raw), ParseMode.STRICT)


class TestParseFile:
    def test_reads_file(self) -> None:
        document = parse_file(FIXTURES_DIR / "contacts.json", ParseMode.STRICT)
        assert document.info.title == "Contacts"

    @BOTH_MODES
    def test_missing_file_raises_in_both_modes(self, mode) -> None:
        with pytest.raises(SpecFileNotFoundError):
            parse_file(FIXTURES_DIR / "nope.json", mode)
