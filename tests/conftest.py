"""Shared test fixtures for restdoc.

Provides reusable fixtures for loading API description fixtures, parsing
them, isolating the build configuration, managing output state, and
running CLI commands. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from restdoc.models import ParsedDocument
from restdoc.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"

CONTACTS_ROOT_UID = "https://graph.windows.net/myorganization/Contacts/1.0"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the package logger after every test.

    Both cache references to sys.stderr at creation time. When Typer's
    CliRunner redirects those streams and the test finishes, the cached
    references become stale ("I/O operation on closed file").
    """
    yield
    reset_output()
    package_logger = logging.getLogger("restdoc")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Raw document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def contacts_path() -> Path:
    return FIXTURES_DIR / "contacts.json"


@pytest.fixture
def contacts_raw() -> dict[str, Any]:
    """Load the raw contacts OpenAPI 3.0 document."""
    with open(FIXTURES_DIR / "contacts.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def contacts_bytes() -> bytes:
    return (FIXTURES_DIR / "contacts.json").read_bytes()


@pytest.fixture
def swagger2_bytes() -> bytes:
    return (FIXTURES_DIR / "simple_swagger2.json").read_bytes()


# ---------------------------------------------------------------------------
# Parsed document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def contacts_document(contacts_bytes: bytes) -> ParsedDocument:
    """The contacts document parsed in strict mode."""
    from restdoc.parser import ParseMode, parse

    return parse(contacts_bytes, ParseMode.STRICT, source_name="contacts.json")


@pytest.fixture
def make_document():
    """Factory turning a raw dict into a strictly parsed document.

    Fills in ``openapi``, ``info`` and ``servers`` when the dict omits them.
    """
    from restdoc.parser import ParseMode, parse

    def _make(raw: dict[str, Any]) -> ParsedDocument:
        document = {
            "openapi": "3.0.0",
            "info": {"title": "Test", "version": "1.0"},
            "servers": [{"url": "https://api.example.com"}],
            "paths": {},
            **raw,
        }
        return parse(json.dumps(document), ParseMode.STRICT, source_name="test.json")

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Clears all RESTDOC_* environment variables and changes the working
    directory to tmp_path, so that no ``restdoc.json`` is picked up.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in [
        "RESTDOC_OUTPUT_DIR",
        "RESTDOC_STRICT",
        "RESTDOC_BOOKMARK_EXTENSION",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
