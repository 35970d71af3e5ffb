"""Load raw API description bytes and decode them into a Python dictionary.

This module is the I/O edge of the parser. It fetches the bytes of a single
document (local file, ``-`` for stdin, or an ``http(s)://`` URL) and decodes
them as JSON or YAML with automatic format detection.

Decoding never raises for bad content: syntax errors, undecodable bytes and
non-object documents are returned as error :class:`~restdoc.models.Diagnostic`
entries so that the caller decides between strict and lenient handling.
Only a missing source raises, as
:class:`~restdoc.exceptions.SpecFileNotFoundError`.
"""

from __future__ import annotations

import base64
import datetime
import json
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from restdoc.exceptions import RestDocError, SpecFileNotFoundError
from restdoc.models import Diagnostic, Severity

_ROOT = "#/"


def load_source(source: str) -> bytes:
    """Read the raw bytes of an API description.

    Args:
        source: A URL (http/https), file path, or ``-`` for stdin.

    Returns:
        The undecoded document bytes.

    Raises:
        SpecFileNotFoundError: If the file does not exist or the URL
            cannot be fetched.
        RestDocError: If an existing file cannot be read.
    """
    if source == "-":
        return sys.stdin.buffer.read()
    if source.startswith(("http://", "https://")):
        return _load_from_url(source)
    return _load_from_file(source)


def _load_from_url(url: str) -> bytes:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecFileNotFoundError(url, f"HTTP {exc.response.status_code}") from exc
    except httpx.RequestError as exc:
        raise SpecFileNotFoundError(url, str(exc)) from exc
    return response.content


def _load_from_file(path: str) -> bytes:
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecFileNotFoundError(path)
    try:
        return file_path.read_bytes()
    except FileNotFoundError as exc:
        raise SpecFileNotFoundError(path) from exc
    except OSError as exc:
        raise RestDocError(f"Failed to read {path}: {exc}") from exc


def format_hint(name: Optional[str]) -> str:
    """Return ``"json"``, ``"yaml"`` or ``""`` from a file name or URL."""
    if not name:
        return ""
    suffix = Path(name.split("?", 1)[0]).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    return ""


def decode_text(data: bytes) -> tuple[Optional[str], list[Diagnostic]]:
    """Decode document bytes as UTF-8 (a leading BOM is dropped)."""
    try:
        return data.decode("utf-8-sig"), []
    except UnicodeDecodeError as exc:
        return None, [_error(f"Document is not valid UTF-8: {exc}")]


def decode_content(
    content: str, hint: str = ""
) -> tuple[Optional[dict[str, Any]], list[Diagnostic]]:
    """Parse document text as JSON or YAML.

    Tries JSON first (unless *hint* is ``"yaml"``), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.
    An explicit ``"json"`` hint disables the YAML fallback.
    YAML results go through :func:`json_compatible`, so both formats yield
    the same plain JSON tree.

    Args:
        content: The decoded document text.
        hint: Optional format hint (``"json"`` or ``"yaml"``).

    Returns:
        ``(document, diagnostics)``. ``document`` is ``None`` whenever
        ``diagnostics`` holds an error.
    """
    if not content.strip():
        return None, [_error("Document is empty")]

    json_error: Optional[Exception] = None

    if hint != "yaml":
        try:
            return _require_object(json.loads(content))
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                return None, [
                    _error(f"Invalid JSON: {exc.msg}", f"line {exc.lineno}, column {exc.colno}")
                ]

    try:
        return _require_object(json_compatible(yaml.safe_load(content)))
    except RecursionError:
        return None, [_error("Invalid YAML: recursive alias")]
    except yaml.YAMLError as exc:
        location = None
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            location = f"line {mark.line + 1}, column {mark.column + 1}"
        diagnostics = []
        if json_error is not None:
            diagnostics.append(_error(f"Invalid JSON: {json_error}"))
        diagnostics.append(_error(f"Invalid YAML: {exc}", location))
        return None, diagnostics


def _require_object(result: Any) -> tuple[Optional[dict[str, Any]], list[Diagnostic]]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        return None, [_error(f"Document root must be an object (got {kind})", _ROOT)]
    return result, []


def _error(message: str, location: Optional[str] = None) -> Diagnostic:
    return Diagnostic(severity=Severity.ERROR, message=message, source_location=location)


def json_compatible(value: Any) -> Any:
    """Turn the YAML-only values of a loaded document into JSON values.

    YAML allows mapping keys that are not strings (``404: NotFound``) and
    scalars JSON has no type for. Keys become their JSON text (``"404"``,
    ``"true"``), dates and timestamps ISO 8601 strings, ``!!binary`` scalars
    base64 text and ``!!set`` collections lists.

    Raises:
        RecursionError: If the document aliases one of its own ancestors.
    """
    if isinstance(value, dict):
        return {_json_key(key): json_compatible(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_compatible(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return [json_compatible(item) for item in value]
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    return value


def _json_key(key: Any) -> str:
    key = json_compatible(key)
    if isinstance(key, str):
        return key
    return json.dumps(key, default=str)
