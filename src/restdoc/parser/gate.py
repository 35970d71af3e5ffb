"""Version-gated parsing with strict and lenient failure policies.

:func:`parse` is the single entry point the rest of restdoc uses to turn
document bytes into a :class:`~restdoc.models.ParsedDocument`. It reads the
document with :func:`~restdoc.parser.reader.read_document` and then applies
two independent decisions:

1. **Diagnostics.** Warnings are always logged and never fatal. Errors make
   the attempt fail: :attr:`ParseMode.LENIENT` logs them and returns ``None``;
   :attr:`ParseMode.STRICT` raises
   :class:`~restdoc.exceptions.OpenApiParseError` carrying every error and
   warning.
2. **Version gate.** Only OpenAPI 3.0 documents are accepted. Any other
   version (Swagger 2.0, OpenAPI 3.1, or an unrecognised document) yields
   ``None`` with a logged warning under LENIENT, so that callers probing many
   files can move on, and raises
   :class:`~restdoc.exceptions.UnsupportedVersionError` under STRICT.

LENIENT is meant for *sniffing* (is this file an OpenAPI 3.0 document?),
STRICT for *loading* a file already identified as one.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Optional, Union

from restdoc.exceptions import OpenApiParseError, UnsupportedVersionError
from restdoc.models import Diagnostic, ParseDiagnostics, ParsedDocument, Severity, SpecVersion
from restdoc.parser.loader import format_hint, load_source
from restdoc.parser.reader import read_document

logger = logging.getLogger(__name__)


class ParseMode(str, enum.Enum):
    """Failure policy for :func:`parse`."""

    STRICT = "strict"
    LENIENT = "lenient"


def parse(
    source: Union[bytes, str],
    mode: ParseMode = ParseMode.LENIENT,
    *,
    source_name: Optional[str] = None,
    version_hint: Optional[str] = None,
) -> Optional[ParsedDocument]:
    """Parse an API description and apply the OpenAPI 3.0 version gate.

    Args:
        source: Raw document bytes (or decoded text).
        mode: :attr:`ParseMode.STRICT` to raise on failure,
            :attr:`ParseMode.LENIENT` to log and return ``None``.
        source_name: File name used in log messages and as the JSON/YAML
            format hint.
        version_hint: Version the caller expected the document to be; only
            used to word diagnostics.

    Returns:
        The parsed document, or ``None`` when the document has errors or is
        not OpenAPI 3.0 and *mode* is LENIENT.

    Raises:
        OpenApiParseError: STRICT mode and the document has errors.
        UnsupportedVersionError: STRICT mode and the document is readable
            but not OpenAPI 3.0.
    """
    result = read_document(source, hint=format_hint(source_name))
    diagnostics = result.diagnostics
    label = source_name or "<document>"

    for warning in diagnostics.warnings:
        logger.warning("OpenApi parse warnings: %s (file: %s)", warning, label)

    if diagnostics.has_errors:
        if mode == ParseMode.STRICT:
            raise OpenApiParseError(diagnostics.errors, diagnostics.warnings, source_name)
        for error in diagnostics.errors:
            logger.error("OpenApi parse errors: %s (file: %s)", error, label)
        return None

    if result.document is None or diagnostics.spec_version != SpecVersion.OPENAPI_3_0:
        message = _unsupported_message(diagnostics, version_hint)
        if mode == ParseMode.STRICT:
            error = Diagnostic(severity=Severity.ERROR, message=message, source_location="#/")
            raise UnsupportedVersionError([error], diagnostics.warnings, source_name)
        logger.warning("%s (file: %s)", message, label)
        return None

    return result.document


def parse_file(
    path: Union[str, Path],
    mode: ParseMode = ParseMode.LENIENT,
    *,
    version_hint: Optional[str] = None,
) -> Optional[ParsedDocument]:
    """Read *path* (file, URL or ``-``) and :func:`parse` it.

    Raises:
        SpecFileNotFoundError: If the source does not exist, in either mode.
    """
    source = str(path)
    return parse(load_source(source), mode, source_name=source, version_hint=version_hint)


def _unsupported_message(diagnostics: ParseDiagnostics, version_hint: Optional[str]) -> str:
    if diagnostics.version_string is None:
        message = "OpenApi version not supported: no 'openapi' or 'swagger' version field"
    else:
        message = f"OpenApi version not supported: {diagnostics.version_string}"
    if version_hint:
        message = f"{message} (expected {version_hint})"
    return message
