"""Exception hierarchy for restdoc.

All exceptions inherit from :class:`RestDocError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`restdoc.exit_codes`.
The top-level handler in :func:`restdoc.app.main` catches ``RestDocError``
and exits with the matching code.

Subclass hierarchy::

    RestDocError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- ConfigError              (exit 1)
    +-- SpecFileNotFoundError    (exit 4, also a FileNotFoundError)
    +-- OpenApiParseError        (exit 7)
    |   +-- UnsupportedVersionError  (exit 8)
    +-- MissingOperationIdError  (exit 9)
"""

from __future__ import annotations

from typing import Optional, Sequence

from restdoc.exit_codes import (
    EXIT_FILE_NOT_FOUND,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MISSING_OPERATION_ID,
    EXIT_PARSE_ERROR,
    EXIT_UNSUPPORTED_VERSION,
)
from restdoc.models import Diagnostic


class RestDocError(Exception):
    """Base exception for all restdoc errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RestDocError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(RestDocError):
    """Raised for an unreadable or invalid ``restdoc.json`` project file."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecFileNotFoundError(RestDocError, FileNotFoundError):
    """Raised when the API description file (or URL) cannot be reached.

    Also a :class:`FileNotFoundError` so that probing code can catch the
    missing-file case on its own, without swallowing parse failures.
    """

    exit_code = EXIT_FILE_NOT_FOUND

    def __init__(self, path: str, reason: Optional[str] = None):
        message = f"API description file not found: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path


class OpenApiParseError(RestDocError):
    """Raised by strict parsing when the document has errors.

    Carries the complete, ordered error and warning lists. The exception
    message is the error messages joined by newlines.

    Args:
        errors: Error diagnostics, in the order they were found.
        warnings: Warning diagnostics, in the order they were found.
        source_name: File name or other label of the parsed source.
    """

    exit_code = EXIT_PARSE_ERROR

    def __init__(
        self,
        errors: Sequence[Diagnostic],
        warnings: Sequence[Diagnostic] = (),
        source_name: Optional[str] = None,
    ):
        super().__init__("\n".join(str(e) for e in errors))
        self.errors: list[Diagnostic] = list(errors)
        self.warnings: list[Diagnostic] = list(warnings)
        self.source_name = source_name


class UnsupportedVersionError(OpenApiParseError):
    """Raised by strict parsing for a readable document that is not OpenAPI 3.0."""

    exit_code = EXIT_UNSUPPORTED_VERSION


class MissingOperationIdError(RestDocError):
    """Raised when an operation has no ``operationId``.

    The whole document is rejected: operation UIDs and anchors are derived
    from the ``operationId``, so a document without one cannot be published
    with stable links.
    """

    exit_code = EXIT_MISSING_OPERATION_ID

    def __init__(self, operation: str, path: str, file_name: Optional[str] = None):
        super().__init__(
            f"OperationId should exist in operation '{operation}' of path "
            f"'{path}' for Open API file '{file_name}'"
        )
        self.operation = operation
        self.path = path
        self.file_name = file_name
