"""Numeric process exit codes returned by the ``restdoc`` command line.

Each constant maps to one failure category and is referenced by the
corresponding :class:`~restdoc.exceptions.RestDocError` subclass, so that
build scripts can tell "this file is not OpenAPI" apart from "this OpenAPI
file is broken" without parsing stderr.

Example::

    $ restdoc build api/contacts.json
    $ echo $?
    9   # EXIT_MISSING_OPERATION_ID -- an operation has no operationId
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_FILE_NOT_FOUND = 4
"""The API description file does not exist."""

EXIT_PARSE_ERROR = 7
"""The API description could not be parsed (malformed document)."""

EXIT_UNSUPPORTED_VERSION = 8
"""The API description declares a version other than OpenAPI 3.0."""

EXIT_MISSING_OPERATION_ID = 9
"""An operation lacks an ``operationId`` so stable anchors cannot be built."""
