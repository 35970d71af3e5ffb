"""API description parser -- load, decode, read and version-gate documents.

This sub-package is the first half of the restdoc pipeline: turning the
bytes of an OpenAPI 3.0 document into a :class:`~restdoc.models.ParsedDocument`
that :mod:`restdoc.converter` projects into the documentation model.

Typical usage::

    from restdoc.parser import ParseMode, parse_file

    document = parse_file("api/contacts.json", ParseMode.STRICT)

Sub-modules:

* :mod:`~restdoc.parser.loader` -- I/O (file, URL, stdin) and JSON/YAML
  decoding.
* :mod:`~restdoc.parser.refs` -- local ``$ref`` resolution with cycle
  detection.
* :mod:`~restdoc.parser.reader` -- builds the parsed document and collects
  diagnostics, for OpenAPI 3.x and Swagger 2.0.
* :mod:`~restdoc.parser.gate` -- the strict/lenient entry points and the
  OpenAPI 3.0 version gate.
"""

from restdoc.parser.gate import ParseMode, parse, parse_file
from restdoc.parser.loader import load_source
from restdoc.parser.reader import ReadResult, read_document

__all__ = ["ParseMode", "parse", "parse_file", "load_source", "ReadResult", "read_document"]
