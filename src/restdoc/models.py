"""Canonical Pydantic models shared across all restdoc modules.

This is the single source of truth for data shapes in the project. The models
fall into four groups:

**Parsed document** -- the immutable value tree produced by
:mod:`restdoc.parser` from an OpenAPI 3 (or Swagger 2) document. Only the
fields the documentation model consumes are kept:
    :class:`ParsedDocument`, :class:`InfoObject`, :class:`ServerObject`,
    :class:`TagObject`, :class:`PathItem`, :class:`OperationObject`,
    :class:`ParameterObject`, :class:`SchemaObject`,
    :class:`ResponseObject`, :class:`MediaTypeObject`.

**Diagnostics** -- :class:`Diagnostic` and :class:`ParseDiagnostics`, the
side channel that accompanies every parse attempt.

**Documentation model** -- the flat, renderable output of
:mod:`restdoc.converter.projector`:
    :class:`RootItem`, :class:`TagItem`, :class:`ChildItem`,
    :class:`ParameterItem`, :class:`ResponseItem`, :class:`ExampleItem`.
These serialise with camelCase keys (``htmlId``, ``operationId``...) via
``model_dump(by_alias=True)``.

**Build models** -- :class:`FileModel`, :class:`UidDefinition` and
:class:`BuildConfig`, used by :mod:`restdoc.processor` and the CLI.

Parsed-document and documentation models are frozen: they are built once per
source document and never mutated afterwards.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


ExtensionValue = Union[str, int, float, bool, None, dict[str, Any], list[Any]]
"""Value of a vendor extension (``x-*``) field."""

Extensions = dict[str, ExtensionValue]
"""Ordered mapping of vendor extension names to their values."""


# --- Enums ---


class SpecVersion(str, enum.Enum):
    """Schema versions the reader can recognise."""

    SWAGGER_2_0 = "2.0"
    OPENAPI_3_0 = "3.0"
    OPENAPI_3_1 = "3.1"
    UNKNOWN = "unknown"


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI path-item objects."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class Severity(str, enum.Enum):
    """Severity of a parse :class:`Diagnostic`."""

    WARNING = "warning"
    ERROR = "error"


class DocumentType(str, enum.Enum):
    """Role of an input file in a documentation build."""

    ARTICLE = "article"
    OVERWRITE = "overwrite"


class ProcessingPriority(str, enum.Enum):
    """Whether the document processor accepts a file."""

    NORMAL = "normal"
    NOT_SUPPORTED = "not_supported"


# --- Diagnostics ---


class Diagnostic(BaseModel):
    """A single parse error or warning.

    ``source_location`` is a JSON pointer into the document
    (e.g. ``#/paths/~1pets/get/parameters/0``) when one is known.
    """

    model_config = ConfigDict(frozen=True)

    severity: Severity
    message: str
    source_location: Optional[str] = None

    def __str__(self) -> str:
        if self.source_location:
            return f"{self.message} [{self.source_location}]"
        return self.message


class ParseDiagnostics(BaseModel):
    """Errors and warnings collected while reading one document.

    Produced for every parse attempt, whether or not a document came out of
    it. Errors and warnings keep the order in which they were found.
    """

    spec_version: SpecVersion = SpecVersion.UNKNOWN
    version_string: Optional[str] = None
    errors: list[Diagnostic] = Field(default_factory=list)
    warnings: list[Diagnostic] = Field(default_factory=list)

    def error(self, message: str, location: Optional[str] = None) -> None:
        """Record an error diagnostic."""
        self.errors.append(
            Diagnostic(severity=Severity.ERROR, message=message, source_location=location)
        )

    def warning(self, message: str, location: Optional[str] = None) -> None:
        """Record a warning diagnostic."""
        self.warnings.append(
            Diagnostic(severity=Severity.WARNING, message=message, source_location=location)
        )

    def extend(self, diagnostics: list[Diagnostic]) -> None:
        """Sort already-built diagnostics into the error and warning lists."""
        for diagnostic in diagnostics:
            if diagnostic.severity == Severity.ERROR:
                self.errors.append(diagnostic)
            else:
                self.warnings.append(diagnostic)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


# --- Parsed document ---


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class InfoObject(_Frozen):
    """The document's *Info Object*."""

    title: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None


class ServerObject(_Frozen):
    """An entry of the ``servers`` array (or the Swagger 2 host + basePath)."""

    url: str
    description: Optional[str] = None


class TagObject(_Frozen):
    """A top-level tag declaration, including its vendor extensions."""

    name: str
    description: Optional[str] = None
    external_docs: Optional[dict[str, Any]] = None
    extensions: Extensions = Field(default_factory=dict)


class SchemaObject(_Frozen):
    """The part of a parameter schema the documentation model reads."""

    type: Optional[str] = None
    format: Optional[str] = None
    default: Any = None


class ParameterObject(_Frozen):
    """A parameter declared on a path item or an operation."""

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_: Optional[SchemaObject] = Field(default=None, alias="schema")


class MediaTypeObject(_Frozen):
    """A response content entry; ``examples`` maps example name to example."""

    examples: dict[str, Any] = Field(default_factory=dict)


class ResponseObject(_Frozen):
    """A response keyed by status code on an operation."""

    description: Optional[str] = None
    content: dict[str, MediaTypeObject] = Field(default_factory=dict)


class OperationObject(_Frozen):
    """One HTTP-verb handler under a path."""

    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: list[ParameterObject] = Field(default_factory=list)
    responses: dict[str, ResponseObject] = Field(default_factory=dict)
    deprecated: bool = False
    extensions: Extensions = Field(default_factory=dict)


class PathItem(_Frozen):
    """All operations and shared parameters of one URL path.

    ``operations`` keeps the order in which the verbs were declared.
    """

    parameters: list[ParameterObject] = Field(default_factory=list)
    operations: dict[HTTPMethod, OperationObject] = Field(default_factory=dict)


class ParsedDocument(_Frozen):
    """Read-only view of an API description document.

    Built by :func:`restdoc.parser.reader.read_document`. Swagger 2
    documents are converted into the same shape, with ``host`` and
    ``basePath`` folded into ``servers[0].url``.
    """

    spec_version: SpecVersion
    version_string: Optional[str] = None
    info: InfoObject = Field(default_factory=InfoObject)
    servers: list[ServerObject] = Field(default_factory=list)
    tags: list[TagObject] = Field(default_factory=list)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    security_schemes: dict[str, Any] = Field(default_factory=dict)
    security: list[dict[str, Any]] = Field(default_factory=list)
    external_docs: Optional[dict[str, Any]] = None
    extensions: Extensions = Field(default_factory=dict)

    @property
    def base_url(self) -> Optional[str]:
        """URL of the first declared server, if any."""
        return self.servers[0].url if self.servers else None


# --- Documentation model ---


class _Item(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )


class ExampleItem(_Item):
    """One example of a response body; ``content`` is ``None`` for a null example."""

    mime_type: str
    content: Optional[str] = None


class ResponseItem(_Item):
    http_status_code: str
    description: Optional[str] = None
    examples: list[ExampleItem] = Field(default_factory=list)


class ParameterItem(_Item):
    """A resolved operation parameter.

    ``metadata`` always holds ``in`` and ``required``; ``default`` and
    ``type`` are added only when the schema declares a string default.
    """

    name: str
    description: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class TagItem(_Item):
    name: str
    description: Optional[str] = None
    html_id: Optional[str] = None
    uid: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class ChildItem(_Item):
    """One documented operation (a path + verb pair).

    ``tags`` holds tag *names* in the operation's declaration order; they
    are looked up against :attr:`RootItem.tags` at render time.
    """

    path: str
    operation_name: str
    tags: list[str] = Field(default_factory=list)
    operation_id: str
    uid: str
    html_id: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    parameters: list[ParameterItem] = Field(default_factory=list)
    responses: list[ResponseItem] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class RootItem(_Item):
    """The documented API: owns its tags and its operations.

    ``raw`` carries the full source text of the document for UIs that show
    it verbatim.
    """

    name: Optional[str] = None
    uid: str
    html_id: Optional[str] = None
    description: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    tags: list[TagItem] = Field(default_factory=list)
    children: list[ChildItem] = Field(default_factory=list)
    raw: Optional[str] = None


# --- Build models ---


class UidDefinition(BaseModel):
    """A UID declared by a file, with the file that declares it."""

    model_config = ConfigDict(frozen=True)

    uid: str
    file: str


class FileModel(BaseModel):
    """A loaded article: the documentation model plus its build bookkeeping."""

    model_config = ConfigDict(frozen=True)

    file: str
    local_path: str
    uids: list[UidDefinition] = Field(default_factory=list)
    content: RootItem


class BuildConfig(BaseModel):
    """Effective settings for a documentation build.

    Resolved by :func:`restdoc.config.resolve_config` from CLI flags,
    ``RESTDOC_*`` environment variables and the project file
    ``./restdoc.json``.
    """

    output_dir: str = Field(default="_site", description="Where raw models are written")
    strict: bool = Field(
        default=True, description="Fail on malformed documents instead of skipping them"
    )
    bookmark_extension: str = Field(
        default="x-bookmark-id",
        description="Tag extension whose value overrides the tag's htmlId",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Build metadata added to every root item"
    )
    verbose: bool = False
