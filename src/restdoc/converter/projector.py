"""Project a parsed document into the flat documentation model.

:func:`project` walks a :class:`~restdoc.models.ParsedDocument` and builds a
:class:`~restdoc.models.RootItem`:

* tags, in declaration order, with UIDs under ``<root uid>/tag/`` and anchors
  that honour the ``x-bookmark-id`` extension;
* one :class:`~restdoc.models.ChildItem` per path and verb, paths and verbs
  in declaration order, limited to ``get``, ``put``, ``post``, ``delete``,
  ``options``, ``head`` and ``patch`` (other verbs are skipped);
* operation parameters merged with path parameters by
  :func:`~restdoc.converter.parameters.resolve_parameters`;
* every ``(mime type, example)`` pair of a response flattened into one list.

:func:`check_operation_ids` is the precondition for projection: operation
UIDs are built from ``operationId``, so a single operation without one
rejects the whole document.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from restdoc.converter.identifiers import (
    BOOKMARK_EXTENSION,
    TAG_SEGMENT,
    derive_html_id,
    derive_root_uid,
    derive_tag_html_id,
    derive_uid,
)
from restdoc.converter.parameters import resolve_parameters
from restdoc.exceptions import MissingOperationIdError
from restdoc.models import (
    ChildItem,
    ExampleItem,
    HTTPMethod,
    OperationObject,
    ParameterItem,
    ParameterObject,
    ParsedDocument,
    ResponseItem,
    ResponseObject,
    RootItem,
    TagItem,
    TagObject,
)

DOCUMENTED_METHODS: tuple[HTTPMethod, ...] = (
    HTTPMethod.GET,
    HTTPMethod.PUT,
    HTTPMethod.POST,
    HTTPMethod.DELETE,
    HTTPMethod.OPTIONS,
    HTTPMethod.HEAD,
    HTTPMethod.PATCH,
)
"""Verbs that produce a :class:`~restdoc.models.ChildItem`."""

SOURCE_KEY = "source"


def check_operation_ids(document: ParsedDocument, file_name: Optional[str] = None) -> None:
    """Require a non-empty ``operationId`` on every operation of every path.

    All verbs are checked, including ones :func:`project` does not document.

    Raises:
        MissingOperationIdError: Naming the first offending verb and path.
    """
    for path, path_item in document.paths.items():
        for method, operation in path_item.operations.items():
            if not operation.operation_id:
                raise MissingOperationIdError(method.value, path, file_name)


def project(
    document: ParsedDocument,
    *,
    raw: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
    bookmark_key: str = BOOKMARK_EXTENSION,
) -> RootItem:
    """Build the documentation model of *document*.

    Args:
        document: A parsed document that passed :func:`check_operation_ids`.
        raw: Full source text, carried through to :attr:`RootItem.raw`.
        metadata: Build metadata (``documentType``, ``source``, ...) added to
            the root after the document's pass-through fields.
        bookmark_key: Tag extension whose value overrides the tag anchor.

    Returns:
        The frozen :class:`~restdoc.models.RootItem`.

    Raises:
        MissingOperationIdError: If a documented operation has no
            ``operationId``.
    """
    uid = derive_root_uid(document.base_url, document.info.title, document.info.version)
    root_metadata = {**_passthrough_metadata(document), **(metadata or {})}
    source = root_metadata.get(SOURCE_KEY)

    children: list[ChildItem] = []
    for path, path_item in document.paths.items():
        for method, operation in path_item.operations.items():
            if method not in DOCUMENTED_METHODS:
                continue
            parameters = resolve_parameters(operation.parameters, path_item.parameters)
            children.append(_child_item(uid, path, method, operation, parameters, source))

    return RootItem(
        name=document.info.title,
        uid=uid,
        html_id=derive_html_id(uid),
        description=document.info.description,
        metadata=root_metadata,
        tags=[_tag_item(uid, tag, bookmark_key) for tag in document.tags],
        children=children,
        raw=raw,
    )


def _passthrough_metadata(document: ParsedDocument) -> dict[str, Any]:
    """Document-level fields renderers read from the root metadata."""
    metadata: dict[str, Any] = {}
    if document.security_schemes:
        metadata["securityDefinitions"] = document.security_schemes
    if document.security:
        metadata["security"] = document.security
    if document.external_docs:
        metadata["externalDocs"] = document.external_docs
    metadata.update(document.extensions)
    return metadata


def _tag_item(parent_uid: str, tag: TagObject, bookmark_key: str) -> TagItem:
    metadata: dict[str, Any] = {}
    if tag.external_docs is not None:
        metadata["externalDocs"] = tag.external_docs
    return TagItem(
        name=tag.name,
        description=tag.description,
        html_id=derive_tag_html_id(tag.name, tag.extensions, bookmark_key),
        uid=derive_uid(parent_uid, TAG_SEGMENT, tag.name),
        metadata=metadata,
    )


def _child_item(
    parent_uid: str,
    path: str,
    method: HTTPMethod,
    operation: OperationObject,
    parameters: list[ParameterObject],
    source: Any,
) -> ChildItem:
    if not operation.operation_id:
        raise MissingOperationIdError(method.value, path)

    uid = derive_uid(parent_uid, operation.operation_id)
    metadata: dict[str, Any] = {SOURCE_KEY: source}
    if operation.deprecated:
        metadata["deprecated"] = True

    return ChildItem(
        path=path,
        operation_name=method.value,
        tags=list(operation.tags),
        operation_id=operation.operation_id,
        uid=uid,
        html_id=derive_html_id(uid),
        description=operation.description,
        summary=operation.summary,
        parameters=[_parameter_item(p) for p in parameters],
        responses=[
            _response_item(status, response) for status, response in operation.responses.items()
        ],
        metadata=metadata,
    )


def _parameter_item(parameter: ParameterObject) -> ParameterItem:
    metadata: dict[str, Any] = {
        "in": parameter.location.value,
        "required": parameter.required,
    }
    # Only string defaults are surfaced
    schema = parameter.schema_
    if schema is not None and isinstance(schema.default, str):
        metadata["default"] = schema.default
        metadata["type"] = schema.type
    return ParameterItem(name=parameter.name, description=parameter.description, metadata=metadata)


def _response_item(status_code: str, response: ResponseObject) -> ResponseItem:
    examples = [
        ExampleItem(mime_type=mime_type, content=serialize_example(example))
        for mime_type, media in response.content.items()
        for example in media.examples.values()
    ]
    return ResponseItem(
        http_status_code=status_code,
        description=response.description,
        examples=examples,
    )


def serialize_example(example: Any) -> Optional[str]:
    """Canonical JSON text of an example, or ``None`` for a null example.

    An Example Object (a mapping with a ``value`` key) is represented by its
    value; anything else (``externalValue`` objects, bare values) is
    serialised as is.
    """
    if isinstance(example, dict) and "value" in example:
        example = example["value"]
    if example is None:
        return None
    return json.dumps(example, indent=2, ensure_ascii=False, default=str)
