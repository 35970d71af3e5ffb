"""Read a decoded API description into a :class:`~restdoc.models.ParsedDocument`.

The single public entry point is :func:`read_document`. It detects the schema
version, inlines local ``$ref`` pointers, and walks the document building the
immutable value tree, recording a :class:`~restdoc.models.Diagnostic` for every
structural problem it meets instead of stopping at the first one.

Both OpenAPI 3.x and Swagger 2.0 documents are read into the same shape:

* Swagger 2 ``host`` + ``basePath`` (and the first of ``schemes``) become
  ``servers[0].url``.
* Swagger 2 ``body`` and ``formData`` parameters describe the request body
  and are not kept as parameters; ``type``/``format``/``default`` on the
  parameter itself become its schema.
* Swagger 2 response ``examples`` (mime type to value) become one content
  entry per mime type.

Whether a successfully read document is *accepted* is decided later by the
version gate in :mod:`restdoc.parser.gate`.

Errors (the document cannot be modelled faithfully):

* missing ``info``, ``info.title``, ``info.version`` or ``paths``;
* a parameter without ``name`` or with a missing/unknown ``in``;
* an operation without ``responses``;
* a tag without ``name`` or a server without ``url``;
* unresolvable ``$ref`` pointers;
* values the document model cannot hold (no document is returned).

Warnings (the document is usable):

* a path key that does not start with ``/``;
* a path parameter that is not marked ``required``;
* an ``operationId`` used by more than one operation;
* an OpenAPI 3 document without ``servers``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from restdoc.models import (
    HTTPMethod,
    InfoObject,
    MediaTypeObject,
    OperationObject,
    ParameterLocation,
    ParameterObject,
    ParseDiagnostics,
    ParsedDocument,
    PathItem,
    ResponseObject,
    SchemaObject,
    ServerObject,
    SpecVersion,
    TagObject,
)
from restdoc.parser.loader import decode_content, decode_text
from restdoc.parser.refs import child_pointer, resolve_local_refs

_HTTP_METHODS = {m.value: m for m in HTTPMethod}
_LOCATIONS = {loc.value: loc for loc in ParameterLocation}
_SWAGGER_BODY_LOCATIONS = frozenset({"body", "formData"})
_ROOT = "#/"

_OPENAPI_30 = re.compile(r"^3\.0(\.\d+)?$")
_OPENAPI_31 = re.compile(r"^3\.1(\.\d+)?$")


@dataclass(frozen=True)
class ReadResult:
    """Outcome of :func:`read_document`.

    ``document`` is ``None`` when the bytes could not be decoded, the
    version is not recognised or a value does not fit the model. Otherwise
    it is populated even when ``diagnostics`` holds errors.
    """

    document: Optional[ParsedDocument]
    diagnostics: ParseDiagnostics


def read_document(
    source: Union[bytes, str],
    hint: str = "",
) -> ReadResult:
    """Decode and read one API description.

    Args:
        source: The raw document bytes (or already decoded text).
        hint: Optional format hint (``"json"`` or ``"yaml"``), usually
            derived from the file extension.

    Returns:
        A :class:`ReadResult` carrying the document (if one could be built)
        and every diagnostic found.
    """
    diagnostics = ParseDiagnostics()

    if isinstance(source, bytes):
        text, decode_errors = decode_text(source)
        diagnostics.extend(decode_errors)
        if text is None:
            return ReadResult(None, diagnostics)
    else:
        text = source

    raw, decode_errors = decode_content(text, hint=hint)
    diagnostics.extend(decode_errors)
    if raw is None:
        return ReadResult(None, diagnostics)

    version, version_string = detect_version(raw)
    diagnostics.spec_version = version
    diagnostics.version_string = version_string
    if version == SpecVersion.UNKNOWN:
        return ReadResult(None, diagnostics)

    spec, ref_errors = resolve_local_refs(raw)
    diagnostics.extend(ref_errors)

    try:
        if version == SpecVersion.SWAGGER_2_0:
            document = _read_swagger2(spec, version_string, diagnostics)
        else:
            document = _read_openapi3(spec, version, version_string, diagnostics)
    except ValidationError as exc:
        for problem in exc.errors():
            field = ".".join(str(part) for part in problem["loc"])
            diagnostics.error(f"Unsupported value at {field}: {problem['msg']}", _ROOT)
        return ReadResult(None, diagnostics)
    return ReadResult(document, diagnostics)


def detect_version(raw: dict[str, Any]) -> tuple[SpecVersion, Optional[str]]:
    """Identify the schema version a document declares.

    Returns:
        ``(version, version_string)``. ``version_string`` is the declared
        value as text, or ``None`` when neither ``openapi`` nor ``swagger``
        is present.
    """
    if "openapi" in raw:
        declared = str(raw["openapi"]).strip()
        if _OPENAPI_30.match(declared):
            return SpecVersion.OPENAPI_3_0, declared
        if _OPENAPI_31.match(declared):
            return SpecVersion.OPENAPI_3_1, declared
        return SpecVersion.UNKNOWN, declared
    if "swagger" in raw:
        declared = str(raw["swagger"]).strip()
        if declared == "2.0":
            return SpecVersion.SWAGGER_2_0, declared
        return SpecVersion.UNKNOWN, declared
    return SpecVersion.UNKNOWN, None


# --- OpenAPI 3 ---


def _read_openapi3(
    spec: dict[str, Any],
    version: SpecVersion,
    version_string: Optional[str],
    diagnostics: ParseDiagnostics,
) -> ParsedDocument:
    components = spec.get("components")
    security_schemes: dict[str, Any] = {}
    if isinstance(components, dict) and isinstance(components.get("securitySchemes"), dict):
        security_schemes = components["securitySchemes"]

    return ParsedDocument(
        spec_version=version,
        version_string=version_string,
        info=_read_info(spec, diagnostics),
        servers=_read_servers(spec, diagnostics),
        tags=_read_tags(spec, diagnostics),
        paths=_read_paths(
            spec,
            diagnostics,
            read_parameter=_read_openapi3_parameter,
            read_response=_read_openapi3_response,
            paths_required=version == SpecVersion.OPENAPI_3_0,
        ),
        security_schemes=security_schemes,
        security=_list_of_dicts(spec.get("security")),
        external_docs=_dict_or_none(spec.get("externalDocs")),
        extensions=_extensions(spec),
    )


def _read_servers(spec: dict[str, Any], diagnostics: ParseDiagnostics) -> list[ServerObject]:
    servers = spec.get("servers")
    if not servers:
        diagnostics.warning("No servers declared; the API UID omits the base URL", "#/servers")
        return []
    if not isinstance(servers, list):
        diagnostics.error("'servers' must be an array", "#/servers")
        return []

    result: list[ServerObject] = []
    for index, server in enumerate(servers):
        pointer = child_pointer("#/servers", index)
        if not isinstance(server, dict) or not isinstance(server.get("url"), str):
            diagnostics.error("url is a REQUIRED field", pointer)
            continue
        result.append(
            ServerObject(url=server["url"], description=_text(server.get("description")))
        )
    return result


def _read_openapi3_parameter(
    param: dict[str, Any], pointer: str, diagnostics: ParseDiagnostics
) -> Optional[ParameterObject]:
    location = _read_location(param, pointer, diagnostics)
    name = _read_parameter_name(param, pointer, diagnostics)
    if location is None or name is None:
        return None

    schema = param.get("schema")
    return _build_parameter(
        param,
        name,
        location,
        _schema_object(schema) if isinstance(schema, dict) else None,
        pointer,
        diagnostics,
    )


def _read_openapi3_response(
    response: dict[str, Any], pointer: str, diagnostics: ParseDiagnostics
) -> ResponseObject:
    content: dict[str, MediaTypeObject] = {}
    raw_content = response.get("content") or {}
    if not isinstance(raw_content, dict):
        diagnostics.error("'content' must be an object", child_pointer(pointer, "content"))
        raw_content = {}

    for mime_type, media in raw_content.items():
        media_pointer = child_pointer(child_pointer(pointer, "content"), mime_type)
        if not isinstance(media, dict):
            diagnostics.error("Media type must be an object", media_pointer)
            continue
        examples = media.get("examples") or {}
        if not isinstance(examples, dict):
            diagnostics.error("'examples' must be an object", child_pointer(media_pointer, "examples"))
            examples = {}
        content[mime_type] = MediaTypeObject(examples=examples)

    return ResponseObject(description=_text(response.get("description")), content=content)


# --- Swagger 2 ---


def _read_swagger2(
    spec: dict[str, Any],
    version_string: Optional[str],
    diagnostics: ParseDiagnostics,
) -> ParsedDocument:
    security_definitions = spec.get("securityDefinitions")
    return ParsedDocument(
        spec_version=SpecVersion.SWAGGER_2_0,
        version_string=version_string,
        info=_read_info(spec, diagnostics),
        servers=_swagger2_servers(spec),
        tags=_read_tags(spec, diagnostics),
        paths=_read_paths(
            spec,
            diagnostics,
            read_parameter=_read_swagger2_parameter,
            read_response=_read_swagger2_response,
            paths_required=True,
        ),
        security_schemes=security_definitions if isinstance(security_definitions, dict) else {},
        security=_list_of_dicts(spec.get("security")),
        external_docs=_dict_or_none(spec.get("externalDocs")),
        extensions=_extensions(spec),
    )


def _swagger2_servers(spec: dict[str, Any]) -> list[ServerObject]:
    host = spec.get("host")
    base_path = spec.get("basePath") or ""
    if not host and not base_path:
        return []
    if not host:
        return [ServerObject(url=str(base_path))]
    schemes = spec.get("schemes")
    scheme = "https"
    if isinstance(schemes, list) and schemes and isinstance(schemes[0], str):
        scheme = schemes[0]
    return [ServerObject(url=f"{scheme}://{host}{base_path}")]


def _read_swagger2_parameter(
    param: dict[str, Any], pointer: str, diagnostics: ParseDiagnostics
) -> Optional[ParameterObject]:
    raw_location = param.get("in")
    if isinstance(raw_location, str) and raw_location in _SWAGGER_BODY_LOCATIONS:
        _read_parameter_name(param, pointer, diagnostics)
        return None
    location = _read_location(param, pointer, diagnostics)
    name = _read_parameter_name(param, pointer, diagnostics)
    if location is None or name is None:
        return None
    return _build_parameter(param, name, location, _schema_object(param), pointer, diagnostics)


def _read_swagger2_response(
    response: dict[str, Any], pointer: str, diagnostics: ParseDiagnostics
) -> ResponseObject:
    examples = response.get("examples") or {}
    if not isinstance(examples, dict):
        diagnostics.error("'examples' must be an object", child_pointer(pointer, "examples"))
        examples = {}
    content = {
        mime_type: MediaTypeObject(examples={"example": value})
        for mime_type, value in examples.items()
    }
    return ResponseObject(description=_text(response.get("description")), content=content)


# --- Shared sections ---


def _read_info(spec: dict[str, Any], diagnostics: ParseDiagnostics) -> InfoObject:
    info = spec.get("info")
    if not isinstance(info, dict):
        diagnostics.error("info is a REQUIRED field", "#/info")
        return InfoObject()

    title = info.get("title")
    if title is None:
        diagnostics.error("title is a REQUIRED field", "#/info/title")
    version = info.get("version")
    if version is None:
        diagnostics.error("version is a REQUIRED field", "#/info/version")

    return InfoObject(
        title=str(title) if title is not None else None,
        description=_text(info.get("description")),
        version=str(version) if version is not None else None,
    )


def _read_tags(spec: dict[str, Any], diagnostics: ParseDiagnostics) -> list[TagObject]:
    tags = spec.get("tags") or []
    if not isinstance(tags, list):
        diagnostics.error("'tags' must be an array", "#/tags")
        return []

    result: list[TagObject] = []
    for index, tag in enumerate(tags):
        pointer = child_pointer("#/tags", index)
        if not isinstance(tag, dict) or tag.get("name") is None:
            diagnostics.error("name is a REQUIRED field", pointer)
            continue
        result.append(
            TagObject(
                name=str(tag["name"]),
                description=_text(tag.get("description")),
                external_docs=_dict_or_none(tag.get("externalDocs")),
                extensions=_extensions(tag),
            )
        )
    return result


def _read_paths(
    spec: dict[str, Any],
    diagnostics: ParseDiagnostics,
    *,
    read_parameter,
    read_response,
    paths_required: bool,
) -> dict[str, PathItem]:
    """Read the ``paths`` object, keeping declaration order of paths and verbs."""
    paths = spec.get("paths")
    if paths is None:
        if paths_required:
            diagnostics.error("paths is a REQUIRED field", "#/paths")
        return {}
    if not isinstance(paths, dict):
        diagnostics.error("'paths' must be an object", "#/paths")
        return {}

    operation_ids: dict[str, str] = {}
    result: dict[str, PathItem] = {}

    for path, path_item in paths.items():
        pointer = child_pointer("#/paths", path)
        if str(path).startswith("x-"):
            continue
        if not str(path).startswith("/"):
            diagnostics.warning(f"Path '{path}' should begin with '/'", pointer)
        if not isinstance(path_item, dict):
            diagnostics.error("Path item must be an object", pointer)
            continue

        # Path-level parameters apply to every operation under this path
        path_params = _read_parameters(
            path_item.get("parameters"), pointer, diagnostics, read_parameter
        )

        operations: dict[HTTPMethod, OperationObject] = {}
        for key, operation in path_item.items():
            method = _HTTP_METHODS.get(key)
            if method is None:
                continue
            op_pointer = child_pointer(pointer, key)
            if not isinstance(operation, dict):
                diagnostics.error("Operation must be an object", op_pointer)
                continue
            op = _read_operation(operation, op_pointer, diagnostics, read_parameter, read_response)
            if op.operation_id:
                previous = operation_ids.get(op.operation_id)
                if previous is not None:
                    diagnostics.warning(
                        f"operationId '{op.operation_id}' is also used at {previous}",
                        op_pointer,
                    )
                else:
                    operation_ids[op.operation_id] = op_pointer
            operations[method] = op

        result[str(path)] = PathItem(parameters=path_params, operations=operations)

    return result


def _read_operation(
    operation: dict[str, Any],
    pointer: str,
    diagnostics: ParseDiagnostics,
    read_parameter,
    read_response,
) -> OperationObject:
    operation_id = operation.get("operationId")
    tags = operation.get("tags") or []
    if not isinstance(tags, list):
        diagnostics.error("'tags' must be an array", child_pointer(pointer, "tags"))
        tags = []

    return OperationObject(
        operation_id=str(operation_id) if operation_id is not None else None,
        summary=_text(operation.get("summary")),
        description=_text(operation.get("description")),
        tags=[str(t) for t in tags],
        parameters=_read_parameters(
            operation.get("parameters"), pointer, diagnostics, read_parameter
        ),
        responses=_read_responses(operation, pointer, diagnostics, read_response),
        deprecated=bool(operation.get("deprecated", False)),
        extensions=_extensions(operation),
    )


def _read_parameters(
    params: Any, pointer: str, diagnostics: ParseDiagnostics, read_parameter
) -> list[ParameterObject]:
    if params is None:
        return []
    list_pointer = child_pointer(pointer, "parameters")
    if not isinstance(params, list):
        diagnostics.error("'parameters' must be an array", list_pointer)
        return []

    result: list[ParameterObject] = []
    for index, param in enumerate(params):
        param_pointer = child_pointer(list_pointer, index)
        if not isinstance(param, dict):
            diagnostics.error("Parameter must be an object", param_pointer)
            continue
        if "$ref" in param:
            # Unresolved reference, already reported by the resolver
            continue
        parameter = read_parameter(param, param_pointer, diagnostics)
        if parameter is not None:
            result.append(parameter)
    return result


def _read_responses(
    operation: dict[str, Any], pointer: str, diagnostics: ParseDiagnostics, read_response
) -> dict[str, ResponseObject]:
    responses = operation.get("responses")
    responses_pointer = child_pointer(pointer, "responses")
    if responses is None:
        diagnostics.error("responses is a REQUIRED field", responses_pointer)
        return {}
    if not isinstance(responses, dict):
        diagnostics.error("'responses' must be an object", responses_pointer)
        return {}

    result: dict[str, ResponseObject] = {}
    for status_code, response in responses.items():
        status = str(status_code)
        if status.startswith("x-"):
            continue
        response_pointer = child_pointer(responses_pointer, status)
        if not isinstance(response, dict):
            diagnostics.error("Response must be an object", response_pointer)
            continue
        if "$ref" in response:
            continue
        result[status] = read_response(response, response_pointer, diagnostics)
    return result


def _read_location(
    param: dict[str, Any], pointer: str, diagnostics: ParseDiagnostics
) -> Optional[ParameterLocation]:
    raw_location = param.get("in")
    if raw_location is None:
        diagnostics.error("in is a REQUIRED field", pointer)
        return None
    location = _LOCATIONS.get(raw_location) if isinstance(raw_location, str) else None
    if location is None:
        diagnostics.error(f"'{raw_location}' is not a valid parameter location", pointer)
    return location


def _read_parameter_name(
    param: dict[str, Any], pointer: str, diagnostics: ParseDiagnostics
) -> Optional[str]:
    name = param.get("name")
    if name is None:
        diagnostics.error("name is a REQUIRED field", pointer)
        return None
    return str(name)


def _build_parameter(
    param: dict[str, Any],
    name: str,
    location: ParameterLocation,
    schema: Optional[SchemaObject],
    pointer: str,
    diagnostics: ParseDiagnostics,
) -> ParameterObject:
    required = param.get("required", False) is True
    if location == ParameterLocation.PATH and not required:
        diagnostics.warning(f"Path parameter '{name}' should be marked required", pointer)
    return ParameterObject(
        name=name,
        location=location,
        required=required,
        description=_text(param.get("description")),
        schema=schema,
    )


def _schema_object(schema: dict[str, Any]) -> SchemaObject:
    """Keep the type, format and default of a schema (or Swagger 2 parameter).

    OpenAPI 3.1 type arrays (``["string", "null"]``) collapse to their first
    non-null member.
    """
    type_value = schema.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        type_value = non_null[0] if non_null else None
    schema_format = schema.get("format")
    return SchemaObject(
        type=str(type_value) if type_value is not None else None,
        format=str(schema_format) if schema_format is not None else None,
        default=schema.get("default"),
    )


def _extensions(node: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in node.items() if str(key).startswith("x-")}


def _dict_or_none(value: Any) -> Optional[dict[str, Any]]:
    return value if isinstance(value, dict) else None


def _list_of_dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)
