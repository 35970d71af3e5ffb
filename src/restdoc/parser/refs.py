"""Resolve local ``$ref`` JSON Reference pointers in API description documents.

Documents commonly use ``$ref`` pointers (``{"$ref": "#/components/parameters/ApiVersion"}``)
to share parameters, responses and schemas. This module performs a recursive
copy of the document, replacing every internal reference with the object it
points to.

Only **internal** references (those starting with ``#/``) are followed.
External file or URL references, and internal references whose target does
not exist, are reported as error diagnostics at the location of the
referencing node and left in place.

Circular references are detected via a ``seen`` set and left unresolved to
prevent infinite recursion, so a self-referencing schema keeps its ``$ref``
dict at the cycle point.
"""

from __future__ import annotations

from typing import Any

from restdoc.models import Diagnostic, Severity


class _UnresolvedRef(Exception):
    """Internal signal for a reference that cannot be followed."""


def escape_pointer_segment(segment: str) -> str:
    """Escape one JSON Pointer segment per RFC 6901 (``~`` then ``/``)."""
    return segment.replace("~", "~0").replace("/", "~1")


def child_pointer(pointer: str, segment: Any) -> str:
    """Append *segment* to the JSON pointer *pointer* (``#`` is the root)."""
    return f"{pointer}/{escape_pointer_segment(str(segment))}"


def resolve_local_refs(document: dict[str, Any]) -> tuple[dict[str, Any], list[Diagnostic]]:
    """Return a copy of *document* with all resolvable local ``$ref`` inlined.

    Args:
        document: The decoded document, as returned by
            :func:`~restdoc.parser.loader.decode_content`.

    Returns:
        ``(resolved, diagnostics)``. The input is never modified; dicts and
        lists in ``resolved`` are new objects.

    Example::

        resolved, diagnostics = resolve_local_refs(raw)
        # resolved["paths"]["/contacts"]["get"]["parameters"][0]
        # now holds the parameter instead of a $ref pointer.
    """
    diagnostics: list[Diagnostic] = []
    resolved = _deep_resolve(document, document, "#", diagnostics, frozenset())
    return resolved, diagnostics


def _resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Follow a single ``#/...`` pointer from the document root.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``).

    Raises:
        _UnresolvedRef: If the reference is external or any segment does
            not exist.
    """
    if not ref.startswith("#/"):
        raise _UnresolvedRef(
            f"External $ref not supported: {ref}. Only internal references (#/...) are resolved."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict):
            if segment not in current:
                raise _UnresolvedRef(f"Cannot resolve $ref '{ref}': key '{segment}' not found")
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise _UnresolvedRef(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise _UnresolvedRef(
                f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
            )
    return current


def _deep_resolve(
    obj: Any,
    root: dict[str, Any],
    pointer: str,
    diagnostics: list[Diagnostic],
    seen: frozenset[str],
) -> Any:
    """Recursively resolve ``$ref`` pointers within *obj*.

    ``seen`` holds the references currently on the resolution stack; it is
    immutable so sibling branches never see each other's references.
    ``pointer`` is the location of *obj* and is used for diagnostics.
    """
    if isinstance(obj, dict):
        ref = obj.get("$ref")
        if isinstance(ref, str):
            if ref in seen:
                return obj
            try:
                target = _resolve_ref(ref, root)
            except _UnresolvedRef as exc:
                diagnostics.append(
                    Diagnostic(severity=Severity.ERROR, message=str(exc), source_location=pointer)
                )
                return obj
            return _deep_resolve(target, root, pointer, diagnostics, seen | {ref})

        return {
            key: _deep_resolve(value, root, child_pointer(pointer, key), diagnostics, seen)
            for key, value in obj.items()
        }

    if isinstance(obj, list):
        return [
            _deep_resolve(item, root, child_pointer(pointer, index), diagnostics, seen)
            for index, item in enumerate(obj)
        ]

    return obj
