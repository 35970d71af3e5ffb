"""Document processor -- decide which files are OpenAPI articles and load them.

A documentation build hands every input file to
:func:`get_processing_priority`; files this processor accepts are then
loaded with :func:`load_article`, which returns a
:class:`~restdoc.models.FileModel` holding the documentation model and the
UIDs the file declares.

Accepting a file *probes* it: the file must carry a supported ending and
parse as OpenAPI 3.0 under :attr:`~restdoc.parser.ParseMode.LENIENT`, so a
Swagger 2 or malformed JSON file is simply not claimed. Loading is
:attr:`~restdoc.parser.ParseMode.STRICT`: a file already claimed must fail
loudly when it is broken.

Legacy file endings (``_swagger2.json``, ``_swagger.json``,
``.swagger.json``, ``.swagger2.json``) are still recognised and normalised
to a plain ``.json`` name, so ``a.b_swagger2.json`` builds as ``a.b.json``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from restdoc.converter.identifiers import BOOKMARK_EXTENSION
from restdoc.converter.projector import SOURCE_KEY, check_operation_ids, project
from restdoc.exceptions import SpecFileNotFoundError
from restdoc.models import (
    DocumentType,
    FileModel,
    ParsedDocument,
    ProcessingPriority,
    RootItem,
    UidDefinition,
)
from restdoc.parser import ParseMode, load_source, parse, parse_file

logger = logging.getLogger(__name__)

DOCUMENT_TYPE = "RestOpenApi"
DOCUMENT_TYPE_KEY = "documentType"
SYSTEM_KEYS_KEY = "_systemKeys"
RAW_MODEL_EXTENSION = ".raw.json"

SUPPORTED_FILE_ENDINGS: tuple[str, ...] = (
    "_swagger2.json",
    "_swagger.json",
    ".swagger.json",
    ".swagger2.json",
    ".json",
)
"""Recognised endings, checked in order; the first match wins."""

SYSTEM_KEYS: tuple[str, ...] = (
    "uid",
    "htmlId",
    "name",
    "conceptual",
    "description",
    "remarks",
    "summary",
    "documentation",
    "children",
    "documentType",
    "source",
    # OpenAPI object fields
    "openapi",
    "info",
    "servers",
    "schemes",
    "consumes",
    "produces",
    "paths",
    "definitions",
    "parameters",
    "responses",
    "securityDefinitions",
    "security",
    "tags",
    "externalDocs",
)
"""Root metadata keys that templates must not treat as user metadata."""


def supported_file_ending(file_name: Union[str, Path]) -> Optional[str]:
    """Return the first of :data:`SUPPORTED_FILE_ENDINGS` *file_name* ends with."""
    lowered = str(file_name).lower()
    for ending in SUPPORTED_FILE_ENDINGS:
        if lowered.endswith(ending):
            return ending
    return None


def normalize_file_name(file_name: str) -> str:
    """Replace a legacy ending with ``.json``.

    ``contacts_swagger2.json`` becomes ``contacts.json``; names without a
    supported ending are returned unchanged.
    """
    ending = supported_file_ending(file_name)
    if ending is None:
        return file_name
    return file_name[: -len(ending)] + ".json"


def raw_model_file_name(file_name: Union[str, Path]) -> str:
    """Name of the exported raw model for *file_name* (``a.b_swagger.json`` -> ``a.b.raw.json``)."""
    normalized = normalize_file_name(Path(file_name).name)
    stem = normalized[: -len(".json")] if normalized.lower().endswith(".json") else normalized
    return stem + RAW_MODEL_EXTENSION


def is_openapi_file(path: Union[str, Path]) -> bool:
    """Whether *path* exists and parses as an OpenAPI 3.0 document.

    Never raises for missing files or for content in another format.
    """
    try:
        return parse_file(path, ParseMode.LENIENT) is not None
    except SpecFileNotFoundError as exc:
        logger.debug("Could not find %s: %s", path, exc)
        return False


def get_processing_priority(
    path: Union[str, Path],
    document_type: DocumentType = DocumentType.ARTICLE,
) -> ProcessingPriority:
    """Whether this processor handles *path*.

    Articles are accepted when they carry a supported ending and are
    OpenAPI 3.0 documents; overwrite files are accepted when they are
    Markdown.
    """
    if document_type == DocumentType.ARTICLE:
        if supported_file_ending(path) is not None and is_openapi_file(path):
            return ProcessingPriority.NORMAL
    elif document_type == DocumentType.OVERWRITE:
        if Path(path).suffix.lower() == ".md":
            return ProcessingPriority.NORMAL
    return ProcessingPriority.NOT_SUPPORTED


def load_article(
    path: Union[str, Path],
    metadata: Optional[Mapping[str, Any]] = None,
    *,
    base_dir: Optional[Union[str, Path]] = None,
    source: Any = None,
    bookmark_key: str = BOOKMARK_EXTENSION,
) -> FileModel:
    """Load an OpenAPI 3.0 file into its documentation model.

    Args:
        path: The article to load.
        metadata: Build metadata added to the root item's metadata.
        base_dir: Directory the displayed local path is made relative to.
        source: Source-control detail of the file, if the caller has one;
            copied to the root and to every child as ``source``.
        bookmark_key: Tag extension whose value overrides the tag anchor.

    Returns:
        A :class:`~restdoc.models.FileModel` declaring the root, child and
        tag UIDs.

    Raises:
        SpecFileNotFoundError: If *path* does not exist.
        OpenApiParseError: If the document has errors.
        UnsupportedVersionError: If the document is not OpenAPI 3.0.
        MissingOperationIdError: If any operation lacks an ``operationId``.
    """
    file_path = Path(path)
    data = load_source(str(file_path))
    document = parse(data, ParseMode.STRICT, source_name=str(file_path))
    root = build_root(
        document,
        raw=data.decode("utf-8-sig"),
        file_name=file_path.name,
        metadata=metadata,
        source=source,
        bookmark_key=bookmark_key,
    )

    local_path = _display_path(file_path, base_dir)
    uids = [root.uid, *(child.uid for child in root.children), *(tag.uid for tag in root.tags)]
    return FileModel(
        file=str(file_path),
        local_path=local_path,
        uids=[UidDefinition(uid=uid, file=local_path) for uid in uids if uid],
        content=root,
    )


def build_root(
    document: ParsedDocument,
    *,
    raw: Optional[str] = None,
    file_name: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
    source: Any = None,
    bookmark_key: str = BOOKMARK_EXTENSION,
) -> RootItem:
    """Check operation ids, then project *document* with article metadata."""
    check_operation_ids(document, file_name)

    article_metadata: dict[str, Any] = dict(metadata or {})
    article_metadata[DOCUMENT_TYPE_KEY] = DOCUMENT_TYPE
    if source is not None:
        article_metadata[SOURCE_KEY] = source
    article_metadata[SYSTEM_KEYS_KEY] = list(SYSTEM_KEYS)

    return project(document, raw=raw, metadata=article_metadata, bookmark_key=bookmark_key)


def _display_path(file_path: Path, base_dir: Optional[Union[str, Path]]) -> str:
    if base_dir is None:
        return file_path.as_posix()
    return Path(os.path.relpath(file_path, base_dir)).as_posix()
