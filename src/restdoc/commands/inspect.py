"""Inspect commands -- look at API description files without building them.

* ``restdoc probe`` -- which files the document processor would claim.
* ``restdoc inspect`` -- the operations of one OpenAPI 3.0 file.
* ``restdoc diagnostics`` -- every parse error and warning of one file.
"""

from __future__ import annotations

from pathlib import Path

import typer

from restdoc.exceptions import RestDocError, SpecFileNotFoundError
from restdoc.exit_codes import EXIT_PARSE_ERROR
from restdoc.models import ProcessingPriority
from restdoc.output import OutputFormat, error, get_output, info, print_json, print_table
from restdoc.parser import load_source, read_document
from restdoc.parser.loader import format_hint
from restdoc.processor import get_processing_priority, load_article


def probe_command(
    files: list[Path] = typer.Argument(..., help="Files to probe."),
) -> None:
    """Show which files are OpenAPI 3.0 articles.

    Example::

        restdoc probe api/*.json
    """
    rows: list[list[str]] = []
    for path in files:
        priority = get_processing_priority(path)
        rows.append([str(path), _declared_version(path), priority.value])
    print_table(["File", "Version", "Priority"], rows, title=f"Probe ({len(rows)})")

    accepted = sum(1 for row in rows if row[2] == ProcessingPriority.NORMAL.value)
    info(f"{accepted} of {len(rows)} file(s) accepted")


def inspect_command(
    file: Path = typer.Argument(..., help="OpenAPI 3.0 document."),
) -> None:
    """List the documented operations of an API description.

    With ``--json`` the whole documentation model is printed.

    Example::

        restdoc inspect api/contacts.json
        restdoc --json inspect api/contacts.json
    """
    try:
        model = load_article(file)
    except RestDocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    root = model.content
    if get_output().format == OutputFormat.JSON:
        print_json(root.model_dump(mode="json", by_alias=True, exclude={"raw"}))
        return

    rows = [
        [child.operation_name.upper(), child.path, child.operation_id, child.uid]
        for child in root.children
    ]
    print_table(
        ["Method", "Path", "Operation ID", "UID"],
        rows,
        title=f"{root.name} -- Operations ({len(rows)})",
    )


def diagnostics_command(
    file: Path = typer.Argument(..., help="API description document."),
) -> None:
    """Print every parse error and warning of a document.

    Exits with the parse-error code when the document has errors.
    """
    try:
        data = load_source(str(file))
    except RestDocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    diagnostics = read_document(data, hint=format_hint(str(file))).diagnostics
    rows = [
        [d.severity.value, d.message, d.source_location or "-"]
        for d in [*diagnostics.errors, *diagnostics.warnings]
    ]
    version = diagnostics.version_string or "unknown"
    print_table(["Severity", "Message", "Location"], rows, title=f"{file} (version {version})")

    if diagnostics.has_errors:
        raise typer.Exit(code=EXIT_PARSE_ERROR)


def _declared_version(path: Path) -> str:
    try:
        data = load_source(str(path))
    except SpecFileNotFoundError:
        return "missing"
    diagnostics = read_document(data, hint=format_hint(str(path))).diagnostics
    return diagnostics.version_string or "-"
