"""Build command -- export the documentation model of each API description.

``restdoc build`` loads every given file and writes its model as
``<name>.raw.json`` (camelCase keys) into the output directory, where the
template layer picks it up. Legacy endings are normalised first, so
``contacts_swagger.json`` is written as ``contacts.raw.json``.

In strict mode (the default) the first broken file stops the build with its
exit code. With ``--lenient`` files that are not OpenAPI 3.0 documents are
skipped with a warning; a missing ``operationId`` still fails the build.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from restdoc.config import resolve_config
from restdoc.exceptions import InvalidUsageError, RestDocError
from restdoc.models import BuildConfig, ProcessingPriority
from restdoc.output import debug, error, info, success, warning
from restdoc.processor import get_processing_priority, load_article, raw_model_file_name


def build_command(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="API description files to build."),
    output_dir: Optional[str] = typer.Option(
        None, "--output", "-o", help="Directory for the raw model files."
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--lenient",
        help="Fail on malformed documents, or skip files that are not OpenAPI 3.0.",
    ),
    metadata: list[str] = typer.Option(
        [], "--metadata", "-m", help="Build metadata as key=value (repeatable)."
    ),
    base_dir: Optional[Path] = typer.Option(
        None, "--base-dir", help="Directory UID definitions are made relative to."
    ),
) -> None:
    """Build raw documentation models.

    Example::

        restdoc build api/contacts.json -o _site/api
        restdoc build api/*.json --lenient -m _appTitle=Contoso
    """
    verbose = bool(ctx.obj.get("verbose")) if ctx.obj else None
    try:
        config = resolve_config(
            cli_output_dir=output_dir,
            cli_strict=strict,
            cli_verbose=verbose,
            cli_metadata=parse_metadata(metadata),
        )
        written = _build(files, config, base_dir)
    except RestDocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Built {written} of {len(files)} file(s) into {config.output_dir}")


def _build(files: list[Path], config: BuildConfig, base_dir: Optional[Path]) -> int:
    out = Path(config.output_dir)
    written = 0
    for path in files:
        if not config.strict and get_processing_priority(path) != ProcessingPriority.NORMAL:
            warning(f"Skipping {path}: not an OpenAPI 3.0 document")
            continue

        debug(f"Loading {path}")
        model = load_article(
            path,
            metadata=config.metadata,
            base_dir=base_dir,
            bookmark_key=config.bookmark_extension,
        )

        target = out / raw_model_file_name(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            model.content.model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8"
        )
        info(f"{path} -> {target} ({len(model.uids)} UIDs)")
        written += 1
    return written


def parse_metadata(pairs: list[str]) -> dict[str, Any]:
    """Turn ``key=value`` strings into a dict; later keys win.

    Raises:
        InvalidUsageError: If a pair has no ``=`` or an empty key.
    """
    result: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise InvalidUsageError(f"Invalid metadata '{pair}': expected key=value")
        result[key.strip()] = value
    return result
