"""restdoc -- Turn OpenAPI 3.0 descriptions into REST documentation models.

This package reads an OpenAPI description (JSON or YAML), gates it on the
declared version, and projects it into the tree of documentation items a
static-site build renders: one root per API, one child per operation, and
one entry per tag, each carrying a stable UID and an HTML anchor.

Typical workflow::

    restdoc probe api/*.json          # which files are OpenAPI 3.0
    restdoc build api/*.json -o _site # write <name>.raw.json models

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    parser: Version-gated OpenAPI parsing with diagnostics.
    converter: Identifier derivation, parameter merging, model projection.
    processor: File acceptance and article loading for a build.
    config: Build configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting and logging setup.
"""

__version__ = "0.1.0"
