"""Build configuration with precedence resolution.

Settings for a documentation build come from four layers, merged by
:func:`resolve_config` into one :class:`~restdoc.models.BuildConfig`.

Precedence (high to low):
    1. CLI flags
    2. Environment variables (``RESTDOC_OUTPUT_DIR``, ``RESTDOC_STRICT``,
       ``RESTDOC_BOOKMARK_EXTENSION``)
    3. Project config (``./restdoc.json``)
    4. Defaults

Example ``restdoc.json``::

    {
        "output_dir": "_site/api",
        "strict": true,
        "metadata": {"_appTitle": "Contoso APIs"}
    }
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from restdoc.exceptions import ConfigError
from restdoc.models import BuildConfig

PROJECT_CONFIG_FILENAME = "restdoc.json"

ENV_OUTPUT_DIR = "RESTDOC_OUTPUT_DIR"
ENV_STRICT = "RESTDOC_STRICT"
ENV_BOOKMARK_EXTENSION = "RESTDOC_BOOKMARK_EXTENSION"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load ``restdoc.json`` from *directory* (default: the working directory).

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = (directory or Path.cwd()) / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable; ``None`` when unset."""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got '{value}'")


def resolve_config(
    cli_output_dir: Optional[str] = None,
    cli_strict: Optional[bool] = None,
    cli_verbose: Optional[bool] = None,
    cli_metadata: Optional[dict[str, Any]] = None,
    directory: Optional[Path] = None,
) -> BuildConfig:
    """Resolve the effective build configuration.

    Args:
        cli_output_dir: ``--output`` flag value.
        cli_strict: ``--strict/--lenient`` flag value.
        cli_verbose: ``--verbose`` flag value.
        cli_metadata: ``--metadata key=value`` pairs, merged over the
            project's ``metadata``.
        directory: Where to look for ``restdoc.json``.

    Returns:
        The merged :class:`~restdoc.models.BuildConfig`.

    Raises:
        ConfigError: If the project file or an environment variable is
            invalid.
    """
    # 4 + 3. Defaults overlaid with the project file
    project = load_project_config(directory) or {}
    try:
        config = BuildConfig.model_validate(project)
    except ValidationError as exc:
        raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2. Environment variables
    env_output_dir = os.environ.get(ENV_OUTPUT_DIR)
    if env_output_dir:
        config.output_dir = env_output_dir
    env_strict = _env_flag(ENV_STRICT)
    if env_strict is not None:
        config.strict = env_strict
    env_bookmark = os.environ.get(ENV_BOOKMARK_EXTENSION)
    if env_bookmark:
        config.bookmark_extension = env_bookmark

    # 1. CLI flags (highest precedence)
    if cli_output_dir is not None:
        config.output_dir = cli_output_dir
    if cli_strict is not None:
        config.strict = cli_strict
    if cli_verbose is not None:
        config.verbose = cli_verbose
    if cli_metadata:
        config.metadata = {**config.metadata, **cli_metadata}

    return config
