"""Project configuration and precedence resolution.

specbind is configured per project, next to the tests that use it:

* **Project config** -- ``./specbind.json`` deserialised into a
  :class:`~specbind.models.ProjectConfig`. See :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and the project file into the effective
  configuration.
* **Registry construction** -- :func:`build_registry` loads every configured
  document into a frozen :class:`~specbind.documents.DocumentRegistry`.

Document sources that are relative paths are resolved against the directory
of the config file, so the same config works from any working directory.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from specbind.documents.registry import DocumentRegistry
from specbind.exceptions import ConfigError
from specbind.models import HeaderStyle, ProjectConfig

_PROJECT_CONFIG_FILENAME = "specbind.json"

ENV_CONFIG = "SPECBIND_CONFIG"
ENV_HEADER_STYLE = "SPECBIND_HEADER_STYLE"


def _is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://")) or source == "-"


def _config_path(cli_config: Optional[str] = None) -> Path:
    """Path of the project config: CLI flag, then ``$SPECBIND_CONFIG``, then ``./specbind.json``."""
    if cli_config:
        return Path(cli_config)
    env_value = os.environ.get(ENV_CONFIG, "")
    if env_value:
        return Path(env_value)
    return Path.cwd() / _PROJECT_CONFIG_FILENAME


def load_project_config(path: Optional[Path] = None) -> Optional[ProjectConfig]:
    """Load and validate the project configuration file.

    Relative document and declarations paths are rewritten relative to the
    file's directory.

    Args:
        path: Config file to read. Defaults to ``./specbind.json``.

    Returns:
        The deserialised :class:`~specbind.models.ProjectConfig`, or ``None``
        if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    if path is None:
        path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        config = ProjectConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc

    base = path.parent
    config.documents = {
        name: source if _is_remote(source) else str(base / source)
        for name, source in config.documents.items()
    }
    if config.declarations is not None:
        config.declarations = str(base / config.declarations)
    return config


def resolve_config(
    cli_config: Optional[str] = None,
    cli_header_style: Optional[str] = None,
) -> ProjectConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_config``, ``cli_header_style``)
        2. Environment variables (``SPECBIND_CONFIG``, ``SPECBIND_HEADER_STYLE``)
        3. Project config (``./specbind.json``)
        4. Defaults

    Raises:
        ConfigError: If an explicitly named config file is missing, any file
            is invalid, or a header style is unknown.
    """
    path = _config_path(cli_config)
    explicit = bool(cli_config or os.environ.get(ENV_CONFIG))
    config = load_project_config(path)
    if config is None:
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        config = ProjectConfig()

    style = cli_header_style or os.environ.get(ENV_HEADER_STYLE)
    if style:
        try:
            config.header_style = HeaderStyle(style.lower())
        except ValueError:
            raise ConfigError(
                f"Unknown header style '{style}'; expected one of: "
                f"{', '.join(s.value for s in HeaderStyle)}"
            ) from None

    return config


def build_registry(config: ProjectConfig) -> DocumentRegistry:
    """Load every configured document and return a frozen registry.

    Raises:
        ConfigError: If no documents are configured.
        DocumentLoadError: If a document cannot be loaded.
    """
    if not config.documents:
        raise ConfigError(
            f"No documents configured. Add a \"documents\" mapping to {_PROJECT_CONFIG_FILENAME}"
        )
    registry = DocumentRegistry.from_sources(config.documents)
    registry.freeze()
    return registry
