"""Load Swagger 2.0 documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw Swagger documents and converting
them into Python dictionaries. It supports both JSON and YAML formats with
automatic format detection, and validates that the document declares
``swagger: "2.0"``.

The two public functions are:

* :func:`load_document` -- Load and parse a document from any supported source.
* :func:`validate_swagger_version` -- Check the ``swagger`` version field,
  rejecting OpenAPI 3.x documents.

Loaded dicts are registered under a name with
:meth:`~specbind.documents.registry.DocumentRegistry.register`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specbind.exceptions import DocumentLoadError

logger = logging.getLogger(__name__)


def load_document(source: str) -> dict[str, Any]:
    """Load a Swagger document from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        DocumentLoadError: If the source cannot be loaded or parsed.
    """
    logger.debug("Loading Swagger document from %s", source)
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin."""
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise DocumentLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from URL. Supports JSON and YAML responses.

    Raises:
        DocumentLoadError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentLoadError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentLoadError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Supports .json, .yaml, and .yml extensions. Falls back to content-based
    detection if the extension is not recognized.

    Raises:
        DocumentLoadError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentLoadError(f"Document file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read document file {path}: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError(f"Document file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        DocumentLoadError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise DocumentLoadError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise DocumentLoadError(
                    "Document must be a JSON/YAML object (got "
                    f"{type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        if not isinstance(result, dict):
            raise DocumentLoadError(
                "Document must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise DocumentLoadError(msg)


def validate_swagger_version(document: dict[str, Any]) -> str:
    """Validate and return the Swagger version string.

    Only Swagger 2.0 is supported: its ``basePath``, ``consumes``,
    ``produces`` and top-level ``parameters`` are what the resolver reads.

    Args:
        document: The parsed document dictionary.

    Returns:
        The version string (``"2.0"``).

    Raises:
        DocumentLoadError: If the version is missing, unsupported, or
            indicates an OpenAPI 3.x document.
    """
    if "openapi" in document:
        raise DocumentLoadError(
            f"OpenAPI {document['openapi']} is not supported. "
            "Only Swagger 2.0 documents are supported."
        )

    version = document.get("swagger")
    if version is None:
        raise DocumentLoadError(
            "Missing 'swagger' field. Is this a Swagger 2.0 document?"
        )

    version_str = str(version)
    if version_str != "2.0":
        raise DocumentLoadError(
            f"Unsupported Swagger version: {version_str}. "
            "Only Swagger 2.0 is supported."
        )
    return version_str
