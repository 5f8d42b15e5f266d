"""Build path items from a declarations file.

A declarations file mirrors the ``paths`` section of a Swagger document, with
an optional per-path ``document`` key naming the registered document the path
belongs to::

    paths:
      /pets/{petId}:
        parameters:
          - {name: petId, in: path, type: integer}
        get:
          summary: Find pet by ID
          responses:
            200: {description: successful operation}
            default: {description: unexpected error}

Every entry is fed through :func:`~specbind.declarations.declare_path`,
:func:`~specbind.declarations.declare_operation`,
:func:`~specbind.declarations.validate_and_normalize` and
:func:`~specbind.declarations.declare_response`, so a file is held to exactly
the rules a test author calling those functions is.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from specbind.declarations.parameters import validate_and_normalize
from specbind.declarations.paths import declare_operation, declare_path
from specbind.declarations.responses import declare_response
from specbind.documents.registry import DocumentRegistry
from specbind.exceptions import DocumentLoadError, InvalidDeclarationError
from specbind.models import DEFAULT, HTTPMethod, PathItem, RequestMetadata

logger = logging.getLogger(__name__)

_PATH_ITEM_KEYS = ("document", "parameters")


def _response_code(key: Any) -> Any:
    if key == "default":
        return DEFAULT
    if isinstance(key, str) and key.isdigit():
        return int(key)
    return key


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidDeclarationError(f"{where} must be a mapping (got {type(value).__name__})")
    return value


def _load_operation(path_item: PathItem, method: str, spec: Mapping[str, Any]) -> None:
    operation = declare_operation(
        path_item,
        method,
        tags=spec.get("tags"),
        summary=spec.get("summary"),
        description=spec.get("description"),
        operation_id=spec.get("operationId"),
        consumes=spec.get("consumes"),
        produces=spec.get("produces"),
        deprecated=bool(spec.get("deprecated", False)),
    )
    for raw in spec.get("parameters") or []:
        validate_and_normalize(raw, operation)

    where = f"Responses of {method.upper()} {path_item.path}"
    for code, response in _mapping(spec.get("responses"), where).items():
        response = _mapping(response, f"Response {code} of {method.upper()} {path_item.path}")
        declare_response(
            operation,
            _response_code(code),
            description=response.get("description"),
            schema=response.get("schema"),
            headers=response.get("headers"),
            examples=response.get("examples"),
        )


def load_declarations(raw: Mapping[str, Any], registry: DocumentRegistry) -> list[PathItem]:
    """Declare every path, operation, parameter and response in *raw*.

    Args:
        raw: Parsed declarations file with a top-level ``paths`` mapping.
        registry: Registry the paths are declared against.

    Returns:
        The declared path items, in file order.

    Raises:
        InvalidDeclarationError: On the first declaration that fails
            validation.
    """
    paths = _mapping(_mapping(raw, "Declarations").get("paths"), "'paths'")

    items: list[PathItem] = []
    for template, spec in paths.items():
        spec = _mapping(spec, f"Path item {template}")
        path_item = declare_path(template, registry, spec.get("document"))
        for param in spec.get("parameters") or []:
            validate_and_normalize(param, path_item)
        for method, op_spec in spec.items():
            if method in _PATH_ITEM_KEYS:
                continue
            _load_operation(path_item, method, _mapping(op_spec, f"Operation {method} {template}"))
        items.append(path_item)

    logger.debug("Loaded %d path item(s) from declarations", len(items))
    return items


def load_declarations_file(path: str, registry: DocumentRegistry) -> list[PathItem]:
    """Read a YAML or JSON declarations file and declare its contents.

    Raises:
        DocumentLoadError: If the file is missing or not valid YAML/JSON.
        InvalidDeclarationError: If a declaration fails validation.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentLoadError(f"Declarations file not found: {path}")
    try:
        raw = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise DocumentLoadError(f"Failed to read declarations file {path}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise DocumentLoadError(f"Declarations file {path} must contain a mapping")
    return load_declarations(raw, registry)


def select_metadata(
    items: list[PathItem],
    path: str,
    method: Optional[str] = None,
) -> RequestMetadata:
    """Find the declared path item (and operation) matching *path* and *method*.

    Raises:
        InvalidDeclarationError: If nothing matching was declared.
    """
    for item in items:
        if item.path != path:
            continue
        if method is None:
            return RequestMetadata(path_item=item)
        operation = item.operations.get(_as_method(method))
        if operation is None:
            raise InvalidDeclarationError(f"No {method.upper()} operation declared on {path}")
        return RequestMetadata(path_item=item, operation=operation)
    raise InvalidDeclarationError(f"Path '{path}' is not declared")


def _as_method(method: str) -> Optional[HTTPMethod]:
    try:
        return HTTPMethod(method.lower())
    except ValueError:
        return None
