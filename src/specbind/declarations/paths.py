"""Declare path items and the operations on them.

Example::

    item = declare_path("/pets/{petId}", registry)
    op = declare_operation(item, "GET", tags=["pet"], summary="Find pet by ID")
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from pydantic import ValidationError

from specbind.documents.registry import DocumentRegistry
from specbind.exceptions import InvalidDeclarationError
from specbind.models import HTTPMethod, Operation, PathItem

logger = logging.getLogger(__name__)

_METHODS: dict[str, HTTPMethod] = {m.value: m for m in HTTPMethod}


def declare_path(
    template: str,
    registry: DocumentRegistry,
    document: Optional[str] = None,
) -> PathItem:
    """Create a :class:`~specbind.models.PathItem` for a URL template.

    Args:
        template: Swagger path template, e.g. ``"/sites/{site_id}"``. Must
            start with ``/``.
        registry: The document registry the path is declared against.
        document: Name of the document the path belongs to. Defaults to the
            first registered document.

    Returns:
        A new, empty path item bound to the selected document.

    Raises:
        InvalidDeclarationError: If the template does not start with ``/``,
            the named document is not registered, or no document is
            registered at all.
    """
    if not isinstance(template, str) or not template.startswith("/"):
        raise InvalidDeclarationError(f"Path must start with a / (got {template!r})")

    if document is None:
        document = registry.default_name
        if document is None:
            raise InvalidDeclarationError(
                f"Cannot declare path '{template}': no Swagger document is registered"
            )
    elif document not in registry:
        raise InvalidDeclarationError(
            f"Cannot declare path '{template}': unknown document '{document}'"
        )

    logger.debug("Declared path %s in %s", template, document)
    return PathItem(path=template, document=document)


def declare_operation(
    path_item: PathItem,
    method: Union[str, HTTPMethod],
    tags: Optional[list[str]] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    operation_id: Optional[str] = None,
    consumes: Optional[list[str]] = None,
    produces: Optional[list[str]] = None,
    deprecated: bool = False,
) -> Operation:
    """Create or replace the operation for *method* on *path_item*.

    The method is case-insensitive (``"GET"`` and ``"get"`` are the same
    operation). Only the verb is required. A single string for *tags* is
    taken as one tag; *consumes* and *produces* must be lists.

    Raises:
        InvalidDeclarationError: If *method* is not a Swagger 2.0 HTTP verb
            or another field has the wrong shape.
    """
    if isinstance(method, HTTPMethod):
        verb = method
    elif isinstance(method, str) and method.lower() in _METHODS:
        verb = _METHODS[method.lower()]
    else:
        raise InvalidDeclarationError(
            f"Invalid HTTP method {method!r}; expected one of: {', '.join(_METHODS)}"
        )

    if isinstance(tags, str):
        tags = [tags]

    try:
        operation = Operation(
            method=verb,
            tags=tags if tags is not None else [],
            summary=summary,
            description=description,
            operation_id=operation_id,
            consumes=consumes,
            produces=produces,
            deprecated=deprecated,
        )
    except ValidationError as exc:
        raise InvalidDeclarationError(
            f"Invalid operation {verb.value.upper()} {path_item.path}: {exc}"
        ) from exc
    path_item.operations[verb] = operation
    logger.debug("Declared operation %s %s", verb.value, path_item.path)
    return operation
