"""Validate parameter declarations and file them under their scope.

A parameter is declared either directly::

    {"name": "petId", "in": "path", "type": "integer"}

or by reference to a reusable definition in the document::

    {"$ref": "#/parameters/petId"}

Direct declarations are fully checked here. References are only
shape-checked: the document they point into is consulted when the example
runs (see :func:`specbind.resolver.resolve_params`), where the referenced
definition goes through the same :func:`normalize_parameter` rules.

Every accepted declaration is stored in the scope's ``parameters`` mapping
under its :class:`~specbind.models.ParameterKey`, so declaring the same
``(location, name)`` twice replaces the first entry.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from specbind.exceptions import InvalidDeclarationError
from specbind.models import (
    Operation,
    Parameter,
    ParameterDeclaration,
    ParameterKey,
    ParameterLocation,
    ParameterRef,
    ParameterType,
    PathItem,
)

logger = logging.getLogger(__name__)

Scope = Union[PathItem, Operation]

_LOCATIONS: dict[str, ParameterLocation] = {loc.value: loc for loc in ParameterLocation}
_TYPES: dict[str, ParameterType] = {t.value: t for t in ParameterType}


def _coerce_location(value: Any, name: Any) -> ParameterLocation:
    """Map an ``in`` value to :class:`ParameterLocation`, accepting exact spellings only."""
    if isinstance(value, ParameterLocation):
        return value
    if isinstance(value, str) and value in _LOCATIONS:
        return _LOCATIONS[value]
    raise InvalidDeclarationError(
        f"Parameter '{name}' has invalid location {value!r}; "
        f"expected one of: {', '.join(_LOCATIONS)}"
    )


def _coerce_type(value: Any, name: Any) -> ParameterType:
    if isinstance(value, ParameterType):
        return value
    if isinstance(value, str) and value in _TYPES:
        return _TYPES[value]
    raise InvalidDeclarationError(
        f"Parameter '{name}' has invalid type {value!r}; "
        f"expected one of: {', '.join(_TYPES)}"
    )


def _normalize_ref(ref: Any) -> ParameterRef:
    if not isinstance(ref, str) or not ref.startswith("#/"):
        raise InvalidDeclarationError(
            f"Parameter $ref must be an internal pointer like '#/parameters/Name' (got {ref!r})"
        )
    if not ref.rsplit("/", 1)[-1]:
        raise InvalidDeclarationError(f"Parameter $ref '{ref}' has no definition name")
    return ParameterRef(ref=ref)


def normalize_parameter(raw: Mapping[str, Any]) -> ParameterDeclaration:
    """Validate a raw parameter mapping and return its canonical model.

    Rules for direct declarations:

    * ``in`` is required and must be exactly ``path``, ``query``,
      ``header``, ``formData`` or ``body``.
    * ``name`` is required.
    * ``body`` parameters require a ``schema``.
    * Every other location requires a ``type`` from
      :class:`~specbind.models.ParameterType`.
    * ``path`` parameters are always ``required``.

    A mapping carrying ``$ref`` (or the ``ref`` shorthand) yields a
    :class:`~specbind.models.ParameterRef` after a shape check only.

    Args:
        raw: The parameter as written by the test author or found in a
            document's ``parameters`` section.

    Returns:
        A :class:`~specbind.models.Parameter` or
        :class:`~specbind.models.ParameterRef`.

    Raises:
        InvalidDeclarationError: If any rule above is violated.
    """
    if not isinstance(raw, Mapping):
        raise InvalidDeclarationError(
            f"Parameter declaration must be a mapping (got {type(raw).__name__})"
        )

    if "$ref" in raw or "ref" in raw:
        return _normalize_ref(raw.get("$ref", raw.get("ref")))

    name = raw.get("name")
    if "in" not in raw or raw["in"] is None:
        raise InvalidDeclarationError(f"Parameter '{name}' requires 'in'")
    location = _coerce_location(raw["in"], name)

    if not isinstance(name, str) or not name:
        raise InvalidDeclarationError(
            f"Parameter in '{location.value}' requires a non-empty string 'name'"
        )

    data = dict(raw)
    data["in"] = location

    if location is ParameterLocation.BODY:
        if data.get("schema") is None:
            raise InvalidDeclarationError(f"Body parameter '{name}' requires a 'schema'")
    else:
        if data.get("type") is None:
            raise InvalidDeclarationError(
                f"Parameter '{name}' in '{location.value}' requires a 'type'"
            )
        data["type"] = _coerce_type(data["type"], name)

    if location is ParameterLocation.PATH:
        data["required"] = True

    try:
        return Parameter.model_validate(data)
    except ValidationError as exc:
        raise InvalidDeclarationError(f"Invalid parameter '{name}': {exc}") from exc


def validate_and_normalize(raw: Mapping[str, Any], scope: Scope) -> ParameterKey:
    """Validate *raw* and store it in *scope*'s parameters.

    Args:
        raw: The raw parameter declaration (see :func:`normalize_parameter`).
        scope: The :class:`~specbind.models.PathItem` or
            :class:`~specbind.models.Operation` the parameter belongs to.

    Returns:
        The key the declaration was stored under. An existing entry with the
        same key is replaced.

    Raises:
        InvalidDeclarationError: If the declaration is malformed.
    """
    declaration = normalize_parameter(raw)
    key = declaration.key
    scope.parameters[key] = declaration
    logger.debug("Declared parameter %s", key)
    return key


def declare_parameter(
    scope: Scope,
    name: Optional[str] = None,
    *,
    ref: Optional[str] = None,
    location: Optional[Union[str, ParameterLocation]] = None,
    **attributes: Any,
) -> ParameterKey:
    """Keyword-style front end to :func:`validate_and_normalize`.

    ``in`` is a Python keyword, so the location is passed as *location*.

    Example::

        declare_parameter(item, "petId", location="path", type="integer")
        declare_parameter(item, ref="#/parameters/skipParam")
    """
    if ref is not None:
        return validate_and_normalize({"$ref": ref}, scope)

    raw = dict(attributes)
    raw["name"] = name
    if location is not None:
        raw["in"] = location
    return validate_and_normalize(raw, scope)
