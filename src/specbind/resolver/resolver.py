"""Resolve declared metadata into concrete request inputs.

The three entry points are pure functions of the metadata, the document
registry and (for the first two) a context holding the example's live
values:

* :func:`resolve_params` -- bind every effective parameter to its value.
* :func:`resolve_path` -- fill the path template and prefix ``basePath``.
* :func:`resolve_headers` -- pick ``Content-Type`` and ``Accept`` from the
  operation or the document.

Nothing is defaulted. A dangling ``$ref`` raises
:class:`~specbind.exceptions.UnresolvedReferenceError` and a value missing
from the context raises :class:`~specbind.exceptions.UnresolvedValueError`,
even for parameters the request would not end up using.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Union

from specbind.declarations.parameters import normalize_parameter
from specbind.documents.registry import Document, DocumentRegistry
from specbind.exceptions import UnresolvedReferenceError
from specbind.models import (
    HeaderStyle,
    Parameter,
    ParameterDeclaration,
    ParameterKey,
    ParameterRef,
    RequestMetadata,
    ResolvedParameter,
)
from specbind.resolver.context import as_value_source
from specbind.wire import format_value

_PLACEHOLDER_RE = re.compile(r"\{([^{}]+)\}")

_HEADER_NAMES: dict[HeaderStyle, tuple[str, str]] = {
    HeaderStyle.HTTP: ("Content-Type", "Accept"),
    HeaderStyle.WSGI: ("CONTENT_TYPE", "HTTP_ACCEPT"),
}


def _dereference(declaration: ParameterDeclaration, document: Document) -> Parameter:
    if not isinstance(declaration, ParameterRef):
        return declaration
    definition = document.parameter_definition(declaration.name)
    resolved = normalize_parameter(definition)
    if isinstance(resolved, ParameterRef):
        raise UnresolvedReferenceError(
            f"Parameter definition '{declaration.name}' in document "
            f"'{document.name}' is itself an unresolvable reference"
        )
    return resolved


def _scope_parameters(
    declarations: Mapping[ParameterKey, ParameterDeclaration], document: Document
) -> dict[ParameterKey, Parameter]:
    resolved: dict[ParameterKey, Parameter] = {}
    for declaration in declarations.values():
        param = _dereference(declaration, document)
        resolved[param.key] = param
    return resolved


def resolve_parameters(metadata: RequestMetadata, registry: DocumentRegistry) -> list[Parameter]:
    """Return the effective parameters with every ``$ref`` replaced by its definition.

    Each scope is dereferenced first, then the operation's parameters are
    layered over the path item's by their resolved ``(location, name)``. An
    operation parameter overriding a path-item one takes its position; new
    keys follow in declaration order. A ``$ref`` and a direct declaration
    naming the same parameter therefore collapse into one entry.

    Referenced definitions are validated with the same rules as direct
    declarations, so a malformed definition in the document raises
    :class:`~specbind.exceptions.InvalidDeclarationError` here.

    Raises:
        UnresolvedReferenceError: If the document or a referenced definition
            does not exist.
    """
    document = registry.get(metadata.document)
    merged = _scope_parameters(metadata.path_item.parameters, document)
    if metadata.operation is not None:
        merged.update(_scope_parameters(metadata.operation.parameters, document))
    return list(merged.values())


def resolve_params(
    metadata: RequestMetadata,
    context: Any,  # noqa: ANN401
    registry: DocumentRegistry,
) -> list[ResolvedParameter]:
    """Bind each effective parameter to the context value of the same name.

    Args:
        metadata: The path item and operation the example runs against.
        context: A :class:`~specbind.resolver.context.NamedValueSource`, a
            mapping, or an object exposing values as attributes.
        registry: Registry holding the path item's document.

    Returns:
        One :class:`~specbind.models.ResolvedParameter` per effective
        parameter, in merge order. For ``$ref`` parameters the location is
        the one given by the referenced definition.

    Raises:
        UnresolvedReferenceError: If a ``$ref`` cannot be resolved.
        UnresolvedValueError: If the context has no value for a parameter.

    Example::

        >>> resolve_params(metadata, {"post_id": 123}, registry)
        [ResolvedParameter(name='post_id', location=<ParameterLocation.PATH: 'path'>, value=123)]
    """
    source = as_value_source(context)
    return [
        ResolvedParameter(name=param.name, location=param.location, value=source.get(param.name))
        for param in resolve_parameters(metadata, registry)
    ]


def resolve_path(
    metadata: RequestMetadata,
    context: Any,  # noqa: ANN401
    registry: DocumentRegistry,
) -> str:
    """Substitute ``{placeholder}`` segments and prefix the document's ``basePath``.

    The prefix is joined by plain concatenation: ``/base`` + ``/sites/``
    gives ``/base/sites/``, and no slashes are added or removed. Values are
    rendered with :func:`~specbind.wire.format_value`.

    Raises:
        UnresolvedValueError: If the context has no value for a placeholder.
    """
    document = registry.get(metadata.document)
    source = as_value_source(context)
    path = _PLACEHOLDER_RE.sub(
        lambda match: format_value(source.get(match.group(1))),
        metadata.path_item.path,
    )
    return document.base_path + path


def resolve_headers(
    metadata: RequestMetadata,
    registry: DocumentRegistry,
    style: Union[HeaderStyle, str] = HeaderStyle.HTTP,
) -> dict[str, str]:
    """Return the content-type and accept headers for the operation.

    The operation's ``consumes`` / ``produces`` win when present and
    non-empty; otherwise the document's lists apply. The first entry of each
    list is used. An empty list produces no header.

    Args:
        metadata: The path item and operation the example runs against.
        registry: Registry holding the path item's document.
        style: ``HTTP`` for ``Content-Type`` / ``Accept``, ``WSGI`` for
            ``CONTENT_TYPE`` / ``HTTP_ACCEPT``.
    """
    content_type_name, accept_name = _HEADER_NAMES[HeaderStyle(style)]
    document = registry.get(metadata.document)
    operation = metadata.operation

    consumes = operation.consumes if operation is not None and operation.consumes else document.consumes
    produces = operation.produces if operation is not None and operation.produces else document.produces

    headers: dict[str, str] = {}
    if consumes:
        headers[content_type_name] = consumes[0]
    if produces:
        headers[accept_name] = produces[0]
    return headers
