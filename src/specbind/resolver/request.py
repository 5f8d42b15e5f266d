"""Assemble a complete request description from the three resolvers.

:func:`resolve_request` produces a :class:`~specbind.models.ResolvedRequest`
that a test client (``httpx``, a WSGI test client, ...) can send as-is. No
request is made here.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from specbind.documents.registry import DocumentRegistry
from specbind.exceptions import InvalidDeclarationError
from specbind.models import HeaderStyle, ParameterLocation, RequestMetadata, ResolvedRequest
from specbind.resolver.resolver import resolve_headers, resolve_params, resolve_path
from specbind.wire import format_value

logger = logging.getLogger(__name__)


def _header_name(name: str, style: HeaderStyle) -> str:
    if style is HeaderStyle.WSGI:
        return "HTTP_" + name.upper().replace("-", "_")
    return name


def resolve_request(
    metadata: RequestMetadata,
    context: Any,  # noqa: ANN401
    registry: DocumentRegistry,
    style: Union[HeaderStyle, str] = HeaderStyle.HTTP,
) -> ResolvedRequest:
    """Resolve method, path, query, headers, form fields and body for one operation.

    Parameters are sorted by location: ``query`` into ``query``, ``header``
    into ``headers`` (alongside the content negotiation headers from
    :func:`~specbind.resolver.resolve_headers`), ``formData`` into ``form``
    and the single ``body`` parameter's value into ``body``.

    Raises:
        InvalidDeclarationError: If *metadata* has no operation or declares
            more than one body parameter.
        UnresolvedReferenceError: If a ``$ref`` cannot be resolved.
        UnresolvedValueError: If the context is missing a value.
    """
    if metadata.operation is None:
        raise InvalidDeclarationError(
            f"Cannot build a request for {metadata.path_item.path}: no operation declared"
        )
    style = HeaderStyle(style)

    params = resolve_params(metadata, context, registry)
    path = resolve_path(metadata, context, registry)
    headers = resolve_headers(metadata, registry, style)

    query: dict[str, Any] = {}
    form: dict[str, Any] = {}
    body: Any = None
    body_name: str | None = None
    for param in params:
        if param.location is ParameterLocation.QUERY:
            query[param.name] = param.value
        elif param.location is ParameterLocation.HEADER:
            headers[_header_name(param.name, style)] = format_value(param.value)
        elif param.location is ParameterLocation.FORM_DATA:
            form[param.name] = param.value
        elif param.location is ParameterLocation.BODY:
            if body_name is not None:
                raise InvalidDeclarationError(
                    f"Operation {metadata.operation.method.value.upper()} "
                    f"{metadata.path_item.path} declares more than one body "
                    f"parameter ('{body_name}', '{param.name}')"
                )
            body_name = param.name
            body = param.value

    method = metadata.operation.method.value.upper()
    logger.debug("Resolved request %s %s", method, path)
    return ResolvedRequest(
        method=method,
        path=path,
        query=query,
        headers=headers,
        form=form,
        body=body,
    )
