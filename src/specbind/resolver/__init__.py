"""Execution-time resolution of declared metadata.

When an example runs, its metadata (a path item and operation) is combined
with the document registry and the example's live values:

* :mod:`~specbind.resolver.context` -- the :class:`NamedValueSource`
  capability and its mapping/attribute adapters.
* :mod:`~specbind.resolver.resolver` -- :func:`resolve_params`,
  :func:`resolve_path` and :func:`resolve_headers`.
* :mod:`~specbind.resolver.request` -- :func:`resolve_request`, all of the
  above assembled into one :class:`~specbind.models.ResolvedRequest`.

Typical usage::

    from specbind.resolver import resolve_request

    request = resolve_request(metadata, {"petId": 7}, registry)
    client.request(request.method, request.url(), headers=request.headers)
"""

from specbind.resolver.context import (
    AttributeValueSource,
    MappingValueSource,
    NamedValueSource,
    as_value_source,
)
from specbind.resolver.request import resolve_request
from specbind.resolver.resolver import (
    resolve_headers,
    resolve_parameters,
    resolve_params,
    resolve_path,
)

__all__ = [
    "AttributeValueSource",
    "MappingValueSource",
    "NamedValueSource",
    "as_value_source",
    "resolve_headers",
    "resolve_parameters",
    "resolve_params",
    "resolve_path",
    "resolve_request",
]
