"""Canonical Pydantic models shared across all specbind modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Declaration models** -- the metadata tree built at declaration time:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`ParameterType`,
    :class:`ParameterKey`, :class:`Parameter`, :class:`ParameterRef`,
    :class:`Response`, :class:`Operation`, and :class:`PathItem`.

**Resolution models** -- produced when an example runs:
    :class:`RequestMetadata`, :class:`ResolvedParameter`,
    :class:`HeaderStyle`, and :class:`ResolvedRequest`.

**Configuration models** -- serialised as JSON in the project directory:
    :class:`ProjectConfig`.

Declaration models are deliberately mutable: the annotators in
:mod:`specbind.declarations` insert parameters, operations and responses into
them as declarations are made.
"""

from __future__ import annotations

import enum
from typing import Any, NamedTuple, Optional, Union
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

from specbind.wire import format_value


# --- Enumerations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by Swagger 2.0 path-item objects."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"


class ParameterLocation(str, enum.Enum):
    """Locations where a parameter can appear, per the Swagger 2.0 ``in`` field.

    The values are the exact spellings Swagger uses; ``formData`` in
    particular has no snake-case alias.
    """

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    FORM_DATA = "formData"
    BODY = "body"


class ParameterType(str, enum.Enum):
    """Primitive types allowed on a non-body Swagger 2.0 parameter."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    FILE = "file"


class ResponseCode(enum.Enum):
    """Sentinel for the catch-all ``default`` response.

    Not a ``str`` enum on purpose: the string ``"default"`` must not compare
    equal to the sentinel.
    """

    DEFAULT = "default"


DEFAULT = ResponseCode.DEFAULT
"""The catch-all response code accepted by :func:`~specbind.declarations.declare_response`."""


class HeaderStyle(str, enum.Enum):
    """Naming convention for the headers returned by the resolver.

    ``HTTP`` produces wire names (``Content-Type``, ``Accept``); ``WSGI``
    produces environ keys (``CONTENT_TYPE``, ``HTTP_ACCEPT``) for test
    clients that build a WSGI environ directly.
    """

    HTTP = "http"
    WSGI = "wsgi"


# --- Declaration models ---


class ParameterKey(NamedTuple):
    """Composite uniqueness key of a parameter within its scope.

    ``location`` is ``None`` for ``$ref`` parameters, whose location is only
    known once the referenced definition is resolved.
    """

    location: Optional[ParameterLocation]
    name: str


class Parameter(BaseModel):
    """A directly declared parameter (Swagger 2.0 *Parameter Object*).

    Non-body parameters carry a :class:`ParameterType`; body parameters carry
    a ``schema`` instead. Additional Swagger keywords (``collectionFormat``,
    ``minimum``, ...) are preserved in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    description: Optional[str] = None
    type: Optional[ParameterType] = None
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    format: Optional[str] = None
    items: Optional[dict[str, Any]] = None
    default: Any = None
    enum_values: Optional[list[Any]] = Field(default=None, alias="enum")

    @property
    def key(self) -> ParameterKey:
        return ParameterKey(self.location, self.name)


class ParameterRef(BaseModel):
    """A parameter declared by reference into a document's ``parameters``."""

    model_config = ConfigDict(populate_by_name=True)

    ref: str = Field(alias="$ref")

    @property
    def name(self) -> str:
        """Terminal segment of the pointer (``Pet`` for ``#/parameters/Pet``)."""
        segment = self.ref.rsplit("/", 1)[-1]
        return segment.replace("~1", "/").replace("~0", "~")

    @property
    def key(self) -> ParameterKey:
        return ParameterKey(None, self.name)


ParameterDeclaration = Union[Parameter, ParameterRef]


class Response(BaseModel):
    """An expected response (Swagger 2.0 *Response Object*)."""

    model_config = ConfigDict(populate_by_name=True)

    description: str
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    headers: dict[str, Any] = Field(default_factory=dict)
    examples: dict[str, Any] = Field(default_factory=dict)


class Operation(BaseModel):
    """One HTTP method on a :class:`PathItem`.

    ``consumes`` and ``produces`` are ``None`` when the operation inherits the
    document-level lists.
    """

    model_config = ConfigDict(populate_by_name=True)

    method: HTTPMethod
    tags: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    consumes: Optional[list[str]] = None
    produces: Optional[list[str]] = None
    deprecated: bool = False
    parameters: dict[ParameterKey, ParameterDeclaration] = Field(default_factory=dict)
    responses: dict[Union[int, ResponseCode], Response] = Field(default_factory=dict)


class PathItem(BaseModel):
    """A URL path template and everything declared on it.

    ``document`` names the registered Swagger document the path belongs to;
    the resolver reads ``basePath``, ``consumes``, ``produces`` and
    ``parameters`` from it.
    """

    path: str
    document: str
    parameters: dict[ParameterKey, ParameterDeclaration] = Field(default_factory=dict)
    operations: dict[HTTPMethod, Operation] = Field(default_factory=dict)


# --- Resolution models ---


class RequestMetadata(BaseModel):
    """The slice of the metadata tree an example runs against.

    ``operation`` may be ``None`` for examples declared directly on a path
    item; only path-item parameters and document defaults then apply.
    """

    path_item: PathItem
    operation: Optional[Operation] = None

    @property
    def document(self) -> str:
        return self.path_item.document


class ResolvedParameter(BaseModel):
    """A parameter bound to its live value."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    value: Any = None


class ResolvedRequest(BaseModel):
    """Concrete inputs for one HTTP request, ready to hand to a test client."""

    method: str
    path: str
    query: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    form: dict[str, Any] = Field(default_factory=dict)
    body: Any = None

    def url(self) -> str:
        """Return ``path`` with the query parameters appended, if any.

        Values are rendered with :func:`~specbind.wire.format_value`; a list
        value repeats its parameter once per item.
        """
        if not self.query:
            return self.path
        pairs: list[tuple[str, str]] = []
        for name, value in self.query.items():
            items = value if isinstance(value, (list, tuple)) else [value]
            pairs.extend((name, format_value(item)) for item in items)
        return f"{self.path}?{urlencode(pairs)}"


# --- Configuration models ---


class ProjectConfig(BaseModel):
    """Project configuration persisted at ``./specbind.json``.

    Loaded by :func:`~specbind.config.load_project_config` and merged with
    environment variables and CLI flags by
    :func:`~specbind.config.resolve_config`.

    Example::

        {
          "documents": {"petstore": "docs/petstore.yaml"},
          "header_style": "wsgi",
          "declarations": "tests/declarations.yaml"
        }
    """

    documents: dict[str, str] = Field(
        default_factory=dict,
        description="Document name -> file path or URL, in registration order",
    )
    header_style: HeaderStyle = Field(
        default=HeaderStyle.HTTP, description="Header naming: http or wsgi"
    )
    declarations: Optional[str] = Field(
        default=None, description="Default declarations file for check/resolve"
    )
