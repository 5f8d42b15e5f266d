"""Tests for specbind.resolver.resolver -- params, path and headers."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from specbind.declarations import (
    declare_operation,
    declare_parameter,
    declare_path,
    validate_and_normalize,
)
from specbind.documents.registry import DocumentRegistry
from specbind.exceptions import InvalidDeclarationError, UnresolvedReferenceError, UnresolvedValueError
from specbind.models import (
    HeaderStyle,
    ParameterLocation,
    RequestMetadata,
    ResolvedParameter,
)
from specbind.resolver import (
    resolve_headers,
    resolve_parameters,
    resolve_params,
    resolve_path,
)


def _metadata(registry: DocumentRegistry, template: str = "/posts/{post_id}", **op: Any) -> RequestMetadata:
    item = declare_path(template, registry)
    operation = declare_operation(item, "get", **op)
    return RequestMetadata(path_item=item, operation=operation)


# ---------------------------------------------------------------------------
# resolve_params
# ---------------------------------------------------------------------------


class TestResolveParams:
    """Binding declared parameters to context values."""

    def test_missing_value_fails(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry)
        validate_and_normalize({"name": "post_id", "in": "path", "type": "integer"}, metadata.path_item)
        with pytest.raises(UnresolvedValueError, match="post_id"):
            resolve_params(metadata, {}, bare_registry)

    def test_value_supplied(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry)
        validate_and_normalize({"name": "post_id", "in": "path", "type": "integer"}, metadata.path_item)
        result = resolve_params(metadata, {"post_id": 123}, bare_registry)
        assert result == [ResolvedParameter(name="post_id", location=ParameterLocation.PATH, value=123)]

    def test_ref_parameter_resolved_from_document(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets/{skipper}")
        validate_and_normalize({"$ref": "#/parameters/skipParam"}, metadata.operation)
        result = resolve_params(metadata, {"skipper": True}, registry)
        assert len(result) == 1
        assert result[0].name == "skipper"
        assert result[0].location is ParameterLocation.PATH
        assert result[0].value is True

    def test_chained_ref(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets")
        declare_parameter(metadata.operation, ref="#/parameters/aliasParam")
        result = resolve_params(metadata, {"limit": 5}, registry)
        assert result == [ResolvedParameter(name="limit", location=ParameterLocation.QUERY, value=5)]

    def test_dangling_ref(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets")
        declare_parameter(metadata.operation, ref="#/parameters/doesNotExist")
        with pytest.raises(UnresolvedReferenceError, match="doesNotExist"):
            resolve_params(metadata, {"doesNotExist": 1}, registry)

    def test_malformed_referenced_definition(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets")
        declare_parameter(metadata.operation, ref="#/parameters/brokenParam")
        with pytest.raises(InvalidDeclarationError, match="invalid location"):
            resolve_params(metadata, {"broken": "x"}, registry)

    def test_unused_parameter_still_fails_eagerly(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets")
        declare_parameter(metadata.operation, "limit", location="query", type="integer")
        declare_parameter(metadata.operation, "offset", location="query", type="integer")
        with pytest.raises(UnresolvedValueError, match="offset"):
            resolve_params(metadata, {"limit": 10}, registry)

    def test_attribute_context(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry)
        declare_parameter(metadata.path_item, "post_id", location="path", type="integer")
        result = resolve_params(metadata, SimpleNamespace(post_id=9), bare_registry)
        assert result[0].value == 9

    def test_order_path_item_then_operation(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry)
        declare_parameter(metadata.path_item, "post_id", location="path", type="integer")
        declare_parameter(metadata.operation, "expand", location="query", type="boolean")
        result = resolve_params(metadata, {"post_id": 1, "expand": False}, bare_registry)
        assert [p.name for p in result] == ["post_id", "expand"]

    def test_no_parameters(self, bare_registry: DocumentRegistry) -> None:
        assert resolve_params(_metadata(bare_registry, "/health"), {}, bare_registry) == []


# ---------------------------------------------------------------------------
# resolve_parameters layering
# ---------------------------------------------------------------------------


class TestResolveParameters:
    """Operation parameters layered over path-item parameters by resolved key."""

    def test_operation_overrides_same_key(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry)
        declare_parameter(metadata.path_item, "post_id", location="path", type="string")
        declare_parameter(metadata.operation, "post_id", location="path", type="integer")
        params = resolve_parameters(metadata, bare_registry)
        assert len(params) == 1
        assert params[0].type.value == "integer"

    def test_path_item_only(self, bare_registry: DocumentRegistry) -> None:
        item = declare_path("/posts/{post_id}", bare_registry)
        declare_parameter(item, "post_id", location="path", type="integer")
        assert len(resolve_parameters(RequestMetadata(path_item=item), bare_registry)) == 1

    def test_direct_declaration_overrides_path_item_ref(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets/{petId}")
        declare_parameter(metadata.path_item, ref="#/parameters/petId")
        declare_parameter(metadata.operation, "petId", location="path", type="string")
        params = resolve_parameters(metadata, registry)
        assert len(params) == 1
        assert params[0].type.value == "string"
        assert resolve_params(metadata, {"petId": 7}, registry) == [
            ResolvedParameter(name="petId", location=ParameterLocation.PATH, value=7)
        ]

    def test_ref_overrides_path_item_declaration(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets")
        declare_parameter(metadata.path_item, "limit", location="query", type="string")
        declare_parameter(metadata.path_item, "offset", location="query", type="integer")
        declare_parameter(metadata.operation, ref="#/parameters/limitParam")
        params = resolve_parameters(metadata, registry)
        assert [p.name for p in params] == ["limit", "offset"]
        assert params[0].type.value == "integer"
        assert params[0].default == 20

    def test_ref_and_declaration_in_one_scope_collapse(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets")
        declare_parameter(metadata.operation, ref="#/parameters/limitParam")
        declare_parameter(metadata.operation, "limit", location="query", type="string")
        params = resolve_parameters(metadata, registry)
        assert len(params) == 1
        assert params[0].type.value == "string"

    def test_same_name_different_location_kept(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets/{limit}")
        declare_parameter(metadata.path_item, "limit", location="path", type="integer")
        declare_parameter(metadata.operation, ref="#/parameters/limitParam")
        assert len(resolve_parameters(metadata, registry)) == 2

    def test_resolve_parameters_replaces_refs(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets/{petId}")
        declare_parameter(metadata.path_item, ref="#/parameters/petId")
        declare_parameter(metadata.operation, ref="#/parameters/petBody")
        params = resolve_parameters(metadata, registry)
        assert [(p.name, p.location) for p in params] == [
            ("petId", ParameterLocation.PATH),
            ("body", ParameterLocation.BODY),
        ]
        assert params[0].required is True


# ---------------------------------------------------------------------------
# resolve_path
# ---------------------------------------------------------------------------


class TestResolvePath:
    """Placeholder substitution and basePath prefixing."""

    def test_substitutes_placeholders(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry, "/sites/{site_id}/accounts/{accountId}")
        path = resolve_path(metadata, {"site_id": 1001, "accountId": "pickles"}, bare_registry)
        assert path == "/sites/1001/accounts/pickles"

    def test_booleans_and_lists_use_wire_spelling(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry, "/flags/{flag}/ids/{ids}")
        path = resolve_path(metadata, {"flag": True, "ids": [1, 2]}, bare_registry)
        assert path == "/flags/true/ids/1,2"

    def test_prefixes_base_path(self) -> None:
        registry = DocumentRegistry({"based": {"swagger": "2.0", "basePath": "/base"}})
        metadata = _metadata(registry, "/sites/")
        assert resolve_path(metadata, {}, registry) == "/base/sites/"

    def test_petstore_base_path(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets/{petId}")
        assert resolve_path(metadata, {"petId": 7}, registry) == "/v2/pets/7"

    def test_missing_placeholder_value(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry, "/sites/{site_id}")
        with pytest.raises(UnresolvedValueError, match="site_id"):
            resolve_path(metadata, {}, bare_registry)

    def test_repeated_placeholder(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry, "/a/{id}/b/{id}")
        assert resolve_path(metadata, {"id": 3}, bare_registry) == "/a/3/b/3"

    def test_no_placeholders_ignores_context(self, bare_registry: DocumentRegistry) -> None:
        metadata = _metadata(bare_registry, "/health")
        assert resolve_path(metadata, object(), bare_registry) == "/health"


# ---------------------------------------------------------------------------
# resolve_headers
# ---------------------------------------------------------------------------


class TestResolveHeaders:
    """Content negotiation headers from operation or document."""

    def test_operation_lists_win(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(
            registry, "/pets", consumes=["application/json"], produces=["application/xml"]
        )
        assert resolve_headers(metadata, registry) == {
            "Content-Type": "application/json",
            "Accept": "application/xml",
        }

    def test_document_lists_used_when_operation_absent(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets")
        assert resolve_headers(metadata, registry) == {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def test_empty_operation_list_falls_back(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets", produces=[])
        assert resolve_headers(metadata, registry)["Accept"] == "application/json"

    def test_no_lists_anywhere(self, bare_registry: DocumentRegistry) -> None:
        assert resolve_headers(_metadata(bare_registry, "/pets"), bare_registry) == {}

    def test_path_item_without_operation(self, registry: DocumentRegistry) -> None:
        metadata = RequestMetadata(path_item=declare_path("/pets", registry))
        assert resolve_headers(metadata, registry)["Content-Type"] == "application/json"

    def test_wsgi_style(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(
            registry, "/pets", consumes=["application/json"], produces=["application/xml"]
        )
        assert resolve_headers(metadata, registry, HeaderStyle.WSGI) == {
            "CONTENT_TYPE": "application/json",
            "HTTP_ACCEPT": "application/xml",
        }

    def test_style_as_string(self, registry: DocumentRegistry) -> None:
        metadata = _metadata(registry, "/pets")
        assert "HTTP_ACCEPT" in resolve_headers(metadata, registry, "wsgi")
