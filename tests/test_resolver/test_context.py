"""Tests for specbind.resolver.context -- named-value sources."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from specbind.exceptions import UnresolvedValueError
from specbind.resolver.context import (
    AttributeValueSource,
    MappingValueSource,
    NamedValueSource,
    as_value_source,
)


class _Fixtures(NamedValueSource):
    """A host-provided source backed by a fixture table."""

    def __init__(self, table: dict[str, Any]):
        self.table = table

    def has(self, name: str) -> bool:
        return name in self.table

    def _lookup(self, name: str) -> Any:
        return self.table[name]()


class TestMappingValueSource:
    def test_get_defined(self) -> None:
        assert MappingValueSource({"post_id": 123}).get("post_id") == 123

    def test_none_value_is_defined(self) -> None:
        source = MappingValueSource({"cursor": None})
        assert source.has("cursor")
        assert source.get("cursor") is None

    def test_missing_raises(self) -> None:
        with pytest.raises(UnresolvedValueError, match="No value defined for 'post_id'") as exc_info:
            MappingValueSource({}).get("post_id")
        assert exc_info.value.name == "post_id"


class TestAttributeValueSource:
    def test_get_attribute(self) -> None:
        assert AttributeValueSource(SimpleNamespace(site_id=1001)).get("site_id") == 1001

    def test_missing_attribute_raises(self) -> None:
        with pytest.raises(UnresolvedValueError):
            AttributeValueSource(SimpleNamespace()).get("site_id")

    def test_unresolved_value_is_attribute_error(self) -> None:
        with pytest.raises(AttributeError):
            AttributeValueSource(object()).get("anything")

    def test_properties_are_values(self) -> None:
        class Example:
            @property
            def account_id(self) -> str:
                return "pickles"

        assert AttributeValueSource(Example()).get("account_id") == "pickles"


class TestAsValueSource:
    def test_mapping_wrapped(self) -> None:
        assert isinstance(as_value_source({"a": 1}), MappingValueSource)

    def test_object_wrapped(self) -> None:
        assert isinstance(as_value_source(SimpleNamespace(a=1)), AttributeValueSource)

    def test_source_returned_unchanged(self) -> None:
        source = _Fixtures({"a": lambda: 1})
        assert as_value_source(source) is source

    def test_custom_source(self) -> None:
        calls: list[str] = []
        source = _Fixtures({"token": lambda: calls.append("token") or "abc"})
        assert source.get("token") == "abc"
        assert calls == ["token"]
        with pytest.raises(UnresolvedValueError):
            source.get("other")
