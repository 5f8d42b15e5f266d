"""Named-value sources the resolver reads live example values from.

The resolver never cares what concrete object holds an example's values; it
asks a :class:`NamedValueSource` whether a name is defined and for its value.
Two adapters cover the common cases:

- :class:`MappingValueSource` -- values in a dict (``{"post_id": 123}``).
- :class:`AttributeValueSource` -- values as attributes of an object, e.g.
  a test class instance or a ``types.SimpleNamespace``.

:func:`as_value_source` picks the right adapter, so resolver entry points
accept any of the three.

To plug in another host (a fixture lookup, a chained scope, ...), subclass
:class:`NamedValueSource` and implement :meth:`~NamedValueSource.has` and
:meth:`~NamedValueSource._lookup`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from specbind.exceptions import UnresolvedValueError


class NamedValueSource(ABC):
    """Abstract capability for looking up example values by name."""

    @abstractmethod
    def has(self, name: str) -> bool:
        """Return ``True`` when a value is defined for *name*."""
        ...

    @abstractmethod
    def _lookup(self, name: str) -> Any:  # noqa: ANN401
        """Return the value for *name*; only called after :meth:`has` succeeded."""
        ...

    def get(self, name: str) -> Any:  # noqa: ANN401
        """Return the value defined for *name*.

        Raises:
            UnresolvedValueError: If :meth:`has` is ``False`` for *name*.
        """
        if not self.has(name):
            raise UnresolvedValueError(name)
        return self._lookup(name)


class MappingValueSource(NamedValueSource):
    """Values held in a mapping."""

    def __init__(self, values: Mapping[str, Any]):
        self._values = values

    def has(self, name: str) -> bool:
        return name in self._values

    def _lookup(self, name: str) -> Any:  # noqa: ANN401
        return self._values[name]


class AttributeValueSource(NamedValueSource):
    """Values exposed as attributes of an arbitrary object.

    A ``None`` attribute counts as defined; only a missing attribute is an
    unresolved value.
    """

    def __init__(self, target: Any):  # noqa: ANN401
        self._target = target

    def has(self, name: str) -> bool:
        return hasattr(self._target, name)

    def _lookup(self, name: str) -> Any:  # noqa: ANN401
        return getattr(self._target, name)


def as_value_source(context: Any) -> NamedValueSource:  # noqa: ANN401
    """Wrap *context* in the adapter matching its shape.

    Args:
        context: A :class:`NamedValueSource` (returned unchanged), a mapping,
            or any other object whose attributes hold the values.
    """
    if isinstance(context, NamedValueSource):
        return context
    if isinstance(context, Mapping):
        return MappingValueSource(context)
    return AttributeValueSource(context)
