"""Named Swagger documents and the registry that holds them.

A :class:`DocumentRegistry` is built once at start-up, before any path is
declared, and frozen before the first example runs. It is passed explicitly
into both the declaration functions (which use it to pick a path's document)
and the resolver (which reads ``basePath``, ``consumes``, ``produces`` and
reusable ``parameters`` from it).

The registry performs no locking. Concurrent readers are safe only once
:meth:`DocumentRegistry.freeze` has been called and every document is
registered.
"""

from __future__ import annotations

import copy
import logging
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from specbind.documents.loader import load_document, validate_swagger_version
from specbind.documents.pointer import follow_ref, resolve_pointer
from specbind.exceptions import RegistryError, UnresolvedReferenceError

logger = logging.getLogger(__name__)


class Document(BaseModel):
    """A loaded Swagger 2.0 document, immutable once registered.

    The accessors return empty defaults when the document omits a section,
    so callers never need to check for missing keys.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    raw: dict[str, Any]

    @property
    def base_path(self) -> str:
        return self.raw.get("basePath") or ""

    @property
    def consumes(self) -> list[str]:
        return list(self.raw.get("consumes") or [])

    @property
    def produces(self) -> list[str]:
        return list(self.raw.get("produces") or [])

    @property
    def parameters(self) -> Mapping[str, Any]:
        """Reusable parameter definitions, keyed by definition name (read-only view)."""
        return MappingProxyType(self.raw.get("parameters") or {})

    def resolve_ref(self, ref: str) -> Any:
        """Return the value an internal ``$ref`` pointer names in this document.

        Raises:
            UnresolvedReferenceError: If the pointer is external or dangling.
        """
        return resolve_pointer(ref, self.raw)

    def parameter_definition(self, name: str) -> dict[str, Any]:
        """Return the reusable parameter definition registered as *name*.

        A definition that is itself a ``$ref`` is followed to its target.

        Args:
            name: Key in the document's top-level ``parameters`` mapping
                (the terminal segment of ``#/parameters/<name>``).

        Raises:
            UnresolvedReferenceError: If the document has no such definition
                or the definition is not a mapping.
        """
        definitions = self.parameters
        if name not in definitions:
            raise UnresolvedReferenceError(
                f"Document '{self.name}' has no parameter definition '{name}'"
            )
        definition = follow_ref(definitions[name], self.raw)
        if not isinstance(definition, dict):
            raise UnresolvedReferenceError(
                f"Parameter definition '{name}' in document '{self.name}' "
                f"is not an object (got {type(definition).__name__})"
            )
        return copy.deepcopy(definition)


class DocumentRegistry:
    """Ordered collection of named :class:`Document` objects.

    Documents keep their registration order; the first one registered is the
    default for paths declared without an explicit document name.

    Example:
        Typical start-up sequence::

            registry = DocumentRegistry()
            registry.register("petstore", load_document("petstore.yaml"))
            registry.freeze()
    """

    def __init__(self, documents: Optional[Mapping[str, dict[str, Any]]] = None) -> None:
        self._documents: dict[str, Document] = {}
        self._frozen = False
        for name, raw in (documents or {}).items():
            self.register(name, raw)

    @classmethod
    def from_sources(cls, sources: Mapping[str, str]) -> DocumentRegistry:
        """Load every ``name -> source`` entry and register it, in order.

        Each source is read with :func:`~specbind.documents.loader.load_document`
        and checked with
        :func:`~specbind.documents.loader.validate_swagger_version`.

        Raises:
            DocumentLoadError: If any source fails to load or validate.
        """
        registry = cls()
        for name, source in sources.items():
            raw = load_document(source)
            validate_swagger_version(raw)
            registry.register(name, raw)
        return registry

    def register(self, name: str, raw: Mapping[str, Any]) -> Document:
        """Add a parsed document under *name*.

        The mapping is deep-copied so later changes by the caller do not leak
        into the registry.

        Raises:
            RegistryError: If the registry is frozen or *name* is taken.
        """
        if self._frozen:
            raise RegistryError(
                f"Cannot register '{name}': the document registry is frozen"
            )
        if name in self._documents:
            raise RegistryError(f"Document '{name}' is already registered")
        document = Document(name=name, raw=copy.deepcopy(dict(raw)))
        self._documents[name] = document
        logger.debug("Registered document %s", name)
        return document

    def freeze(self) -> None:
        """Make the registry read-only. Idempotent."""
        if not self._frozen:
            logger.debug("Froze document registry with %d document(s)", len(self._documents))
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def default_name(self) -> Optional[str]:
        """Name of the first registered document, or ``None`` when empty."""
        return next(iter(self._documents), None)

    def get(self, name: str) -> Document:
        """Return the document registered as *name*.

        Raises:
            UnresolvedReferenceError: If no such document is registered.
        """
        try:
            return self._documents[name]
        except KeyError:
            raise UnresolvedReferenceError(
                f"No Swagger document named '{name}' is registered"
            ) from None

    def names(self) -> list[str]:
        return list(self._documents)

    def __contains__(self, name: object) -> bool:
        return name in self._documents

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents.values())

    def __len__(self) -> int:
        return len(self._documents)
