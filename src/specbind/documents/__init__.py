"""Swagger document store -- load documents, register them, follow ``$ref`` pointers.

This sub-package is the read-only input to both declaration and resolution:

* :mod:`~specbind.documents.loader` -- I/O layer (URL, file, stdin) plus
  format detection and Swagger version validation.
* :mod:`~specbind.documents.pointer` -- internal ``$ref`` navigation.
* :mod:`~specbind.documents.registry` -- :class:`Document` and the ordered,
  freezable :class:`DocumentRegistry`.

Typical usage::

    from specbind.documents import DocumentRegistry

    registry = DocumentRegistry.from_sources({"petstore": "petstore.yaml"})
    registry.freeze()
"""

from specbind.documents.loader import load_document, validate_swagger_version
from specbind.documents.registry import Document, DocumentRegistry

__all__ = ["Document", "DocumentRegistry", "load_document", "validate_swagger_version"]
