"""Resolve ``$ref`` JSON Reference pointers inside a Swagger document.

Swagger 2.0 documents use ``$ref`` pointers (e.g.
``{"$ref": "#/parameters/skipParam"}``) to share parameter, response and
schema definitions. This module navigates such pointers against a document's
root mapping.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~specbind.exceptions.UnresolvedReferenceError`.

Public functions:

* :func:`resolve_pointer` -- look up the value a single pointer names.
* :func:`follow_ref` -- dereference a node, following chained ``$ref``
  pointers with cycle detection.
* :func:`split_pointer` -- decode a pointer into its unescaped segments.
"""

from __future__ import annotations

from typing import Any

from specbind.exceptions import UnresolvedReferenceError


def split_pointer(ref: str) -> list[str]:
    """Split an internal ``$ref`` into RFC 6901 unescaped segments.

    Args:
        ref: The ``$ref`` string (e.g., ``"#/parameters/Pet"``).

    Returns:
        The path segments (``["parameters", "Pet"]``).

    Raises:
        UnresolvedReferenceError: If the reference is not internal.
    """
    if not isinstance(ref, str) or not ref.startswith("#/"):
        raise UnresolvedReferenceError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )
    return [
        segment.replace("~1", "/").replace("~0", "~")
        for segment in ref[2:].split("/")
    ]


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the root document.

    Handles RFC 6901 escaping (``~0`` for ``~``, ``~1`` for ``/``) and
    array indices.

    Args:
        ref: The ``$ref`` string (e.g., ``"#/parameters/skipParam"``).
        root: The root document mapping to resolve against.

    Returns:
        The value found at the referenced path.

    Raises:
        UnresolvedReferenceError: If the reference is external, or if any
            segment in the pointer path does not exist in the document.
    """
    current: Any = root
    for segment in split_pointer(ref):
        if isinstance(current, dict):
            if segment not in current:
                raise UnresolvedReferenceError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                index = int(segment)
                current = current[index]
            except (ValueError, IndexError) as exc:
                raise UnresolvedReferenceError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise UnresolvedReferenceError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def follow_ref(node: Any, root: dict[str, Any]) -> Any:
    """Dereference *node* until it is no longer a ``$ref`` dict.

    A definition may itself be a ``$ref`` to another definition; each hop is
    resolved in turn. Unlike a full-document walk, nested values inside the
    final target are left untouched.

    Args:
        node: Any value -- a ``{"$ref": ...}`` dict is followed, everything
            else is returned as-is.
        root: The root document mapping.

    Returns:
        The first non-reference value reached.

    Raises:
        UnresolvedReferenceError: If a pointer cannot be resolved or the
            chain loops back on itself.
    """
    seen: set[str] = set()
    while isinstance(node, dict) and "$ref" in node:
        ref = node["$ref"]
        if ref in seen:
            raise UnresolvedReferenceError(f"Circular $ref chain at '{ref}'")
        seen.add(ref)
        node = resolve_pointer(ref, root)
    return node
