"""Render example values as the strings they take on the wire.

Path segments, query strings and header values all go through
:func:`format_value`, so a value is spelled the same wherever it lands.
"""

from __future__ import annotations

from typing import Any


def format_value(value: Any) -> str:  # noqa: ANN401
    """Return the wire spelling of *value*.

    Booleans are ``true`` / ``false`` and ``None`` is the empty string.
    Lists and tuples are comma-joined (``csv``, the Swagger 2.0 default
    ``collectionFormat``). Everything else goes through :func:`str`.

    Example::

        >>> format_value(True)
        'true'
        >>> format_value([1, "a", False])
        '1,a,false'
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(format_value(item) for item in value)
    return str(value)
