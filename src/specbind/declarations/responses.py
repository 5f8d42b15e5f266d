"""Declare the responses an operation is expected to produce."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from specbind.exceptions import InvalidDeclarationError
from specbind.models import DEFAULT, Operation, Response, ResponseCode


logger = logging.getLogger(__name__)


def _check_code(code: Any) -> Union[int, ResponseCode]:
    # bool is an int subclass; True must not pass as status 1.
    if code is DEFAULT:
        return code
    if isinstance(code, int) and not isinstance(code, bool) and 100 <= code < 600:
        return code
    raise InvalidDeclarationError(
        f"Response code must be an integer 100...599 or DEFAULT (got {code!r})"
    )


def declare_response(
    operation: Operation,
    code: Union[int, ResponseCode],
    description: Optional[str] = None,
    schema: Optional[dict[str, Any]] = None,
    headers: Optional[dict[str, Any]] = None,
    examples: Optional[dict[str, Any]] = None,
) -> Response:
    """Record an expected response on *operation*.

    Args:
        operation: The operation the response belongs to.
        code: An ``int`` status in ``[100, 600)`` or
            :data:`~specbind.models.DEFAULT`. Strings -- ``"404"`` as well as
            ``"default"`` -- are rejected.
        description: Required human-readable description.
        schema: Optional Swagger schema (often ``{"$ref": "#/definitions/..."}``).
        headers: Optional response header definitions.
        examples: Optional examples keyed by MIME type.

    Returns:
        The stored :class:`~specbind.models.Response`. Declaring the same code
        again replaces it.

    Raises:
        InvalidDeclarationError: If the code or description is invalid.
    """
    checked = _check_code(code)
    if not description:
        raise InvalidDeclarationError(f"Response {code!r} requires a description")

    try:
        response = Response(
            description=description,
            schema=schema,
            headers=dict(headers or {}),
            examples=dict(examples or {}),
        )
    except ValidationError as exc:
        raise InvalidDeclarationError(f"Invalid response {code!r}: {exc}") from exc

    operation.responses[checked] = response
    logger.debug("Declared response %s on %s", code, operation.method.value)
    return response
