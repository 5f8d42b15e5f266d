"""Declaration-time validation of paths, operations, parameters and responses.

This sub-package builds the metadata tree an example runs against. Each
function validates its input immediately and raises
:class:`~specbind.exceptions.InvalidDeclarationError` on the first problem.

* :mod:`~specbind.declarations.paths` -- :func:`declare_path` and
  :func:`declare_operation`.
* :mod:`~specbind.declarations.parameters` -- :func:`validate_and_normalize`
  and its keyword front end :func:`declare_parameter`.
* :mod:`~specbind.declarations.responses` -- :func:`declare_response`.
* :mod:`~specbind.declarations.loader` -- the same declarations read from a
  YAML or JSON file.
"""

from specbind.declarations.loader import (
    load_declarations,
    load_declarations_file,
    select_metadata,
)
from specbind.declarations.parameters import (
    declare_parameter,
    normalize_parameter,
    validate_and_normalize,
)
from specbind.declarations.paths import declare_operation, declare_path
from specbind.declarations.responses import declare_response

__all__ = [
    "declare_operation",
    "declare_parameter",
    "declare_path",
    "declare_response",
    "load_declarations",
    "load_declarations_file",
    "normalize_parameter",
    "select_metadata",
    "validate_and_normalize",
]
