"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specbind.exceptions.SpecbindError` subclass.
CI scripts can inspect the exit code of ``specbind check`` to tell a bad
declaration from an unloadable document without parsing stderr.

Example::

    $ specbind check declarations.yaml
    $ echo $?
    3   # EXIT_INVALID_DECLARATION -- a path, parameter or response was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_INVALID_DECLARATION = 3
"""A path, operation, parameter or response declaration failed validation."""

EXIT_UNRESOLVED_REFERENCE = 4
"""A ``$ref`` or document name could not be resolved."""

EXIT_UNRESOLVED_VALUE = 5
"""A parameter or path placeholder had no value in the supplied context."""

EXIT_DOCUMENT_LOAD_ERROR = 7
"""A Swagger document could not be loaded, parsed, or validated."""
