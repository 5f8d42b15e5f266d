"""Exception hierarchy for specbind.

All exceptions inherit from :class:`SpecbindError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specbind.exit_codes`.
The CLI entry point in :func:`specbind.app.main` catches ``SpecbindError``
and exits with the appropriate code, while unexpected exceptions produce a
crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The three errors raised by the core also inherit from the builtin exception
a Python caller would naturally catch for that situation, so test code can
use ``pytest.raises(ValueError)`` or ``except AttributeError`` without
importing specbind.

Subclass hierarchy::

    SpecbindError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- InvalidDeclarationError    (exit 3, also ValueError)
    +-- UnresolvedReferenceError   (exit 4, also LookupError)
    +-- UnresolvedValueError       (exit 5, also AttributeError)
    +-- DocumentLoadError          (exit 7)
    +-- RegistryError              (exit 1)
    +-- ConfigError                (exit 1)
"""

from specbind.exit_codes import (
    EXIT_DOCUMENT_LOAD_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_DECLARATION,
    EXIT_INVALID_USAGE,
    EXIT_UNRESOLVED_REFERENCE,
    EXIT_UNRESOLVED_VALUE,
)


class SpecbindError(Exception):
    """Base exception for all specbind errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specbind.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecbindError):
    """Raised for invalid CLI arguments (e.g. a malformed ``--value`` pair)."""

    exit_code = EXIT_INVALID_USAGE


class InvalidDeclarationError(SpecbindError, ValueError):
    """Raised at declaration time when a path, operation, parameter or response is malformed.

    Always surfaced immediately to the declaring caller; never retried or
    suppressed.
    """

    exit_code = EXIT_INVALID_DECLARATION


class UnresolvedReferenceError(SpecbindError, LookupError):
    """Raised at resolution time when a ``$ref`` or document name points at nothing."""

    exit_code = EXIT_UNRESOLVED_REFERENCE


class UnresolvedValueError(SpecbindError, AttributeError):
    """Raised at resolution time when the context has no value for a name.

    Args:
        name: The parameter or path placeholder that could not be resolved.
        message: Optional message; a default naming *name* is used otherwise.
    """

    exit_code = EXIT_UNRESOLVED_VALUE

    def __init__(self, name: str, message: str | None = None):
        super().__init__(message or f"No value defined for '{name}'")
        self.name = name


class DocumentLoadError(SpecbindError):
    """Raised when a Swagger document cannot be loaded, parsed, or is not Swagger 2.0."""

    exit_code = EXIT_DOCUMENT_LOAD_ERROR


class RegistryError(SpecbindError):
    """Raised on duplicate document names or registration into a frozen registry."""

    exit_code = EXIT_GENERIC_FAILURE


class ConfigError(SpecbindError):
    """Raised for configuration problems (missing file, invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
