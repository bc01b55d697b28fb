"""Exception hierarchy for specwright.

All exceptions inherit from :class:`SpecwrightError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specwright.exit_codes`.
The top-level error handler in :func:`specwright.app.main` catches
``SpecwrightError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The assembly engine itself raises only for caller contract violations
(:class:`ExtensionNameError`, :class:`InvalidSchemeError`). Everything else
degrades gracefully: collisions are logged, lookups return ``None`` or
``False``.

Subclass hierarchy::

    SpecwrightError (exit 1)
    +-- InvalidUsageError     (exit 2)
    |   +-- ExtensionNameError
    |   +-- InvalidSchemeError
    +-- NotFoundError         (exit 4)
    +-- DocumentLoadError     (exit 7)
    +-- ConfigError           (exit 1)
"""

from specwright.exit_codes import (
    EXIT_DOCUMENT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)


class SpecwrightError(Exception):
    """Base exception for all specwright errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specwright.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecwrightError):
    """Raised for invalid CLI arguments or a violated caller contract."""

    exit_code = EXIT_INVALID_USAGE


class ExtensionNameError(InvalidUsageError):
    """Raised when a vendor extension name does not start with ``x-``."""


class InvalidSchemeError(InvalidUsageError):
    """Raised when a security scheme cannot be assembled from the given options."""


class NotFoundError(SpecwrightError):
    """Raised when a requested component or reference does not exist."""

    exit_code = EXIT_NOT_FOUND


class DocumentLoadError(SpecwrightError):
    """Raised when a source document cannot be read, parsed, or is not OpenAPI 3.x."""

    exit_code = EXIT_DOCUMENT_ERROR


class ConfigError(SpecwrightError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
