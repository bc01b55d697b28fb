"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specwright.exceptions.SpecwrightError` subclass.
External tooling (CI scripts, shell wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ specwright resolve openapi.yaml '#/components/schemas/Missing'
    $ echo $?
    4   # EXIT_NOT_FOUND -- the reference did not resolve
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or a caller contract was violated."""

EXIT_NOT_FOUND = 4
"""A requested component, path, or reference was not found in the document."""

EXIT_DOCUMENT_ERROR = 7
"""The source document could not be loaded, parsed, or is not OpenAPI 3.x."""
