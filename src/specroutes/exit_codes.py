"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specroutes.exceptions.SpecroutesError` subclass.
Service launchers and CI scripts can inspect the exit code to tell a broken
contract from a missing handler without parsing stderr.

Example::

    $ specroutes check openapi.yaml --handlers myservice.handlers
    $ echo $?
    9   # EXIT_MISSING_HANDLER -- an operation has no implementation
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unimportable handler module."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be loaded, parsed, or has an unsupported version."""

EXIT_COMPILE_ERROR = 8
"""The document could not be compiled (orphan or cyclic references, malformed schemas)."""

EXIT_MISSING_HANDLER = 9
"""One or more operations have no callable handler in the registry."""
