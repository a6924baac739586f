"""Exception hierarchy for specroutes.

All exceptions inherit from :class:`SpecroutesError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specroutes.exit_codes`.
The compiler core only ever *raises*; deciding whether a failure terminates
the process is left to the caller.  The CLI entry point in
:func:`specroutes.app.main` catches ``SpecroutesError``, prints its
:meth:`~SpecroutesError.report` and exits with the appropriate code.

Subclass hierarchy::

    SpecroutesError (exit 1)
    +-- InvalidUsageError            (exit 2)
    +-- SpecParseError               (exit 7)
    +-- ConfigError                  (exit 1)
    +-- CompileError                 (exit 8)
        +-- UnresolvedReferenceError (exit 8)
        +-- CyclicReferenceError     (exit 8)
        +-- MalformedSchemaError     (exit 8)
        +-- MissingHandlerError      (exit 9)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from specroutes.exit_codes import (
    EXIT_COMPILE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MISSING_HANDLER,
    EXIT_SPEC_PARSE_ERROR,
)


class SpecroutesError(Exception):
    """Base exception for all specroutes errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specroutes.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code

    def report(self) -> str:
        """Return the multi-line diagnostic report for this error.

        The base implementation is just the message; subclasses that carry
        several offending items enumerate them one per line.
        """
        return str(self)


class InvalidUsageError(SpecroutesError):
    """Raised for invalid CLI arguments or an unimportable handler module."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SpecroutesError):
    """Raised when the OpenAPI document cannot be loaded, parsed, or has an unsupported version."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ConfigError(SpecroutesError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE


class CompileError(SpecroutesError):
    """Base class for fatal compile-time failures.

    None of these are retried and none allow a partial route list; the only
    recovery is fixing the document or the handler registry and compiling
    again.
    """

    exit_code = EXIT_COMPILE_ERROR


class UnresolvedReferenceError(CompileError):
    """Raised when ``$ref`` pointers remain after full resolution (orphan refs).

    Args:
        references: Every orphan pointer, exactly as written in the document.
    """

    def __init__(self, references: Sequence[str]):
        self.references = list(references)
        super().__init__(
            f"Unresolved references remained in the document "
            f"({len(self.references)} orphan ref(s))"
        )

    def report(self) -> str:
        lines = [
            "Unresolved references remained in the document (orphan refs).",
            "Orphan refs found:",
        ]
        lines.extend(f'  => "$ref": "{ref}"' for ref in self.references)
        return "\n".join(lines)


class CyclicReferenceError(CompileError):
    """Raised when the component reference graph contains a cycle.

    Args:
        chain: The pointers on the resolution chain, ending with the pointer
            that was revisited (e.g. ``[A, B, A]``).
    """

    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(
            "Cyclic reference between components: " + " -> ".join(self.chain)
        )

    def report(self) -> str:
        lines = ["Cyclic reference between components:"]
        lines.extend(f"  => {pointer}" for pointer in self.chain)
        return "\n".join(lines)


class MalformedSchemaError(CompileError):
    """Raised when a schema or parameter shape makes filtering undefined.

    Args:
        message: Description of what is wrong with the node.
        location: Where the node sits (pointer, path + method, or parameter
            name), when known.
    """

    def __init__(self, message: str, location: Optional[str] = None):
        self.detail = message
        self.location = location
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)


@dataclass(frozen=True)
class MissingHandler:
    """One operation whose handler could not be found in the registry."""

    path: str
    method: str
    operation_id: Optional[str]
    handler_name: Optional[str]

    def describe(self) -> str:
        where = f"{self.method.upper()} {self.path}"
        if self.operation_id is None:
            return f"{where}: operation has no operationId"
        return (
            f"{where}: the handler {self.handler_name} is absent "
            f"(operationId {self.operation_id})"
        )


class MissingHandlerError(CompileError):
    """Raised when operations have no corresponding callable in the registry.

    Args:
        missing: Every offending operation.
    """

    exit_code = EXIT_MISSING_HANDLER

    def __init__(self, missing: Sequence[MissingHandler]):
        self.missing = list(missing)
        names = ", ".join(
            m.handler_name or f"{m.method.upper()} {m.path}" for m in self.missing
        )
        super().__init__(f"Missing handler(s): {names}")

    def report(self) -> str:
        lines = [
            "Some handlers are absent. Implement them before starting the service:",
        ]
        lines.extend(f"  !!! {m.describe()}" for m in self.missing)
        return "\n".join(lines)
