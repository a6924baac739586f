"""specroutes -- Compile OpenAPI 3.0 documents into router-ready route descriptors.

An API is specified once, in its OpenAPI contract, and everything the router
needs is derived from it: routing patterns, per-request-part validation
schemas, and the handler wired to each operation.

Typical usage::

    from specroutes import compile_routes

    routes = compile_routes(document, {"getDocument": get_document})

Compilation resolves every ``$ref``, strips ``readOnly`` fields from request
bodies and ``writeOnly`` fields from responses, and fails before any route is
registered if an operation has no handler.

Modules:
    models: Pydantic models (configuration and route descriptors).
    config: Project file and environment configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes used by the CLI.
    output: stdout/stderr formatting system with Rich support.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from specroutes.compiler.routes import compile_routes  # noqa: E402
from specroutes.models import CompilerConfig, RouteDescriptor  # noqa: E402

__all__ = ["compile_routes", "CompilerConfig", "RouteDescriptor", "__version__"]
