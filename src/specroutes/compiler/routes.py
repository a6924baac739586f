"""Compile a whole OpenAPI document into router-ready route descriptors.

:func:`compile_routes` is the single public entry point of the compiler.  It
resolves every ``$ref`` once, then walks the ``paths`` object in document
order, turning each URL template into a routing pattern and each operation
into a :class:`~specroutes.models.RouteDescriptor`.

Compilation is all-or-nothing: it runs to completion and returns the full
list, or raises.  Missing handlers are collected across every path before
raising so that a single run reports all of them.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specroutes.compiler.handlers import HandlerRegistry
from specroutes.compiler.methods import compile_methods
from specroutes.compiler.paths import transform_path
from specroutes.exceptions import MalformedSchemaError, MissingHandler, MissingHandlerError
from specroutes.models import CompilerConfig, RouteDescriptor
from specroutes.parser.resolver import resolve_references

logger = logging.getLogger(__name__)


def compile_routes(
    spec: dict[str, Any],
    handlers: HandlerRegistry,
    config: Optional[CompilerConfig] = None,
) -> list[RouteDescriptor]:
    """Compile *spec* into an ordered list of route descriptors.

    Args:
        spec: The OpenAPI 3.0.x document as an in-memory tree.  It is not
            modified.
        handlers: Registry mapping camelCase operation names to callables.
            Only read.
        config: Compiler options; defaults apply when omitted.

    Returns:
        Descriptors ordered by path (document order), then by the order the
        verbs are declared within each path.

    Raises:
        UnresolvedReferenceError: If orphan ``$ref`` pointers remain.
        CyclicReferenceError: If components reference each other in a loop.
        MissingHandlerError: If any operation has no callable handler; lists
            every such operation across the document.
        MalformedSchemaError: If a parameter or schema cannot be compiled.

    Example::

        routes = compile_routes(document, {"getDocument": get_document})
        for route in routes:
            router.add(**route.to_route())
    """
    config = config or CompilerConfig()

    logger.info("Resolving references")
    document = resolve_references(spec)

    logger.info("Compiling routes from the OpenAPI document")
    paths = document.get("paths") or {}
    if not isinstance(paths, dict):
        raise MalformedSchemaError("'paths' must be an object", "#/paths")

    routes: list[RouteDescriptor] = []
    missing: list[MissingHandler] = []
    for template, path_item in paths.items():
        if not isinstance(path_item, dict):
            raise MalformedSchemaError("Path item must be an object", template)
        url = transform_path(template)
        logger.info("Creating path %s", url)
        try:
            routes.extend(
                compile_methods(path_item, handlers, config, path=template, url=url)
            )
        except MissingHandlerError as exc:
            missing.extend(exc.missing)

    if missing:
        raise MissingHandlerError(missing)

    logger.info("Compiled %d route(s)", len(routes))
    return routes
