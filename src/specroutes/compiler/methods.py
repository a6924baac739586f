"""Compile the operations of one path item into route descriptors.

Each key of a path item that is an HTTP verb is an operation.  For every one
of them, in declaration order, the handler is looked up by its camelCased
``operationId`` and the route schema is assembled from the parameter, request
body and response builders.

A missing handler is fatal: a contract that promises behaviour no handler
implements cannot be served.  All offending operations of the path item are
reported together, and no descriptor is returned for it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from specroutes.compiler.bodies import build_request_body, build_responses
from specroutes.compiler.handlers import HandlerRegistry, handler_name
from specroutes.compiler.parameters import map_parameters
from specroutes.exceptions import MalformedSchemaError, MissingHandler, MissingHandlerError
from specroutes.models import CompilerConfig, HTTPMethod, RouteDescriptor

logger = logging.getLogger(__name__)

HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def compile_methods(
    path_item: dict[str, Any],
    handlers: HandlerRegistry,
    config: Optional[CompilerConfig] = None,
    path: str = "",
    url: Optional[str] = None,
) -> list[RouteDescriptor]:
    """Compile every operation declared on *path_item*.

    Args:
        path_item: The resolved OpenAPI *Path Item Object*.
        handlers: Registry of camelCase operation names to callables.
        config: Compiler options; defaults apply when omitted.
        path: The path item's URL template, used in diagnostics and stored
            on each descriptor.
        url: The routing pattern for the descriptors; defaults to *path*.

    Returns:
        One :class:`~specroutes.models.RouteDescriptor` per operation, in
        the order the verbs are declared.

    Raises:
        MissingHandlerError: If any operation lacks an ``operationId`` or a
            callable handler; every such operation is listed.
        MalformedSchemaError: If a parameter or schema cannot be compiled.
    """
    config = config or CompilerConfig()
    shared_parameters = path_item.get("parameters") or []

    missing: list[MissingHandler] = []
    routes: list[RouteDescriptor] = []
    for method, operation in path_item.items():
        if method not in HTTP_METHODS:
            continue
        where = f"{method.upper()} {path}"
        logger.debug("Compiling method %s", where)
        if not isinstance(operation, dict):
            raise MalformedSchemaError("Operation must be an object", where)

        operation_id = operation.get("operationId")
        if not operation_id:
            missing.append(MissingHandler(path, method, None, None))
            continue
        name = handler_name(str(operation_id))
        handler = _lookup(handlers, name)
        if handler is None:
            missing.append(MissingHandler(path, method, str(operation_id), name))
            continue

        local_parameters = operation.get("parameters") or []
        schema: dict[str, Any] = {}
        try:
            schema.update(
                map_parameters(
                    [*local_parameters, *shared_parameters],
                    derive_required=config.derive_required,
                )
            )
        except MalformedSchemaError as exc:
            at = f"{where} {exc.location}" if exc.location else where
            raise MalformedSchemaError(exc.detail, at) from None
        schema.update(build_request_body(operation.get("requestBody"), config, where))
        schema.update(build_responses(operation.get("responses"), config, where))

        routes.append(
            RouteDescriptor(
                method=method.upper(),
                url=url if url is not None else path,
                schema=schema,
                handler=handler,
                path=path,
                operation_id=str(operation_id),
                handler_name=name,
            )
        )

    if missing:
        raise MissingHandlerError(missing)
    return routes


def _lookup(handlers: HandlerRegistry, name: str) -> Optional[Callable[..., Any]]:
    handler = handlers.get(name)
    if handler is None or not callable(handler):
        return None
    return handler
