"""Group OpenAPI parameters into one object schema per request location.

The router validates each part of a request against its own schema: path
variables, the query string, headers and cookies.  This module folds a flat
list of OpenAPI *Parameter Objects* into those per-location schemas.

**Mapping rules:**

* ``in: path`` becomes ``params`` and ``in: query`` becomes ``querystring``;
  ``header`` and ``cookie`` keep their names.
* Parameters are folded left to right.  Two parameters with the same name in
  the same location do not conflict: the later one's schema replaces the
  earlier one.  The same name in *different* locations lands in different
  groups.
* Each group is wrapped as ``{"type": "object", "properties": {...}}``.  A
  ``required`` array is only emitted when ``derive_required`` is set.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, Optional

from specroutes.exceptions import MalformedSchemaError
from specroutes.models import ParameterLocation

_LOCATION_KEYS: dict[ParameterLocation, str] = {
    ParameterLocation.PATH: "params",
    ParameterLocation.QUERY: "querystring",
    ParameterLocation.HEADER: "header",
    ParameterLocation.COOKIE: "cookie",
}


def parse_location(location: str) -> str:
    """Translate an OpenAPI ``in`` value into the router's schema key.

    Raises:
        MalformedSchemaError: If *location* is not a known parameter location.

    Example::

        >>> parse_location("path")
        'params'
        >>> parse_location("header")
        'header'
    """
    try:
        return _LOCATION_KEYS[ParameterLocation(location)]
    except ValueError:
        raise MalformedSchemaError(
            f"Unsupported parameter location '{location}'"
        ) from None


def map_parameters(
    parameters: Optional[Iterable[dict[str, Any]]],
    derive_required: bool = False,
) -> dict[str, dict[str, Any]]:
    """Build the per-location schemas for a list of parameters.

    Args:
        parameters: The operation's own parameters followed by the path
            item's shared ones.  ``None`` is treated as empty.
        derive_required: Also emit a ``required`` array listing every
            parameter flagged ``required: true`` and every path parameter.
            A redeclared parameter's flag follows the last declaration.

    Returns:
        A mapping such as ``{"params": {...}, "querystring": {...}}``, with
        locations in first-seen order.  Empty when there are no parameters.

    Raises:
        MalformedSchemaError: If a parameter is not an object, has no name,
            or declares an unsupported location.
    """
    if not parameters:
        return {}

    grouped: dict[str, dict[str, Any]] = {}
    required: dict[str, list[str]] = {}
    for param in parameters:
        if not isinstance(param, dict):
            raise MalformedSchemaError(
                f"Parameter must be an object, got {type(param).__name__}"
            )
        name = param.get("name")
        if not isinstance(name, str) or not name:
            raise MalformedSchemaError("Parameter has no 'name'")

        try:
            key = parse_location(param.get("in", ""))
        except MalformedSchemaError as exc:
            raise MalformedSchemaError(exc.detail, location=f"parameter '{name}'") from None

        properties = grouped.setdefault(key, {})
        properties[name] = copy.deepcopy(param.get("schema") or {})

        names = required.setdefault(key, [])
        if name in names:
            names.remove(name)
        if _is_required(param):
            names.append(name)

    return {
        key: wrap_object(
            properties, required.get(key) if derive_required else None
        )
        for key, properties in grouped.items()
    }


def _is_required(param: dict[str, Any]) -> bool:
    return param.get("in") == ParameterLocation.PATH.value or param.get("required") is True


def wrap_object(
    properties: dict[str, Any],
    required: Optional[list[str]] = None,
) -> dict[str, Any]:
    """Wrap *properties* into an object schema.

    ``required`` is only added when given and non-empty.
    """
    schema: dict[str, Any] = {"type": "object", "properties": dict(properties)}
    if required:
        schema["required"] = list(required)
    return schema
