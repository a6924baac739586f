"""Derive request-safe and response-safe variants of a JSON schema.

A property flagged ``readOnly: true`` is assigned by the server, so clients
must not be asked to send it: :func:`filter_read_only` removes it from request
body schemas.  A property flagged ``writeOnly: true`` (a password, say) must
never be echoed back: :func:`filter_write_only` removes it from response
schemas.  Removed names are pruned from ``required`` as well.

For an array schema the filter applies to ``items.properties`` and
``items.required``.  Every other key (``type``, ``format``, ``description``...)
is kept untouched, and the input schema is never mutated.

Filtering is **shallow** by default (``depth=1``): nested object properties
keep their own flagged fields.  Pass a larger ``depth``, or ``None`` for
unlimited recursion, to descend into nested object and array properties.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from specroutes.exceptions import MalformedSchemaError

logger = logging.getLogger(__name__)

READ_ONLY = "readOnly"
WRITE_ONLY = "writeOnly"

_PRIMITIVE_TYPES = frozenset({"string", "number", "integer", "boolean", "null"})
_UNSTRUCTURED_KEYS = ("allOf", "anyOf", "oneOf", "not", "additionalProperties")


def filter_read_only(
    schema: Optional[dict[str, Any]],
    depth: Optional[int] = 1,
    strict: bool = True,
    location: Optional[str] = None,
) -> dict[str, Any]:
    """Return *schema* without its ``readOnly`` properties.

    Args:
        schema: The request body schema.  ``None`` or ``{}`` yields ``{}``.
        depth: Levels to filter; ``1`` is the top level (or the array items)
            only, ``None`` recurses without limit.
        strict: Raise when the schema has no ``properties`` to filter instead
            of returning it unchanged.  Primitive and composed schemas
            (``allOf``/``anyOf``/``oneOf``...) are always returned unchanged.
        location: Where the schema sits, used in error messages.

    Raises:
        MalformedSchemaError: If the schema's shape makes filtering undefined.

    Example::

        >>> filter_read_only({
        ...     "properties": {"a": {"readOnly": True}, "b": {}},
        ...     "required": ["a", "b"],
        ... })
        {'properties': {'b': {}}, 'required': ['b']}
    """
    return _filter_schema(schema, READ_ONLY, depth, strict, location)


def filter_write_only(
    schema: Optional[dict[str, Any]],
    depth: Optional[int] = 1,
    strict: bool = True,
    location: Optional[str] = None,
) -> dict[str, Any]:
    """Return *schema* without its ``writeOnly`` properties.

    The mirror image of :func:`filter_read_only`, applied to response
    schemas.  Takes the same arguments and raises the same errors.
    """
    return _filter_schema(schema, WRITE_ONLY, depth, strict, location)


def _filter_schema(
    schema: Optional[dict[str, Any]],
    flag: str,
    depth: Optional[int],
    strict: bool,
    location: Optional[str],
) -> dict[str, Any]:
    if not schema:
        return {}
    if not isinstance(schema, dict):
        raise MalformedSchemaError(
            f"Schema must be an object, got {type(schema).__name__}", location
        )
    if depth is not None and depth < 1:
        raise ValueError(f"depth must be at least 1 or None, got {depth}")

    filtered = copy.deepcopy(schema)
    target = _filter_target(filtered, location)

    if "properties" not in target and (not strict or _is_unstructured(target)):
        if not _is_unstructured(target):
            logger.warning(
                "Schema without properties left unfiltered%s",
                f" at {location}" if location else "",
            )
        return filtered

    _filter_level(target, flag, depth, location)
    return filtered


def _filter_target(schema: dict[str, Any], location: Optional[str]) -> dict[str, Any]:
    """Return the mapping holding ``properties``: the schema itself or its items."""
    if schema.get("type") != "array":
        return schema
    items = schema.get("items")
    if not isinstance(items, dict):
        raise MalformedSchemaError("Array schema has no 'items' object", location)
    return items


def _is_unstructured(schema: dict[str, Any]) -> bool:
    """Whether a schema legitimately has no ``properties`` to filter."""
    if any(key in schema for key in _UNSTRUCTURED_KEYS):
        return True
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        return bool(schema_type) and all(t in _PRIMITIVE_TYPES for t in schema_type)
    return schema_type in _PRIMITIVE_TYPES


def _filter_level(
    target: dict[str, Any],
    flag: str,
    depth: Optional[int],
    location: Optional[str],
) -> None:
    """Filter ``target["properties"]`` in place, then descend if *depth* allows."""
    properties = target.get("properties")
    if not isinstance(properties, dict):
        raise MalformedSchemaError(
            "Schema has no 'properties' object to filter", location
        )

    kept: dict[str, Any] = {}
    for name, prop in properties.items():
        if not isinstance(prop, dict):
            raise MalformedSchemaError(
                f"Property '{name}' is not a schema object", location
            )
        if prop.get(flag) is True:
            continue
        kept[name] = prop
    target["properties"] = kept

    if "required" in target:
        required = target["required"]
        if not isinstance(required, list):
            raise MalformedSchemaError("'required' must be a list", location)
        target["required"] = [name for name in required if name in kept]

    if depth is not None and depth <= 1:
        return
    next_depth = None if depth is None else depth - 1
    for name, prop in kept.items():
        nested = prop
        if prop.get("type") == "array":
            nested = prop.get("items")
            if not isinstance(nested, dict):
                continue
        if "properties" in nested:
            child = f"{location}.{name}" if location else name
            _filter_level(nested, flag, next_depth, child)
