"""Handler registries: map camelCase operation names to callables.

The compiler only reads a registry, it never adds to it.  Any
``Mapping[str, Callable]`` will do; :func:`registry_from_object` builds one
from a module or a class instance so a service can keep its handlers as plain
functions or methods.
"""

from __future__ import annotations

import importlib
import inspect
from types import MappingProxyType
from typing import Any, Callable, Mapping

from specroutes.exceptions import InvalidUsageError

HandlerRegistry = Mapping[str, Callable[..., Any]]


def handler_name(operation_id: str) -> str:
    """Derive the registry key for *operation_id* (first character lower-cased).

    Example::

        >>> handler_name("GetDocument")
        'getDocument'
        >>> handler_name("addDocument")
        'addDocument'
    """
    return operation_id[:1].lower() + operation_id[1:]


def registry_from_object(source: Any) -> HandlerRegistry:
    """Build a read-only registry from a mapping, module, or object.

    For modules and objects every public callable attribute (name not
    starting with ``_``) is registered.  Classes defined in a module are
    skipped; only functions and other callables are handlers.

    Returns:
        A read-only mapping of name to callable.
    """
    if isinstance(source, Mapping):
        return MappingProxyType(dict(source))

    handlers: dict[str, Callable[..., Any]] = {}
    for name in dir(source):
        if name.startswith("_"):
            continue
        value = getattr(source, name)
        if inspect.isclass(value) or not callable(value):
            continue
        handlers[name] = value
    return MappingProxyType(handlers)


def import_registry(target: str) -> HandlerRegistry:
    """Import ``module`` or ``module:attribute`` and build a registry from it.

    Raises:
        InvalidUsageError: If the module or attribute cannot be imported.
    """
    module_name, _, attribute = target.partition(":")
    try:
        source: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise InvalidUsageError(
            f"Cannot import handler module '{module_name}': {exc}"
        ) from exc

    if attribute:
        for part in attribute.split("."):
            try:
                source = getattr(source, part)
            except AttributeError:
                raise InvalidUsageError(
                    f"Handler module '{module_name}' has no attribute '{attribute}'"
                ) from None
        if inspect.isclass(source):
            source = source()
    return registry_from_object(source)
