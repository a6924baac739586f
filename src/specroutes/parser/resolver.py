"""Inline internal ``$ref`` pointers against the document's component registry.

OpenAPI documents reuse definitions through pointers such as
``{"$ref": "#/components/schemas/Pet"}``.  The route compiler needs a
self-contained document, so this module replaces every such pointer with the
content of the component it names.

Substitution is structural: the parsed tree is walked and reference nodes are
rebuilt in place.  Nothing is serialised and re-parsed, so component keys that
are prefixes of one another never collide and numeric or boolean values keep
their types.

A reference node is *spliced*: ``{"$ref": p, "description": "x"}`` becomes the
component's keys merged with the node's other keys, in the order they appear
(a later key wins).  Components that reference other components are resolved
transitively; a cycle raises :class:`~specroutes.exceptions.CyclicReferenceError`.
Any pointer still present after substitution (unknown key, wrong group,
external file) is an orphan and raises
:class:`~specroutes.exceptions.UnresolvedReferenceError`.

The public functions are :func:`resolve_references`, :func:`find_references`
and :func:`component_pointer`.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Mapping

from specroutes.exceptions import (
    CyclicReferenceError,
    MalformedSchemaError,
    UnresolvedReferenceError,
)

logger = logging.getLogger(__name__)

REF_KEY = "$ref"
_COMPONENTS_ROOT = "#/components"


def component_pointer(group: str, key: str) -> str:
    """Build the pointer addressing ``components[group][key]``.

    ``/`` and ``~`` inside names are escaped per RFC 6901.

    Example::

        >>> component_pointer("schemas", "Pet")
        '#/components/schemas/Pet'
        >>> component_pointer("schemas", "a/b")
        '#/components/schemas/a~1b'
    """
    return f"{_COMPONENTS_ROOT}/{_escape(group)}/{_escape(key)}"


def _escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def resolve_references(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *spec* with every component ``$ref`` inlined.

    The input is never mutated.  A missing or ``None`` ``components`` member
    is treated as an empty registry.  Resolving an already resolved document
    is a no-op.

    Args:
        spec: The OpenAPI document tree.

    Returns:
        A new document in which no ``$ref`` pointer remains.

    Raises:
        CyclicReferenceError: If components reference each other in a loop.
        UnresolvedReferenceError: If any pointer does not name an existing
            component; every orphan is listed.
        MalformedSchemaError: If a non-object component is spliced into a
            node that has sibling keys.
    """
    document = copy.deepcopy(spec)
    if document.get("components") is None:
        document["components"] = {}

    resolver = _ComponentResolver(document["components"])
    logger.debug("Registered %d component pointer(s)", len(resolver.registry))
    resolved = resolver.substitute(document, ())

    orphans = find_references(resolved)
    if orphans:
        raise UnresolvedReferenceError(orphans)
    return resolved


def find_references(node: Any) -> list[str]:
    """List every ``$ref`` string found anywhere in *node*.

    Pointers are returned in document (depth-first) order, each one once.
    A ``$ref`` key whose value is not a string is data, not a reference.
    """
    found: dict[str, None] = {}
    _collect_references(node, found)
    return list(found)


def _collect_references(node: Any, found: dict[str, None]) -> None:
    if isinstance(node, dict):
        ref = node.get(REF_KEY)
        if isinstance(ref, str):
            found.setdefault(ref, None)
        for value in node.values():
            _collect_references(value, found)
    elif isinstance(node, list):
        for item in node:
            _collect_references(item, found)


class _ComponentResolver:
    """Resolve pointers against one component registry.

    ``registry`` maps every pointer the document may legally use to its
    ``(group, key)`` address.  Resolved component bodies are memoised per
    pointer; each inlining site receives its own deep copy.
    """

    def __init__(self, components: Mapping[str, Any]) -> None:
        self._components = components
        self.registry: dict[str, tuple[str, str]] = {}
        for group, entries in components.items():
            if not isinstance(entries, dict):
                continue
            for key in entries:
                self.registry[component_pointer(group, key)] = (group, key)
        self._resolved: dict[str, Any] = {}

    def substitute(self, node: Any, chain: tuple[str, ...]) -> Any:
        """Rebuild *node* with every known reference replaced.

        *chain* holds the pointers currently being resolved above this node,
        which is how cycles are detected.  Unknown pointers are left in place
        for the orphan scan.
        """
        if isinstance(node, dict):
            ref = node.get(REF_KEY)
            if isinstance(ref, str) and ref in self.registry:
                return self._splice(node, ref, chain)
            return {key: self.substitute(value, chain) for key, value in node.items()}
        if isinstance(node, list):
            return [self.substitute(item, chain) for item in node]
        return node

    def _splice(self, node: dict[str, Any], ref: str, chain: tuple[str, ...]) -> Any:
        content = self._resolve_pointer(ref, chain)
        if not isinstance(content, dict):
            if len(node) > 1:
                raise MalformedSchemaError(
                    f"Cannot splice non-object component into an object with "
                    f"sibling keys {sorted(k for k in node if k != REF_KEY)}",
                    location=ref,
                )
            return content

        spliced: dict[str, Any] = {}
        for key, value in node.items():
            if key == REF_KEY:
                spliced.update(content)
            else:
                spliced[key] = self.substitute(value, chain)
        return spliced

    def _resolve_pointer(self, ref: str, chain: tuple[str, ...]) -> Any:
        if ref in chain:
            raise CyclicReferenceError([*chain, ref])

        if ref not in self._resolved:
            group, key = self.registry[ref]
            logger.debug("Inlining %s", ref)
            self._resolved[ref] = self.substitute(
                self._components[group][key], (*chain, ref)
            )
        return copy.deepcopy(self._resolved[ref])
