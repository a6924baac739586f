"""OpenAPI document parser -- load documents and resolve ``$ref`` pointers.

Typical usage::

    from specroutes.parser import load_spec, resolve_references

    raw = load_spec("openapi.yaml")
    document = resolve_references(raw)

Sub-modules:

* :mod:`~specroutes.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~specroutes.parser.resolver` -- Structural inlining of component
  ``$ref`` pointers with cycle and orphan detection.
"""

from specroutes.parser.loader import load_spec, validate_openapi_version
from specroutes.parser.resolver import find_references, resolve_references

__all__ = [
    "load_spec",
    "validate_openapi_version",
    "resolve_references",
    "find_references",
]
