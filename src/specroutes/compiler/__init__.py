"""Route compiler -- turn a resolved OpenAPI document into route descriptors.

Typical usage::

    from specroutes.compiler import compile_routes

    routes = compile_routes(document, handlers)

Sub-modules:

* :mod:`~specroutes.compiler.paths` -- URL template to routing pattern.
* :mod:`~specroutes.compiler.parameters` -- Per-location parameter schemas.
* :mod:`~specroutes.compiler.schema_filter` -- ``readOnly`` / ``writeOnly``
  property stripping.
* :mod:`~specroutes.compiler.bodies` -- Request body and response schemas.
* :mod:`~specroutes.compiler.handlers` -- Handler registries and name
  derivation.
* :mod:`~specroutes.compiler.methods` -- Per-path-item operation compiler.
* :mod:`~specroutes.compiler.routes` -- The document-level orchestrator.
"""

from specroutes.compiler.handlers import handler_name, registry_from_object
from specroutes.compiler.paths import transform_path
from specroutes.compiler.routes import compile_routes

__all__ = ["compile_routes", "transform_path", "handler_name", "registry_from_object"]
