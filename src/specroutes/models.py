"""Canonical Pydantic models shared across all specroutes modules.

The OpenAPI document itself stays a plain ``dict``/``list`` tree: it is
loosely typed and deeply nested, and the compiler rewrites it structurally.
The models here cover the two shapes that *are* fixed:

**Configuration** -- :class:`CompilerConfig`, the options that steer schema
filtering and parameter mapping.

**Compiler output** -- :class:`HTTPMethod`, :class:`ParameterLocation` and
:class:`RouteDescriptor`, the immutable unit handed to the HTTP router.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Configuration ---


class CompilerConfig(BaseModel):
    """Options controlling how schemas are derived from the document.

    Loaded by :func:`~specroutes.config.resolve_config` from (in increasing
    precedence) defaults, ``./specroutes.json``, ``SPECROUTES_*`` environment
    variables and CLI flags.

    Example::

        CompilerConfig(filter_depth=None, derive_required=True)
    """

    model_config = ConfigDict(extra="forbid")

    filter_depth: Optional[int] = Field(
        default=1,
        ge=1,
        description="How many levels readOnly/writeOnly filtering descends; "
        "None recurses without limit",
    )
    strict_schemas: bool = Field(
        default=True,
        description="Raise MalformedSchemaError for body/response schemas "
        "without properties instead of passing them through",
    )
    derive_required: bool = Field(
        default=False,
        description="Emit a 'required' array in parameter schemas from the "
        "parameters' own 'required' flags",
    )
    json_media_types: list[str] = Field(
        default_factory=lambda: ["application/json"],
        description="Media types treated as JSON content, in priority order",
    )

    @field_validator("json_media_types")
    @classmethod
    def _non_empty_media_types(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("json_media_types must list at least one media type")
        return value


# --- Compiler output ---


class HTTPMethod(str, enum.Enum):
    """HTTP verbs recognised on an OpenAPI path item.

    Any other key of a path item (``summary``, ``parameters``, ``servers``,
    extensions...) is not an operation.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class RouteDescriptor(BaseModel):
    """A compiled route, ready to register with the HTTP router.

    Created once per compilation run and frozen afterwards; the router may
    share it freely across request-handling threads.

    ``schema`` holds the validation schema keyed by request part: any of
    ``params``, ``querystring``, ``header``, ``cookie``, ``body`` and
    ``response``.  It is exposed as :attr:`schema_` because ``schema`` is
    reserved on Pydantic models.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    method: str = Field(description="Upper-case HTTP verb")
    url: str = Field(description="Routing pattern, e.g. /documents/:id")
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")
    handler: Callable[..., Any]
    path: str = Field(description="Original OpenAPI URL template")
    operation_id: str
    handler_name: str = Field(description="Registry key the handler was found under")

    def to_route(self) -> dict[str, Any]:
        """Return the plain ``{method, url, schema, handler}`` mapping a router registers."""
        return {
            "method": self.method,
            "url": self.url,
            "schema": self.schema_,
            "handler": self.handler,
        }
