"""Derive the ``body`` and ``response`` parts of a route schema.

Only JSON content is validated by the router; other media types (PDF uploads,
images, ...) produce no schema.  The request body schema is stripped of
``readOnly`` properties, every response schema of ``writeOnly`` ones, via
:mod:`~specroutes.compiler.schema_filter`.
"""

from __future__ import annotations

from typing import Any, Optional

from specroutes.compiler.schema_filter import filter_read_only, filter_write_only
from specroutes.models import CompilerConfig


def _json_schema(
    node: Optional[dict[str, Any]], config: CompilerConfig
) -> Optional[dict[str, Any]]:
    """Return the schema of the first JSON media type declared by *node*.

    ``None`` means *node* declares no JSON content at all; a JSON entry
    without a schema yields ``{}``.
    """
    if not isinstance(node, dict):
        return None
    content = node.get("content")
    if not isinstance(content, dict):
        return None
    for media_type in config.json_media_types:
        media = content.get(media_type)
        if media is None:
            continue
        if isinstance(media, dict):
            return media.get("schema") or {}
        return {}
    return None


def build_request_body(
    request_body: Optional[dict[str, Any]],
    config: Optional[CompilerConfig] = None,
    location: Optional[str] = None,
) -> dict[str, Any]:
    """Build the ``body`` part of a route schema.

    Args:
        request_body: The operation's ``requestBody`` object, possibly
            ``None``.
        config: Compiler options; defaults apply when omitted.
        location: Operation description used in error messages.

    Returns:
        ``{"body": schema}`` when JSON content is declared, else ``{}``.
    """
    config = config or CompilerConfig()
    schema = _json_schema(request_body, config)
    if schema is None:
        return {}
    return {
        "body": filter_read_only(
            schema,
            depth=config.filter_depth,
            strict=config.strict_schemas,
            location=f"{location} requestBody" if location else "requestBody",
        )
    }


def build_responses(
    responses: Optional[dict[Any, Any]],
    config: Optional[CompilerConfig] = None,
    location: Optional[str] = None,
) -> dict[str, Any]:
    """Build the ``response`` part of a route schema.

    Every entry of *responses* (``"200"``, ``"4xx"``, ``"default"``...) that
    declares JSON content contributes its filtered schema under the same key;
    the others are dropped.  Integer status codes (as produced by YAML) are
    keyed by their string form.

    Returns:
        ``{"response": {...}}`` when at least one entry has JSON content,
        else ``{}``.
    """
    config = config or CompilerConfig()
    if not responses:
        return {}

    collected: dict[str, Any] = {}
    for status, response in responses.items():
        schema = _json_schema(response, config)
        if schema is None:
            continue
        where = f"{location} response {status}" if location else f"response {status}"
        collected[str(status)] = filter_write_only(
            schema,
            depth=config.filter_depth,
            strict=config.strict_schemas,
            location=where,
        )
    return {"response": collected} if collected else {}
