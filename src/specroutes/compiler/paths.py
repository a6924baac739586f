"""Rewrite OpenAPI URL templates into router patterns.

OpenAPI writes path variables in braces (``/documents/{type}/{id}``); the
router expects a leading colon (``/documents/:type/:id``).  Literal text and
segment order are preserved.  Variable names are not validated: a malformed
template becomes a malformed routing pattern, and the router reports it.
"""

from __future__ import annotations

import re

_VARIABLE_RE = re.compile(r"\{([^{}]*)\}")


def transform_path(template: str) -> str:
    """Convert a brace-delimited URL template to the router's ``:name`` syntax.

    Example::

        >>> transform_path("/api/documents/{type}/{id}")
        '/api/documents/:type/:id'
        >>> transform_path("/health")
        '/health'
    """
    return _VARIABLE_RE.sub(r":\1", template)


def path_variables(template: str) -> list[str]:
    """Return the variable names of *template* in the order they appear.

    Example::

        >>> path_variables("/users/{user_id}/orders/{id}")
        ['user_id', 'id']
    """
    return _VARIABLE_RE.findall(template)
