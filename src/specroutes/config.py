"""Compiler configuration with project-file, environment and CLI precedence.

Options are the fields of :class:`~specroutes.models.CompilerConfig`.  They
are resolved by :func:`resolve_config`, highest precedence first:

1. Explicit overrides (CLI flags, keyword arguments).
2. Environment variables (``SPECROUTES_FILTER_DEPTH``,
   ``SPECROUTES_STRICT_SCHEMAS``, ``SPECROUTES_DERIVE_REQUIRED``,
   ``SPECROUTES_JSON_MEDIA_TYPES``).
3. The project file, ``./specroutes.json`` (or an explicit path).
4. Model defaults.

Nothing is ever written back; configuration is read once, before compiling.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specroutes.exceptions import ConfigError
from specroutes.models import CompilerConfig

_PROJECT_CONFIG_FILENAME = "specroutes.json"
_ENV_PREFIX = "SPECROUTES_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_UNLIMITED_DEPTH = frozenset({"all", "none", "recursive", "unlimited"})


# --- Project-local config ---


def load_project_config(path: Optional[str | Path] = None) -> dict[str, Any]:
    """Load the project configuration file.

    Args:
        path: Explicit file path.  When ``None``, ``./specroutes.json`` is
            used if it exists.

    Returns:
        The parsed JSON object, or ``{}`` when no default file exists.

    Raises:
        ConfigError: If an explicit *path* does not exist, or the file holds
            invalid JSON or a non-object value.
    """
    if path is None:
        config_path = Path.cwd() / _PROJECT_CONFIG_FILENAME
        if not config_path.is_file():
            return {}
    else:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid config at {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {config_path}: expected a JSON object")
    return data


# --- Environment ---


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {raw!r}")


def _parse_depth(name: str, raw: str) -> Optional[int]:
    value = raw.strip().lower()
    if value in _UNLIMITED_DEPTH:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigError(
            f"Invalid depth for {name}: {raw!r} (expected a number or 'all')"
        ) from None


def load_env_config(environ: Optional[dict[str, str]] = None) -> dict[str, Any]:
    """Read ``SPECROUTES_*`` overrides from the environment.

    Only variables that are set contribute a key.

    Raises:
        ConfigError: If a variable holds an unparseable value.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}

    name = f"{_ENV_PREFIX}FILTER_DEPTH"
    if env.get(name):
        overrides["filter_depth"] = _parse_depth(name, env[name])

    for field in ("strict_schemas", "derive_required"):
        name = f"{_ENV_PREFIX}{field.upper()}"
        if env.get(name):
            overrides[field] = _parse_bool(name, env[name])

    name = f"{_ENV_PREFIX}JSON_MEDIA_TYPES"
    if env.get(name):
        overrides["json_media_types"] = [
            media.strip() for media in env[name].split(",") if media.strip()
        ]

    return overrides


# --- Precedence resolution ---


def resolve_config(
    config_path: Optional[str | Path] = None,
    environ: Optional[dict[str, str]] = None,
    **overrides: Any,
) -> CompilerConfig:
    """Resolve the effective :class:`~specroutes.models.CompilerConfig`.

    Args:
        config_path: Explicit project config file (default ``./specroutes.json``).
        environ: Environment mapping to read instead of ``os.environ``.
        **overrides: Highest-precedence values; ``None`` values are ignored
            except for ``filter_depth``, where callers pass the sentinel
            string ``"all"`` to request unlimited depth.

    Raises:
        ConfigError: If any layer holds invalid values.
    """
    merged: dict[str, Any] = {}
    merged.update(load_project_config(config_path))
    merged.update(load_env_config(environ))
    for key, value in overrides.items():
        if value is None:
            continue
        if key == "filter_depth" and isinstance(value, str):
            value = _parse_depth("filter_depth", value)
        merged[key] = value

    try:
        return CompilerConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
