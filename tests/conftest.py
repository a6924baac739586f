"""Shared test fixtures for specroutes.

Provides the example OpenAPI documents, matching handler registries, an
isolated environment for configuration tests, and output/CLI helpers.
These fixtures are discovered by pytest and available to every test module.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

import pytest

from specroutes.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr when it is created; a
    CliRunner swaps those streams per invocation, so a stale manager would
    write to closed files.  The CLI callback also installs a root logging
    handler bound to the runner's stderr, which is removed for the same reason.
    """
    yield
    reset_output()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@pytest.fixture
def documents_raw() -> dict[str, Any]:
    """The PDF documents API: one path, three methods, shared parameters."""
    with open(FIXTURES_DIR / "documents_api.json") as f:
        return json.load(f)


@pytest.fixture
def users_raw() -> dict[str, Any]:
    """The users API: readOnly/writeOnly fields, array responses, cookies."""
    with open(FIXTURES_DIR / "users_api.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Handler registries
# ---------------------------------------------------------------------------


def _make_handler(name: str) -> Callable[..., Any]:
    def handler(*args: Any, **kwargs: Any) -> str:
        return name

    handler.__name__ = name
    handler.__qualname__ = name
    return handler


@pytest.fixture
def documents_handlers() -> dict[str, Callable[..., Any]]:
    """Registry covering every operation of the documents API."""
    return {
        name: _make_handler(name)
        for name in ("getDocument", "addDocument", "deleteDocument")
    }


@pytest.fixture
def users_handlers() -> dict[str, Callable[..., Any]]:
    """Registry covering every operation of the users API."""
    return {
        name: _make_handler(name)
        for name in ("listUsers", "createUser", "getUser", "deleteUser")
    }


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty working directory with no SPECROUTES_* variables set.

    Returns:
        The tmp_path root, for writing a ``specroutes.json`` when needed.
    """
    for var in (
        "SPECROUTES_FILTER_DEPTH",
        "SPECROUTES_STRICT_SCHEMAS",
        "SPECROUTES_DERIVE_REQUIRED",
        "SPECROUTES_JSON_MEDIA_TYPES",
    ):
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
