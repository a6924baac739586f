"""Typer application and CLI entry point for specroutes.

The CLI is a thin shell around the compiler: it loads a document, resolves
configuration, calls into :mod:`specroutes.parser` and
:mod:`specroutes.compiler`, and renders the result or the error report.

Commands:

* ``specroutes resolve SPEC`` -- print the document with every ``$ref``
  inlined.
* ``specroutes compile SPEC --handlers MODULE`` -- print the compiled routes.
* ``specroutes check SPEC --handlers MODULE`` -- compile and only report
  success or failure (for CI and service start scripts).

Every :class:`~specroutes.exceptions.SpecroutesError` is rendered as its
multi-line report on stderr and mapped to the error's exit code.
"""

from __future__ import annotations

import logging
import signal
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import typer

from specroutes import __version__
from specroutes.exceptions import SpecroutesError
from specroutes.exit_codes import EXIT_GENERIC_FAILURE
from specroutes.models import CompilerConfig, RouteDescriptor
from specroutes.output import (
    OutputFormat,
    OutputManager,
    error,
    get_output,
    set_output,
    success,
)

app = typer.Typer(
    name="specroutes",
    help="Compile OpenAPI 3.0 documents into router-ready route descriptors.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_SPEC_ARGUMENT = typer.Argument(..., help="OpenAPI document: file path, URL, or '-' for stdin.")
_HANDLERS_OPTION = typer.Option(
    ...,
    "--handlers",
    "-H",
    help="Handler module, as 'package.module' or 'package.module:attribute'.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specroutes {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Config file (default ./specroutes.json)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Install the output manager and logging, and share options via ``ctx.obj``."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn a :class:`SpecroutesError` into its report and a clean exit code."""
    try:
        yield
    except SpecroutesError as exc:
        output = get_output()
        output.error(str(exc))
        report = exc.report()
        if report != str(exc):
            output.report(report)
        raise typer.Exit(code=exc.exit_code) from None


def _load_document(source: str) -> dict[str, Any]:
    from specroutes.parser import load_spec, validate_openapi_version

    document = load_spec(source)
    validate_openapi_version(document)
    return document


def _resolve_config(ctx: typer.Context, **overrides: Any) -> CompilerConfig:
    from specroutes.config import resolve_config

    obj = ctx.obj or {}
    return resolve_config(obj.get("config_path"), **overrides)


def _describe_handler(route: RouteDescriptor) -> str:
    handler = route.handler
    module = getattr(handler, "__module__", None)
    qualname = getattr(handler, "__qualname__", None)
    if module and qualname:
        return f"{module}.{qualname}"
    return repr(handler)


@app.command("resolve")
def resolve_command(spec: str = _SPEC_ARGUMENT) -> None:
    """Print the document with every component reference inlined.

    Example::

        specroutes resolve openapi.yaml > resolved.json
    """
    from specroutes.parser import resolve_references

    with _reported_errors():
        document = resolve_references(_load_document(spec))
    get_output().print_document(document)


@app.command("compile")
def compile_command(
    ctx: typer.Context,
    spec: str = _SPEC_ARGUMENT,
    handlers: str = _HANDLERS_OPTION,
    filter_depth: Optional[int] = typer.Option(
        None, "--filter-depth", min=1, help="Levels of readOnly/writeOnly filtering."
    ),
    recursive: bool = typer.Option(
        False, "--recursive", help="Filter readOnly/writeOnly at every depth."
    ),
    derive_required: Optional[bool] = typer.Option(
        None,
        "--derive-required/--no-derive-required",
        help="Emit 'required' arrays in parameter schemas.",
    ),
    lenient: bool = typer.Option(
        False, "--lenient", help="Pass schemas without properties through unfiltered."
    ),
) -> None:
    """Compile the document and print its routes.

    Example::

        specroutes compile openapi.yaml --handlers myservice.handlers
        specroutes --json compile openapi.yaml -H myservice.api:Handlers
    """
    from specroutes.compiler import compile_routes
    from specroutes.compiler.handlers import import_registry

    with _reported_errors():
        config = _resolve_config(
            ctx,
            filter_depth="all" if recursive else filter_depth,
            derive_required=derive_required,
            strict_schemas=False if lenient else None,
        )
        document = _load_document(spec)
        routes = compile_routes(document, import_registry(handlers), config)

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_document([
            {
                "method": route.method,
                "url": route.url,
                "path": route.path,
                "operationId": route.operation_id,
                "handler": _describe_handler(route),
                "schema": route.schema_,
            }
            for route in routes
        ])
        return

    rows = [
        [
            route.method,
            route.url,
            route.operation_id,
            _describe_handler(route),
            ", ".join(route.schema_) or "-",
        ]
        for route in routes
    ]
    output.print_table(
        ["Method", "URL", "Operation", "Handler", "Schema"],
        rows,
        title=f"Routes ({len(rows)})",
    )


@app.command("check")
def check_command(
    ctx: typer.Context,
    spec: str = _SPEC_ARGUMENT,
    handlers: str = _HANDLERS_OPTION,
) -> None:
    """Compile the document and report whether every route can be served.

    Exits non-zero with the full report when references are orphaned or
    cyclic, a schema is malformed, or a handler is missing.
    """
    from specroutes.compiler import compile_routes
    from specroutes.compiler.handlers import import_registry

    with _reported_errors():
        config = _resolve_config(ctx)
        routes = compile_routes(_load_document(spec), import_registry(handlers), config)
    success(f"OK: {len(routes)} route(s) compiled")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """Console-script entry point.

    :class:`~specroutes.exceptions.SpecroutesError` instances escaping a
    command exit with the error's ``exit_code``; any other exception prints
    its message and exits with :data:`EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except SpecroutesError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
