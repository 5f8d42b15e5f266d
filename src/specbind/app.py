"""Typer application and CLI entry point for specbind.

The CLI is a thin shell around the library for use in CI and while writing
declarations:

* ``specbind documents`` -- list the configured Swagger documents.
* ``specbind parameters DOCUMENT`` -- list a document's reusable parameters.
* ``specbind check [FILE]`` -- validate a declarations file.
* ``specbind resolve PATH METHOD --value name=value ...`` -- resolve one
  declared operation into the request a test would send.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. :class:`~specbind.exceptions.SpecbindError` exits with
the error's ``exit_code``; anything else writes a crash log.

See Also:
    :mod:`specbind.config`: Project configuration resolution.
    :mod:`specbind.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import json
import logging
import sys
import tempfile
import traceback
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional

import typer

from specbind import __version__
from specbind.documents.registry import DocumentRegistry
from specbind.exceptions import InvalidUsageError, SpecbindError
from specbind.exit_codes import EXIT_GENERIC_FAILURE
from specbind.models import PathItem, ProjectConfig, RequestMetadata
from specbind.output import debug, error, get_output, info, success, warning


app = typer.Typer(
    name="specbind",
    help="Validate and resolve API test declarations against Swagger 2.0 documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specbind {__version__}")
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
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to specbind.json."
    ),
    header_style: Optional[str] = typer.Option(
        None, "--header-style", help="Header naming: http or wsgi."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~specbind.output.OutputManager` and stores
    the config overrides in ``ctx.obj`` for the sub-commands.
    """
    from specbind.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["header_style"] = header_style


@contextmanager
def _exit_on_error() -> Iterator[None]:
    """Report a :class:`SpecbindError` on stderr and exit with its code."""
    try:
        yield
    except SpecbindError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _load_config(ctx: typer.Context) -> ProjectConfig:
    from specbind.config import resolve_config

    obj = ctx.obj or {}
    return resolve_config(cli_config=obj.get("config"), cli_header_style=obj.get("header_style"))


def _load_declarations(
    file: Optional[str], config: ProjectConfig, registry: DocumentRegistry
) -> list[PathItem]:
    from specbind.declarations import load_declarations_file

    path = file or config.declarations
    if path is None:
        raise InvalidUsageError(
            "No declarations file given. Pass FILE or set \"declarations\" in specbind.json"
        )
    return load_declarations_file(path, registry)


def _parse_values(pairs: list[str]) -> dict[str, Any]:
    """Turn ``name=value`` pairs into a dict, decoding JSON values where possible."""
    values: dict[str, Any] = {}
    for pair in pairs:
        name, sep, raw = pair.partition("=")
        if not sep or not name:
            raise InvalidUsageError(f"Expected NAME=VALUE, got '{pair}'")
        try:
            values[name] = json.loads(raw)
        except json.JSONDecodeError:
            values[name] = raw
    return values


@app.command("documents")
def documents_command(ctx: typer.Context) -> None:
    """List the configured Swagger documents.

    Example::

        specbind documents
        specbind --json documents
    """
    from specbind.config import build_registry

    with _exit_on_error():
        registry = build_registry(_load_config(ctx))

    rows = [
        [
            doc.name,
            doc.base_path or "-",
            ", ".join(doc.consumes) or "-",
            ", ".join(doc.produces) or "-",
            str(len(doc.parameters)),
        ]
        for doc in registry
    ]
    get_output().print_table(
        ["Name", "Base Path", "Consumes", "Produces", "Parameters"],
        rows,
        title=f"Documents ({len(rows)})",
    )


@app.command("parameters")
def parameters_command(
    ctx: typer.Context,
    document: str = typer.Argument(..., help="Document name."),
) -> None:
    """List the reusable parameter definitions of DOCUMENT.

    Each definition is validated with the same rules as a declared
    parameter; the first invalid one stops the listing.
    """
    from specbind.config import build_registry
    from specbind.declarations import normalize_parameter

    rows: list[list[str]] = []
    with _exit_on_error():
        doc = build_registry(_load_config(ctx)).get(document)
        for key in doc.parameters:
            param = normalize_parameter(doc.parameter_definition(key))
            rows.append([
                f"#/parameters/{key}",
                param.name,
                param.location.value,
                param.type.value if param.type is not None else "schema",
                "Yes" if param.required else "",
            ])

    get_output().print_table(
        ["Ref", "Name", "In", "Type", "Required"],
        rows,
        title=f"{document} -- Parameters ({len(rows)})",
    )


@app.command("check")
def check_command(
    ctx: typer.Context,
    file: Optional[str] = typer.Argument(None, help="Declarations file (YAML or JSON)."),
) -> None:
    """Validate a declarations file against the configured documents.

    Every ``$ref`` parameter is resolved against its document, so a dangling
    reference fails here rather than when an example runs. Exits with the
    error's code on the first problem (3 for an invalid declaration, 4 for an
    unresolved reference).
    """
    from specbind.config import build_registry
    from specbind.resolver import resolve_parameters

    rows: list[list[str]] = []
    with _exit_on_error():
        config = _load_config(ctx)
        registry = build_registry(config)
        info(f"Checking declarations against {len(registry)} document(s)")
        items = _load_declarations(file, config, registry)

        for item in items:
            if not item.operations:
                warning(f"Path {item.path} declares no operations")
                count = len(resolve_parameters(RequestMetadata(path_item=item), registry))
                rows.append([item.path, "-", str(count), "0"])
            for operation in item.operations.values():
                metadata = RequestMetadata(path_item=item, operation=operation)
                params = resolve_parameters(metadata, registry)
                debug(
                    f"{operation.method.value.upper()} {item.path}: "
                    + (", ".join(f"{p.location.value}:{p.name}" for p in params) or "no parameters")
                )
                rows.append([
                    item.path,
                    operation.method.value.upper(),
                    str(len(params)),
                    str(len(operation.responses)),
                ])

    get_output().print_table(["Path", "Method", "Parameters", "Responses"], rows, title="Declarations")
    success(f"{len(items)} path(s) declared without errors.")


@app.command("resolve")
def resolve_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Declared path template, e.g. /pets/{petId}."),
    method: str = typer.Argument(..., help="HTTP method."),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Declarations file."),
    values: Optional[list[str]] = typer.Option(
        None, "--value", "-V", help="Example value as NAME=VALUE (JSON-decoded). Repeatable."
    ),
) -> None:
    """Resolve one declared operation into the request a test would send.

    Example::

        specbind resolve /pets/{petId} get -V petId=7
    """
    from specbind.config import build_registry
    from specbind.declarations import select_metadata
    from specbind.resolver import resolve_request

    with _exit_on_error():
        config = _load_config(ctx)
        registry = build_registry(config)
        items = _load_declarations(file, config, registry)
        metadata = select_metadata(items, path, method)
        debug(f"Resolving {method.upper()} {path} against document '{metadata.document}'")
        request = resolve_request(
            metadata, _parse_values(values or []), registry, config.header_style
        )

    data = request.model_dump()
    data["url"] = request.url()
    get_output().print_json(data)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to the temp directory and return the log file path."""
    logs_dir = Path(tempfile.gettempdir()) / "specbind"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specbind`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        if isinstance(exc, SpecbindError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
