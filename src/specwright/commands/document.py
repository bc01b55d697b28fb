"""Document commands -- render, merge and resolve OpenAPI documents.

Each command loads its inputs through :mod:`specwright.loader`, rehydrates
them as :class:`~specwright.assembly.document.OpenAPIDocument` instances and
writes the result to stdout or to a file. Rendered documents always declare
OpenAPI 3.1.0.

Example::

    specwright render api.json --format yaml
    specwright merge base.yaml users.yaml orders.yaml -o merged.yaml
    specwright resolve api.yaml '#/components/schemas/User'
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional

import typer

from specwright import serializer
from specwright.assembly.dialect import DEFAULT_DIALECT
from specwright.assembly.document import OpenAPIDocument
from specwright.config import resolve_config
from specwright.exceptions import NotFoundError, SpecwrightError
from specwright.loader import load_document, validate_openapi_version
from specwright.models import GlobalConfig
from specwright.output import debug, error, print_document, success


def fail(exc: SpecwrightError) -> NoReturn:
    """Report *exc* on stderr and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def load_source(source: str, config: GlobalConfig) -> OpenAPIDocument:
    """Load *source* and rehydrate it as a document.

    Documents that declare no ``jsonSchemaDialect`` get the configured
    default dialect, or 2020-12 when none is configured.

    Raises:
        DocumentLoadError: If the source cannot be read, parsed, or is not
            an OpenAPI 3.x document.
    """
    debug(f"Loading {source}")
    raw = load_document(source)
    validate_openapi_version(raw)
    return OpenAPIDocument.from_dict(raw, default_dialect=config.default_dialect or DEFAULT_DIALECT)


def _config(ctx: typer.Context, fmt: Optional[str] = None) -> GlobalConfig:
    output_format = (ctx.obj or {}).get("output_format")
    return resolve_config(cli_format=fmt, cli_output_format=output_format)


def _emit(
    value: Any,
    config: GlobalConfig,
    fmt: Optional[str],
    output_file: Optional[str],
) -> None:
    """Write *value* to *output_file*, or print it to stdout."""
    indent = config.serialization.json_indent
    if output_file:
        # --format is already validated and lowercased into the config.
        if fmt:
            target_fmt = config.serialization.default_format
        else:
            target_fmt = serializer.format_for_path(
                output_file, config.serialization.default_format
            )
        path = serializer.write_document(value, output_file, target_fmt, indent=indent)
        success(f"Wrote {path}")
        return
    target_fmt = config.serialization.default_format
    print_document(serializer.render(value, target_fmt, indent=indent), target_fmt)


def render_command(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Document path, URL, or '-' for stdin."),
    fmt: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output encoding: json or yaml."
    ),
    output_file: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write to this file instead of stdout."
    ),
) -> None:
    """Load a document and re-render it as OpenAPI 3.1.

    Key order is preserved. Without ``--format`` the encoding follows the
    output file's extension, then ``SPECWRIGHT_FORMAT``, then config.
    """
    try:
        config = _config(ctx, fmt)
        doc = load_source(source, config)
        _emit(doc.to_dict(), config, fmt, output_file)
    except SpecwrightError as exc:
        fail(exc)


def merge_command(
    ctx: typer.Context,
    base: str = typer.Argument(..., help="Base document."),
    overlays: list[str] = typer.Argument(..., help="Documents merged over the base, in order."),
    fmt: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output encoding: json or yaml."
    ),
    output_file: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write to this file instead of stdout."
    ),
) -> None:
    """Merge overlay documents into a base document.

    Paths and webhooks from later documents replace earlier ones wholesale
    (a warning lists dropped operations). Components are overwritten, the
    first declaration of a tag wins, and global security requirements are
    appended as alternatives.
    """
    try:
        config = _config(ctx, fmt)
        doc = load_source(base, config)
        for overlay in overlays:
            debug(f"Merging {overlay}")
            doc.merge(load_source(overlay, config))
        _emit(doc.to_dict(), config, fmt, output_file)
    except SpecwrightError as exc:
        fail(exc)


def resolve_command(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Document path, URL, or '-' for stdin."),
    ref: str = typer.Argument(..., help="Reference such as '#/components/schemas/User'."),
    fmt: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output encoding: json or yaml."
    ),
) -> None:
    """Print the component a ``#/components/...`` reference points to.

    Exits with code 4 when the reference does not resolve.
    """
    try:
        config = _config(ctx, fmt)
        doc = load_source(source, config)
        fragment = doc.resolve(ref)
        if fragment is None:
            raise NotFoundError(f"Reference not found: {ref}")
        _emit(fragment, config, fmt, None)
    except SpecwrightError as exc:
        fail(exc)

