"""Inspect commands -- examine OpenAPI document details.

Provides the ``specwright inspect`` sub-command group with read-only
commands for viewing the contents of a document: general info, paths and
their effective security, registered components, and security schemes. All
sub-commands load the given source and present the data in table or
structured output format.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from specwright.assembly.document import OpenAPIDocument
from specwright.assembly.references import ComponentCollection
from specwright.assembly.security import effective_security
from specwright.commands.document import fail, load_source
from specwright.config import resolve_config
from specwright.exceptions import SpecwrightError
from specwright.models import HTTP_METHODS
from specwright.output import format_response, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)


def _load(source: str) -> OpenAPIDocument:
    try:
        return load_source(source, resolve_config())
    except SpecwrightError as exc:
        fail(exc)


def describe_security(requirements: Optional[list[dict[str, list[str]]]]) -> str:
    """Summarise a requirement list: ``|`` separates alternatives, ``+`` joins schemes.

    ``None`` (nothing declared) renders as ``-`` and an empty list as ``none``.
    """
    if requirements is None:
        return "-"
    if not requirements:
        return "none"
    alternatives = []
    for requirement in requirements:
        schemes = [
            f"{name}({','.join(scopes)})" if scopes else name
            for name, scopes in requirement.items()
        ]
        alternatives.append(" + ".join(schemes) or "anonymous")
    return " | ".join(alternatives)


@inspect_app.command("info")
def inspect_info(
    source: str = typer.Argument(..., help="Document path, URL, or '-' for stdin."),
) -> None:
    """Show document info (title, version, dialect, counts).

    Example::

        specwright inspect info openapi.yaml
    """
    doc = _load(source)
    raw = doc.raw
    info_obj = doc.info

    data: dict[str, Any] = {
        "title": info_obj.get("title", ""),
        "version": info_obj.get("version", ""),
        "description": info_obj.get("description") or "-",
        "dialect": doc.get_default_dialect(),
        "servers": [s.get("url", "") for s in raw.get("servers") or []],
        "paths": len(raw.get("paths") or {}),
        "webhooks": len(doc.get_webhooks()),
        "components": sum(
            len(entries) for entries in doc.components.components.values()
            if isinstance(entries, dict)
        ),
        "tags": [t.get("name", "") for t in doc.get_tags()],
        "security": describe_security(doc.global_security),
    }

    contact = info_obj.get("contact") or {}
    if contact.get("email"):
        data["contact"] = contact["email"]
    license_obj = info_obj.get("license") or {}
    if license_obj.get("name"):
        data["license"] = license_obj["name"]

    format_response(data)


@inspect_app.command("paths")
def inspect_paths(
    source: str = typer.Argument(..., help="Document path, URL, or '-' for stdin."),
) -> None:
    """List every operation with its effective security.

    The Security column shows the operation's own requirements, or the
    global ones when the operation declares none. ``none`` means the
    operation explicitly opts out of authentication.

    Example::

        specwright inspect paths openapi.yaml
    """
    doc = _load(source)

    headers = ["Method", "Path", "Operation ID", "Summary", "Security"]
    rows: list[list[str]] = []
    for template, item in (doc.raw.get("paths") or {}).items():
        if not isinstance(item, dict):
            continue
        for method in HTTP_METHODS:
            operation = item.get(method)
            if not isinstance(operation, dict):
                continue
            rows.append([
                method.upper(),
                template,
                operation.get("operationId") or "-",
                operation.get("summary") or "-",
                describe_security(effective_security(doc.global_security, operation)),
            ])

    if not rows:
        info("No operations defined in this document.")
        return

    title = doc.info.get("title") or "API"
    get_output().print_table(headers, rows, title=f"{title} -- Paths ({len(rows)})")


@inspect_app.command("components")
def inspect_components(
    source: str = typer.Argument(..., help="Document path, URL, or '-' for stdin."),
    collection: Optional[ComponentCollection] = typer.Option(
        None, "--collection", "-c", help="Only list this collection."
    ),
) -> None:
    """List registered components and the reference that reaches each one.

    Example::

        specwright inspect components openapi.yaml --collection schemas
    """
    doc = _load(source)
    registry = doc.components

    collections = [collection] if collection else list(ComponentCollection)
    headers = ["Collection", "Name", "Reference"]
    rows: list[list[str]] = []
    for coll in collections:
        for name in registry.names(coll):
            rows.append([coll.value, name, f"#/components/{coll.value}/{name}"])

    if not rows:
        info("No components defined in this document.")
        return

    get_output().print_table(headers, rows, title=f"Components ({len(rows)})")


@inspect_app.command("security")
def inspect_security(
    source: str = typer.Argument(..., help="Document path, URL, or '-' for stdin."),
) -> None:
    """Show security schemes and the global requirements.

    Example::

        specwright inspect security openapi.yaml
    """
    doc = _load(source)
    registry = doc.components

    names = registry.names(ComponentCollection.SECURITY_SCHEMES)
    if names:
        headers = ["Name", "Type", "Scheme", "Location", "Description"]
        rows: list[list[str]] = []
        for name in names:
            scheme = registry.get(ComponentCollection.SECURITY_SCHEMES, name) or {}
            rows.append([
                name,
                scheme.get("type", "-"),
                scheme.get("scheme") or "-",
                scheme.get("in") or "-",
                (scheme.get("description") or "-")[:60],
            ])
        get_output().print_table(headers, rows, title="Security Schemes")
    else:
        info("No security schemes defined.")

    info(f"Global security: {describe_security(doc.global_security)}")
