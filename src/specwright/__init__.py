"""specwright -- Assemble OpenAPI 3.1 documents programmatically.

This package builds an OpenAPI 3.1 document incrementally from Python code:
API metadata, paths and webhooks, reusable components reached through
``#/components/...`` references, layered security requirements, JSON Schema
dialect metadata and ``x-`` vendor extensions. The assembled document renders
deterministically as JSON or YAML.

Typical usage::

    from specwright import OpenAPIDocument, OperationBuilder, PathBuilder

    doc = OpenAPIDocument("Users API", "1.0.0")
    user = doc.add_schema("User", {"type": "object"})
    doc.add_path(
        PathBuilder("/users/{userId}")
        .add_parameter("userId", "path")
        .add_operation(OperationBuilder("get").add_response("200", "OK", schema=user))
    )
    doc.save("openapi.yaml")

A small CLI (``specwright render|merge|resolve|inspect``) works on existing
documents.

Modules:
    assembly: The document assembler and its collaborators.
    builders: Fluent path and operation builders.
    serializer: JSON/YAML rendering.
    loader: Reading documents from files, URLs, or stdin.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    app: Typer application and CLI entry point.
"""

__version__ = "0.1.0"

from specwright.assembly.dialect import (  # noqa: E402
    DEFAULT_DIALECT,
    DRAFT_04,
    DRAFT_06,
    DRAFT_07,
    DRAFT_2019_09,
    DRAFT_2020_12,
)
from specwright.assembly.document import OpenAPIDocument  # noqa: E402
from specwright.builders import OperationBuilder, PathBuilder  # noqa: E402

__all__ = [
    "DEFAULT_DIALECT",
    "DRAFT_04",
    "DRAFT_06",
    "DRAFT_07",
    "DRAFT_2019_09",
    "DRAFT_2020_12",
    "OpenAPIDocument",
    "OperationBuilder",
    "PathBuilder",
    "__version__",
]
