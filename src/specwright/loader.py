"""Load existing OpenAPI documents from a URL, local file, or stdin.

This module handles all I/O for reading documents that are later rehydrated
with :meth:`~specwright.assembly.document.OpenAPIDocument.from_dict` (for
instance by the ``render`` and ``merge`` CLI commands). It supports both JSON
and YAML with automatic format detection, and checks that the document
declares an OpenAPI 3.x version.

The public functions are:

* :func:`load_document` -- Load and parse a document from any supported source.
* :func:`parse_content` -- Parse already-read JSON or YAML text.
* :func:`validate_openapi_version` -- Check and return the ``openapi`` version
  string, rejecting Swagger 2.x and unsupported versions.

Only the document itself is fetched. ``$ref`` values pointing at other files
or URLs are kept verbatim and never dereferenced.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specwright.exceptions import DocumentLoadError

logger = logging.getLogger(__name__)


def load_document(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        DocumentLoadError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin, trying JSON then YAML."""
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError("No input received from stdin")

    return parse_content(content, hint="")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from URL. Supports JSON and YAML responses.

    Args:
        url: The HTTP(S) URL to fetch.

    Returns:
        The parsed document dictionary.

    Raises:
        DocumentLoadError: If the URL cannot be fetched or content cannot be parsed.
    """
    logger.debug("Fetching document from %s", url)
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentLoadError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentLoadError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Supports .json, .yaml, and .yml extensions. Falls back to content-based
    detection if the extension is not recognized.

    Raises:
        DocumentLoadError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentLoadError(f"Document not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read document {path}: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError(f"Document is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return parse_content(content, hint=hint)


def parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        DocumentLoadError: If the content cannot be parsed as either format,
            or does not contain a mapping at the top level.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise DocumentLoadError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        return _require_mapping(result)

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise DocumentLoadError(msg)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise DocumentLoadError(f"Document must be a JSON/YAML object (got {kind})")
    return result


def validate_openapi_version(document: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Documents built by specwright declare 3.1.0, but any 3.x document can be
    loaded. Swagger 2.x and other versions are rejected.

    Args:
        document: The parsed document dictionary.

    Returns:
        The OpenAPI version string (e.g., '3.0.3', '3.1.0').

    Raises:
        DocumentLoadError: If the version is missing, unsupported, or indicates Swagger 2.x.
    """
    if "swagger" in document:
        swagger_ver = str(document["swagger"])
        raise DocumentLoadError(
            f"Swagger {swagger_ver} is not supported. "
            "Only OpenAPI 3.x documents can be loaded. "
            "Consider converting with https://converter.swagger.io"
        )

    openapi_version = document.get("openapi")
    if openapi_version is None:
        raise DocumentLoadError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(openapi_version)
    if not version_str.startswith("3."):
        raise DocumentLoadError(
            f"Unsupported OpenAPI version: {version_str}. "
            "Only OpenAPI 3.x documents can be loaded."
        )
    if not version_str.startswith("3.1."):
        logger.warning(
            "Document declares OpenAPI %s; it will be re-rendered as 3.1.0", version_str
        )
    return version_str
