"""Fluent builders for path items and operations.

These are thin field setters. Every method stores a value and returns
``self``. The builders hand finished fragments to
:meth:`~specwright.assembly.document.OpenAPIDocument.merge_path` (or
``merge_webhook``), which owns all merge decisions.

Example::

    path = (
        PathBuilder("/users/{userId}")
        .add_parameter("userId", "path", required=True, description="The user ID")
        .add_operation(
            OperationBuilder("get")
            .set_operation_id("getUser")
            .add_response("200", "User found", schema=user_ref)
        )
    )
    doc.add_path(path)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from specwright.assembly.extensions import ExtensionMap
from specwright.assembly.security import any_of
from specwright.exceptions import InvalidUsageError
from specwright.models import ExternalDocs, HTTPMethod, ParameterLocation, Server

logger = logging.getLogger(__name__)


def _parameter(
    name: str,
    location: Union[ParameterLocation, str],
    required: bool,
    description: Optional[str],
    schema: Optional[Mapping[str, Any]],
) -> dict[str, Any]:
    try:
        location = ParameterLocation(location).value
    except ValueError:
        raise InvalidUsageError(f"Invalid parameter location: {location!r}") from None
    # Path parameters are always required.
    param: dict[str, Any] = {
        "name": name,
        "in": location,
        "required": True if location == "path" else required,
    }
    if description is not None:
        param["description"] = description
    if schema is not None:
        param["schema"] = dict(schema)
    return param


def _servers(servers: Iterable[Union[Server, Mapping[str, Any]]]) -> list[dict[str, Any]]:
    return [
        (s if isinstance(s, Server) else Server.model_validate(dict(s))).as_fragment()
        for s in servers
    ]


class OperationBuilder:
    """Builds a single *Operation Object* for one HTTP method.

    Args:
        method: HTTP method token (``"get"``, ``"post"``, ...), case-insensitive.

    Raises:
        InvalidUsageError: If *method* is not an OpenAPI path-item method.
    """

    def __init__(self, method: Union[HTTPMethod, str]) -> None:
        try:
            self.method = HTTPMethod(str(getattr(method, "value", method)).lower()).value
        except ValueError:
            raise InvalidUsageError(f"Unsupported HTTP method: {method!r}") from None
        self.operation: dict[str, Any] = {}
        self.extensions = ExtensionMap()

    def set_operation_id(self, operation_id: str) -> "OperationBuilder":
        self.operation["operationId"] = operation_id
        return self

    def set_summary(self, summary: str) -> "OperationBuilder":
        self.operation["summary"] = summary
        return self

    def set_description(self, description: str) -> "OperationBuilder":
        self.operation["description"] = description
        return self

    def set_tags(self, tags: Iterable[str]) -> "OperationBuilder":
        self.operation["tags"] = list(tags)
        return self

    def set_external_docs(self, url: str, description: Optional[str] = None) -> "OperationBuilder":
        self.operation["externalDocs"] = ExternalDocs(url=url, description=description).as_fragment()
        return self

    def set_security(
        self, requirements: Iterable[Mapping[str, Iterable[str]]]
    ) -> "OperationBuilder":
        """Set the operation's security requirements.

        An empty iterable writes ``security: []``, which opts the operation
        out of the document's global requirements. Never calling this leaves
        the key absent, so the global requirements apply.
        """
        self.operation["security"] = any_of(*requirements)
        return self

    def add_parameter(
        self,
        name: str,
        location: Union[ParameterLocation, str],
        required: bool = False,
        description: Optional[str] = None,
        schema: Optional[Mapping[str, Any]] = None,
    ) -> "OperationBuilder":
        self.operation.setdefault("parameters", []).append(
            _parameter(name, location, required, description, schema)
        )
        return self

    def add_parameter_ref(self, reference: Mapping[str, str]) -> "OperationBuilder":
        self.operation.setdefault("parameters", []).append(dict(reference))
        return self

    def set_request_body(
        self,
        content: Mapping[str, Any],
        required: bool = False,
        description: Optional[str] = None,
    ) -> "OperationBuilder":
        """Set the request body from a media-type map (``{"application/json": {"schema": ...}}``)."""
        body: dict[str, Any] = {}
        if description is not None:
            body["description"] = description
        body["content"] = dict(content)
        body["required"] = required
        self.operation["requestBody"] = body
        return self

    def add_response(
        self,
        status: Union[int, str],
        description: str,
        schema: Optional[Mapping[str, Any]] = None,
        media_type: str = "application/json",
    ) -> "OperationBuilder":
        response: dict[str, Any] = {"description": description}
        if schema is not None:
            response["content"] = {media_type: {"schema": dict(schema)}}
        self.operation.setdefault("responses", {})[str(status)] = response
        return self

    def set_responses(self, responses: Mapping[Union[int, str], Any]) -> "OperationBuilder":
        self.operation["responses"] = {str(k): v for k, v in responses.items()}
        return self

    def set_callbacks(self, callbacks: Mapping[str, Any]) -> "OperationBuilder":
        self.operation["callbacks"] = dict(callbacks)
        return self

    def set_deprecated(self, deprecated: bool = True) -> "OperationBuilder":
        self.operation["deprecated"] = deprecated
        return self

    def set_servers(self, servers: Iterable[Union[Server, Mapping[str, Any]]]) -> "OperationBuilder":
        self.operation["servers"] = _servers(servers)
        return self

    def add_extension(self, name: str, value: Any) -> "OperationBuilder":
        """Attach an ``x-`` extension, rendered into the operation by :meth:`build`."""
        self.extensions.set(name, value)
        return self

    def build(self) -> dict[str, Any]:
        """Return the operation dict with extensions merged in."""
        return self.extensions.merge_into(self.operation)


class PathBuilder:
    """Builds a *Path Item Object* for one URL template.

    Args:
        template: The path template, e.g. ``"/users/{userId}"``.
    """

    def __init__(self, template: str) -> None:
        self.path = template
        self.path_item: dict[str, Any] = {}
        self.extensions = ExtensionMap()

    def set_summary(self, summary: str) -> "PathBuilder":
        self.path_item["summary"] = summary
        return self

    def set_description(self, description: str) -> "PathBuilder":
        self.path_item["description"] = description
        return self

    def add_parameter(
        self,
        name: str,
        location: Union[ParameterLocation, str],
        required: bool = False,
        description: Optional[str] = None,
        schema: Optional[Mapping[str, Any]] = None,
    ) -> "PathBuilder":
        self.path_item.setdefault("parameters", []).append(
            _parameter(name, location, required, description, schema)
        )
        return self

    def set_servers(self, servers: Iterable[Union[Server, Mapping[str, Any]]]) -> "PathBuilder":
        self.path_item["servers"] = _servers(servers)
        return self

    def add_operation(self, builder: OperationBuilder) -> "PathBuilder":
        """Attach an operation under its method key, replacing any previous one."""
        if builder.method in self.path_item:
            logger.warning(
                "Operation %s already exists for path %s, overwriting it",
                builder.method.upper(),
                self.path,
            )
        self.path_item[builder.method] = builder.build()
        return self

    def add_extension(self, name: str, value: Any) -> "PathBuilder":
        self.extensions.set(name, value)
        return self

    def build(self) -> dict[str, Any]:
        """Return the path item dict with extensions merged in."""
        return self.extensions.merge_into(self.path_item)
