"""Canonical Pydantic models shared across all specwright modules.

The document tree itself is kept as plain, insertion-ordered dictionaries so
that it can be serialised verbatim. The models here validate the *structured*
inputs a caller hands to the assembler before they are dumped into that tree.
They fall into two groups:

**Document input models** -- validated, then dumped with
``by_alias=True, exclude_none=True`` so the tree never holds ``None``:
    :class:`Contact`, :class:`License`, :class:`ServerVariable`,
    :class:`Server`, :class:`ExternalDocs`, :class:`Tag`, :class:`OAuthFlow`,
    :class:`OAuthFlows`, and :class:`SecurityScheme`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`SerializationConfig`, and
    :class:`GlobalConfig`.

Document input models use ``extra="allow"`` so that vendor extensions
(``x-...`` keys) and newer OpenAPI fields are preserved in ``model_extra``
and written back out unchanged.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Enumerations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operation keys on an OpenAPI *Path Item Object*."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


HTTP_METHODS: tuple[str, ...] = tuple(m.value for m in HTTPMethod)


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


# --- Document input models ---


class Fragment(BaseModel):
    """Base class for models that are dumped into the document tree."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def as_fragment(self) -> dict[str, Any]:
        """Return the OpenAPI-shaped dict for this model (aliases, no ``None``)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Contact(Fragment):
    """Contact information for the exposed API (*Contact Object*)."""

    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None


class License(Fragment):
    """License information for the exposed API (*License Object*).

    OpenAPI 3.1 allows either ``identifier`` (an SPDX expression) or ``url``;
    both are accepted here without cross-validation.
    """

    name: str
    identifier: Optional[str] = None
    url: Optional[str] = None


class ServerVariable(Fragment):
    """A substitution variable for a server URL template."""

    default: str
    enum: Optional[list[str]] = None
    description: Optional[str] = None


class Server(Fragment):
    """A server entry for the document's ``servers`` array."""

    url: str
    description: Optional[str] = None
    variables: Optional[dict[str, ServerVariable]] = None


class ExternalDocs(Fragment):
    """Pointer to external documentation (*External Documentation Object*)."""

    url: str
    description: Optional[str] = None


class Tag(Fragment):
    """A tag declared in the document's ``tags`` list, unique by name."""

    name: str
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = Field(default=None, alias="externalDocs")


class OAuthFlow(Fragment):
    """Configuration for a single OAuth2 flow.

    Which URLs are mandatory depends on the flow kind; that check lives on
    :class:`OAuthFlows` because a flow object does not know its own kind.
    """

    authorization_url: Optional[str] = Field(default=None, alias="authorizationUrl")
    token_url: Optional[str] = Field(default=None, alias="tokenUrl")
    refresh_url: Optional[str] = Field(default=None, alias="refreshUrl")
    scopes: dict[str, str]


_FLOW_REQUIREMENTS: dict[str, tuple[str, ...]] = {
    "implicit": ("authorization_url",),
    "password": ("token_url",),
    "client_credentials": ("token_url",),
    "authorization_code": ("authorization_url", "token_url"),
}


class OAuthFlows(Fragment):
    """The set of OAuth2 flows supported by an ``oauth2`` security scheme.

    At least one flow must be present, and each present flow must carry the
    URLs its kind requires:

    * ``implicit`` -- ``authorizationUrl``
    * ``password`` / ``clientCredentials`` -- ``tokenUrl``
    * ``authorizationCode`` -- ``authorizationUrl`` and ``tokenUrl``
    """

    implicit: Optional[OAuthFlow] = None
    password: Optional[OAuthFlow] = None
    client_credentials: Optional[OAuthFlow] = Field(default=None, alias="clientCredentials")
    authorization_code: Optional[OAuthFlow] = Field(default=None, alias="authorizationCode")

    @model_validator(mode="after")
    def _check_flows(self) -> "OAuthFlows":
        present = [kind for kind in _FLOW_REQUIREMENTS if getattr(self, kind) is not None]
        if not present:
            raise ValueError(
                "oauth2 flows must define at least one of: implicit, password, "
                "clientCredentials, authorizationCode"
            )
        for kind in present:
            flow = getattr(self, kind)
            for attr in _FLOW_REQUIREMENTS[kind]:
                if getattr(flow, attr) is None:
                    alias = OAuthFlow.model_fields[attr].alias
                    raise ValueError(f"oauth2 flow '{kind}' requires '{alias}'")
        return self


class SecurityScheme(Fragment):
    """An OpenAPI *Security Scheme Object*.

    The ``type`` field discriminates between ``apiKey``, ``http``,
    ``mutualTLS``, ``oauth2`` and ``openIdConnect``. Only the fields relevant
    to the scheme type need to be set; a validator rejects schemes missing
    their mandatory fields.
    """

    type: Literal["apiKey", "http", "mutualTLS", "oauth2", "openIdConnect"]
    description: Optional[str] = None
    # apiKey
    name: Optional[str] = None
    location: Optional[Literal["query", "header", "cookie"]] = Field(default=None, alias="in")
    # http
    scheme: Optional[str] = None
    bearer_format: Optional[str] = Field(default=None, alias="bearerFormat")
    # oauth2
    flows: Optional[OAuthFlows] = None
    # openIdConnect
    open_id_connect_url: Optional[str] = Field(default=None, alias="openIdConnectUrl")

    @model_validator(mode="after")
    def _check_type_fields(self) -> "SecurityScheme":
        if self.type == "apiKey" and (self.name is None or self.location is None):
            raise ValueError("apiKey schemes require 'name' and 'in'")
        if self.type == "http" and not self.scheme:
            raise ValueError("http schemes require 'scheme'")
        if self.type == "oauth2" and self.flows is None:
            raise ValueError("oauth2 schemes require 'flows'")
        if self.type == "openIdConnect" and not self.open_id_connect_url:
            raise ValueError("openIdConnect schemes require 'openIdConnectUrl'")
        return self


# --- Configuration models ---


class OutputConfig(BaseModel):
    """Default diagnostic/output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class SerializationConfig(BaseModel):
    """How rendered documents are written by the CLI."""

    default_format: Literal["json", "yaml"] = Field(
        default="yaml", description="Encoding used when no --format flag is given"
    )
    json_indent: int = Field(default=2, description="Indent width for JSON output")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specwright/config.json``.

    Loaded and saved by :func:`~specwright.config.load_global_config` and
    :func:`~specwright.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specwright.config.resolve_config`
    for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    serialization: SerializationConfig = Field(default_factory=SerializationConfig)
    default_dialect: Optional[str] = Field(
        default=None,
        description="Dialect applied by the CLI to documents that declare none",
    )
