"""Keyed storage for the reusable objects under ``components``.

:class:`ComponentRegistry` wraps the document's ``components`` dict (it does
not copy it), so every registration is immediately visible in the document
tree. Sub-collections such as ``components.schemas`` are created lazily on
first use.

Registering under a name that already exists overwrites the previous entry
without complaint, which lets callers rebuild a document idempotently.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from specwright.assembly.references import (
    ComponentCollection,
    make_reference,
    resolve_reference,
)
from specwright.exceptions import InvalidSchemeError
from specwright.models import OAuthFlows, SecurityScheme

logger = logging.getLogger(__name__)

CollectionName = Union[ComponentCollection, str]


def _collection_key(collection: CollectionName) -> str:
    if isinstance(collection, ComponentCollection):
        return collection.value
    return collection


class ComponentRegistry:
    """Typed, keyed access to a ``components`` mapping.

    Args:
        components: The live ``components`` dict to operate on. A fresh
            dict is used when omitted.

    Example::

        registry = ComponentRegistry()
        ref = registry.register("schemas", "User", {"type": "object"})
        # ref == {"$ref": "#/components/schemas/User"}
        registry.resolve(ref["$ref"])
        # {"type": "object"}
    """

    def __init__(self, components: Optional[dict[str, Any]] = None) -> None:
        self._components: dict[str, Any] = components if components is not None else {}

    @property
    def components(self) -> dict[str, Any]:
        """The underlying ``components`` dict (live, not a copy)."""
        return self._components

    def register(
        self, collection: CollectionName, name: str, fragment: Any
    ) -> dict[str, str]:
        """Store *fragment* under ``components.<collection>.<name>``.

        Args:
            collection: Target collection, e.g. ``"schemas"``.
            name: Entry name. Must not contain ``/``.
            fragment: The object to store. It is stored as-is, not copied.

        Returns:
            A Reference dict pointing at the stored entry.
        """
        key = _collection_key(collection)
        entries = self._components.setdefault(key, {})
        if name in entries:
            logger.debug("Replacing component %s/%s", key, name)
        entries[name] = fragment
        return make_reference(key, name)

    def resolve(self, ref: Any) -> Any:
        """Return the fragment *ref* points to, or ``None`` if it does not resolve."""
        return resolve_reference(self._components, ref)

    def get(self, collection: CollectionName, name: str) -> Any:
        """Return ``components.<collection>.<name>`` or ``None``."""
        entries = self._components.get(_collection_key(collection))
        if not isinstance(entries, Mapping):
            return None
        return entries.get(name)

    def names(self, collection: CollectionName) -> list[str]:
        """Return the entry names of one collection in insertion order."""
        entries = self._components.get(_collection_key(collection))
        if not isinstance(entries, Mapping):
            return []
        return list(entries)

    def remove(self, collection: CollectionName, name: str) -> bool:
        """Delete an entry. Returns ``False`` if it did not exist."""
        entries = self._components.get(_collection_key(collection))
        if not isinstance(entries, dict) or name not in entries:
            return False
        del entries[name]
        return True

    # ------------------------------------------------------------------ #
    # Security scheme constructors
    # ------------------------------------------------------------------ #

    def security_scheme(self, name: str, scheme: Union[SecurityScheme, Mapping[str, Any]]) -> dict[str, str]:
        """Validate and register a security scheme.

        Args:
            name: Scheme name, later used as the key of security requirements.
            scheme: A :class:`~specwright.models.SecurityScheme` or an
                OpenAPI-shaped mapping (``{"type": "http", "scheme": "bearer"}``).

        Raises:
            InvalidSchemeError: If the mapping does not describe a valid scheme.
        """
        if not isinstance(scheme, SecurityScheme):
            try:
                scheme = SecurityScheme.model_validate(dict(scheme))
            except ValidationError as exc:
                raise InvalidSchemeError(
                    f"Invalid security scheme '{name}': {_first_error(exc)}"
                ) from exc
        return self.register(
            ComponentCollection.SECURITY_SCHEMES, name, scheme.as_fragment()
        )

    def api_key(
        self,
        name: str,
        location: str,
        parameter_name: str,
        description: Optional[str] = None,
    ) -> dict[str, str]:
        """Register an ``apiKey`` scheme sent in a header, query string, or cookie."""
        return self.security_scheme(
            name,
            {"type": "apiKey", "in": location, "name": parameter_name, "description": description},
        )

    def http(
        self,
        name: str,
        scheme: str,
        bearer_format: Optional[str] = None,
        description: Optional[str] = None,
    ) -> dict[str, str]:
        """Register an ``http`` scheme (``basic``, ``bearer``, ``digest``, ...)."""
        return self.security_scheme(
            name,
            {
                "type": "http",
                "scheme": scheme,
                "bearerFormat": bearer_format,
                "description": description,
            },
        )

    def oauth2(
        self,
        name: str,
        flows: Union[OAuthFlows, Mapping[str, Any]],
        description: Optional[str] = None,
    ) -> dict[str, str]:
        """Register an ``oauth2`` scheme.

        *flows* must define at least one of ``implicit``, ``password``,
        ``clientCredentials`` or ``authorizationCode``, each with the URLs
        and ``scopes`` its kind requires (see :class:`~specwright.models.OAuthFlows`).
        """
        if isinstance(flows, OAuthFlows):
            flows = flows.as_fragment()
        return self.security_scheme(
            name, {"type": "oauth2", "flows": dict(flows), "description": description}
        )

    def openid_connect(
        self, name: str, url: str, description: Optional[str] = None
    ) -> dict[str, str]:
        """Register an ``openIdConnect`` scheme using a discovery URL."""
        return self.security_scheme(
            name,
            {"type": "openIdConnect", "openIdConnectUrl": url, "description": description},
        )

    def mutual_tls(self, name: str, description: Optional[str] = None) -> dict[str, str]:
        """Register a ``mutualTLS`` scheme."""
        return self.security_scheme(name, {"type": "mutualTLS", "description": description})


def _first_error(exc: ValidationError) -> str:
    """Condense a pydantic ValidationError into a single readable line."""
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    msg = err.get("msg", str(exc))
    return f"{loc}: {msg}" if loc else msg
