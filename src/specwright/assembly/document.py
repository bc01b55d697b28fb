"""The document assembler: single owner of an OpenAPI 3.1 document tree.

:class:`OpenAPIDocument` holds the root tree as plain, insertion-ordered
dicts and exposes every mutation the rest of the package needs. It delegates
to the component registry, security composer, dialect stamper and
serializer, all of which operate on data reachable from this one object.
There is no module-level document; each instance is an independent build
session owned by whoever created it.

Collision policies differ by collection, and both are deliberate:

* **Paths and webhooks** -- :meth:`~OpenAPIDocument.merge_path` and
  :meth:`~OpenAPIDocument.merge_webhook` replace an existing entry
  *wholesale* (no deep merge) and log a warning naming the entry and the
  operations that were dropped. Callers wanting additive behaviour must
  combine fragments before merging.
* **Components** -- re-registering a name overwrites silently.
* **Tags** -- the first registration wins; later :meth:`~OpenAPIDocument.add_tag`
  calls for the same name are ignored.

Typical usage::

    doc = OpenAPIDocument("Pet Store", "1.0.0")
    pet = doc.add_schema("Pet", {"type": "object"})
    doc.add_http_security("Bearer", "bearer", bearer_format="JWT")
    doc.set_global_security([doc.create_security_requirement("Bearer")])
    doc.add_path(
        PathBuilder("/pets").add_operation(
            OperationBuilder("get").add_response("200", "OK", schema=pet)
        )
    )
    print(doc.to_yaml())
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from specwright import serializer
from specwright.assembly.components import ComponentRegistry
from specwright.assembly.dialect import (
    DEFAULT_DIALECT,
    VocabularyRegistry,
    stamp_schema,
    stamp_vocabularies,
)
from specwright.assembly.extensions import EXTENSION_PREFIX, ExtensionMap
from specwright.assembly.references import (
    ComponentCollection,
    is_reference,
    make_reference,
)
from specwright.assembly.security import (
    SecurityRequirement,
    any_of,
    create_requirement,
)
from specwright.builders import OperationBuilder, PathBuilder
from specwright.exceptions import InvalidUsageError
from specwright.models import (
    HTTP_METHODS,
    Contact,
    ExternalDocs,
    License,
    OAuthFlows,
    SecurityScheme,
    Server,
    Tag,
)

logger = logging.getLogger(__name__)

ServerInput = Union[Server, Mapping[str, Any]]
ExternalDocsInput = Union[ExternalDocs, Mapping[str, Any]]
ValidationRuleDescriber = Callable[[Any], str]


def _server_fragment(server: ServerInput) -> dict[str, Any]:
    if not isinstance(server, Server):
        server = Server.model_validate(dict(server))
    return server.as_fragment()


def _external_docs_fragment(docs: ExternalDocsInput) -> dict[str, Any]:
    if not isinstance(docs, ExternalDocs):
        docs = ExternalDocs.model_validate(dict(docs))
    return docs.as_fragment()


def _operation_keys(item: Any) -> list[str]:
    if not isinstance(item, Mapping) or is_reference(item):
        return []
    return [key for key in item if key in HTTP_METHODS]


def _check_method(method: str) -> str:
    method = str(method).lower()
    if method not in HTTP_METHODS:
        raise InvalidUsageError(f"Unsupported HTTP method: {method!r}")
    return method


class OpenAPIDocument:
    """Mutable OpenAPI 3.1 document under construction.

    Every setter returns ``self`` so calls can be chained. Lookups that miss
    return ``None`` (or ``False`` for update/remove helpers) instead of
    raising.

    Args:
        title: API title (``info.title``).
        version: API version (``info.version``), not the OpenAPI version.
        description: Optional ``info.description``.
        servers: Initial ``servers`` entries.
        default_dialect: Value for ``jsonSchemaDialect``. Defaults to the
            JSON Schema 2020-12 dialect URI.
    """

    OPENAPI_VERSION = "3.1.0"

    def __init__(
        self,
        title: str,
        version: str,
        description: Optional[str] = None,
        servers: Optional[Iterable[ServerInput]] = None,
        default_dialect: str = DEFAULT_DIALECT,
    ) -> None:
        info: dict[str, Any] = {"title": title, "version": version}
        if description is not None:
            info["description"] = description
        self._document: dict[str, Any] = {
            "openapi": self.OPENAPI_VERSION,
            "info": info,
            "jsonSchemaDialect": default_dialect,
            "servers": [_server_fragment(s) for s in servers or ()],
            "paths": {},
            "components": {},
        }
        self._registry = ComponentRegistry(self._document["components"])
        self._extensions = ExtensionMap()
        self._vocabularies = VocabularyRegistry()
        self._validation_rules: dict[str, ValidationRuleDescriber] = {}

    # ------------------------------------------------------------------ #
    # Construction from an existing document
    # ------------------------------------------------------------------ #

    @classmethod
    def from_dict(
        cls, raw: Mapping[str, Any], default_dialect: str = DEFAULT_DIALECT
    ) -> "OpenAPIDocument":
        """Rehydrate a document from a parsed OpenAPI 3.x mapping.

        The input is deep-copied. ``openapi`` is normalised to ``3.1.0``,
        ``jsonSchemaDialect`` falls back to *default_dialect*, and root-level
        ``x-`` keys move into the extension side-map. All other keys keep
        their original order.
        """
        info = raw.get("info")
        info = copy.deepcopy(dict(info)) if isinstance(info, Mapping) else {}
        info.setdefault("title", "")
        info.setdefault("version", "")

        doc = cls(str(info["title"]), str(info["version"]))
        tree: dict[str, Any] = {
            "openapi": cls.OPENAPI_VERSION,
            "info": info,
            "jsonSchemaDialect": raw.get("jsonSchemaDialect") or default_dialect,
        }
        for key, value in raw.items():
            if key in tree:
                continue
            if isinstance(key, str) and key.startswith(EXTENSION_PREFIX):
                doc._extensions.set(key, copy.deepcopy(value))
            else:
                tree[key] = copy.deepcopy(value)
        if not isinstance(tree.get("components"), dict):
            tree["components"] = {}
        # Empty YAML sections load as None.
        for key, empty in (("paths", dict), ("webhooks", dict), ("servers", list), ("tags", list)):
            if key in tree and tree[key] is None:
                tree[key] = empty()
        if tree.get("security", []) is None:
            del tree["security"]

        doc._document = tree
        doc._registry = ComponentRegistry(tree["components"])
        return doc

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def raw(self) -> dict[str, Any]:
        """The live document tree (without extensions). Mutations are visible."""
        return self._document

    @property
    def info(self) -> dict[str, Any]:
        return self._document["info"]

    @property
    def components(self) -> ComponentRegistry:
        """The component registry bound to this document's ``components``."""
        return self._registry

    @property
    def global_security(self) -> Optional[list[SecurityRequirement]]:
        """The global ``security`` list, or ``None`` when never declared."""
        return self._document.get("security")

    # ------------------------------------------------------------------ #
    # Info
    # ------------------------------------------------------------------ #

    def set_title(self, title: str) -> "OpenAPIDocument":
        self.info["title"] = title
        return self

    def set_version(self, version: str) -> "OpenAPIDocument":
        self.info["version"] = version
        return self

    def set_summary(self, summary: str) -> "OpenAPIDocument":
        self.info["summary"] = summary
        return self

    def set_description(self, description: str) -> "OpenAPIDocument":
        self.info["description"] = description
        return self

    def set_terms_of_service(self, url: str) -> "OpenAPIDocument":
        self.info["termsOfService"] = url
        return self

    def _contact(self) -> dict[str, Any]:
        return self.info.setdefault("contact", {})

    def set_contact_name(self, name: str) -> "OpenAPIDocument":
        self._contact()["name"] = name
        return self

    def set_contact_url(self, url: str) -> "OpenAPIDocument":
        self._contact()["url"] = url
        return self

    def set_contact_email(self, email: str) -> "OpenAPIDocument":
        self._contact()["email"] = email
        return self

    def set_contact(
        self,
        name: Optional[str] = None,
        url: Optional[str] = None,
        email: Optional[str] = None,
    ) -> "OpenAPIDocument":
        """Replace the whole ``info.contact`` object."""
        self.info["contact"] = Contact(name=name, url=url, email=email).as_fragment()
        return self

    def _license(self) -> dict[str, Any]:
        return self.info.setdefault("license", {"name": ""})

    def set_license_name(self, name: str) -> "OpenAPIDocument":
        self._license()["name"] = name
        return self

    def set_license_url(self, url: str) -> "OpenAPIDocument":
        self._license()["url"] = url
        return self

    def set_license_identifier(self, identifier: str) -> "OpenAPIDocument":
        self._license()["identifier"] = identifier
        return self

    def set_license(
        self,
        name: str,
        identifier: Optional[str] = None,
        url: Optional[str] = None,
    ) -> "OpenAPIDocument":
        """Replace the whole ``info.license`` object."""
        self.info["license"] = License(name=name, identifier=identifier, url=url).as_fragment()
        return self

    # ------------------------------------------------------------------ #
    # Servers and external docs
    # ------------------------------------------------------------------ #

    def set_servers(self, servers: Iterable[ServerInput]) -> "OpenAPIDocument":
        self._document["servers"] = [_server_fragment(s) for s in servers]
        return self

    def add_server(
        self,
        url: str,
        description: Optional[str] = None,
        variables: Optional[Mapping[str, Any]] = None,
    ) -> "OpenAPIDocument":
        server = Server.model_validate(
            {"url": url, "description": description, "variables": variables}
        )
        self._document.setdefault("servers", []).append(server.as_fragment())
        return self

    def create_external_docs(
        self, url: str, description: Optional[str] = None
    ) -> dict[str, Any]:
        """Return an *External Documentation Object* without attaching it anywhere."""
        return ExternalDocs(url=url, description=description).as_fragment()

    def set_external_docs(
        self, url: str, description: Optional[str] = None
    ) -> "OpenAPIDocument":
        self._document["externalDocs"] = self.create_external_docs(url, description)
        return self

    # ------------------------------------------------------------------ #
    # Paths
    # ------------------------------------------------------------------ #

    def _replace_entry(
        self, section: str, key: str, item: Any, kind: str
    ) -> None:
        entries = self._document.get(section)
        if entries is None:
            entries = self._document[section] = {}
        if key in entries:
            new_methods = _operation_keys(item)
            lost = [m for m in _operation_keys(entries[key]) if m not in new_methods]
            logger.warning(
                "%s %s already exists, overwriting it (operations dropped: %s)",
                kind,
                key,
                ", ".join(lost) if lost else "none",
            )
        entries[key] = item

    def merge_path(self, template: str, path_item: Mapping[str, Any]) -> "OpenAPIDocument":
        """Store *path_item* under ``paths[template]``.

        An existing entry is replaced wholesale, including any operations
        missing from *path_item*, and a warning is logged.
        """
        self._replace_entry("paths", template, path_item, "Path")
        return self

    def add_path(self, builder: PathBuilder) -> "OpenAPIDocument":
        """Merge the path item produced by a :class:`~specwright.builders.PathBuilder`."""
        return self.merge_path(builder.path, builder.build())

    def add_paths(self, builders: Iterable[PathBuilder]) -> "OpenAPIDocument":
        for builder in builders:
            self.add_path(builder)
        return self

    def get_path(self, template: str) -> Optional[dict[str, Any]]:
        return (self._document.get("paths") or {}).get(template)

    def remove_path(self, template: str) -> bool:
        paths = self._document.get("paths") or {}
        if template not in paths:
            return False
        del paths[template]
        return True

    # ------------------------------------------------------------------ #
    # Webhooks
    # ------------------------------------------------------------------ #

    def merge_webhook(self, name: str, item: Mapping[str, Any]) -> "OpenAPIDocument":
        """Store a path item or Reference under ``webhooks[name]``.

        Same wholesale-replace-with-warning policy as :meth:`merge_path`.
        """
        self._replace_entry("webhooks", name, item, "Webhook")
        return self

    def add_webhook(self, name: str, item: Mapping[str, Any]) -> "OpenAPIDocument":
        return self.merge_webhook(name, item)

    def create_webhook(
        self,
        name: str,
        summary: Optional[str] = None,
        description: Optional[str] = None,
        operations: Optional[Mapping[str, Union[Mapping[str, Any], OperationBuilder]]] = None,
        servers: Optional[Iterable[ServerInput]] = None,
        parameters: Optional[Iterable[Mapping[str, Any]]] = None,
    ) -> "OpenAPIDocument":
        """Assemble a path item from its parts and merge it as webhook *name*."""
        item: dict[str, Any] = {}
        if summary is not None:
            item["summary"] = summary
        if description is not None:
            item["description"] = description
        if servers is not None:
            item["servers"] = [_server_fragment(s) for s in servers]
        if parameters is not None:
            item["parameters"] = [dict(p) for p in parameters]
        for method, operation in (operations or {}).items():
            if isinstance(operation, OperationBuilder):
                operation = operation.build()
            item[_check_method(method)] = operation
        return self.merge_webhook(name, item)

    def get_webhooks(self) -> dict[str, Any]:
        return self._document.get("webhooks") or {}

    def get_webhook(self, name: str) -> Optional[dict[str, Any]]:
        return self.get_webhooks().get(name)

    def update_webhook(self, name: str, item: Mapping[str, Any]) -> bool:
        """Replace an existing webhook. Returns ``False`` if *name* is unknown."""
        webhooks = self._document.get("webhooks")
        if not webhooks or name not in webhooks:
            return False
        webhooks[name] = item
        return True

    def remove_webhook(self, name: str) -> bool:
        webhooks = self._document.get("webhooks")
        if not webhooks or name not in webhooks:
            return False
        del webhooks[name]
        return True

    def add_webhook_operation(
        self,
        name: str,
        method: str,
        operation: Union[Mapping[str, Any], OperationBuilder],
    ) -> bool:
        """Add or replace one operation on an existing webhook.

        Returns ``False`` when the webhook does not exist or is a Reference
        (the target lives in ``components`` and is not edited through here).
        """
        webhook = self.get_webhook(name)
        if webhook is None or is_reference(webhook):
            return False
        if isinstance(operation, OperationBuilder):
            operation = operation.build()
        webhook[_check_method(method)] = operation
        return True

    def create_webhook_reference(self, name: str) -> dict[str, str]:
        return make_reference(ComponentCollection.WEBHOOKS, name)

    # ------------------------------------------------------------------ #
    # Tags
    # ------------------------------------------------------------------ #

    def add_tag(
        self,
        name: str,
        description: Optional[str] = None,
        external_docs: Optional[ExternalDocsInput] = None,
    ) -> "OpenAPIDocument":
        """Declare a tag. Ignored if a tag with the same name already exists."""
        if self.get_tag(name) is not None:
            logger.debug("Tag %s already declared, keeping the first one", name)
            return self
        tag = Tag.model_validate(
            {
                "name": name,
                "description": description,
                "externalDocs": _external_docs_fragment(external_docs) if external_docs else None,
            }
        )
        if self._document.get("tags") is None:
            self._document["tags"] = []
        self._document["tags"].append(tag.as_fragment())
        return self

    def get_tags(self) -> list[dict[str, Any]]:
        return self._document.get("tags") or []

    def get_tag(self, name: str) -> Optional[dict[str, Any]]:
        for tag in self.get_tags():
            if tag.get("name") == name:
                return tag
        return None

    get_tag_by_name = get_tag

    def update_tag(
        self,
        name: str,
        description: Optional[str] = None,
        external_docs: Optional[ExternalDocsInput] = None,
    ) -> bool:
        """Update the given fields of an existing tag. Returns ``False`` if it is unknown."""
        tag = self.get_tag(name)
        if tag is None:
            return False
        if description is not None:
            tag["description"] = description
        if external_docs is not None:
            tag["externalDocs"] = _external_docs_fragment(external_docs)
        return True

    def add_tag_external_docs(
        self, name: str, url: str, description: Optional[str] = None
    ) -> bool:
        return self.update_tag(name, external_docs=ExternalDocs(url=url, description=description))

    def remove_tag(self, name: str) -> bool:
        tags = self.get_tags()
        for index, tag in enumerate(tags):
            if tag.get("name") == name:
                del tags[index]
                return True
        return False

    # ------------------------------------------------------------------ #
    # Global security
    # ------------------------------------------------------------------ #

    def create_security_requirement(
        self, scheme_name: str, scopes: Optional[Iterable[str]] = None
    ) -> SecurityRequirement:
        return create_requirement(scheme_name, scopes)

    def set_global_security(
        self, requirements: Iterable[Mapping[str, Iterable[str]]]
    ) -> "OpenAPIDocument":
        """Replace the global ``security`` list. An empty list means "no authentication"."""
        self._document["security"] = any_of(*requirements)
        return self

    def add_global_security(
        self, requirement: Mapping[str, Iterable[str]]
    ) -> "OpenAPIDocument":
        """Append one more alternative (OR branch) to the global ``security`` list."""
        if self._document.get("security") is None:
            self._document["security"] = []
        self._document["security"].extend(any_of(requirement))
        return self

    def clear_global_security(self) -> "OpenAPIDocument":
        """Remove the global ``security`` key entirely (nothing declared)."""
        self._document.pop("security", None)
        return self

    # ------------------------------------------------------------------ #
    # Components
    # ------------------------------------------------------------------ #

    def register(
        self, collection: Union[ComponentCollection, str], name: str, fragment: Any
    ) -> dict[str, str]:
        return self._registry.register(collection, name, fragment)

    def resolve(self, ref: Any) -> Any:
        """Return the component *ref* points to, or ``None``."""
        return self._registry.resolve(ref)

    get_component_by_ref = resolve

    def add_schema(
        self,
        name: str,
        schema: Mapping[str, Any],
        dialect: Optional[str] = None,
        extensions: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, str]:
        """Register a schema, stamping ``$schema`` only when *dialect* is given.

        *extensions* are ``x-`` keys appended after the schema's own keywords.
        """
        if dialect is not None or extensions:
            schema = self.create_schema(schema, dialect, extensions)
        return self.register(ComponentCollection.SCHEMAS, name, schema)

    def add_response(self, name: str, response: Mapping[str, Any]) -> dict[str, str]:
        return self.register(ComponentCollection.RESPONSES, name, response)

    def add_parameter(self, name: str, parameter: Mapping[str, Any]) -> dict[str, str]:
        return self.register(ComponentCollection.PARAMETERS, name, parameter)

    def add_example(self, name: str, example: Mapping[str, Any]) -> dict[str, str]:
        return self.register(ComponentCollection.EXAMPLES, name, example)

    def add_request_body(self, name: str, request_body: Mapping[str, Any]) -> dict[str, str]:
        return self.register(ComponentCollection.REQUEST_BODIES, name, request_body)

    def add_header(self, name: str, header: Mapping[str, Any]) -> dict[str, str]:
        return self.register(ComponentCollection.HEADERS, name, header)

    def add_security_scheme(
        self, name: str, scheme: Union[SecurityScheme, Mapping[str, Any]]
    ) -> dict[str, str]:
        return self._registry.security_scheme(name, scheme)

    def add_link(self, name: str, link: Mapping[str, Any]) -> dict[str, str]:
        return self.register(ComponentCollection.LINKS, name, link)

    def add_callback(self, name: str, callback: Mapping[str, Any]) -> dict[str, str]:
        return self.register(ComponentCollection.CALLBACKS, name, callback)

    def add_path_item(self, name: str, path_item: Mapping[str, Any]) -> dict[str, str]:
        return self.register(ComponentCollection.PATH_ITEMS, name, path_item)

    def add_component_webhook(self, name: str, item: Mapping[str, Any]) -> dict[str, str]:
        return self.register(ComponentCollection.WEBHOOKS, name, item)

    def add_api_key_security(
        self,
        name: str,
        location: str,
        parameter_name: str,
        description: Optional[str] = None,
    ) -> dict[str, str]:
        return self._registry.api_key(name, location, parameter_name, description)

    def add_http_security(
        self,
        name: str,
        scheme: str,
        bearer_format: Optional[str] = None,
        description: Optional[str] = None,
    ) -> dict[str, str]:
        return self._registry.http(name, scheme, bearer_format, description)

    def add_oauth2_security(
        self,
        name: str,
        flows: Union[OAuthFlows, Mapping[str, Any]],
        description: Optional[str] = None,
    ) -> dict[str, str]:
        return self._registry.oauth2(name, flows, description)

    def add_openid_connect_security(
        self, name: str, url: str, description: Optional[str] = None
    ) -> dict[str, str]:
        return self._registry.openid_connect(name, url, description)

    def add_mutual_tls_security(
        self, name: str, description: Optional[str] = None
    ) -> dict[str, str]:
        return self._registry.mutual_tls(name, description)

    # ------------------------------------------------------------------ #
    # Dialect and vocabularies
    # ------------------------------------------------------------------ #

    def set_default_dialect(self, uri: str) -> "OpenAPIDocument":
        self._document["jsonSchemaDialect"] = uri
        return self

    def get_default_dialect(self) -> str:
        return self._document["jsonSchemaDialect"]

    def create_schema(
        self,
        schema: Mapping[str, Any],
        dialect: Optional[str] = None,
        extensions: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """Return a copy of *schema*, with ``$schema`` set when *dialect* is given.

        Raises:
            ExtensionNameError: If an *extensions* key does not start with ``x-``.
        """
        return ExtensionMap.from_mapping(extensions).merge_into(stamp_schema(schema, dialect))

    def create_schema_with_vocabularies(
        self,
        schema: Mapping[str, Any],
        vocabularies: Mapping[str, bool],
        dialect: Optional[str] = None,
        extensions: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        return ExtensionMap.from_mapping(extensions).merge_into(
            stamp_vocabularies(stamp_schema(schema, dialect), vocabularies)
        )

    def register_vocabulary(
        self, uri: str, description: Optional[str] = None
    ) -> "OpenAPIDocument":
        """Record a vocabulary in the documentation side table (never serialised)."""
        self._vocabularies.register(uri, description)
        return self

    def get_vocabularies(self) -> dict[str, Optional[str]]:
        return dict(self._vocabularies.items())

    # ------------------------------------------------------------------ #
    # Extensions and validation-rule descriptions
    # ------------------------------------------------------------------ #

    def add_extension(self, name: str, value: Any) -> "OpenAPIDocument":
        """Attach a root-level ``x-`` extension.

        Raises:
            ExtensionNameError: If *name* does not start with ``x-``.
        """
        self._extensions.set(name, value)
        return self

    def get_extensions(self) -> dict[str, Any]:
        return self._extensions.as_dict()

    def describe_validation_rule(self, kind: str, describer: ValidationRuleDescriber) -> bool:
        """Register a human-readable describer for a validation keyword.

        Returns:
            ``True`` if a describer for *kind* was already registered and has
            been replaced.
        """
        replaced = kind in self._validation_rules
        self._validation_rules[kind] = describer
        return replaced

    def get_validation_rule_description(self, kind: str) -> Optional[ValidationRuleDescriber]:
        return self._validation_rules.get(kind)

    # ------------------------------------------------------------------ #
    # Merging whole documents
    # ------------------------------------------------------------------ #

    def merge(self, other: Union["OpenAPIDocument", Mapping[str, Any]]) -> "OpenAPIDocument":
        """Fold another document into this one, applying each section's policy.

        * ``paths`` / ``webhooks`` -- :meth:`merge_path` / :meth:`merge_webhook`
          (wholesale replace, warning on collision).
        * ``components`` -- :meth:`register` (silent overwrite).
        * ``tags`` -- :meth:`add_tag` (first registration wins).
        * ``servers`` -- appended unless a server with the same URL exists.
        * ``security`` -- adopted when this document declares none, otherwise
          new requirements are appended as extra OR branches.
        * root ``x-`` extensions -- overwrite.
        """
        if isinstance(other, OpenAPIDocument):
            source, extensions = other.raw, other.get_extensions()
        else:
            source = other
            extensions = {k: v for k, v in other.items() if str(k).startswith(EXTENSION_PREFIX)}

        known_urls = {s.get("url") for s in self._document.get("servers") or []}
        for server in source.get("servers") or []:
            if server.get("url") not in known_urls:
                if self._document.get("servers") is None:
                    self._document["servers"] = []
                self._document["servers"].append(copy.deepcopy(server))
                known_urls.add(server.get("url"))

        for template, item in (source.get("paths") or {}).items():
            self.merge_path(template, copy.deepcopy(item))
        for name, item in (source.get("webhooks") or {}).items():
            self.merge_webhook(name, copy.deepcopy(item))

        for collection, entries in (source.get("components") or {}).items():
            for name, fragment in (entries or {}).items():
                self.register(collection, name, copy.deepcopy(fragment))

        for tag in source.get("tags") or []:
            self._merge_tag(tag)

        security = source.get("security")
        if security is not None:
            if self.global_security is None:
                self.set_global_security(security)
            else:
                for requirement in security:
                    if requirement not in self.global_security:
                        self.add_global_security(requirement)

        for name, value in extensions.items():
            self.add_extension(name, copy.deepcopy(value))
        return self

    def _merge_tag(self, tag: Any) -> None:
        if not isinstance(tag, Mapping) or not tag.get("name"):
            logger.warning("Skipping tag without a name: %r", tag)
            return
        try:
            self.add_tag(tag["name"], tag.get("description"), tag.get("externalDocs"))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping invalid tag %s: %s", tag["name"], exc)

    # ------------------------------------------------------------------ #
    # Serialisation
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Return a deep-copied snapshot of the document with extensions merged in."""
        return serializer.to_json_value(self._document, self._extensions.as_dict())

    def to_json(self, indent: Optional[int] = 2) -> str:
        return serializer.to_json_text(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        return serializer.to_yaml_text(self.to_dict())

    def save(
        self,
        path: Union[str, Path],
        fmt: Optional[serializer.Format] = None,
        indent: Optional[int] = 2,
    ) -> Path:
        """Write the document to *path*; the format follows the extension unless given."""
        return serializer.write_document(self.to_dict(), path, fmt, indent=indent)
