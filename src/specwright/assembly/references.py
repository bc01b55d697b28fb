"""Mint and resolve ``#/components/...`` references.

A reference is a plain dict of the form ``{"$ref": "#/components/schemas/Pet"}``
that points at an entry of the document's ``components`` section by
collection and name. References never own their target; they are resolved
on demand against whatever is stored at lookup time.

Unlike a general JSON Pointer, the shape accepted here is fixed: exactly
``#/components/<collection>/<name>``. Names are used verbatim, with no
``~0``/``~1`` escaping, so a name containing ``/`` can be registered but will
never resolve.

Resolution is side-effect free and never raises. Anything malformed or
missing yields ``None``.
"""

from __future__ import annotations

import enum
from typing import Any, Mapping, Optional

REF_PREFIX = "#/components/"


class ComponentCollection(str, enum.Enum):
    """Names of the keyed collections under ``components``."""

    SCHEMAS = "schemas"
    RESPONSES = "responses"
    PARAMETERS = "parameters"
    EXAMPLES = "examples"
    REQUEST_BODIES = "requestBodies"
    HEADERS = "headers"
    SECURITY_SCHEMES = "securitySchemes"
    LINKS = "links"
    CALLBACKS = "callbacks"
    PATH_ITEMS = "pathItems"
    WEBHOOKS = "webhooks"


def make_reference(
    collection: str,
    name: str,
    summary: Optional[str] = None,
    description: Optional[str] = None,
) -> dict[str, str]:
    """Build a *Reference Object* pointing at ``components.<collection>.<name>``.

    Args:
        collection: Collection name, e.g. ``"schemas"`` or a
            :class:`ComponentCollection` member.
        name: Registration key within the collection (case-sensitive).
        summary: Optional summary overriding the target's.
        description: Optional description overriding the target's.

    Returns:
        A new dict with ``$ref`` and, when given, ``summary``/``description``.

    Example::

        make_reference("schemas", "User")
        # {"$ref": "#/components/schemas/User"}
    """
    if isinstance(collection, ComponentCollection):
        collection = collection.value
    ref: dict[str, str] = {"$ref": f"{REF_PREFIX}{collection}/{name}"}
    if summary is not None:
        ref["summary"] = summary
    if description is not None:
        ref["description"] = description
    return ref


def parse_reference(ref: Any) -> Optional[tuple[str, str]]:
    """Split a reference string into ``(collection, name)``.

    Returns ``None`` unless *ref* is a string starting with
    ``#/components/`` that splits into exactly three segments after the
    leading ``#/``.
    """
    if not isinstance(ref, str) or not ref.startswith(REF_PREFIX):
        return None
    segments = ref[2:].split("/")
    if len(segments) != 3:
        return None
    _, collection, name = segments
    return collection, name


def resolve_reference(components: Optional[Mapping[str, Any]], ref: Any) -> Any:
    """Look up the fragment a reference points to.

    Args:
        components: The document's ``components`` mapping (may be ``None``).
        ref: A reference string, or a Reference dict carrying ``$ref``.

    Returns:
        The stored fragment, or ``None`` when the reference is malformed,
        the collection does not exist, or the entry does not exist.
    """
    if isinstance(ref, Mapping):
        ref = ref.get("$ref")
    parsed = parse_reference(ref)
    if parsed is None or not isinstance(components, Mapping):
        return None
    collection, name = parsed
    entries = components.get(collection)
    if not isinstance(entries, Mapping) or name not in entries:
        return None
    return entries[name]


def is_reference(value: Any) -> bool:
    """Return ``True`` if *value* is a dict carrying a ``$ref`` key."""
    return isinstance(value, Mapping) and "$ref" in value
