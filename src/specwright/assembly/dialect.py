"""JSON Schema dialect and vocabulary metadata.

OpenAPI 3.1 documents declare a default schema dialect in
``jsonSchemaDialect``; individual schemas may override it with ``$schema``
and may declare which vocabularies they rely on with ``$vocabulary``.

Stamping never interprets or validates the schema's keywords, and never
mutates its input: :func:`stamp_schema` and :func:`stamp_vocabularies` return
shallow copies. A schema is stamped with ``$schema`` only when a dialect is
passed explicitly. It does not inherit the document default.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional

DRAFT_2020_12 = "https://json-schema.org/draft/2020-12/schema"
DRAFT_2019_09 = "https://json-schema.org/draft/2019-09/schema"
DRAFT_07 = "http://json-schema.org/draft-07/schema#"
DRAFT_06 = "http://json-schema.org/draft-06/schema#"
DRAFT_04 = "http://json-schema.org/draft-04/schema#"

DEFAULT_DIALECT = DRAFT_2020_12

SCHEMA_DIALECTS: dict[str, str] = {
    "DRAFT_2020_12": DRAFT_2020_12,
    "DRAFT_2019_09": DRAFT_2019_09,
    "DRAFT_07": DRAFT_07,
    "DRAFT_06": DRAFT_06,
    "DRAFT_04": DRAFT_04,
}

_VOCAB_BASE = "https://json-schema.org/draft/2020-12/vocab/"

VOCABULARIES_2020_12: dict[str, str] = {
    "CORE": _VOCAB_BASE + "core",
    "APPLICATOR": _VOCAB_BASE + "applicator",
    "UNEVALUATED": _VOCAB_BASE + "unevaluated",
    "VALIDATION": _VOCAB_BASE + "validation",
    "META_DATA": _VOCAB_BASE + "meta-data",
    "FORMAT_ANNOTATION": _VOCAB_BASE + "format-annotation",
    "CONTENT": _VOCAB_BASE + "content",
}


def stamp_schema(fragment: Mapping[str, Any], dialect: Optional[str] = None) -> dict[str, Any]:
    """Return a shallow copy of *fragment*, with ``$schema`` set when *dialect* is given."""
    stamped = dict(fragment)
    if dialect is not None:
        stamped["$schema"] = dialect
    return stamped


def stamp_vocabularies(
    fragment: Mapping[str, Any], vocabularies: Mapping[str, bool]
) -> dict[str, Any]:
    """Return a shallow copy of *fragment* with ``$vocabulary`` set.

    Args:
        fragment: The schema to annotate.
        vocabularies: Vocabulary URI to required flag (``True`` means an
            implementation must understand it, ``False`` means optional).
            URIs are not checked against any registry.
    """
    stamped = dict(fragment)
    stamped["$vocabulary"] = dict(vocabularies)
    return stamped


class VocabularyRegistry:
    """Documentation side table of vocabulary URIs.

    Entries are informational only. Nothing here is consulted when stamping
    schemas or serialising the document.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Optional[str]] = {}

    def register(self, uri: str, description: Optional[str] = None) -> None:
        self._entries[uri] = description

    def describe(self, uri: str) -> Optional[str]:
        return self._entries.get(uri)

    def items(self) -> Iterator[tuple[str, Optional[str]]]:
        return iter(self._entries.items())

    def __contains__(self, uri: object) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)
