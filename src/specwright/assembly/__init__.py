"""The document assembly engine.

* :mod:`~specwright.assembly.document` -- :class:`OpenAPIDocument`, the single
  owner of a document tree.
* :mod:`~specwright.assembly.components` -- keyed storage under ``components``.
* :mod:`~specwright.assembly.references` -- minting and resolving
  ``#/components/...`` references.
* :mod:`~specwright.assembly.security` -- OR/AND composition of security
  requirements.
* :mod:`~specwright.assembly.dialect` -- JSON Schema dialect and vocabulary
  stamping.
* :mod:`~specwright.assembly.extensions` -- ``x-`` extension side-maps.
"""

from specwright.assembly.components import ComponentRegistry
from specwright.assembly.document import OpenAPIDocument
from specwright.assembly.references import ComponentCollection, make_reference, resolve_reference

__all__ = [
    "ComponentCollection",
    "ComponentRegistry",
    "OpenAPIDocument",
    "make_reference",
    "resolve_reference",
]
