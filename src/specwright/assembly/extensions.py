"""Vendor extension (``x-...``) side-maps.

Extensions are kept apart from the object they annotate and merged into it
only when it is rendered. The ``x-`` prefix is checked when an extension is
added, so a bad name fails at the call site rather than at render time.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional

from specwright.exceptions import ExtensionNameError

EXTENSION_PREFIX = "x-"


class ExtensionMap:
    """An ordered, prefix-checked mapping of extension names to values."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    @classmethod
    def from_mapping(cls, extensions: Optional[Mapping[str, Any]]) -> "ExtensionMap":
        """Build a map from *extensions*, checking every name.

        Raises:
            ExtensionNameError: If any name does not start with ``x-``.
        """
        result = cls()
        for name, value in (extensions or {}).items():
            result.set(name, value)
        return result

    def set(self, name: str, value: Any) -> None:
        """Add or replace an extension.

        Raises:
            ExtensionNameError: If *name* does not start with ``x-``.
        """
        if not isinstance(name, str) or not name.startswith(EXTENSION_PREFIX):
            raise ExtensionNameError(
                f"Extension name must start with {EXTENSION_PREFIX}: {name!r}"
            )
        self._values[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def remove(self, name: str) -> bool:
        if name not in self._values:
            return False
        del self._values[name]
        return True

    def merge_into(self, target: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of *target* with the extensions appended after its own keys."""
        merged = dict(target)
        merged.update(self._values)
        return merged

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values
