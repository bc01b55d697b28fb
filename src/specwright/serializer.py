"""Deterministic JSON and YAML rendering of an assembled document.

Both encodings keep the document's key insertion order and render every key
that is present in the tree, including explicitly empty lists and mappings
(``security: []`` stays distinguishable from an absent ``security`` key).
Keys that were never set are simply not in the tree and therefore not
rendered.

Round-trip guarantees::

    json.loads(to_json_text(v)) == v
    yaml.safe_load(to_yaml_text(v)) == json.loads(to_json_text(v))
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Literal, Mapping, Optional, Union

import yaml

from specwright.config import atomic_write
from specwright.exceptions import InvalidUsageError

Format = Literal["json", "yaml"]


class _BlockDumper(yaml.SafeDumper):
    """SafeDumper that never emits anchors/aliases for shared sub-objects.

    The same fragment dict is often reachable from several places in the
    tree (for instance one schema reused inline). Aliases would still parse
    back to equal values, but they make the output hard to read and are not
    understood by every OpenAPI tool.
    """

    def ignore_aliases(self, data: Any) -> bool:
        return True


def to_json_value(
    tree: Mapping[str, Any], extensions: Optional[Mapping[str, Any]] = None
) -> dict[str, Any]:
    """Return a deep-copied snapshot of *tree* with *extensions* appended at the root.

    Later mutations of the document do not affect the snapshot, and the
    snapshot can be modified freely without touching the document.

    Mapping keys are converted to strings and tuples to lists, as
    :func:`json.dumps` would, so the JSON and YAML renderings of the snapshot
    parse back to the same value.
    """
    snapshot = _json_ready(tree)
    if extensions:
        snapshot.update(_json_ready(extensions))
    return snapshot


def _json_key(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _json_ready(value: Any) -> Any:
    """Deep-copy *value*, stringifying mapping keys the way JSON does."""
    if isinstance(value, Mapping):
        return {_json_key(k): _json_ready(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_ready(v) for v in value]
    return copy.deepcopy(value)


def to_json_text(value: Any, indent: Optional[int] = 2) -> str:
    """Render *value* as JSON text, preserving key order."""
    return json.dumps(value, indent=indent, ensure_ascii=False)


def to_yaml_text(value: Any) -> str:
    """Render *value* as block-style YAML text, preserving key order."""
    return yaml.dump(
        value,
        Dumper=_BlockDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def render(value: Any, fmt: Format = "yaml", indent: Optional[int] = 2) -> str:
    """Render *value* in the given format (``"json"`` or ``"yaml"``)."""
    if fmt == "json":
        return to_json_text(value, indent=indent)
    if fmt == "yaml":
        return to_yaml_text(value)
    raise InvalidUsageError(f"Unsupported output format: {fmt!r} (expected json or yaml)")


def parse_text(text: str, fmt: Optional[Format] = None) -> dict[str, Any]:
    """Parse JSON or YAML text back into a dict.

    Args:
        text: The rendered document.
        fmt: Format hint. When ``None`` JSON is tried first, then YAML.

    Raises:
        DocumentLoadError: If the text cannot be parsed as a mapping.
    """
    from specwright.loader import parse_content

    return parse_content(text, hint=fmt or "")


def format_for_path(path: Union[str, Path], default: Format = "yaml") -> Format:
    """Infer the output format from a file extension."""
    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    return default


def write_document(
    value: Any,
    path: Union[str, Path],
    fmt: Optional[Format] = None,
    indent: Optional[int] = 2,
) -> Path:
    """Render *value* and write it atomically to *path*.

    Args:
        value: The JSON value to write (usually a document snapshot).
        path: Destination file. Parent directories are created.
        fmt: Output format; inferred from the extension when ``None``.
        indent: JSON indent width (ignored for YAML).

    Returns:
        The destination path.
    """
    path = Path(path)
    text = render(value, fmt or format_for_path(path), indent=indent)
    if not text.endswith("\n"):
        text += "\n"
    atomic_write(path, text)
    return path
