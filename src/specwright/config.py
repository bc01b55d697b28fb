"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for specwright:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specwright/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~specwright.models.GlobalConfig`
  JSON file storing defaults (output format, serialization, dialect).
* **Project config** -- An optional ``./specwright.json`` whose keys are
  layered over the global config.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`), which is also how rendered documents are written.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specwright.exceptions import ConfigError
from specwright.models import GlobalConfig

_APP_NAME = "specwright"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specwright.json"

ENV_FORMAT = "SPECWRIGHT_FORMAT"
ENV_DIALECT = "SPECWRIGHT_DIALECT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specwright/`` (default ``~/.config/specwright/``).
    On macOS/Windows: ``~/.specwright/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specwright/`` (default ``~/.local/share/specwright/``).
    On macOS/Windows: ``~/.specwright/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~specwright.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specwright.json``.

    Project-local config sits between global config and environment variables
    in the precedence chain. It typically pins the serialization format a
    repository checks its documents in with.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_output_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_format`` for the document encoding,
           ``cli_output_format`` for diagnostics/tables)
        2. Environment variables (``SPECWRIGHT_FORMAT``, ``SPECWRIGHT_DIALECT``)
        3. Project config (``./specwright.json``)
        4. User config (``~/.config/specwright/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~specwright.models.GlobalConfig`.

    Raises:
        ConfigError: If any layer holds invalid values.
    """
    # 5 + 4. Defaults and user config
    global_cfg = load_global_config()

    # 3. Project-local overrides
    project = load_project_config()
    if project is not None:
        merged = _deep_merge(global_cfg.model_dump(mode="json"), project)
        try:
            global_cfg = GlobalConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2. Environment
    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        _set_document_format(global_cfg, env_format, source=ENV_FORMAT)
    env_dialect = os.environ.get(ENV_DIALECT)
    if env_dialect:
        global_cfg.default_dialect = env_dialect

    # 1. CLI flags
    if cli_format is not None:
        _set_document_format(global_cfg, cli_format, source="--format")
    if cli_output_format is not None:
        global_cfg.output.format = cli_output_format

    return global_cfg


def _set_document_format(config: GlobalConfig, value: str, source: str) -> None:
    value = value.lower()
    if value not in ("json", "yaml"):
        raise ConfigError(f"Invalid document format {value!r} from {source} (expected json or yaml)")
    config.serialization.default_format = value  # type: ignore[assignment]
