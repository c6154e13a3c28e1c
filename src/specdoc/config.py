"""Configuration loading with XDG paths, atomic writes, and precedence resolution.

This module supplies the :class:`~specdoc.models.DocsConfig` that drives
:func:`~specdoc.suite.load_specifications`:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specdoc/`` on macOS and Windows. See :func:`get_config_dir`.
* **User config** -- ``<config_dir>/config.json``, read by
  :func:`load_config` and written by :func:`save_config`.
* **Project config** -- ``./specdoc.json``, read by
  :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config and user config.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specdoc.exceptions import ConfigError
from specdoc.models import DocsConfig

_APP_NAME = "specdoc"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specdoc.json"

ENV_SPECS = "SPECDOC_SPECS"
ENV_HOST = "SPECDOC_HOST"
ENV_COLLAPSE = "SPECDOC_COLLAPSE"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specdoc/`` (default ``~/.config/specdoc/``).
    On macOS/Windows: ``~/.specdoc/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the target directory so that
    ``os.replace`` is an atomic rename on POSIX systems. On failure the
    temporary file is removed and the exception re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as fd:
            tmp_path = fd.name
            fd.write(data)
            fd.flush()
            os.fsync(fd.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# --- Config files ---


def _config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, label: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_config() -> DocsConfig:
    """Load the user configuration from the config directory.

    Returns:
        The deserialised :class:`~specdoc.models.DocsConfig`, or defaults
        when the file does not exist.

    Raises:
        ConfigError: If the file exists but is not valid JSON or fails
            validation.
    """
    path = _config_path()
    if not path.is_file():
        return DocsConfig()
    try:
        return DocsConfig.model_validate(_read_json(path, "config"))
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: DocsConfig) -> Path:
    """Persist *config* atomically as the user configuration.

    Returns:
        The path written.
    """
    path = _config_path()
    data = config.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./specdoc.json`` if present.

    Returns:
        The raw JSON object, or ``None`` when the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a valid JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json(path, "project config")


# --- Precedence resolution ---


def _parse_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    specs = os.environ.get(ENV_SPECS)
    if specs:
        overrides["spec_filenames"] = [s.strip() for s in specs.split(",") if s.strip()]
    host = os.environ.get(ENV_HOST)
    if host:
        overrides["host"] = host
    collapse = os.environ.get(ENV_COLLAPSE)
    if collapse is not None:
        overrides["collapse"] = _parse_bool(collapse, ENV_COLLAPSE)
    return overrides


def resolve_config(
    cli_specs: Optional[list[str]] = None,
    cli_host: Optional[str] = None,
    cli_collapse: Optional[bool] = None,
) -> DocsConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_specs``, ``cli_host``, ``cli_collapse``)
        2. Environment variables (``SPECDOC_SPECS``, ``SPECDOC_HOST``,
           ``SPECDOC_COLLAPSE``)
        3. Project config (``./specdoc.json``)
        4. User config (``~/.config/specdoc/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer is invalid.
    """
    merged = load_config().model_dump()

    project = load_project_config()
    if project is not None:
        merged.update(project)

    merged.update(_env_overrides())

    if cli_specs:
        merged["spec_filenames"] = list(cli_specs)
    if cli_host is not None:
        merged["host"] = cli_host
    if cli_collapse is not None:
        merged["collapse"] = cli_collapse

    try:
        return DocsConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
