"""Configuration management with XDG paths and precedence resolution.

This module handles all persistent configuration for apispec:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.apispec/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **User config** -- ``config.json`` in the config directory, holding
  default values for any :class:`~apispec.models.Settings` field.
* **Project config** -- ``apispec.json`` in the working directory, same
  shape, overriding the user config for one repository.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, project config, user config, and defaults into
  the effective :class:`~apispec.models.Settings`.

Example ``apispec.json``::

    {"output": "yaml", "loglevel": "warn", "validate_spec": true}
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from apispec.exceptions import ConfigError
from apispec.models import Settings

_APP_NAME = "apispec"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "apispec.json"

_ENV_PREFIX = "APISPEC_"
_ENV_FIELDS = {
    "OUTPUT": "output",
    "LOGLEVEL": "loglevel",
    "TIMEOUT": "timeout",
    "VERIFY_SSL": "verify_ssl",
    "VALIDATE": "validate_spec",
    "DEEP": "deep",
}
_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})
_BOOL_FIELDS = frozenset({"verify_ssl", "validate_spec", "deep"})


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
    """Return the configuration directory (not created).

    On Linux/BSD: ``$XDG_CONFIG_HOME/apispec/`` (default ``~/.config/apispec/``).
    On macOS/Windows: ``~/.apispec/``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/apispec/`` (default ``~/.local/share/apispec/``).
    On macOS/Windows: ``~/.apispec/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Config files ---


def _read_json_object(path: Path, label: str) -> Optional[dict[str, Any]]:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} config at {path}: expected a JSON object")
    return data


def load_user_config() -> dict[str, Any]:
    """Load ``config.json`` from the config directory.

    Returns:
        The parsed JSON object, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json_object(get_config_dir() / _CONFIG_FILENAME, "user") or {}


def load_project_config() -> dict[str, Any]:
    """Load project-local configuration from ``./apispec.json``.

    Returns:
        The parsed JSON object, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    return _read_json_object(path, "project") or {}


def load_env_config() -> dict[str, Any]:
    """Collect ``APISPEC_*`` environment overrides.

    Boolean variables accept ``1/0``, ``true/false``, ``yes/no``, ``on/off``.
    ``NO_COLOR`` (any value) turns colour off.

    Raises:
        ConfigError: If a boolean variable holds anything else.
    """
    values: dict[str, Any] = {}
    for suffix, field in _ENV_FIELDS.items():
        raw = os.environ.get(_ENV_PREFIX + suffix)
        if raw is None:
            continue
        if field in _BOOL_FIELDS:
            values[field] = _parse_bool(_ENV_PREFIX + suffix, raw)
        else:
            values[field] = raw
    if os.environ.get("NO_COLOR") is not None:
        values["color"] = False
    return values


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got {raw!r}")


# --- Precedence resolution ---


def resolve_settings(**cli: Any) -> Settings:
    """Resolve settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (keyword arguments; ``None`` means "not given")
        2. Environment variables (``APISPEC_OUTPUT``, ``APISPEC_LOGLEVEL``, ...)
        3. Project config (``./apispec.json``)
        4. User config (``~/.config/apispec/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer holds an unknown key or an invalid value.
    """
    merged: dict[str, Any] = {}
    merged.update(load_user_config())
    merged.update(load_project_config())
    merged.update(load_env_config())
    merged.update({key: value for key, value in cli.items() if value is not None})

    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
