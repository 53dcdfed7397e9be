"""YAML and environment configuration for xdgkit.

Configuration is an explicit value handed to the resource locator. It is
assembled from three layers, later layers winning:

1. Built-in defaults
2. An optional ``xdgkit.yaml`` file
3. Environment variables (``XDGKIT_SCRIPT_PATH``, ``XDGKIT_SEARCH_PATH``)

Example ``xdgkit.yaml``::

    script_dir: /opt/xdg-utils/bin
    search_path:
      - /usr/local/bin
      - /usr/bin
    lock_timeout: 10
"""

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from xdgkit.core.exceptions import ConfigError
from xdgkit.core.models import SCRIPT_VERSION, VENDOR_TAG

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "xdgkit.yaml"

SCRIPT_PATH_ENV = "XDGKIT_SCRIPT_PATH"
SEARCH_PATH_ENV = "XDGKIT_SEARCH_PATH"

_PATH_KEYS = ("script_dir", "temp_dir", "home_dir", "working_dir")
_STRING_KEYS = ("vendor_tag", "script_version", "user")


def _default_search_path() -> List[str]:
    return [p for p in os.environ.get("PATH", "").split(os.pathsep) if p]


@dataclass
class XdgKitConfig:
    """
    Resolution settings for bundled scripts.

    Attributes:
        script_dir: Pre-extracted directory holding every tool; when set it
            bypasses extraction and digest checks
        vendor_tag: Directory tag used in cache locations
        script_version: Version segment used in cache locations
        temp_dir: Base for the per-user temp cache (default: system temp dir)
        home_dir: Base for the home cache (default: user's home)
        working_dir: Base for the relative cache (default: current directory)
        user: User segment of the temp cache (default: login name)
        search_path: Directories checked for pre-installed tools
        lock_timeout: Seconds to wait for another process's extraction
    """

    script_dir: Optional[Path] = None
    vendor_tag: str = VENDOR_TAG
    script_version: str = SCRIPT_VERSION
    temp_dir: Optional[Path] = None
    home_dir: Optional[Path] = None
    working_dir: Optional[Path] = None
    user: Optional[str] = None
    search_path: List[str] = field(default_factory=_default_search_path)
    lock_timeout: float = 30.0


def parse_config(config_path: Path) -> Dict[str, Any]:
    """
    Read an xdgkit.yaml file into a validated settings dictionary.

    Args:
        config_path: Path to the YAML file

    Returns:
        Settings keyed by XdgKitConfig field name

    Raises:
        ConfigError: If the file is missing or invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {config_path}: {e}")

    if data is None:
        return {}

    return _parse_and_validate(data)


def _parse_and_validate(data: Any) -> Dict[str, Any]:
    """Validate raw YAML data and convert values to field types."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    known = {f.name for f in fields(XdgKitConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    settings: Dict[str, Any] = {}

    for key in _PATH_KEYS:
        if data.get(key) is not None:
            value = data[key]
            if not isinstance(value, str) or not value:
                raise ConfigError(f"'{key}' must be a non-empty string")
            settings[key] = Path(value).expanduser()

    for key in _STRING_KEYS:
        if data.get(key) is not None:
            value = data[key]
            if not isinstance(value, (str, int, float)) or isinstance(value, bool):
                raise ConfigError(f"'{key}' must be a string")
            value = str(value)
            if not value or "/" in value:
                raise ConfigError(f"'{key}' must be a non-empty path segment")
            settings[key] = value

    if "search_path" in data and data["search_path"] is not None:
        search_path = data["search_path"]
        if isinstance(search_path, str):
            search_path = search_path.split(os.pathsep)
        if not isinstance(search_path, list) or not all(
            isinstance(p, str) for p in search_path
        ):
            raise ConfigError("'search_path' must be a list of directories")
        settings["search_path"] = [
            str(Path(p).expanduser()) for p in search_path if p
        ]

    if data.get("lock_timeout") is not None:
        timeout = data["lock_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError("'lock_timeout' must be a number")
        if timeout < 0:
            raise ConfigError("'lock_timeout' must not be negative")
        settings["lock_timeout"] = float(timeout)

    return settings


def _as_raw_settings(overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert keyword overrides to the plain values a YAML file would hold."""
    raw: Dict[str, Any] = {}
    for key, value in overrides.items():
        if isinstance(value, Path):
            value = str(value)
        elif isinstance(value, (list, tuple)):
            value = [str(v) if isinstance(v, Path) else v for v in value]
        raw[key] = value
    return raw


def _environment_settings(environ: Mapping[str, str]) -> Dict[str, Any]:
    settings: Dict[str, Any] = {}

    script_path = environ.get(SCRIPT_PATH_ENV)
    if script_path:
        settings["script_dir"] = Path(script_path).expanduser()
        logger.debug(f"Using script directory from {SCRIPT_PATH_ENV}: {script_path}")

    search_path = environ.get(SEARCH_PATH_ENV)
    if search_path:
        settings["search_path"] = [p for p in search_path.split(os.pathsep) if p]

    return settings


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> XdgKitConfig:
    """
    Build a configuration from defaults, an optional file and the environment.

    Args:
        config_path: YAML file to read; if None, ./xdgkit.yaml is read when
            present
        environ: Environment mapping (default: os.environ)
        **overrides: Field values applied last, validated like file
            settings; None values are ignored

    Returns:
        Assembled configuration

    Raises:
        ConfigError: If the file or an override is invalid

    Example:
        >>> config = load_config(environ={"XDGKIT_SCRIPT_PATH": "/opt/xdg"})
        >>> config.script_dir
        PosixPath('/opt/xdg')
    """
    if environ is None:
        environ = os.environ

    config = XdgKitConfig()

    if config_path is not None:
        config = replace(config, **parse_config(Path(config_path)))
    else:
        default_file = Path(DEFAULT_CONFIG_FILE)
        if default_file.exists():
            logger.debug(f"Loading configuration from {default_file}")
            config = replace(config, **parse_config(default_file))

    config = replace(config, **_environment_settings(environ))

    if overrides:
        config = replace(config, **_parse_and_validate(_as_raw_settings(overrides)))

    return config


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "SCRIPT_PATH_ENV",
    "SEARCH_PATH_ENV",
    "XdgKitConfig",
    "load_config",
    "parse_config",
]
