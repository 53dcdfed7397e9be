"""
Configuration for xdgkit script resolution.
"""

from .parser import (
    DEFAULT_CONFIG_FILE,
    SCRIPT_PATH_ENV,
    SEARCH_PATH_ENV,
    XdgKitConfig,
    load_config,
    parse_config,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "SCRIPT_PATH_ENV",
    "SEARCH_PATH_ENV",
    "XdgKitConfig",
    "load_config",
    "parse_config",
]
