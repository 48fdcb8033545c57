"""Configuration loading functions.

This module provides the entry points to load a reconstruction configuration:
- load_config(): Load from a YAML string
- load_config_file(): Load from a file path

A configuration may include other files through a top-level `include` key
(a path or a list of paths, relative to the including file). Included files
are loaded first, in order, and the including file is merged on top of them.
"""

import os
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigCycleError, ConfigError, ConfigIncludeError

__all__ = ["load_config", "load_config_file", "deep_merge"]


def deep_merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merges `update` into a copy of `base`.

    Parameters
    ----------
    base : Dict[str, Any]
        Base configuration
    update : Dict[str, Any]
        Configuration which takes precedence

    Returns
    -------
    Dict[str, Any]
        Merged configuration
    """
    merged = dict(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value

    return merged


def _parse(stream: Any, source: str) -> Dict[str, Any]:
    """Parses a YAML stream into a dictionary."""
    try:
        cfg = yaml.safe_load(stream)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Error parsing {source}: {exc}") from exc

    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"The configuration in {source} must be a mapping.")

    return cfg


def _resolve_includes(
    cfg: Dict[str, Any], root_dir: str, include_stack: List[str]
) -> Dict[str, Any]:
    """Loads the files listed under `include` and merges `cfg` on top."""
    includes = cfg.pop("include", None)
    if includes is None:
        return cfg
    if isinstance(includes, str):
        includes = [includes]

    base = {}
    for path in includes:
        if not os.path.isabs(path):
            path = os.path.join(root_dir, path)
        base = deep_merge(base, _load_recursive(path, include_stack))

    return deep_merge(base, cfg)


def _load_recursive(
    cfg_path: str, include_stack: Optional[List[str]] = None
) -> Dict[str, Any]:
    """Recursively load a configuration file with cycle detection."""
    cfg_path = os.path.abspath(cfg_path)
    include_stack = include_stack or []
    if cfg_path in include_stack:
        raise ConfigCycleError(include_stack + [cfg_path])

    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = _parse(f, cfg_path)
    except FileNotFoundError as exc:
        raise ConfigIncludeError(f"Configuration file not found: {cfg_path}") from exc

    return _resolve_includes(
        cfg, os.path.dirname(cfg_path), include_stack + [cfg_path]
    )


def load_config(config_string: str, root_dir: Optional[str] = None) -> Dict[str, Any]:
    """Load a configuration from a YAML string.

    Parameters
    ----------
    config_string : str
        YAML configuration string
    root_dir : str, optional
        Directory against which relative include paths are resolved.
        Defaults to the current working directory.

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary
    """
    cfg = _parse(config_string, "<string>")

    return _resolve_includes(cfg, root_dir or os.getcwd(), [])


def load_config_file(cfg_path: str) -> Dict[str, Any]:
    """Load a configuration from a YAML file.

    Parameters
    ----------
    cfg_path : str
        Path to the configuration file

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary

    Raises
    ------
    ConfigIncludeError
        If the file or one of its includes does not exist
    ConfigCycleError
        If the include chain loops back on itself
    """
    return _load_recursive(cfg_path)
