#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the docrender CLI.

A configuration file supplies defaults for command line options. Recognized
keys are ``backend``, ``template_dirs``, ``template_engine``,
``template_cache``, ``strict_undefined``, ``standalone``, ``extra_context``
and ``engine_options``; for example, in ``.docrender.toml``::

    backend = "html5"
    template_dirs = ["./custom", "./fallback"]

    [engine_options]
    trim_blocks = true

Relative template directories are resolved against the directory holding
the configuration file.
"""

import argparse
import json
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Callable, Dict, Optional

import yaml

DEDICATED_CONFIG_FILENAMES = [".docrender.toml", ".docrender.yaml", ".docrender.yml", ".docrender.json"]
CONFIG_FILENAMES = DEDICATED_CONFIG_FILENAMES + ["pyproject.toml"]

CONFIG_KEYS = frozenset(
    {
        "backend",
        "template_dirs",
        "template_engine",
        "template_cache",
        "strict_undefined",
        "standalone",
        "extra_context",
        "engine_options",
    }
)


def _read_toml(config_path: Path) -> Any:
    with open(config_path, "rb") as f:
        return tomllib.load(f)


def _read_yaml(config_path: Path) -> Any:
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _read_json(config_path: Path) -> Any:
    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


_READERS: Dict[str, Callable[[Path], Any]] = {
    ".toml": _read_toml,
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
    ".json": _read_json,
}

_PARSE_ERRORS = (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError)


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.docrender]`` table from a pyproject.toml file.

    Returns
    -------
    dict
        The table, or an empty dict if the file has none

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be parsed or the section is not a table

    """
    try:
        data = _read_toml(pyproject_path)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading pyproject.toml {pyproject_path}: {e}") from e

    config = data.get("tool", {}).get("docrender", {})
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.docrender] section in {pyproject_path} must be a table, got {type(config).__name__}"
        )
    return config


def _config_in_dir(directory: Path, include_pyproject: bool = True) -> Optional[Path]:
    for filename in DEDICATED_CONFIG_FILENAMES:
        config_path = directory / filename
        if config_path.is_file():
            return config_path

    if include_pyproject:
        pyproject_path = directory / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except argparse.ArgumentTypeError:
                # Unparseable pyproject.toml files are skipped during discovery
                pass
    return None


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file in a directory or any of its parents.

    Each directory is checked for ``.docrender.toml``, ``.docrender.yaml``,
    ``.docrender.yml``, ``.docrender.json`` and finally a ``pyproject.toml``
    with a ``[tool.docrender]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    current = (start_dir or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        config_path = _config_in_dir(directory)
        if config_path is not None:
            return config_path
    return None


def discover_config_file(start_dir: Optional[Path] = None, home: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in standard locations.

    Searches from the working directory up to the filesystem root, then the
    dedicated config files in the user's home directory.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for the parent search
    home : Path, optional
        Home directory, defaults to ``Path.home()``

    Returns
    -------
    Path or None
        Path to discovered config file, or None if not found

    """
    config_in_parents = find_config_in_parents(start_dir)
    if config_in_parents:
        return config_in_parents
    return _config_in_dir(home or Path.home(), include_pyproject=False)


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, YAML, JSON or pyproject.toml file.

    Relative ``template_dirs`` entries are made absolute against the
    directory containing the file.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read, parsed, or has invalid format

    Examples
    --------
    >>> config = load_config_file(".docrender.toml")
    >>> config.get("backend")
    'html5'

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")
    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration path is not a file: {config_path}")

    if config_path.name.lower() == "pyproject.toml":
        config = _load_pyproject_section(config_path)
    else:
        ext = config_path.suffix.lower()
        reader = _READERS.get(ext)
        if reader is None:
            raise argparse.ArgumentTypeError(f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml")
        try:
            config = reader(config_path)
        except _PARSE_ERRORS as e:
            raise argparse.ArgumentTypeError(f"Invalid {ext[1:].upper()} in config file {config_path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise argparse.ArgumentTypeError(f"Error reading config file {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"Config file {config_path} must contain a mapping at root level, got {type(config).__name__}"
        )

    return _resolve_relative_dirs(validate_config(config, config_path), config_path.parent)


def validate_config(config: Dict[str, Any], source: Path | str = "<config>") -> Dict[str, Any]:
    """Check that a configuration only uses known keys with sensible types.

    Raises
    ------
    argparse.ArgumentTypeError
        If an unknown key is present or a value has the wrong type

    """
    unknown = sorted(set(config) - CONFIG_KEYS)
    if unknown:
        raise argparse.ArgumentTypeError(
            f"Unknown key(s) in {source}: {', '.join(unknown)}. Valid keys: {', '.join(sorted(CONFIG_KEYS))}"
        )

    template_dirs = config.get("template_dirs")
    if isinstance(template_dirs, str):
        config = {**config, "template_dirs": [template_dirs]}
    elif template_dirs is not None and not (
        isinstance(template_dirs, list) and all(isinstance(d, str) for d in template_dirs)
    ):
        raise argparse.ArgumentTypeError(f"template_dirs in {source} must be a string or a list of strings")

    for key in ("extra_context", "engine_options"):
        if key in config and not isinstance(config[key], dict):
            raise argparse.ArgumentTypeError(f"{key} in {source} must be a table/mapping")

    return config


def _resolve_relative_dirs(config: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
    template_dirs = config.get("template_dirs")
    if not template_dirs:
        return config
    resolved = [str(d) if Path(d).is_absolute() else str(base_dir / d) for d in template_dirs]
    return {**config, "template_dirs": resolved}


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries with deep merging.

    The override dictionary takes precedence over base for conflicting keys.
    Nested dictionaries are merged recursively, not replaced entirely.

    Examples
    --------
    >>> base = {"engine_options": {"trim_blocks": True}, "backend": "html5"}
    >>> override = {"engine_options": {"lstrip_blocks": True}, "backend": "docbook5"}
    >>> merge_configs(base, override)
    {'engine_options': {'trim_blocks': True, 'lstrip_blocks': True}, 'backend': 'docbook5'}

    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def load_config_with_priority(
    explicit_path: Optional[str] = None, env_var_path: Optional[str] = None
) -> Dict[str, Any]:
    """Load configuration with proper priority handling.

    Priority order (highest to lowest):
    1. Explicit config file path (--config flag)
    2. Environment variable config path (DOCRENDER_CONFIG)
    3. Auto-discovered config file

    Returns
    -------
    dict
        Loaded configuration dictionary (empty dict if no config found)

    Raises
    ------
    argparse.ArgumentTypeError
        If a config file is specified but cannot be loaded

    """
    for path in (explicit_path, env_var_path):
        if path:
            return load_config_file(path)

    discovered_path = discover_config_file()
    if discovered_path:
        return load_config_file(discovered_path)

    return {}
