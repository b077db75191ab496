"""
Layered YAML configuration.

Layers, lowest priority first:
1. config/defaults.yaml    - shipped defaults (checked into repo)
2. config/settings.yaml    - local overrides (gitignored)
3. <vault>/.deltanote.yaml - per-vault overrides that travel with the notes
Environment variables go on top, applied by typed_config_loader.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

logger = logging.getLogger(__name__)

VAULT_CONFIG_NAME = ".deltanote.yaml"

# Merged config per layer list
_cache: Dict[Tuple[Path, ...], Dict[str, Any]] = {}


def get_project_root() -> Path:
    """Get the project root directory."""
    # Navigate up from deltanote/core/defaults_loader.py
    return Path(__file__).resolve().parent.parent.parent


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """Mapping stored in ``file_path``; ``{}`` when missing, empty or unusable."""
    if not file_path.is_file():
        return {}

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring unparsable config file {file_path}: {e}")
        return {}

    if content is None:
        return {}
    if not isinstance(content, dict):
        logger.warning(f"Ignoring config file {file_path}: top level is not a mapping")
        return {}
    return content


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def config_layers(
    vault: Optional[Path] = None, config_dir: Optional[Path] = None
) -> List[Path]:
    """Files to merge, lowest priority first."""
    config_dir = config_dir or get_project_root() / "config"
    layers = [config_dir / "defaults.yaml", config_dir / "settings.yaml"]
    if vault is not None:
        layers.append(Path(vault).expanduser() / VAULT_CONFIG_NAME)
    return layers


def load_layers(layers: Sequence[Path], reload: bool = False) -> Dict[str, Any]:
    """Merge ``layers`` in order. Missing files are skipped."""
    key = tuple(layers)
    if not reload and key in _cache:
        return _cache[key]

    config: Dict[str, Any] = {}
    for path in layers:
        layer = load_yaml_file(path)
        if layer:
            logger.debug(f"Config layer loaded: {path}")
            config = deep_merge(config, layer)

    _cache[key] = config
    return config


def load_defaults(vault: Optional[Path] = None, reload: bool = False) -> Dict[str, Any]:
    """Project config, plus the vault's own overrides when ``vault`` is given."""
    return load_layers(config_layers(vault), reload=reload)


def get_section(
    name: str, vault: Optional[Path] = None, config: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Top-level section ``name`` as a dict (``{}`` when absent or malformed)."""
    if config is None:
        config = load_defaults(vault)
    section = config.get(name) or {}
    if not isinstance(section, dict):
        logger.warning(f"Config '{name}' section is not a mapping, ignoring it")
        return {}
    return section


def clear_cache() -> None:
    """Clear the configuration cache (useful for testing)."""
    _cache.clear()
