"""
Typed config loader — parses YAML / env vars into DeltaSettings.

The ``delta:`` section of the layered YAML config (defaults.yaml,
settings.yaml, then the vault's .deltanote.yaml) is overlaid with
``DELTA_*`` environment variables. Fields that fail validation are logged
and fall back to their defaults instead of taking the whole configuration
down.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .defaults_loader import get_section, load_yaml_file
from .typed_config import DeltaSettings

logger = logging.getLogger(__name__)

# env var -> DeltaSettings field
_ENV_OVERRIDES = {
    "DELTA_TAG_NAME": "tag_name",
    "DELTA_DEFAULT_INTERVAL": "default_interval",
    "DELTA_DEFAULT_MULTIPLIER": "default_multiplier",
    "DELTA_AUTO_INSERT": "auto_insert_on_daily_note",
    "DELTA_DAILY_NOTES_FOLDER": "daily_notes_folder",
    "DELTA_DAILY_NOTE_FORMAT": "daily_note_format",
    "DELTA_TARGET_RULE": "target_rule",
}


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_name, field in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None and value != "":
            overrides[field] = value
    return overrides


def build_delta_settings(raw: Dict[str, Any]) -> DeltaSettings:
    """Validate ``raw``, dropping invalid or unknown fields."""
    known = {k: v for k, v in raw.items() if k in DeltaSettings.model_fields and v is not None}
    unknown = sorted(k for k in raw if k not in DeltaSettings.model_fields)
    if unknown:
        logger.warning("Ignoring unknown delta settings: %s", ", ".join(unknown))

    try:
        return DeltaSettings(**known)
    except ValidationError as e:
        bad_fields = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
        for field in sorted(bad_fields):
            logger.warning(
                "Invalid delta setting '%s' = %r, using default", field, known.get(field)
            )
        return DeltaSettings(**{k: v for k, v in known.items() if k not in bad_fields})


def load_delta_settings(
    path: Optional[Path] = None, vault: Optional[Path] = None
) -> DeltaSettings:
    """Parse the ``delta`` section into DeltaSettings.

    With ``path`` only that file is read. Otherwise the layered project
    config is used, including ``vault``'s own overrides when given.
    """
    if path is not None:
        raw = load_yaml_file(path)
        if not raw:
            logger.warning("Config file not found or empty: %s", path)
        section = get_section("delta", config=raw)
    else:
        section = get_section("delta", vault=vault)

    return build_delta_settings({**section, **_env_overrides()})


# ---------------------------------------------------------------------------
# Cached singleton
# ---------------------------------------------------------------------------

_delta_settings: Optional[DeltaSettings] = None


def get_delta_settings() -> DeltaSettings:
    global _delta_settings
    if _delta_settings is None:
        _delta_settings = load_delta_settings()
    return _delta_settings


def _clear_caches() -> None:
    """Clear cached typed config (for testing)."""
    global _delta_settings
    _delta_settings = None
