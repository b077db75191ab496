"""
Daily note naming and detection.

Note names use ``YYYY``, ``MM`` and ``DD`` tokens (``YYYY_MM_DD`` by default).
Daily notes live under one folder of the vault, possibly nested below it
(``journals/2024/2024_01_02.md``); new notes are created directly in it.
"""

import re
from datetime import date
from pathlib import PurePosixPath
from typing import Optional, Pattern

from ..core.typed_config import DeltaSettings

_DAILY_NOTE_NAME_RE = re.compile(r"^\d{4}[_-]\d{2}[_-]\d{2}$")

_TOKEN_PATTERNS = {"YYYY": r"\d{4}", "MM": r"\d{2}", "DD": r"\d{2}"}


def format_note_name(day: date, fmt: str = "YYYY_MM_DD") -> str:
    """Render a daily note basename, e.g. ``2024_01_02``."""
    return (
        fmt.replace("YYYY", f"{day.year:04d}")
        .replace("MM", f"{day.month:02d}")
        .replace("DD", f"{day.day:02d}")
    )


def note_name_pattern(fmt: str) -> Pattern[str]:
    """Regex matching any basename rendered from ``fmt``."""
    parts = re.split(r"(YYYY|MM|DD)", fmt)
    body = "".join(_TOKEN_PATTERNS.get(part, re.escape(part)) for part in parts)
    return re.compile(f"^{body}$")


def in_folder(document_id: str, folder: str) -> bool:
    """Whether ``document_id`` sits anywhere below ``folder`` ("" is the vault root)."""
    folder = folder.strip("/")
    return not folder or document_id.startswith(folder + "/")


def is_daily_note(document_id: str, folder: str, fmt: Optional[str] = None) -> bool:
    """Inside the daily notes folder and named like a date.

    Without ``fmt`` any ``YYYY_MM_DD`` or ``YYYY-MM-DD`` basename counts.
    """
    if not in_folder(document_id, folder):
        return False
    pattern = note_name_pattern(fmt) if fmt else _DAILY_NOTE_NAME_RE
    return bool(pattern.match(PurePosixPath(document_id).stem))


def todays_note_id(today: date, settings: DeltaSettings) -> str:
    name = format_note_name(today, settings.daily_note_format)
    folder = settings.daily_notes_folder
    return f"{folder}/{name}.md" if folder else f"{name}.md"


def is_todays_note(document_id: str, today: date, settings: DeltaSettings) -> bool:
    """A daily note (at any depth under the folder) named for ``today``."""
    fmt = settings.daily_note_format
    return (
        is_daily_note(document_id, settings.daily_notes_folder, fmt)
        and PurePosixPath(document_id).stem == format_note_name(today, fmt)
    )
