"""
Typed configuration domain objects.

Replaces raw dict/env access with Pydantic-validated, immutable config:
- DeltaSettings  (tag grammar, schedule defaults, daily-note integration)
"""

import logging
import re
from typing import TYPE_CHECKING, List, Literal

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from ..services.delta.tag_codec import DeltaTagCodec

logger = logging.getLogger(__name__)

# The tag grammar only understands fixed-width ISO dates.
SUPPORTED_DATE_FORMAT = "YYYY-MM-DD"

_TAG_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_NOTE_FORMAT_TOKENS = ("YYYY", "MM", "DD")


class DeltaSettings(BaseModel):
    """Settings surface for delta scheduling and daily-note surfacing."""

    model_config = ConfigDict(frozen=True)

    tag_name: str = "delta"
    default_interval: int = 1
    default_multiplier: int = 2
    date_format: str = SUPPORTED_DATE_FORMAT

    auto_insert_on_daily_note: bool = True
    daily_notes_folder: str = "journals"
    daily_note_format: str = "YYYY_MM_DD"
    target_rule: Literal["daily_note", "active_document"] = "daily_note"

    section_header: str = "Δ Due Today"
    insert_header: str = "Δ Items Due Today"
    sentinels: List[str] = ["**Δ Due Today**", "**Δ Items Due Today**"]
    done_markers: List[str] = ["[x]", "[X]", "✅"]

    @field_validator("tag_name")
    @classmethod
    def tag_name_valid(cls, v: str) -> str:
        if not _TAG_NAME_RE.match(v):
            raise ValueError(
                f"tag_name must contain only letters, digits, '_' or '-', got '{v}'"
            )
        return v

    @field_validator("default_interval", "default_multiplier")
    @classmethod
    def positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("date_format")
    @classmethod
    def date_format_supported(cls, v: str) -> str:
        if v != SUPPORTED_DATE_FORMAT:
            raise ValueError(
                f"date_format must be '{SUPPORTED_DATE_FORMAT}', got '{v}'"
            )
        return v

    @field_validator("daily_note_format")
    @classmethod
    def note_format_has_tokens(cls, v: str) -> str:
        missing = [t for t in _NOTE_FORMAT_TOKENS if t not in v]
        if missing:
            raise ValueError(f"daily_note_format is missing {', '.join(missing)}")
        return v

    @field_validator("daily_notes_folder")
    @classmethod
    def strip_folder_slashes(cls, v: str) -> str:
        return v.strip("/")

    @field_validator("sentinels")
    @classmethod
    def sentinels_non_empty(cls, v: List[str]) -> List[str]:
        cleaned = [s for s in v if s]
        if not cleaned:
            raise ValueError("at least one sentinel is required")
        return cleaned

    @property
    def section_sentinel(self) -> str:
        """Bold header text written by reconciliation."""
        return f"**{self.section_header}**"

    def codec(self) -> "DeltaTagCodec":
        """Build the tag codec for the configured grammar."""
        from ..services.delta.tag_codec import DeltaTagCodec

        return DeltaTagCodec(
            tag_name=self.tag_name, default_multiplier=self.default_multiplier
        )
