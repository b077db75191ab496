"""
Delta tag codec.

Encodes and decodes the inline schedule marker::

    {{delta:<interval>+<multiplier> <YYYY-MM-DD>}}

The legacy form without ``+<multiplier>`` still decodes (the configured
default multiplier is filled in) but encode always writes the multiplier.
Any run of whitespace before the date decodes; encode writes one space.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Pattern, Union

from ...domain.errors import InvalidSchedule

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class DeltaTag:
    """A schedule parsed from a line."""

    interval: int
    multiplier: int
    due_date: str
    raw_text: str

    def is_due(self, today: Union[date, str]) -> bool:
        """Due on or after ``due_date``; fixed-width ISO strings compare in date order."""
        today_iso = today if isinstance(today, str) else today.isoformat()
        return self.due_date <= today_iso


class DeltaTagCodec:
    """Tag grammar bound to a tag name and a default multiplier."""

    def __init__(self, tag_name: str = "delta", default_multiplier: int = 2):
        if default_multiplier < 1:
            raise InvalidSchedule("default multiplier must be >= 1")
        self.tag_name = tag_name
        self.default_multiplier = default_multiplier
        self._pattern: Pattern[str] = re.compile(
            r"\{\{"
            + re.escape(tag_name)
            + r":(\d+)(?:\+(\d+))?\s+(\d{4}-\d{2}-\d{2})\}\}"
        )

    def decode(self, line: str) -> Optional[DeltaTag]:
        """Return the first tag on ``line``, or None.

        Tags with a zero interval or multiplier are not recognised.
        """
        match = self._pattern.search(line)
        if not match:
            return None

        interval = int(match.group(1))
        multiplier = (
            int(match.group(2)) if match.group(2) is not None else self.default_multiplier
        )
        if interval < 1 or multiplier < 1:
            return None

        return DeltaTag(
            interval=interval,
            multiplier=multiplier,
            due_date=match.group(3),
            raw_text=match.group(0),
        )

    def encode(self, interval: int, multiplier: int, due_date: Union[date, str]) -> str:
        """Canonical tag text for a schedule."""
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
            raise InvalidSchedule(f"interval must be a positive integer, got {interval!r}")
        if (
            isinstance(multiplier, bool)
            or not isinstance(multiplier, int)
            or multiplier < 1
        ):
            raise InvalidSchedule(
                f"multiplier must be a positive integer, got {multiplier!r}"
            )

        if isinstance(due_date, date):
            due_str = due_date.isoformat()
        else:
            due_str = str(due_date)
            if not _ISO_DATE_RE.match(due_str):
                raise InvalidSchedule(f"due date must be YYYY-MM-DD, got {due_str!r}")

        return f"{{{{{self.tag_name}:{interval}+{multiplier} {due_str}}}}}"

    def contains_tag(self, line: str) -> bool:
        return self.decode(line) is not None
