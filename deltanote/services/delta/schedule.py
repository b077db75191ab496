"""
Schedule transitions for one line of text.

    Untagged --send_forward--> Tagged(i, m, today+i)
    Tagged   --resurface-----> Tagged(i*m, m, today+i*m)
    Tagged   --complete------> Untagged

The line text is the only state; each function returns the rewritten line.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from ...domain.errors import InvalidSchedule, NoDeltaTag
from ...domain.ports import RandomTokenSource
from .block_identity import ensure_reference
from .line_mutator import apply_tag, remove_tag
from .tag_codec import DeltaTag, DeltaTagCodec


@dataclass(frozen=True)
class Transition:
    line_text: str
    tag: Optional[DeltaTag]
    reference: Optional[str] = None


def due_date_after(today: date, days: int) -> str:
    """ISO date ``days`` after ``today``."""
    return (today + timedelta(days=days)).isoformat()


def next_interval(tag: DeltaTag) -> int:
    return tag.interval * tag.multiplier


def send_forward(
    line: str,
    days: int,
    today: date,
    codec: DeltaTagCodec,
    token_source: RandomTokenSource,
) -> Transition:
    """Schedule ``line`` to resurface in ``days`` days.

    The line gets a block reference first (so the surfaced copy can embed
    it). An existing tag keeps its multiplier; a new one uses the codec's
    default.
    """
    if days < 1:
        raise InvalidSchedule(f"days must be >= 1, got {days}")

    ref = ensure_reference(line, token_source)
    existing = codec.decode(ref.line_text)
    multiplier = existing.multiplier if existing else codec.default_multiplier

    tag_text = codec.encode(days, multiplier, due_date_after(today, days))
    new_line = apply_tag(ref.line_text, tag_text, codec)
    return Transition(
        line_text=new_line, tag=codec.decode(new_line), reference=ref.reference
    )


def resurface(line: str, today: date, codec: DeltaTagCodec) -> Transition:
    """Grow the interval by the multiplier and push the due date out."""
    tag = codec.decode(line)
    if tag is None:
        raise NoDeltaTag()

    interval = next_interval(tag)
    tag_text = codec.encode(interval, tag.multiplier, due_date_after(today, interval))
    new_line = apply_tag(line, tag_text, codec)
    return Transition(line_text=new_line, tag=codec.decode(new_line))


def complete(line: str, codec: DeltaTagCodec) -> Transition:
    """Drop the tag; the block is done resurfacing."""
    tag = codec.decode(line)
    if tag is None:
        raise NoDeltaTag()

    return Transition(line_text=remove_tag(line, tag.raw_text), tag=None)
