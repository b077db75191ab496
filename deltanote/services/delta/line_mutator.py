"""
Line mutator: insert, replace and remove delta tags on a single line.

Everything outside the tag (list markers, indentation, checkboxes, the
trailing block reference) is kept as-is.
"""

from .block_identity import REFERENCE_RE
from .tag_codec import DeltaTagCodec


def apply_tag(line: str, tag_text: str, codec: DeltaTagCodec) -> str:
    """Put ``tag_text`` on ``line``.

    An existing tag is replaced in place. Otherwise the tag goes just before
    the block reference when there is one, or at the end of the line.
    """
    existing = codec.decode(line)
    if existing is not None:
        return line.replace(existing.raw_text, tag_text, 1)

    ref_match = REFERENCE_RE.search(line)
    if ref_match:
        head = line[: ref_match.start()]
        return f"{head} {tag_text}{line[ref_match.start():]}"

    return f"{line.rstrip()} {tag_text}"


def remove_tag(line: str, matched_tag_text: str) -> str:
    """Delete ``matched_tag_text`` and the whitespace right before it.

    Returns ``line`` unchanged when the text is not present verbatim, so a
    stale caller can never corrupt the line.
    """
    if not matched_tag_text:
        return line

    idx = line.find(matched_tag_text)
    if idx == -1:
        return line

    before = line[:idx]
    after = line[idx + len(matched_tag_text):]
    if before.strip():
        before = before.rstrip()
    else:
        # Tag opened the line: keep indentation, drop the gap after the tag.
        after = after.lstrip(" \t")

    return (before + after).rstrip()
