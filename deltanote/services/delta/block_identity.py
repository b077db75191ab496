"""
Block identity resolver.

A block reference is the trailing `` ^token`` of a line. It is what embed
links (``![[note#^token]]``) point at, so once a line has one it is never
regenerated.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ...domain.ports import RandomTokenSource

REFERENCE_LENGTH = 6

REFERENCE_RE = re.compile(r"\s+\^([a-zA-Z0-9]+)\s*$")


@dataclass(frozen=True)
class ReferenceResult:
    line_text: str
    reference: str
    created: bool


def find_reference(line: str) -> Optional[str]:
    """Return the trailing block reference token, or None."""
    match = REFERENCE_RE.search(line)
    return match.group(1) if match else None


def strip_reference(line: str) -> str:
    """Remove the trailing reference marker (and the whitespace before it)."""
    return REFERENCE_RE.sub("", line)


def ensure_reference(line: str, token_source: RandomTokenSource) -> ReferenceResult:
    """Return ``line`` with a block reference, creating one when absent.

    The new marker is appended after any delta tag, so the tag region is
    never moved. Uniqueness across the vault is not checked.
    """
    existing = find_reference(line)
    if existing is not None:
        return ReferenceResult(line_text=line, reference=existing, created=False)

    reference = token_source.token(REFERENCE_LENGTH)
    return ReferenceResult(
        line_text=f"{line.rstrip()} ^{reference}",
        reference=reference,
        created=True,
    )
