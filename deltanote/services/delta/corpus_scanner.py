"""
Corpus scanner: finds every due delta item in the vault.

Full scan, no index. Results follow the store's document order and then
ascending line index; callers that want date order sort the list
themselves.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import PurePosixPath
from typing import Iterable, List, Optional, Union

from ...domain.errors import DocumentNotFound
from ...domain.ports import DocumentStore
from ...utils.logging import get_logger
from .block_identity import find_reference, strip_reference
from .line_mutator import remove_tag
from .tag_codec import DeltaTag, DeltaTagCodec

logger = logging.getLogger(__name__)
scan_log = get_logger("deltanote.scan")

DEFAULT_DONE_MARKERS = ("[x]", "[X]", "✅")


@dataclass(frozen=True)
class DueItem:
    """A tagged line whose due date has arrived. Stale after any edit."""

    document_id: str
    line_index: int
    display_content: str
    block_reference: Optional[str]
    delta: DeltaTag
    original_line: str

    @property
    def document_name(self) -> str:
        return document_display_name(self.document_id)


def document_display_name(document_id: str) -> str:
    """Link name of a document: its basename without extension."""
    return PurePosixPath(document_id).stem


def display_content(line: str, tag: DeltaTag) -> str:
    """Line text with the tag and block reference taken out."""
    return strip_reference(remove_tag(line, tag.raw_text)).strip()


def is_completed(line: str, done_markers: Iterable[str]) -> bool:
    return any(marker and marker in line for marker in done_markers)


def scan_document(
    document_id: str,
    text: str,
    today: Union[date, str],
    codec: DeltaTagCodec,
    done_markers: Iterable[str] = DEFAULT_DONE_MARKERS,
) -> List[DueItem]:
    """Due items of a single document, in line order."""
    today_iso = today if isinstance(today, str) else today.isoformat()
    markers = tuple(done_markers)
    items: List[DueItem] = []

    for index, line in enumerate(text.split("\n")):
        tag = codec.decode(line)
        if tag is None or not tag.is_due(today_iso):
            continue
        if is_completed(line, markers):
            continue

        items.append(
            DueItem(
                document_id=document_id,
                line_index=index,
                display_content=display_content(line, tag),
                block_reference=find_reference(line),
                delta=tag,
                original_line=line,
            )
        )

    return items


async def find_due_items(
    store: DocumentStore,
    today: Union[date, str],
    codec: DeltaTagCodec,
    done_markers: Iterable[str] = DEFAULT_DONE_MARKERS,
) -> List[DueItem]:
    """Scan every document in the store for due items."""
    markers = tuple(done_markers)
    document_ids = await store.list_documents()
    due: List[DueItem] = []
    skipped = 0

    for document_id in document_ids:
        try:
            text = await store.read(document_id)
        except DocumentNotFound:
            # Listed but gone by the time we read it.
            logger.warning(f"Skipping unreadable document during scan: {document_id}")
            skipped += 1
            continue
        due.extend(scan_document(document_id, text, today, codec, markers))

    scan_log.info(
        "Delta scan completed",
        documents=len(document_ids),
        skipped=skipped,
        due=len(due),
        today=str(today),
    )
    return due
