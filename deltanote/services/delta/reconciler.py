"""
Due-item reconciler.

Surfaces a set of due items into one target document and clears their
source tags so each item surfaces exactly once:

1. guard    - target already carries a sentinel: nothing to do
2. filter   - drop items that live in the target itself
3. render   - one header line plus one line per item, in scan order
4. insert   - after leading front matter, else at the top; one write
5. clear    - per source document: fresh read, descending line order,
              re-verify the tag, one write

Steps 4 and 5 are not atomic. A failure in between leaves items tagged in
their sources, so they surface again tomorrow rather than disappearing.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from ...core.typed_config import DeltaSettings
from ...domain.errors import DocumentNotFound
from ...domain.ports import DocumentStore, Notifier
from ...utils.logging import get_logger
from .corpus_scanner import DueItem
from .line_mutator import remove_tag
from .tag_codec import DeltaTagCodec

logger = logging.getLogger(__name__)
reconcile_log = get_logger("deltanote.reconcile")

FRONT_MATTER_DELIMITER = "---"


class ReconcileStatus(Enum):
    SURFACED = "surfaced"
    ALREADY_SURFACED = "already_surfaced"
    NOTHING_DUE = "nothing_due"
    WRITE_FAILED = "write_failed"


@dataclass
class ReconcileResult:
    status: ReconcileStatus
    target_id: str
    surfaced: List[DueItem] = field(default_factory=list)
    cleared: Dict[str, int] = field(default_factory=dict)
    failed_documents: List[str] = field(default_factory=list)
    skipped_stale: int = 0

    @property
    def ok(self) -> bool:
        return self.status != ReconcileStatus.WRITE_FAILED and not self.failed_documents


def render_item(item: DueItem) -> str:
    if item.block_reference:
        return f"![[{item.document_name}#^{item.block_reference}]]"
    return f"{item.display_content} — from [[{item.document_name}]]"


def render_section(items: Sequence[DueItem], header: str, with_count: bool = True) -> str:
    """Markdown block for ``items``; always ends with a newline."""
    title = f"* **{header}**"
    if with_count:
        title += f" ({len(items)} items)"
    lines = [title] + [f"\t* {render_item(item)}" for item in items]
    return "\n".join(lines) + "\n"


def front_matter_end(text: str) -> Optional[int]:
    """Offset just past the closing front-matter delimiter line, or None."""
    lines = text.split("\n")
    if not lines or lines[0].rstrip() != FRONT_MATTER_DELIMITER:
        return None

    offset = len(lines[0]) + 1
    for line in lines[1:]:
        offset += len(line) + 1
        if line.rstrip() == FRONT_MATTER_DELIMITER:
            return min(offset, len(text))
    return None


def insert_section(text: str, section: str) -> str:
    """Splice ``section`` in after front matter, or at the very start."""
    position = front_matter_end(text)
    if position is None:
        return section + text

    head = text[:position]
    if not head.endswith("\n"):
        head += "\n"
    return head + section + text[position:]


def contains_sentinel(text: str, sentinels: Iterable[str]) -> bool:
    return any(s and s in text for s in sentinels)


class DueItemReconciler:
    """Runs one surface-and-clear pass against a target document."""

    def __init__(
        self,
        store: DocumentStore,
        settings: DeltaSettings,
        notifier: Notifier,
        codec: Optional[DeltaTagCodec] = None,
    ):
        self.store = store
        self.settings = settings
        self.notifier = notifier
        self.codec = codec or settings.codec()

    @property
    def sentinels(self) -> List[str]:
        sentinels = list(self.settings.sentinels)
        if self.settings.section_sentinel not in sentinels:
            sentinels.append(self.settings.section_sentinel)
        return sentinels

    async def reconcile(self, target_id: str, due_items: Sequence[DueItem]) -> ReconcileResult:
        """Insert ``due_items`` into ``target_id`` and clear their sources."""
        try:
            target_text = await self.store.read(target_id)
        except DocumentNotFound:
            logger.info(f"Reconcile target {target_id} does not exist yet, creating it")
            target_text = ""

        if contains_sentinel(target_text, self.sentinels):
            logger.info(f"Due items already surfaced in {target_id}")
            self.notifier.notify("Δ Due items already surfaced, nothing to do")
            return ReconcileResult(ReconcileStatus.ALREADY_SURFACED, target_id)

        external = [item for item in due_items if item.document_id != target_id]
        if not external:
            self.notifier.notify("Δ No delta items due today!")
            return ReconcileResult(ReconcileStatus.NOTHING_DUE, target_id)

        section = render_section(external, self.settings.section_header)
        written = await self.store.write(target_id, insert_section(target_text, section))
        if not written:
            logger.error(f"Failed to write due section into {target_id}")
            self.notifier.notify(f"Δ Failed to update {target_id}")
            return ReconcileResult(ReconcileStatus.WRITE_FAILED, target_id)

        result = ReconcileResult(
            ReconcileStatus.SURFACED, target_id, surfaced=list(external)
        )
        await self.clear_sources(external, result)

        reconcile_log.info(
            "Due items surfaced",
            target=target_id,
            surfaced=len(external),
            cleared=sum(result.cleared.values()),
            stale=result.skipped_stale,
            failed=len(result.failed_documents),
        )

        if result.failed_documents:
            self.notifier.notify(
                f"Δ {len(external)} items due today; could not clear tags in "
                f"{', '.join(result.failed_documents)}"
            )
        else:
            self.notifier.notify(f"Δ {len(external)} items due today")
        return result

    async def clear_sources(self, items: Sequence[DueItem], result: ReconcileResult) -> None:
        """Strip the surfaced tags, one read and at most one write per document."""
        by_document: "OrderedDict[str, List[DueItem]]" = OrderedDict()
        for item in items:
            by_document.setdefault(item.document_id, []).append(item)

        for document_id, document_items in by_document.items():
            try:
                text = await self.store.read(document_id)
            except DocumentNotFound:
                logger.warning(f"Source vanished before clearing: {document_id}")
                result.skipped_stale += len(document_items)
                continue

            lines = text.split("\n")
            cleared = 0
            # Descending so an edit never shifts a line still pending.
            for item in sorted(document_items, key=lambda i: i.line_index, reverse=True):
                if item.line_index >= len(lines):
                    result.skipped_stale += 1
                    continue

                line = lines[item.line_index]
                body = line.rstrip("\r")
                eol = line[len(body):]
                current = self.codec.decode(body)
                if current is None or current.raw_text != item.delta.raw_text:
                    result.skipped_stale += 1
                    continue

                lines[item.line_index] = remove_tag(body, current.raw_text) + eol
                cleared += 1

            if not cleared:
                continue

            if await self.store.write(document_id, "\n".join(lines)):
                result.cleared[document_id] = cleared
            else:
                logger.error(f"Failed to clear delta tags in {document_id}")
                result.failed_documents.append(document_id)
