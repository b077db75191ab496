"""
Delta Service
Editor-facing delta commands: send forward, resurface, done, list and
surface due items
"""

import logging
from datetime import date
from typing import Callable, List, Optional

from ..core.error_messages import user_message
from ..core.typed_config import DeltaSettings
from ..domain.errors import DocumentNotFound, DomainError, NoDeltaTag
from ..domain.ports import DocumentStore, Notifier, RandomTokenSource
from ..infrastructure.token_sources import SystemTokenSource
from ..utils.logging import log_delta_event
from .daily_notes import is_todays_note, todays_note_id
from .delta import schedule
from .delta.corpus_scanner import DueItem, find_due_items
from .delta.reconciler import DueItemReconciler, ReconcileResult, render_section

logger = logging.getLogger(__name__)


class DeltaService:
    """Binds the delta core to a document store and a notifier."""

    def __init__(
        self,
        store: DocumentStore,
        notifier: Notifier,
        settings: Optional[DeltaSettings] = None,
        token_source: Optional[RandomTokenSource] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.store = store
        self.notifier = notifier
        self.settings = settings or DeltaSettings()
        self.token_source = token_source or SystemTokenSource()
        self.codec = self.settings.codec()
        self.reconciler = DueItemReconciler(store, self.settings, notifier, self.codec)
        self._clock = clock

    def _today(self, today: Optional[date]) -> date:
        return today if today is not None else self._clock()

    def _report(self, error: DomainError) -> None:
        logger.warning(f"Delta command failed: {error}")
        self.notifier.notify(f"Δ {user_message(error)}")

    # ------------------------------------------------------------------
    # Line commands
    # ------------------------------------------------------------------

    async def send_forward(
        self,
        buffer_id: str,
        line_index: int,
        days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> Optional[schedule.Transition]:
        """Tag the line to resurface in ``days`` days (default interval if None)."""
        days = days if days is not None else self.settings.default_interval
        try:
            line = await self.store.get_line(buffer_id, line_index)
            transition = schedule.send_forward(
                line, days, self._today(today), self.codec, self.token_source
            )
            if not await self.store.set_line(buffer_id, line_index, transition.line_text):
                self.notifier.notify(f"Δ Failed to update {buffer_id}")
                return None
        except DomainError as e:
            self._report(e)
            return None

        log_delta_event(
            "send_forward",
            {
                "document": buffer_id,
                "line": line_index,
                "interval": days,
                "due": transition.tag.due_date,
            },
        )
        self.notifier.notify(f"Δ Block will resurface on {transition.tag.due_date}")
        return transition

    async def send_to_tomorrow(
        self, buffer_id: str, line_index: int, today: Optional[date] = None
    ) -> Optional[schedule.Transition]:
        return await self.send_forward(buffer_id, line_index, 1, today)

    async def resurface_line(
        self, buffer_id: str, line_index: int, today: Optional[date] = None
    ) -> Optional[schedule.Transition]:
        """Grow the line's interval and reschedule it."""
        try:
            line = await self.store.get_line(buffer_id, line_index)
            try:
                transition = schedule.resurface(line, self._today(today), self.codec)
            except NoDeltaTag:
                self.notifier.notify(
                    'Δ No delta tag found on this line. Use "Send to tomorrow" first.'
                )
                return None
            if not await self.store.set_line(buffer_id, line_index, transition.line_text):
                self.notifier.notify(f"Δ Failed to update {buffer_id}")
                return None
        except DomainError as e:
            self._report(e)
            return None

        log_delta_event(
            "resurface",
            {
                "document": buffer_id,
                "line": line_index,
                "interval": transition.tag.interval,
                "due": transition.tag.due_date,
            },
        )
        self.notifier.notify(
            f"Δ Block will resurface on {transition.tag.due_date} "
            f"(interval: {transition.tag.interval} days)"
        )
        return transition

    async def mark_done(self, buffer_id: str, line_index: int) -> Optional[schedule.Transition]:
        """Remove the line's delta tag."""
        try:
            line = await self.store.get_line(buffer_id, line_index)
            try:
                transition = schedule.complete(line, self.codec)
            except NoDeltaTag:
                self.notifier.notify("Δ No delta tag found on this line.")
                return None
            if not await self.store.set_line(buffer_id, line_index, transition.line_text):
                self.notifier.notify(f"Δ Failed to update {buffer_id}")
                return None
        except DomainError as e:
            self._report(e)
            return None

        log_delta_event("complete", {"document": buffer_id, "line": line_index})
        self.notifier.notify("Δ Item marked as done")
        return transition

    async def line_has_tag(self, buffer_id: str, line_index: int) -> bool:
        """Whether the context menu should offer done/resurface for this line."""
        try:
            line = await self.store.get_line(buffer_id, line_index)
        except DomainError:
            return False
        return self.codec.contains_tag(line)

    # ------------------------------------------------------------------
    # Due items
    # ------------------------------------------------------------------

    async def find_due(self, today: Optional[date] = None) -> List[DueItem]:
        return await find_due_items(
            self.store, self._today(today), self.codec, self.settings.done_markers
        )

    async def show_due(self, today: Optional[date] = None) -> List[DueItem]:
        """Due items for display; notifies when there are none."""
        items = await self.find_due(today)
        if not items:
            self.notifier.notify("Δ No delta items due today!")
        return items

    async def insert_due_at(
        self, buffer_id: str, line_index: int, today: Optional[date] = None
    ) -> int:
        """Insert a due-items block above ``line_index``. Source tags are kept."""
        items = await self.find_due(today)
        if not items:
            self.notifier.notify("Δ No delta items due today!")
            return 0

        try:
            text = await self.store.read(buffer_id)
        except DocumentNotFound as e:
            self._report(e)
            return 0

        lines = text.split("\n")
        position = max(0, min(line_index, len(lines)))
        block = render_section(items, self.settings.insert_header, with_count=False)
        # Match the document's line endings.
        eol = "\r" if "\r\n" in text else ""
        lines[position:position] = [
            line + eol for line in block.rstrip("\n").split("\n")
        ]

        if not await self.store.write(buffer_id, "\n".join(lines)):
            self.notifier.notify(f"Δ Failed to update {buffer_id}")
            return 0

        self.notifier.notify(f"Inserted {len(items)} delta items")
        return len(items)

    async def _rewrite_item(self, item: DueItem, rewrite) -> Optional[schedule.Transition]:
        """Re-read the item's document and rewrite its line if the tag is unchanged."""
        try:
            text = await self.store.read(item.document_id)
        except DocumentNotFound as e:
            self._report(e)
            return None

        lines = text.split("\n")
        line = lines[item.line_index] if item.line_index < len(lines) else ""
        body = line.rstrip("\r")
        eol = line[len(body):]
        current = self.codec.decode(body)
        if current is None or current.raw_text != item.delta.raw_text:
            logger.info(
                f"Due item changed since listing: {item.document_id}:{item.line_index}"
            )
            self.notifier.notify("Δ Item changed since it was listed; skipped")
            return None

        transition = rewrite(body)
        lines[item.line_index] = transition.line_text + eol
        if not await self.store.write(item.document_id, "\n".join(lines)):
            self.notifier.notify(f"Δ Failed to update {item.document_id}")
            return None
        return transition

    async def complete_item(self, item: DueItem) -> bool:
        transition = await self._rewrite_item(
            item, lambda line: schedule.complete(line, self.codec)
        )
        if transition is None:
            return False
        self.notifier.notify("Δ Item marked as done")
        return True

    async def resurface_item(self, item: DueItem, today: Optional[date] = None) -> bool:
        day = self._today(today)
        transition = await self._rewrite_item(
            item, lambda line: schedule.resurface(line, day, self.codec)
        )
        if transition is None:
            return False
        self.notifier.notify(
            f"Δ Resurfacing in {transition.tag.interval} days ({transition.tag.due_date})"
        )
        return True

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def resolve_target(
        self, today: date, active_document: Optional[str] = None
    ) -> str:
        """Target document according to the configured selection rule."""
        if self.settings.target_rule == "active_document":
            if active_document:
                return active_document
            logger.warning("No active document, falling back to today's daily note")
        return todays_note_id(today, self.settings)

    async def surface_today(
        self, today: Optional[date] = None, active_document: Optional[str] = None
    ) -> ReconcileResult:
        """Scan the vault and surface due items into the target document."""
        day = self._today(today)
        target = self.resolve_target(day, active_document)
        items = await self.find_due(day)
        return await self.reconciler.reconcile(target, items)

    async def on_document_opened(
        self, document_id: str, today: Optional[date] = None
    ) -> Optional[ReconcileResult]:
        """Auto-surface when today's daily note is opened."""
        if not self.settings.auto_insert_on_daily_note:
            return None

        day = self._today(today)
        if not is_todays_note(document_id, day, self.settings):
            return None

        try:
            text = await self.store.read(document_id)
        except DocumentNotFound:
            text = ""
        # Cheap guard before paying for a full vault scan.
        if any(s in text for s in self.reconciler.sentinels):
            return None

        items = await self.find_due(day)
        return await self.reconciler.reconcile(document_id, items)
