"""
Delta resurfacing core
Inline schedule tags, due-item scanning and daily-note reconciliation
"""

from .block_identity import ReferenceResult, ensure_reference, find_reference, strip_reference
from .corpus_scanner import DueItem, find_due_items, scan_document
from .line_mutator import apply_tag, remove_tag
from .reconciler import (
    DueItemReconciler,
    ReconcileResult,
    ReconcileStatus,
    insert_section,
    render_section,
)
from .schedule import Transition, complete, resurface, send_forward
from .tag_codec import DeltaTag, DeltaTagCodec

__all__ = [
    "DeltaTag",
    "DeltaTagCodec",
    "ReferenceResult",
    "ensure_reference",
    "find_reference",
    "strip_reference",
    "apply_tag",
    "remove_tag",
    "Transition",
    "send_forward",
    "resurface",
    "complete",
    "DueItem",
    "scan_document",
    "find_due_items",
    "DueItemReconciler",
    "ReconcileResult",
    "ReconcileStatus",
    "render_section",
    "insert_section",
]
