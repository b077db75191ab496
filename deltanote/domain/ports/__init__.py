"""Domain port protocols for decoupling the delta core from its host."""

from .document_store import DocumentStore
from .notifier import Notifier
from .token_source import RandomTokenSource

__all__ = ["DocumentStore", "Notifier", "RandomTokenSource"]
