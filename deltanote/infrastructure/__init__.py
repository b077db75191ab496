"""Concrete adapters for the domain ports."""

from .notifiers import ConsoleNotifier, LoggingNotifier
from .token_sources import FixedTokenSource, SystemTokenSource
from .vault_store import VaultStore

__all__ = [
    "ConsoleNotifier",
    "LoggingNotifier",
    "FixedTokenSource",
    "SystemTokenSource",
    "VaultStore",
]
