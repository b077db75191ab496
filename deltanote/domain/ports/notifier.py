"""Notifier port -- short transient user-facing messages."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """Displays a short, non-blocking message to the user."""

    def notify(self, message: str) -> None: ...
