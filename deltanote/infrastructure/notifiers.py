"""Notifier adapters."""

import logging
import sys
from typing import List, TextIO

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Logs notifications and keeps them for later inspection."""

    def __init__(self):
        self.messages: List[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
        logger.info(f"Notice: {message}")


class ConsoleNotifier(LoggingNotifier):
    """Prints notifications to a stream (stdout by default)."""

    def __init__(self, stream: TextIO = None):
        super().__init__()
        self.stream = stream or sys.stdout

    def notify(self, message: str) -> None:
        super().notify(message)
        print(message, file=self.stream)
