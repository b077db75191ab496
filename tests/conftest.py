import logging
import os
from typing import Dict, List, Optional

import pytest

# Set test environment variables
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_TO_FILE"] = "false"


class InMemoryStore:
    """DocumentStore fake keyed by document id, in insertion order."""

    def __init__(self, documents: Optional[Dict[str, str]] = None):
        self.documents: Dict[str, str] = dict(documents or {})
        self.reads: List[str] = []
        self.writes: List[str] = []
        self.fail_writes: set = set()

    async def list_documents(self) -> List[str]:
        return list(self.documents)

    async def read(self, document_id: str) -> str:
        from deltanote.domain.errors import DocumentNotFound

        self.reads.append(document_id)
        if document_id not in self.documents:
            raise DocumentNotFound(document_id)
        return self.documents[document_id]

    async def write(self, document_id: str, text: str) -> bool:
        if document_id in self.fail_writes:
            return False
        self.writes.append(document_id)
        self.documents[document_id] = text
        return True

    async def get_line(self, buffer_id: str, index: int) -> str:
        from deltanote.domain.errors import LineOutOfRange

        lines = (await self.read(buffer_id)).split("\n")
        if index < 0 or index >= len(lines):
            raise LineOutOfRange(buffer_id, index)
        return lines[index].rstrip("\r")

    async def set_line(self, buffer_id: str, index: int, text: str) -> bool:
        from deltanote.domain.errors import LineOutOfRange

        lines = (await self.read(buffer_id)).split("\n")
        if index < 0 or index >= len(lines):
            raise LineOutOfRange(buffer_id, index)
        old = lines[index]
        lines[index] = text.rstrip("\r") + old[len(old.rstrip("\r")):]
        return await self.write(buffer_id, "\n".join(lines))


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture(autouse=True)
def _clear_config_caches():
    """Config loaders cache module-level state; reset it around every test."""
    from deltanote.core import defaults_loader, typed_config_loader

    defaults_loader.clear_cache()
    typed_config_loader._clear_caches()
    yield
    defaults_loader.clear_cache()
    typed_config_loader._clear_caches()


@pytest.fixture
def settings():
    from deltanote.core.typed_config import DeltaSettings

    return DeltaSettings()


@pytest.fixture
def codec(settings):
    return settings.codec()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def notifier():
    from deltanote.infrastructure.notifiers import LoggingNotifier

    return LoggingNotifier()


@pytest.fixture
def tokens():
    from deltanote.infrastructure.token_sources import FixedTokenSource

    return FixedTokenSource(["abc123", "def456", "ghi789"])
