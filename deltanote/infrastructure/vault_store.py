"""
Filesystem DocumentStore over a Markdown vault.

Document ids are POSIX paths relative to the vault root
(``journals/2024_01_02.md``). Blocking file I/O runs in a worker thread so
the async callers never stall the event loop.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import List

from ..domain.errors import DocumentNotFound, DocumentWriteFailed, LineOutOfRange

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


class VaultStore:
    """Reads and writes ``*.md`` files under ``root``."""

    def __init__(self, root: Path):
        self.root = Path(root).expanduser().resolve()

    def _path(self, document_id: str) -> Path:
        path = (self.root / document_id).resolve()
        # Ids must not climb out of the vault.
        if path != self.root and self.root not in path.parents:
            raise DocumentNotFound(document_id)
        return path

    # ------------------------------------------------------------------
    # Sync helpers (run via asyncio.to_thread)
    # ------------------------------------------------------------------

    def _list_sync(self) -> List[str]:
        ids: List[str] = []
        for path in self.root.rglob(f"*{MARKDOWN_SUFFIX}"):
            relative = path.relative_to(self.root)
            # Skip .obsidian, .trash and other hidden folders.
            if any(part.startswith(".") for part in relative.parts):
                continue
            if path.is_file():
                ids.append(relative.as_posix())
        return sorted(ids)

    def _read_sync(self, document_id: str) -> str:
        path = self._path(document_id)
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise DocumentNotFound(document_id) from None

    def _write_sync(self, document_id: str, text: str) -> None:
        path = self._path(document_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                    f.write(text)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise DocumentWriteFailed(document_id) from e

    # ------------------------------------------------------------------
    # DocumentStore protocol
    # ------------------------------------------------------------------

    async def list_documents(self) -> List[str]:
        return await asyncio.to_thread(self._list_sync)

    async def read(self, document_id: str) -> str:
        return await asyncio.to_thread(self._read_sync, document_id)

    async def write(self, document_id: str, text: str) -> bool:
        try:
            await asyncio.to_thread(self._write_sync, document_id, text)
        except (DocumentWriteFailed, DocumentNotFound) as e:
            logger.error(f"{e}: {e.__cause__}")
            return False
        logger.debug(f"Wrote {document_id} ({len(text)} chars)")
        return True

    async def get_line(self, buffer_id: str, index: int) -> str:
        """Line ``index`` without its line ending."""
        lines = (await self.read(buffer_id)).split("\n")
        if index < 0 or index >= len(lines):
            raise LineOutOfRange(buffer_id, index)
        return lines[index].rstrip("\r")

    async def set_line(self, buffer_id: str, index: int, text: str) -> bool:
        """Replace line ``index``, keeping the line ending it had (CRLF or LF)."""
        lines = (await self.read(buffer_id)).split("\n")
        if index < 0 or index >= len(lines):
            raise LineOutOfRange(buffer_id, index)
        old = lines[index]
        eol = old[len(old.rstrip("\r")):]
        lines[index] = text.rstrip("\r") + eol
        return await self.write(buffer_id, "\n".join(lines))
