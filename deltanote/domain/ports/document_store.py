"""DocumentStore port -- abstracts vault reads, writes and open buffers."""

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class DocumentStore(Protocol):
    """Reads and writes whole documents by identifier.

    ``write`` and ``set_line`` report success as a bool instead of raising,
    so callers can surface a failure without aborting a batch. ``read``
    raises ``DocumentNotFound`` for unknown identifiers.

    ``get_line``/``set_line`` address a line of an open buffer; a buffer is
    identified the same way as a document. Lines are exchanged without their
    line ending; ``set_line`` keeps the ending the replaced line had.
    """

    async def list_documents(self) -> List[str]: ...

    async def read(self, document_id: str) -> str: ...

    async def write(self, document_id: str, text: str) -> bool: ...

    async def get_line(self, buffer_id: str, index: int) -> str: ...

    async def set_line(self, buffer_id: str, index: int, text: str) -> bool: ...
