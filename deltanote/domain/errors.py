"""
Typed domain errors for deltanote.

Parse misses are not errors (codec and resolver return None). These classes
cover the failure modes callers must tell apart: a document that cannot be
read, a write the store refused, a command run on an untagged line, and
schedule values that cannot be encoded.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for all domain-specific errors."""


# ---------------------------------------------------------------------------
# Document store
# ---------------------------------------------------------------------------


class DocumentNotFound(DomainError):
    """The store has no document with the given identifier."""

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


class DocumentWriteFailed(DomainError):
    """The store signalled failure when writing a document."""

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(f"Failed to write document: {document_id}")


class LineOutOfRange(DomainError, IndexError):
    """A buffer line index past the end of the document."""

    def __init__(self, document_id: str, line_index: int) -> None:
        self.document_id = document_id
        self.line_index = line_index
        super().__init__(f"Line {line_index} is out of range in {document_id}")


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


class NoDeltaTag(DomainError):
    """A schedule transition was requested on a line without a delta tag."""

    def __init__(
        self, document_id: Optional[str] = None, line_index: Optional[int] = None
    ) -> None:
        self.document_id = document_id
        self.line_index = line_index
        where = ""
        if document_id is not None:
            where = f" in {document_id}"
            if line_index is not None:
                where += f" at line {line_index + 1}"
        super().__init__(f"No delta tag found{where}")


class InvalidSchedule(DomainError, ValueError):
    """Interval, multiplier or due date cannot be encoded into a delta tag."""


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class UnknownCommand(DomainError):
    """No handler is registered under the given command identifier."""

    def __init__(self, command_id: str) -> None:
        self.command_id = command_id
        super().__init__(f"Unknown command: {command_id}")
