"""
User-facing error message sanitization.

Maps exception types to short notification texts that never expose
internal details (absolute paths, stack traces) to the user.

Usage:
    from deltanote.core.error_messages import user_message

    try:
        ...
    except DomainError as e:
        logger.warning(f"Delta command failed: {e}")
        notifier.notify(f"Δ {user_message(e)}")
"""

import logging
from typing import Optional

from ..domain.errors import (
    DocumentNotFound,
    DocumentWriteFailed,
    InvalidSchedule,
    LineOutOfRange,
    NoDeltaTag,
    UnknownCommand,
)

logger = logging.getLogger(__name__)

# Default fallback for any unrecognised exception
_DEFAULT_MESSAGE = "Something went wrong. Please try again."

# Order matters: more specific types first.
_TYPE_MAP: dict[type, str] = {
    NoDeltaTag: "No delta tag found on this line.",
    InvalidSchedule: "That schedule is not valid. Intervals must be whole days of 1 or more.",
    LineOutOfRange: "That line no longer exists.",
    UnknownCommand: "Unknown delta command.",
    PermissionError: "A permissions issue prevented saving the note.",
    TimeoutError: "The vault took too long to respond. Please try again.",
}


def user_message(exc: Optional[BaseException], *, context: Optional[str] = None) -> str:
    """Return a user-safe message for *exc*.

    Document errors name the vault-relative document id, which is what the
    user sees in their vault anyway.
    """
    if exc is None:
        message = _DEFAULT_MESSAGE
    elif isinstance(exc, DocumentNotFound):
        message = f"Could not find note {exc.document_id}."
    elif isinstance(exc, DocumentWriteFailed):
        message = f"Could not save note {exc.document_id}."
    else:
        message = _resolve_message(exc)

    if context:
        return f"Sorry, there was an error {context}. {message}"
    return message


def _resolve_message(exc: BaseException) -> str:
    for exc_type, msg in _TYPE_MAP.items():
        if isinstance(exc, exc_type):
            return msg
    return _DEFAULT_MESSAGE
