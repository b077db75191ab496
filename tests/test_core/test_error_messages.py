"""Tests for user-facing error message sanitization."""

import pytest

from deltanote.core.error_messages import user_message
from deltanote.domain.errors import (
    DocumentNotFound,
    DocumentWriteFailed,
    InvalidSchedule,
    LineOutOfRange,
    NoDeltaTag,
    UnknownCommand,
)


class TestUserMessage:
    def test_document_errors_name_the_document(self):
        assert user_message(DocumentNotFound("notes/a.md")) == "Could not find note notes/a.md."
        assert user_message(DocumentWriteFailed("notes/a.md")) == "Could not save note notes/a.md."

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (NoDeltaTag("a.md", 2), "No delta tag found on this line."),
            (LineOutOfRange("a.md", 9), "That line no longer exists."),
            (UnknownCommand("x"), "Unknown delta command."),
            (InvalidSchedule("interval 0"), "That schedule is not valid"),
        ],
    )
    def test_domain_errors(self, exc, expected):
        assert user_message(exc).startswith(expected)

    def test_os_errors_do_not_leak_paths(self):
        msg = user_message(PermissionError("/home/me/vault/secret.md"))

        assert "/home" not in msg
        assert "permissions" in msg

    def test_unknown_exception_uses_default(self):
        msg = user_message(RuntimeError("Traceback: boom at /srv/x.py"))

        assert msg == "Something went wrong. Please try again."

    def test_none(self):
        assert user_message(None) == "Something went wrong. Please try again."

    def test_context_prefix(self):
        msg = user_message(UnknownCommand("x"), context="running the command")

        assert msg == "Sorry, there was an error running the command. Unknown delta command."
