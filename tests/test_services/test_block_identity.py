"""Tests for block reference detection and creation."""

from deltanote.infrastructure.token_sources import FixedTokenSource, SystemTokenSource
from deltanote.services.delta.block_identity import (
    REFERENCE_LENGTH,
    ensure_reference,
    find_reference,
    strip_reference,
)


class TestFindReference:
    def test_trailing_reference(self):
        assert find_reference("Some text ^abc123") == "abc123"

    def test_trailing_whitespace_after_reference(self):
        assert find_reference("Some text ^abc123  ") == "abc123"

    def test_reference_needs_leading_whitespace(self):
        assert find_reference("Some text^abc123") is None
        assert find_reference("^abc123") is None

    def test_reference_must_end_the_line(self):
        assert find_reference("Some ^abc123 text") is None

    def test_strip_reference(self):
        assert strip_reference("Some text ^abc123") == "Some text"
        assert strip_reference("No ref") == "No ref"


class TestEnsureReference:
    def test_creates_reference_when_absent(self):
        result = ensure_reference("Review goals   ", FixedTokenSource(["abc123"]))

        assert result.created is True
        assert result.reference == "abc123"
        assert result.line_text == "Review goals ^abc123"

    def test_keeps_existing_reference(self):
        result = ensure_reference("Review goals ^zzz999", FixedTokenSource([]))

        assert result.created is False
        assert result.reference == "zzz999"
        assert result.line_text == "Review goals ^zzz999"

    def test_idempotent(self):
        first = ensure_reference("Review goals", FixedTokenSource(["abc123", "other1"]))
        second = ensure_reference(first.line_text, FixedTokenSource(["other1"]))

        assert second.reference == first.reference
        assert second.created is False
        assert second.line_text == first.line_text

    def test_reference_goes_after_delta_tag(self):
        line = "Task {{delta:1+2 2024-01-01}}"
        result = ensure_reference(line, FixedTokenSource(["abc123"]))

        assert result.line_text == "Task {{delta:1+2 2024-01-01}} ^abc123"


class TestSystemTokenSource:
    def test_token_shape(self):
        token = SystemTokenSource().token(REFERENCE_LENGTH)

        assert len(token) == 6
        assert token.isalnum()
        assert token == token.lower()
