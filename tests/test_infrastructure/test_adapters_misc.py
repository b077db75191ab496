"""Tests for notifier and token source adapters."""

import io
import re

import pytest

from deltanote.infrastructure.notifiers import ConsoleNotifier, LoggingNotifier
from deltanote.infrastructure.token_sources import FixedTokenSource, SystemTokenSource


class TestNotifiers:
    def test_logging_notifier_keeps_messages(self):
        notifier = LoggingNotifier()
        notifier.notify("Δ one")
        notifier.notify("Δ two")

        assert notifier.messages == ["Δ one", "Δ two"]

    def test_console_notifier_prints(self):
        stream = io.StringIO()
        notifier = ConsoleNotifier(stream=stream)

        notifier.notify("Δ Item marked as done")

        assert stream.getvalue() == "Δ Item marked as done\n"
        assert notifier.messages == ["Δ Item marked as done"]


class TestTokenSources:
    def test_system_tokens_alphabet_and_length(self):
        source = SystemTokenSource()

        for _ in range(20):
            assert re.fullmatch(r"[a-z0-9]{6}", source.token(6))

    def test_fixed_tokens_in_order(self):
        source = FixedTokenSource(["abc123", "def456"])

        assert source.token(6) == "abc123"
        assert source.token(3) == "def"

    def test_fixed_tokens_exhausted(self):
        source = FixedTokenSource([])

        with pytest.raises(RuntimeError):
            source.token(6)
