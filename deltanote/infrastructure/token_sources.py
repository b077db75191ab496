"""Block reference token sources."""

import secrets
import string
from typing import Iterable, Iterator

TOKEN_ALPHABET = string.ascii_lowercase + string.digits


class SystemTokenSource:
    """Uniform random tokens over ``[a-z0-9]``."""

    def token(self, length: int) -> str:
        return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


class FixedTokenSource:
    """Hands out predetermined tokens in order (deterministic runs, tests)."""

    def __init__(self, tokens: Iterable[str]):
        self._tokens: Iterator[str] = iter(tokens)

    def token(self, length: int) -> str:
        try:
            value = next(self._tokens)
        except StopIteration:
            raise RuntimeError("FixedTokenSource ran out of tokens") from None
        return value[:length]
