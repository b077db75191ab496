"""RandomTokenSource port -- supplies block reference tokens."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomTokenSource(Protocol):
    """Returns a random token of ``length`` lowercase alphanumeric characters."""

    def token(self, length: int) -> str: ...
