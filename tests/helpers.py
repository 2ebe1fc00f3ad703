"""
Test helpers.
"""

from __future__ import annotations


class ScriptedRandom:
    """
    Deterministic random source.

    randrange replays a fixed cycle of values (reduced modulo the
    bound); uniform always returns the same offset.
    """

    def __init__(self, values: list[int] | None = None, offset: float = 0.0) -> None:
        self._values = values or []
        self._index = 0
        self.offset = offset

    def randrange(self, stop: int) -> int:
        if not self._values:
            return 0
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value % stop

    def uniform(self, a: float, b: float) -> float:
        return self.offset
