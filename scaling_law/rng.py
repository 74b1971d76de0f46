"""Random sources that can be injected into the generator and simulator.

Anything exposing ``random() -> float`` in ``[0, 1)`` works, which includes
:class:`random.Random`. :class:`ScriptedRandom` replays a fixed list of draws
so tests and replays can pin every decision point.
"""
from __future__ import annotations

from typing import Iterable, List, Protocol


class RandomSource(Protocol):
    def random(self) -> float:  # pragma: no cover - protocol
        ...


class ScriptedRandom:
    """Replay a predetermined sequence of draws."""

    def __init__(self, values: Iterable[float]) -> None:
        self.values: List[float] = list(values)
        self.position = 0

    def random(self) -> float:
        if self.position >= len(self.values):
            raise RuntimeError(
                f"Scripted random stream exhausted after {len(self.values)} draws"
            )
        value = self.values[self.position]
        self.position += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self.values) - self.position
