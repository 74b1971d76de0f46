"""Model roster and the card generator."""
from __future__ import annotations

import math
import random
import uuid
from typing import Callable, Optional, Sequence

from .config import GROWTH_RATE, VARIANCE_MIN, VARIANCE_SPREAD
from .models import Archetype, Card
from .rng import RandomSource

IdFactory = Callable[[], str]


ROSTER: Sequence[Archetype] = (
    Archetype(0, "GPT", "assets/gpt.png", 120, 25, 10),
    Archetype(1, "Claude", "assets/claude.png", 100, 20, 15),
    Archetype(2, "Gemini", "assets/gemini.png", 140, 18, 8),
    Archetype(3, "Llama", "assets/llama.png", 90, 22, 5),
    Archetype(4, "Mistral", "assets/mistral.png", 80, 28, 3),
    Archetype(5, "Grok", "assets/grok.png", 110, 20, 10),
)


def archetype_name(type_idx: int) -> str:
    return ROSTER[type_idx].name


def new_card_id() -> str:
    return str(uuid.uuid4())


class CardGenerator:
    """Produces fresh cards for packs and battle opponents.

    Every draw comes from the injected ``rng`` so a seeded
    :class:`random.Random` or a :class:`~scaling_law.rng.ScriptedRandom`
    makes the output reproducible. Draw order per card is archetype, then
    hp, atk and def variance.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        *,
        roster: Sequence[Archetype] = ROSTER,
        id_factory: IdFactory = new_card_id,
    ) -> None:
        self.rng = rng or random.Random()
        self.roster = roster
        self.id_factory = id_factory

    def generate(self, level: int = 0) -> Card:
        if level < 0:
            raise ValueError(f"Card level must be non-negative, got {level}")
        type_idx = min(math.floor(self.rng.random() * len(self.roster)), len(self.roster) - 1)
        archetype = self.roster[type_idx]
        multiplier = GROWTH_RATE ** level

        return Card(
            id=self.id_factory(),
            type=type_idx,
            level=level,
            hp=self._roll_stat(archetype.base_hp, multiplier),
            atk=self._roll_stat(archetype.base_atk, multiplier),
            defense=self._roll_stat(archetype.base_def, multiplier),
        )

    def generate_many(self, count: int, level: int = 0) -> list[Card]:
        return [self.generate(level) for _ in range(count)]

    def _roll_stat(self, base: int, multiplier: float) -> int:
        variance = VARIANCE_MIN + self.rng.random() * VARIANCE_SPREAD
        return math.floor(base * multiplier * variance)
