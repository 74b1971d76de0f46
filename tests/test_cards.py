import math
import random

import pytest

from scaling_law.cards import ROSTER, CardGenerator
from scaling_law.rng import ScriptedRandom


def test_generate_uses_draws_in_order():
    rng = ScriptedRandom([0.0, 0.5, 0.5, 0.5])
    card = CardGenerator(rng).generate(1)
    assert card.type == 0
    assert card.level == 1
    # GPT base 120/25/10 scaled by 2.5 with neutral variance
    assert (card.hp, card.atk, card.defense) == (300, 62, 25)
    assert rng.remaining == 0


def test_archetype_index_covers_last_entry():
    rng = ScriptedRandom([0.99, 0.0, 0.0, 0.0])
    card = CardGenerator(rng).generate(0)
    assert card.type == len(ROSTER) - 1
    assert ROSTER[card.type].name == "Grok"


def test_stats_stay_within_variance_band():
    generator = CardGenerator(random.Random(7))
    for level in (0, 1, 3):
        multiplier = 2.5 ** level
        for _ in range(200):
            card = generator.generate(level)
            base = ROSTER[card.type]
            for stat, base_value in ((card.hp, base.base_hp), (card.atk, base.base_atk), (card.defense, base.base_def)):
                assert math.floor(base_value * multiplier * 0.8) <= stat <= math.floor(base_value * multiplier * 1.2)
                assert stat > 0


def test_ids_are_unique():
    cards = CardGenerator(random.Random(1)).generate_many(50)
    assert len({card.id for card in cards}) == 50


def test_id_factory_is_injectable():
    counter = iter(range(100))
    generator = CardGenerator(random.Random(0), id_factory=lambda: f"card-{next(counter)}")
    assert [card.id for card in generator.generate_many(3)] == ["card-0", "card-1", "card-2"]


def test_negative_level_rejected():
    with pytest.raises(ValueError):
        CardGenerator(random.Random(0)).generate(-1)


def test_scripted_random_exhaustion():
    rng = ScriptedRandom([0.1])
    rng.random()
    with pytest.raises(RuntimeError):
        rng.random()
