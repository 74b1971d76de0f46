import random

import pytest

from scaling_law.battle import BattleSimulator
from scaling_law.cards import CardGenerator
from scaling_law.enums import EventKind, Outcome, Side
from scaling_law.models import Card
from scaling_law.rng import ScriptedRandom

# heat +10, no self-harm, no crit
PLAIN_TURN = [0.0, 0.99, 0.99]


def card(card_id, hp=1000, atk=20, defense=10, level=0, type_idx=0):
    return Card(id=card_id, type=type_idx, level=level, hp=hp, atk=atk, defense=defense)


def test_first_exchange_uses_base_damage():
    rng = ScriptedRandom(PLAIN_TURN * 2)
    simulation = BattleSimulator(rng).duel(card("p", atk=25, defense=10), card("o", atk=20, defense=15))

    first = next(simulation)
    second = next(simulation)

    assert (first.actor, first.kind, first.amount) == (Side.PLAYER, EventKind.ATTACK, 10)
    assert first.opponent_hp == 990
    assert (second.actor, second.kind, second.amount) == (Side.OPPONENT, EventKind.ATTACK, 10)
    assert second.player_hp == 990
    assert simulation.player.heat == simulation.opponent.heat == 10
    assert first.round == second.round == 1


def test_damage_is_at_least_one():
    rng = ScriptedRandom(PLAIN_TURN)
    simulation = BattleSimulator(rng).duel(card("p", atk=5), card("o", defense=50))
    assert next(simulation).amount == 1


def test_heat_gain_range_and_cap():
    rng = ScriptedRandom([0.999, 0.99, 0.99] * 12)
    simulation = BattleSimulator(rng).duel(card("p", atk=11), card("o", atk=11))
    event = next(simulation)
    assert event.heat == 20
    for _ in range(11):
        next(simulation)
    assert simulation.player.heat == 100
    assert simulation.opponent.heat == 100


def test_self_harm_skips_attack():
    rng = ScriptedRandom([0.0, 0.0])
    simulation = BattleSimulator(rng).duel(card("p", hp=95), card("o"))

    event = next(simulation)
    assert (event.kind, event.amount) == (EventKind.SELF_HARM, 9)
    assert event.player_hp == 86
    assert event.opponent_hp == 1000
    # the crit roll is never drawn
    assert rng.remaining == 0


def test_critical_hit_multiplies_damage():
    rng = ScriptedRandom([0.0, 0.5, 0.05])
    simulation = BattleSimulator(rng).duel(card("p", atk=20), card("o", defense=10))

    event = next(simulation)
    assert (event.kind, event.amount) == (EventKind.CRITICAL, 15)
    assert event.opponent_hp == 985


def test_player_kill_ends_before_opponent_acts():
    rng = ScriptedRandom(PLAIN_TURN)
    simulation = BattleSimulator(rng).duel(card("p", atk=50), card("o", hp=5, defense=0))

    events = list(simulation)
    assert [event.kind for event in events] == [EventKind.ATTACK, EventKind.VICTORY]
    result = simulation.result
    assert result.outcome is Outcome.WIN
    assert result.gold_delta == 50
    assert result.rounds == 1
    assert result.opponent.current_hp <= 0 < result.player.current_hp


def test_opponent_kill_is_a_loss():
    rng = ScriptedRandom(PLAIN_TURN * 2)
    simulation = BattleSimulator(rng).duel(card("p", hp=10, defense=0), card("o", atk=50))

    result = simulation.run()
    assert result.outcome is Outcome.LOSS
    assert result.gold_delta == 10
    assert result.events[-1].kind is EventKind.DEFEAT
    assert result.player.current_hp <= 0


def test_player_self_harm_can_end_the_battle():
    # round 1 leaves the player on 1 hp, round 2 the player hurts itself
    rng = ScriptedRandom(PLAIN_TURN * 2 + [0.0, 0.0])
    simulation = BattleSimulator(rng).duel(card("p", hp=20, defense=0), card("o", atk=19))

    result = simulation.run()
    assert [event.kind for event in result.events] == [
        EventKind.ATTACK,
        EventKind.ATTACK,
        EventKind.SELF_HARM,
        EventKind.DEFEAT,
    ]
    self_harm = result.events[2]
    assert (self_harm.actor, self_harm.round, self_harm.amount) == (Side.PLAYER, 2, 2)
    assert result.outcome is Outcome.LOSS
    assert result.gold_delta == 10
    assert result.player.current_hp <= 0
    # the opponent never takes its round 2 turn
    assert rng.remaining == 0
    assert result.opponent.heat == 10


def test_opponent_self_harm_hands_the_player_a_win():
    rng = ScriptedRandom(PLAIN_TURN + [0.0, 0.0])
    simulation = BattleSimulator(rng).duel(card("p", atk=29), card("o", hp=20, defense=10))

    result = simulation.run()
    assert [(event.actor, event.kind) for event in result.events] == [
        (Side.PLAYER, EventKind.ATTACK),
        (Side.OPPONENT, EventKind.SELF_HARM),
        (Side.PLAYER, EventKind.VICTORY),
    ]
    assert result.events[1].amount == 2
    assert result.outcome is Outcome.WIN
    assert result.gold_delta == 50
    assert result.opponent.current_hp <= 0 < result.player.current_hp
    assert rng.remaining == 0


def test_round_counter_advances_after_full_exchange():
    rng = ScriptedRandom(PLAIN_TURN * 5)
    simulation = BattleSimulator(rng).duel(card("p", atk=30), card("o", hp=45, defense=10))

    result = simulation.run()
    rounds = [event.round for event in result.events if event.kind is EventKind.ATTACK]
    assert rounds == [1, 1, 2, 2, 3]
    assert result.rounds == 3
    assert result.won


def test_stream_is_not_restartable():
    rng = ScriptedRandom(PLAIN_TURN)
    simulation = BattleSimulator(rng).duel(card("p", atk=50), card("o", hp=5, defense=0))
    assert len(list(simulation)) == 2
    assert list(simulation) == []


def test_abandon_discards_result():
    simulation = BattleSimulator(random.Random(3)).duel(card("p", hp=10**6), card("o", hp=10**6))
    next(simulation)
    simulation.abandon()

    assert simulation.abandoned
    assert simulation.result is None
    with pytest.raises(ValueError):
        simulation.run()


@pytest.mark.parametrize(
    "player_level, draws, expected",
    [
        (3, [0.7, 0.5], 4),
        (3, [0.5, 0.5], 3),
        (3, [0.5, 0.9], 2),
        (3, [0.7, 0.9], 3),
        (0, [0.5, 0.9], 0),
    ],
)
def test_opponent_level_roll(player_level, draws, expected):
    simulator = BattleSimulator(ScriptedRandom(draws))
    assert simulator.roll_opponent_level(player_level) == expected


def test_simulate_generates_opponent_from_shared_stream():
    # level roll, then archetype and three variance draws
    rng = ScriptedRandom([0.7, 0.5, 0.0, 0.5, 0.5, 0.5])
    simulation = BattleSimulator(rng).simulate(card("p", level=1))

    assert simulation.opponent_card.level == 2
    assert simulation.opponent_card.type == 0
    assert simulation.opponent_card.hp == 750


def test_battles_always_terminate_with_one_winner():
    for seed in range(40):
        rng = random.Random(seed)
        generator = CardGenerator(rng)
        simulator = BattleSimulator(rng, generator=generator)
        player = generator.generate(seed % 4)
        result = simulator.simulate(player).run()

        assert result.outcome in (Outcome.WIN, Outcome.LOSS)
        assert result.events[-1].kind in (EventKind.VICTORY, EventKind.DEFEAT)
        if result.won:
            assert result.player.current_hp > 0
            assert result.opponent.current_hp <= 0
            assert result.gold_delta == 50
        else:
            assert result.player.current_hp <= 0
            assert result.gold_delta == 10
