"""Turn based battle simulation for the Scaling Law engine."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .cards import CardGenerator
from .config import (
    CRIT_MULTIPLIER,
    HEAT_GAIN_MIN,
    HEAT_GAIN_SPREAD,
    LOSS_REWARD,
    OPPONENT_DOWNGRADE_ROLL,
    OPPONENT_UPGRADE_ROLL,
    SELF_HARM_DIVISOR,
    SELF_HARM_RATIO,
    WIN_REWARD,
)
from .enums import EventKind, Outcome, Side
from .models import BattleUnit, Card
from .rng import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BattleEvent:
    """One observable step of a battle."""

    round: int
    actor: Side
    kind: EventKind
    amount: int
    player_hp: int
    opponent_hp: int
    heat: int

    def serialize(self) -> Dict[str, Any]:
        return {
            "round": self.round,
            "actor": self.actor.value,
            "kind": self.kind.name.lower(),
            "amount": self.amount,
            "player_hp": self.player_hp,
            "opponent_hp": self.opponent_hp,
            "heat": self.heat,
        }


@dataclass
class BattleResult:
    """Terminal state of a finished battle."""

    outcome: Outcome
    gold_delta: int
    rounds: int
    player: BattleUnit
    opponent: BattleUnit
    events: List[BattleEvent] = field(default_factory=list)

    @property
    def won(self) -> bool:
        return self.outcome is Outcome.WIN

    def serialize(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "gold_delta": self.gold_delta,
            "rounds": self.rounds,
            "player": self.player.serialize(),
            "opponent": self.opponent.serialize(),
            "events": [event.serialize() for event in self.events],
        }


def base_damage(attacker: BattleUnit, defender: BattleUnit) -> int:
    return max(1, attacker.atk - defender.defense)


class BattleSimulation:
    """Lazy stream of battle events between a player card and an opponent card.

    Iterating drives the fight one half-turn at a time: the player acts, then
    the opponent, until either side's health drops to zero. The final event is
    ``VICTORY`` or ``DEFEAT``; after it, :attr:`result` is set. The stream is
    finite and cannot be restarted. :meth:`abandon` stops an unfinished battle
    without ever producing a result, so no reward can be applied for it.
    """

    def __init__(
        self,
        player_card: Card,
        opponent_card: Card,
        rng: RandomSource,
    ) -> None:
        self.player_card = player_card
        self.opponent_card = opponent_card
        self.player = BattleUnit.from_card(player_card)
        self.opponent = BattleUnit.from_card(opponent_card)
        self.rng = rng
        self.round = 1
        self.events: List[BattleEvent] = []
        self.result: Optional[BattleResult] = None
        self.abandoned = False
        self._stream = self._resolve()

    def __iter__(self) -> Iterator[BattleEvent]:
        return self

    def __next__(self) -> BattleEvent:
        return next(self._stream)

    @property
    def finished(self) -> bool:
        return self.result is not None

    def abandon(self) -> None:
        if self.finished:
            return
        self._stream.close()
        self.abandoned = True
        logger.info("Battle abandoned in round %d", self.round)

    def run(self) -> BattleResult:
        """Drain the remaining events and return the result."""
        for _ in self:
            pass
        if self.result is None:
            raise ValueError("Battle was abandoned before it finished")
        return self.result

    # ------------------------------------------------------------------
    # Combat loop
    # ------------------------------------------------------------------

    def _resolve(self) -> Iterator[BattleEvent]:
        while self.player.is_alive and self.opponent.is_alive:
            yield self._take_turn(Side.PLAYER, self.player, self.opponent)
            if self._is_over():
                break

            yield self._take_turn(Side.OPPONENT, self.opponent, self.player)
            if self._is_over():
                break
            self.round += 1

        if self.player.is_alive:
            outcome, kind, reward = Outcome.WIN, EventKind.VICTORY, WIN_REWARD
        else:
            outcome, kind, reward = Outcome.LOSS, EventKind.DEFEAT, LOSS_REWARD

        yield self._record(Side.PLAYER, kind, reward, self.player.heat)
        self.result = BattleResult(
            outcome=outcome,
            gold_delta=reward,
            rounds=self.round,
            player=self.player,
            opponent=self.opponent,
            events=list(self.events),
        )
        logger.info("Battle finished after %d rounds: %s", self.round, outcome.value)

    def _take_turn(self, side: Side, actor: BattleUnit, target: BattleUnit) -> BattleEvent:
        actor.add_heat(HEAT_GAIN_MIN + math.floor(self.rng.random() * (HEAT_GAIN_SPREAD + 1)))

        if self.rng.random() * 100 < actor.heat / SELF_HARM_DIVISOR:
            self_damage = math.floor(actor.max_hp * SELF_HARM_RATIO)
            actor.take_damage(self_damage)
            return self._record(side, EventKind.SELF_HARM, self_damage, actor.heat)

        damage = base_damage(actor, target)
        kind = EventKind.ATTACK
        if self.rng.random() * 100 < actor.heat:
            damage = math.floor(damage * CRIT_MULTIPLIER)
            kind = EventKind.CRITICAL
        target.take_damage(damage)
        return self._record(side, kind, damage, actor.heat)

    def _is_over(self) -> bool:
        return not self.player.is_alive or not self.opponent.is_alive

    def _record(self, side: Side, kind: EventKind, amount: int, heat: int) -> BattleEvent:
        event = BattleEvent(
            round=self.round,
            actor=side,
            kind=kind,
            amount=amount,
            player_hp=self.player.current_hp,
            opponent_hp=self.opponent.current_hp,
            heat=heat,
        )
        self.events.append(event)
        logger.debug("Round %d %s %s %d", self.round, side.value, kind.name, amount)
        return event


class BattleSimulator:
    """Matches the equipped card against a freshly generated opponent."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        *,
        generator: Optional[CardGenerator] = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.generator = generator or CardGenerator(self.rng)

    def roll_opponent_level(self, player_level: int) -> int:
        level = max(0, player_level + (1 if self.rng.random() > OPPONENT_UPGRADE_ROLL else 0))
        if self.rng.random() > OPPONENT_DOWNGRADE_ROLL and level > 0:
            level -= 1
        return level

    def simulate(self, player_card: Card) -> BattleSimulation:
        opponent_card = self.generator.generate(self.roll_opponent_level(player_card.level))
        logger.info(
            "Battle start: level %d vs level %d", player_card.level, opponent_card.level
        )
        return self.duel(player_card, opponent_card)

    def duel(self, player_card: Card, opponent_card: Card) -> BattleSimulation:
        return BattleSimulation(player_card, opponent_card, self.rng)
