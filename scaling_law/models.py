"""Dataclasses that describe archetypes, cards and battle units."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .config import MAX_HEAT


@dataclass(frozen=True)
class Archetype:
    """Immutable blueprint for one entry of the model roster."""

    id: int
    name: str
    image: str
    base_hp: int
    base_atk: int
    base_def: int

    def serialize(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "img": self.image,
            "base": {"hp": self.base_hp, "atk": self.base_atk, "def": self.base_def},
        }


@dataclass(frozen=True)
class Card:
    """A collectible card. Created by the generator or by fusion, never edited."""

    id: str
    type: int
    level: int
    hp: int
    atk: int
    defense: int

    @property
    def total(self) -> int:
        return self.hp + self.atk + self.defense

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uuid": self.id,
            "type": self.type,
            "level": self.level,
            "hp": self.hp,
            "atk": self.atk,
            "def": self.defense,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        return cls(
            id=str(data["uuid"]),
            type=int(data["type"]),
            level=int(data.get("level", 0)),
            hp=int(data["hp"]),
            atk=int(data["atk"]),
            defense=int(data["def"]),
        )


@dataclass
class BattleUnit:
    """Battle-scoped snapshot of a card with health and heat tracking."""

    type: int
    level: int
    atk: int
    defense: int
    max_hp: int
    current_hp: int
    heat: int = 0

    @classmethod
    def from_card(cls, card: Card) -> "BattleUnit":
        return cls(
            type=card.type,
            level=card.level,
            atk=card.atk,
            defense=card.defense,
            max_hp=card.hp,
            current_hp=card.hp,
        )

    @property
    def is_alive(self) -> bool:
        return self.current_hp > 0

    def add_heat(self, amount: int) -> None:
        self.heat = min(MAX_HEAT, self.heat + amount)

    def take_damage(self, damage: int) -> None:
        self.current_hp -= damage

    def serialize(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "level": self.level,
            "atk": self.atk,
            "def": self.defense,
            "max_hp": self.max_hp,
            "current_hp": self.current_hp,
            "heat": self.heat,
        }
