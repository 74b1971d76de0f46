"""Core enumerations used across the Scaling Law engine."""
from __future__ import annotations

from enum import Enum, auto


class Notice(Enum):
    """Advisory conditions reported to callers instead of raising."""

    INSUFFICIENT_RESOURCES = "insufficient_resources"
    NO_EQUIPPED_UNIT = "no_equipped_unit"
    NO_FUSION_CANDIDATES = "no_fusion_candidates"


class Side(Enum):
    """Which combatant performed a battle action."""

    PLAYER = "player"
    OPPONENT = "opponent"


class EventKind(Enum):
    """Discrete events emitted by the battle simulator."""

    ATTACK = auto()
    CRITICAL = auto()
    SELF_HARM = auto()
    VICTORY = auto()
    DEFEAT = auto()


class Outcome(Enum):
    """Terminal result of a battle from the player's point of view."""

    WIN = "win"
    LOSS = "loss"
