"""Public entrypoints for the Scaling Law engine."""
from .battle import BattleEvent, BattleResult, BattleSimulation, BattleSimulator
from .cards import ROSTER, CardGenerator
from .enums import EventKind, Notice, Outcome, Side
from .fusion import FusionResult, fuse
from .game import GameState, sorted_for_display
from .models import Archetype, BattleUnit, Card
from .rng import ScriptedRandom
from .selection import toggle_equip
from .storage import SaveStore, SaveStoreError

__all__ = [
    "Archetype",
    "BattleEvent",
    "BattleResult",
    "BattleSimulation",
    "BattleSimulator",
    "BattleUnit",
    "Card",
    "CardGenerator",
    "EventKind",
    "FusionResult",
    "GameState",
    "Notice",
    "Outcome",
    "ROSTER",
    "SaveStore",
    "SaveStoreError",
    "ScriptedRandom",
    "Side",
    "fuse",
    "sorted_for_display",
    "toggle_equip",
]
