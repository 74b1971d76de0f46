"""Game orchestration: packs, fusion, equip and battles."""
from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .battle import BattleResult, BattleSimulation, BattleSimulator
from .cards import CardGenerator, archetype_name
from .config import PACK_PRICE, PACK_SIZE, settings
from .enums import Notice
from .fusion import FusionResult, fuse
from .models import Card
from .rng import RandomSource
from .selection import toggle_equip

logger = logging.getLogger(__name__)


def sorted_for_display(inventory: Sequence[Card]) -> List[Card]:
    """Order cards by total stats, then level (both descending), then type."""
    return sorted(inventory, key=lambda card: (-card.total, -card.level, card.type))


class GameState:
    """Complete state for one player's collection.

    The state is owned by a single writer; callers serialise mutations and
    persist :meth:`to_dict` after each one.
    """

    def __init__(
        self,
        gold: Optional[int] = None,
        inventory: Optional[List[Card]] = None,
        selected_card_id: Optional[str] = None,
        auto_fuse: bool = False,
        *,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.gold = settings.starting_gold if gold is None else gold
        self.inventory: List[Card] = list(inventory or [])
        self.selected_card_id = selected_card_id
        self.auto_fuse = auto_fuse

        self.rng = rng or random.Random()
        self.generator = CardGenerator(self.rng)
        self.simulator = BattleSimulator(self.rng, generator=self.generator)

    # ------------------------------------------------------------------
    # Economy & packs
    # ------------------------------------------------------------------

    def buy_pack(self) -> Tuple[bool, str, List[Card], int]:
        """Spend ``PACK_PRICE`` gold on ``PACK_SIZE`` fresh level 0 cards.

        Returns ``(success, message, new_cards, upgraded_count)``; the upgrade
        count is only non-zero when auto-fuse is enabled.
        """

        if self.gold < PACK_PRICE:
            logger.warning("Pack refused: %d gold, need %d", self.gold, PACK_PRICE)
            return False, f"Not enough gold (need {PACK_PRICE}G)", [], 0

        self.gold -= PACK_PRICE
        cards = self.generator.generate_many(PACK_SIZE)
        self.inventory.extend(cards)
        logger.info("Bought pack: %s", ", ".join(archetype_name(card.type) for card in cards))
        message = f"+{len(cards)} new models"

        upgraded = 0
        if self.auto_fuse:
            upgraded = self._apply_fusion(fuse(self.inventory, self.selected_card_id))
            if upgraded:
                message = f"{message} · Scaling Law: {upgraded} upgraded"
        return True, message, cards, upgraded

    # ------------------------------------------------------------------
    # Fusion
    # ------------------------------------------------------------------

    def fuse(self) -> Tuple[bool, str, FusionResult]:
        result = fuse(self.inventory, self.selected_card_id)
        upgraded = self._apply_fusion(result)
        if result.notice is Notice.INSUFFICIENT_RESOURCES:
            return False, "Not enough cards to fuse", result
        if not upgraded:
            return False, "No fusion candidates (need 5 of the same model and level)", result
        return True, f"Scaling Law applied: {upgraded} models upgraded", result

    def _apply_fusion(self, result: FusionResult) -> int:
        if result.fused:
            self.inventory = result.inventory
            self.selected_card_id = result.selected_card_id
            logger.info("Fusion upgraded %d cards", result.upgraded_count)
        return result.upgraded_count

    def set_auto_fuse(self, enabled: bool) -> bool:
        self.auto_fuse = bool(enabled)
        return self.auto_fuse

    # ------------------------------------------------------------------
    # Equip & battle
    # ------------------------------------------------------------------

    def find_card(self, card_id: str) -> Optional[Card]:
        return next((card for card in self.inventory if card.id == card_id), None)

    def toggle_equip(self, card_id: str) -> Tuple[bool, Optional[str]]:
        if self.find_card(card_id) is None:
            return False, self.selected_card_id
        self.selected_card_id = toggle_equip(card_id, self.selected_card_id)
        return True, self.selected_card_id

    def equipped_card(self) -> Optional[Card]:
        if self.selected_card_id is None:
            return None
        return self.find_card(self.selected_card_id)

    def start_battle(self) -> Tuple[Optional[BattleSimulation], Optional[Notice]]:
        card = self.equipped_card()
        if card is None:
            logger.warning("Battle refused: no card equipped")
            return None, Notice.NO_EQUIPPED_UNIT
        return self.simulator.simulate(card), None

    def apply_battle_result(self, simulation: BattleSimulation) -> int:
        """Credit the reward of a finished battle and return the gold delta."""
        if simulation.abandoned or simulation.result is None:
            raise ValueError("Cannot apply the reward of an unfinished battle")
        result: BattleResult = simulation.result
        self.gold += result.gold_delta
        return result.gold_delta

    # ------------------------------------------------------------------
    # Serialization helpers for API/storage
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gold": self.gold,
            "inventory": [card.to_dict() for card in self.inventory],
            "selectedCardId": self.selected_card_id,
            "autoFuse": self.auto_fuse,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        payload = self.to_dict()
        payload["display_order"] = [card.id for card in sorted_for_display(self.inventory)]
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, rng: Optional[RandomSource] = None) -> "GameState":
        inventory = [Card.from_dict(item) for item in data.get("inventory") or []]
        selected = data.get("selectedCardId")
        if selected is not None and not any(card.id == selected for card in inventory):
            selected = None
        return cls(
            gold=data.get("gold"),
            inventory=inventory,
            selected_card_id=selected,
            auto_fuse=bool(data.get("autoFuse", False)),
            rng=rng,
        )
