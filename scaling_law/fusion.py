"""Cascading 5-for-1 fusion ("Scaling Law")."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .cards import ROSTER, IdFactory, archetype_name, new_card_id
from .config import FUSION_BATCH, MAX_LEVEL
from .enums import Notice
from .models import Card
from .selection import invalidate_selection

logger = logging.getLogger(__name__)


@dataclass
class FusionResult:
    """Outcome of a fusion pass over an inventory."""

    inventory: List[Card]
    upgraded_count: int
    selected_card_id: Optional[str] = None
    events: List[Dict[str, object]] = field(default_factory=list)
    notice: Optional[Notice] = None

    @property
    def fused(self) -> bool:
        return self.upgraded_count > 0


def merge_materials(materials: Sequence[Card], id_factory: IdFactory = new_card_id) -> Card:
    """Combine ``FUSION_BATCH`` cards of one bucket into a card one level up."""
    first = materials[0]
    return Card(
        id=id_factory(),
        type=first.type,
        level=min(first.level, MAX_LEVEL) + 1,
        hp=sum(card.hp for card in materials) // 2,
        atk=sum(card.atk for card in materials) // 2,
        defense=sum(card.defense for card in materials) // 2,
    )


def fuse(
    inventory: Sequence[Card],
    selected_card_id: Optional[str] = None,
    *,
    roster_size: int = len(ROSTER),
    id_factory: IdFactory = new_card_id,
) -> FusionResult:
    """Merge every group of five same-type, same-level cards, cascading upward.

    Buckets are scanned level by level and, within a level, in roster order.
    A freshly merged card lands at the end of the next level's bucket, so it
    can be consumed again later in the same pass. Cards at ``MAX_LEVEL`` are
    never consumed. When nothing merges, the inventory comes back in its
    original order.
    """

    if len(inventory) < FUSION_BATCH:
        return FusionResult(
            inventory=list(inventory),
            upgraded_count=0,
            selected_card_id=selected_card_id,
            notice=Notice.INSUFFICIENT_RESOURCES,
        )

    buckets: List[List[List[Card]]] = [
        [[] for _ in range(roster_size)] for _ in range(MAX_LEVEL + 1)
    ]
    for card in inventory:
        buckets[min(card.level, MAX_LEVEL)][card.type].append(card)

    upgraded = 0
    events: List[Dict[str, object]] = []
    consumed: List[str] = []

    for level in range(MAX_LEVEL):
        for type_idx in range(roster_size):
            cards = buckets[level][type_idx]
            while len(cards) >= FUSION_BATCH:
                materials = cards[:FUSION_BATCH]
                del cards[:FUSION_BATCH]
                merged = merge_materials(materials, id_factory)
                buckets[level + 1][type_idx].append(merged)
                consumed.extend(card.id for card in materials)
                upgraded += 1
                events.append({"name": archetype_name(type_idx), "level": merged.level, "card_id": merged.id})
                logger.debug("Fused five %s +%d into %s", archetype_name(type_idx), level, merged.id)

    selection = invalidate_selection(selected_card_id, consumed)

    if not upgraded:
        return FusionResult(
            inventory=list(inventory),
            upgraded_count=0,
            selected_card_id=selection,
            notice=Notice.NO_FUSION_CANDIDATES,
        )

    flattened = [card for level_bucket in buckets for type_bucket in level_bucket for card in type_bucket]
    if selection != selected_card_id:
        logger.info("Equipped card %s was consumed by fusion", selected_card_id)
    return FusionResult(
        inventory=flattened,
        upgraded_count=upgraded,
        selected_card_id=selection,
        events=events,
    )
