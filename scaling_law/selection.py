"""Equip selection helpers."""
from __future__ import annotations

from typing import Iterable, Optional


def toggle_equip(card_id: str, current_selection: Optional[str]) -> Optional[str]:
    """Equip ``card_id``, or unequip it when it is already equipped."""
    if current_selection == card_id:
        return None
    return card_id


def invalidate_selection(
    current_selection: Optional[str], consumed_ids: Iterable[str]
) -> Optional[str]:
    """Drop the selection if the equipped card was consumed."""
    if current_selection is None:
        return None
    if current_selection in set(consumed_ids):
        return None
    return current_selection
