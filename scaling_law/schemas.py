"""Pydantic models for the persisted game-state blob."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .cards import ROSTER


class CardModel(BaseModel):
    """One inventory entry as stored in the save."""

    model_config = ConfigDict(populate_by_name=True)

    uuid: str = Field(min_length=1)
    type: int = Field(ge=0, lt=len(ROSTER))
    level: int = Field(default=0, ge=0)
    hp: int = Field(gt=0)
    atk: int = Field(gt=0)
    defense: int = Field(gt=0, alias="def")


class SaveBlob(BaseModel):
    """Whole save. Unknown keys such as the legacy ``deck`` are ignored."""

    gold: Optional[int] = Field(default=None, ge=0)
    inventory: Optional[List[CardModel]] = None
    selectedCardId: Optional[str] = None
    autoFuse: bool = False

    @field_validator("inventory")
    @classmethod
    def unique_ids(cls, value: Optional[List[CardModel]]) -> Optional[List[CardModel]]:
        if value is None:
            return value
        ids = [card.uuid for card in value]
        if len(ids) != len(set(ids)):
            raise ValueError("inventory contains duplicate card ids")
        return value

    def to_state_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
