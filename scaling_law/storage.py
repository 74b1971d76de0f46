"""JSON save file backing the game state."""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .config import settings
from .game import GameState
from .rng import RandomSource
from .schemas import SaveBlob

logger = logging.getLogger(__name__)


class SaveStoreError(Exception):
    """Raised when the save file cannot be read or written."""


def default_save() -> Dict[str, Any]:
    return {
        "gold": settings.starting_gold,
        "inventory": [],
        "selectedCardId": None,
        "autoFuse": False,
    }


class SaveStore:
    """Reads and writes the persisted game-state blob.

    The first load creates the parent directory and a default save. All file
    access goes through one lock so concurrent saves cannot interleave.
    """

    def __init__(self, path: Optional[str | Path] = None) -> None:
        self.path = Path(path or settings.save_path)
        self._lock = threading.Lock()

    def load_raw(self) -> Dict[str, Any]:
        with self._lock:
            if not self.path.exists():
                data = default_save()
                self._write(data)
                logger.info("Created default save at %s", self.path)
                return data
            try:
                return json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise SaveStoreError(f"Cannot read save file {self.path}: {exc}") from exc

    def save_raw(self, data: Dict[str, Any]) -> None:
        with self._lock:
            self._write(data)
        logger.debug("Save written to %s", self.path)

    def load(self, *, rng: Optional[RandomSource] = None) -> GameState:
        raw = self.load_raw()
        try:
            blob = SaveBlob.model_validate(raw)
        except ValidationError as exc:
            raise SaveStoreError(f"Invalid save file {self.path}: {exc}") from exc
        return GameState.from_dict(blob.to_state_dict(), rng=rng)

    def save(self, game: GameState) -> None:
        self.save_raw(game.to_dict())

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as exc:
            raise SaveStoreError(f"Cannot write save file {self.path}: {exc}") from exc
