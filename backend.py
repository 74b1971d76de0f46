"""FastAPI backend powering the Scaling Law UI."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from scaling_law import ROSTER, GameState, SaveStore, SaveStoreError
from scaling_law.battle import BattleSimulation
from scaling_law.config import configure_logging, settings
from scaling_law.enums import Notice
from scaling_law.schemas import SaveBlob

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging()
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class GameManager:
    """Single owner of the game state; every mutation runs under one lock."""

    def __init__(self, store: Optional[SaveStore] = None, step_delay: Optional[float] = None) -> None:
        self.store = store or SaveStore()
        self.step_delay = settings.battle_step_delay if step_delay is None else step_delay
        self.lock = asyncio.Lock()
        self._game: Optional[GameState] = None

    @property
    def game(self) -> GameState:
        if self._game is None:
            self._game = self._load()
        return self._game

    def _load(self) -> GameState:
        try:
            return self.store.load()
        except SaveStoreError as exc:
            logger.error("Load failed: %s", exc)
            raise HTTPException(status_code=500, detail="Cannot read save") from exc

    def persist(self) -> None:
        try:
            self.store.save(self.game)
        except SaveStoreError as exc:
            logger.error("Save failed: %s", exc)
            raise HTTPException(status_code=500, detail="Save failed") from exc

    def replace(self, blob: SaveBlob) -> None:
        game = GameState.from_dict(blob.to_state_dict())
        self.store.save(game)
        self._game = game

    def serialize(self) -> Dict[str, Any]:
        return self.game.to_public_dict()

    def finish_battle(self, simulation: BattleSimulation) -> int:
        delta = self.game.apply_battle_result(simulation)
        self.persist()
        return delta


manager = GameManager()


def get_manager() -> GameManager:
    return manager


class AutoFuseRequest(BaseModel):
    enabled: bool


@app.get("/api/load")
async def load(mgr: GameManager = Depends(get_manager)) -> Dict[str, Any]:
    async with mgr.lock:
        try:
            return mgr.store.load().to_dict()
        except SaveStoreError as exc:
            logger.error("Load failed: %s", exc)
            raise HTTPException(status_code=500, detail="Cannot read save") from exc


@app.post("/api/save")
async def save(request: Request, mgr: GameManager = Depends(get_manager)) -> Dict[str, str]:
    body = await request.body()
    try:
        blob = SaveBlob.model_validate_json(body)
    except ValidationError as exc:
        errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()]
        logger.warning("Rejected save: %d validation errors", len(errors))
        raise HTTPException(status_code=400, detail=errors) from exc
    async with mgr.lock:
        try:
            mgr.replace(blob)
        except SaveStoreError as exc:
            logger.error("Save failed: %s", exc)
            raise HTTPException(status_code=500, detail="Save failed") from exc
    return {"status": "ok"}


@app.get("/api/state")
async def get_state(mgr: GameManager = Depends(get_manager)) -> Dict[str, Any]:
    async with mgr.lock:
        return mgr.serialize()


@app.post("/api/pack")
async def buy_pack(mgr: GameManager = Depends(get_manager)) -> Dict[str, Any]:
    async with mgr.lock:
        success, message, cards, upgraded = mgr.game.buy_pack()
        if success:
            mgr.persist()
        result: Dict[str, Any] = {
            "success": success,
            "message": message,
            "cards": [card.to_dict() for card in cards],
            "upgraded": upgraded,
        }
        if not success:
            result["notice"] = Notice.INSUFFICIENT_RESOURCES.value
        result["game_state"] = mgr.serialize()
        return result


@app.post("/api/fuse")
async def fuse_inventory(mgr: GameManager = Depends(get_manager)) -> Dict[str, Any]:
    async with mgr.lock:
        success, message, fusion = mgr.game.fuse()
        if success:
            mgr.persist()
        return {
            "success": success,
            "message": message,
            "upgraded": fusion.upgraded_count,
            "notice": fusion.notice.value if fusion.notice else None,
            "fusion_events": fusion.events,
            "game_state": mgr.serialize(),
        }


@app.post("/api/equip/{card_id}")
async def equip(card_id: str, mgr: GameManager = Depends(get_manager)) -> Dict[str, Any]:
    async with mgr.lock:
        found, selection = mgr.game.toggle_equip(card_id)
        if not found:
            raise HTTPException(status_code=404, detail="Card not found")
        mgr.persist()
        return {"selectedCardId": selection}


@app.post("/api/auto-fuse")
async def auto_fuse(request: AutoFuseRequest, mgr: GameManager = Depends(get_manager)) -> Dict[str, Any]:
    async with mgr.lock:
        enabled = mgr.game.set_auto_fuse(request.enabled)
        mgr.persist()
        return {"autoFuse": enabled}


@app.post("/api/battle")
async def battle(mgr: GameManager = Depends(get_manager)) -> Dict[str, Any]:
    async with mgr.lock:
        simulation, notice = mgr.game.start_battle()
        if simulation is None:
            return {"success": False, "notice": notice.value, "message": "Equip a card first"}
        result = simulation.run()
        mgr.finish_battle(simulation)
        return {
            "success": True,
            "opponent": simulation.opponent_card.to_dict(),
            "result": result.serialize(),
            "gold": mgr.game.gold,
        }


@app.get("/api/models")
async def get_models() -> Dict[str, Any]:
    return {"models": [archetype.serialize() for archetype in ROSTER]}


@app.websocket("/ws/battle")
async def battle_stream(websocket: WebSocket, mgr: GameManager = Depends(get_manager)) -> None:
    await websocket.accept()
    async with mgr.lock:
        simulation, notice = mgr.game.start_battle()
        if simulation is None:
            await websocket.send_json({"type": "battle_refused", "notice": notice.value})
            await websocket.close()
            return

        await websocket.send_json(
            {
                "type": "battle_start",
                "player": simulation.player_card.to_dict(),
                "opponent": simulation.opponent_card.to_dict(),
            }
        )
        try:
            for event in simulation:
                await websocket.send_json({"type": "battle_event", "event": event.serialize()})
                await asyncio.sleep(mgr.step_delay)
        except WebSocketDisconnect:
            simulation.abandon()
            logger.info("Battle stream disconnected; reward discarded")
            return

        delta = mgr.finish_battle(simulation)
        await websocket.send_json(
            {
                "type": "battle_end",
                "outcome": simulation.result.outcome.value,
                "gold_delta": delta,
                "gold": mgr.game.gold,
            }
        )
        await websocket.close()


@app.get("/")
async def root() -> Dict[str, Any]:
    return {
        "name": settings.app_name,
        "status": "running",
        "endpoints": {
            "load": "GET /api/load",
            "save": "POST /api/save",
            "battle_stream": "/ws/battle",
            "models": "GET /api/models",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
