"""Runtime settings and balance constants."""
from __future__ import annotations

import logging
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    model_config = SettingsConfigDict(env_prefix="SCALING_LAW_", env_file=".env")

    app_name: str = "Scaling Law"

    save_path: str = "./data/save.json"
    starting_gold: int = 1000

    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Seconds between streamed battle events
    battle_step_delay: float = 0.5


settings = Settings()


# =============================================================================
# BALANCE
# =============================================================================

# Highest level that takes part in fusion; cards at or above it are inert
MAX_LEVEL = 10

# Cards consumed per merge
FUSION_BATCH = 5

# Stat multiplier per level for generated cards
GROWTH_RATE = 2.5
VARIANCE_MIN = 0.8
VARIANCE_SPREAD = 0.4

PACK_PRICE = 100
PACK_SIZE = 5

WIN_REWARD = 50
LOSS_REWARD = 10

MAX_HEAT = 100
HEAT_GAIN_MIN = 10
HEAT_GAIN_SPREAD = 10
SELF_HARM_DIVISOR = 3
SELF_HARM_RATIO = 0.1
CRIT_MULTIPLIER = 1.5

# Opponent level rolls
OPPONENT_UPGRADE_ROLL = 0.6
OPPONENT_DOWNGRADE_ROLL = 0.8


def configure_logging(level: str | None = None) -> None:
    """Install a root handler once for CLI and server entrypoints."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
