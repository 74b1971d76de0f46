"""Monte Carlo balance analysis for battles."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import numpy as np
from tqdm import trange

from .battle import BattleSimulator
from .cards import CardGenerator
from .enums import EventKind, Outcome


@dataclass
class MatchupReport:
    """Summary statistics for many battles at one player level."""

    level: int
    battles: int
    win_rate: float
    mean_rounds: float
    std_rounds: float
    mean_gold: float
    event_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "level": self.level,
            "battles": self.battles,
            "win_rate": self.win_rate,
            "mean_rounds": self.mean_rounds,
            "std_rounds": self.std_rounds,
            "mean_gold": self.mean_gold,
            "event_counts": dict(self.event_counts),
        }


def estimate_win_rate(
    level: int,
    battles: int = 1000,
    *,
    seed: Optional[int] = None,
    progress_bar: bool = False,
) -> MatchupReport:
    """Battle freshly generated level ``level`` cards against rolled opponents."""

    if battles <= 0:
        raise ValueError("battles must be positive")

    rng = random.Random(seed)
    generator = CardGenerator(rng)
    simulator = BattleSimulator(rng, generator=generator)

    wins = np.zeros(battles, dtype=np.int8)
    rounds = np.zeros(battles, dtype=np.int32)
    gold = np.zeros(battles, dtype=np.int32)
    counts = {kind.name.lower(): 0 for kind in EventKind}

    iterator: Iterable[int] = trange(battles, desc=f"Level {level}") if progress_bar else range(battles)
    for idx in iterator:
        result = simulator.simulate(generator.generate(level)).run()
        wins[idx] = result.outcome is Outcome.WIN
        rounds[idx] = result.rounds
        gold[idx] = result.gold_delta
        for event in result.events:
            counts[event.kind.name.lower()] += 1

    return MatchupReport(
        level=level,
        battles=battles,
        win_rate=float(np.mean(wins)),
        mean_rounds=float(np.mean(rounds)),
        std_rounds=float(np.std(rounds)),
        mean_gold=float(np.mean(gold)),
        event_counts=counts,
    )


def sweep_levels(
    levels: Iterable[int],
    battles: int = 1000,
    *,
    seed: Optional[int] = None,
    progress_bar: bool = False,
) -> List[MatchupReport]:
    return [
        estimate_win_rate(
            level,
            battles,
            seed=None if seed is None else seed + level,
            progress_bar=progress_bar,
        )
        for level in levels
    ]


def plot_win_rates(reports: List[MatchupReport], save_path: Optional[str] = None) -> None:
    """Bar chart of win rate with mean rounds per level."""
    import matplotlib

    if save_path:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    levels = [report.level for report in reports]
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 4))

    ax1.bar(levels, [report.win_rate for report in reports], color="tab:blue", alpha=0.8)
    ax1.axhline(0.5, color="grey", linestyle="--", linewidth=1)
    ax1.set_xlabel("Player level")
    ax1.set_ylabel("Win rate")
    ax1.set_ylim(0, 1)
    ax1.set_title("Win rate by level")
    ax1.grid(True, alpha=0.3)

    ax2.errorbar(
        levels,
        [report.mean_rounds for report in reports],
        yerr=[report.std_rounds for report in reports],
        fmt="o-",
        capsize=3,
    )
    ax2.set_xlabel("Player level")
    ax2.set_ylabel("Rounds")
    ax2.set_title("Battle length")
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
    else:
        plt.show()
