"""Command line entrypoint: ``scaling-law [battle|analyze|serve]``."""
from __future__ import annotations

import argparse
import random
from typing import List, Optional

from .battle import BattleSimulator
from .cards import CardGenerator, archetype_name
from .config import configure_logging, settings
from .enums import EventKind, Side
from .models import Card

_EVENT_TEXT = {
    EventKind.ATTACK: "Output generated. Dmg {amount}.",
    EventKind.CRITICAL: "Hallucination hit! Crit {amount}!",
    EventKind.SELF_HARM: "OOM error! Self-harm {amount}.",
    EventKind.VICTORY: "WINNER: PLAYER! +{amount} Gold",
    EventKind.DEFEAT: "SYSTEM FAILURE. +{amount} Gold",
}


def describe_card(card: Card) -> str:
    return f"{archetype_name(card.type)} (+{card.level}) HP {card.hp} ATK {card.atk} DEF {card.defense}"


def run_battle(level: int, seed: Optional[int]) -> None:
    rng = random.Random(seed)
    generator = CardGenerator(rng)
    simulator = BattleSimulator(rng, generator=generator)
    player = generator.generate(level)
    simulation = simulator.simulate(player)

    print(f"Player:   {describe_card(simulation.player_card)}")
    print(f"Opponent: {describe_card(simulation.opponent_card)}")
    print("=" * 60)
    for event in simulation:
        who = "" if event.kind in (EventKind.VICTORY, EventKind.DEFEAT) else (
            "Player " if event.actor is Side.PLAYER else "Enemy  "
        )
        text = _EVENT_TEXT[event.kind].format(amount=event.amount)
        print(f"[T{event.round}] {who}{text}  ({event.player_hp} / {event.opponent_hp})")


def run_analysis(levels: List[int], battles: int, seed: Optional[int], plot: Optional[str]) -> None:
    from .analysis import plot_win_rates, sweep_levels

    reports = sweep_levels(levels, battles, seed=seed, progress_bar=True)
    print(f"{'Level':>5} {'Win rate':>9} {'Rounds':>8} {'Gold':>6}")
    for report in reports:
        print(
            f"{report.level:>5} {report.win_rate:>9.3f} "
            f"{report.mean_rounds:>8.2f} {report.mean_gold:>6.1f}"
        )
    if plot:
        plot_win_rates(reports, plot)
        print(f"Plot saved to {plot}")


def serve(host: str, port: int) -> None:
    import uvicorn

    uvicorn.run("backend:app", host=host, port=port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scaling-law", description="Scaling Law card game tools")
    parser.add_argument("--log-level", default=None, help="Override SCALING_LAW_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    battle = sub.add_parser("battle", help="Simulate one battle and print its log")
    battle.add_argument("--level", type=int, default=0)
    battle.add_argument("--seed", type=int, default=None)

    analyze = sub.add_parser("analyze", help="Estimate win rates per level")
    analyze.add_argument("--levels", type=int, nargs="+", default=list(range(0, 6)))
    analyze.add_argument("--battles", type=int, default=1000)
    analyze.add_argument("--seed", type=int, default=None)
    analyze.add_argument("--plot", default=None, help="Save a chart to this path")

    srv = sub.add_parser("serve", help="Run the HTTP backend")
    srv.add_argument("--host", default=settings.host)
    srv.add_argument("--port", type=int, default=settings.port)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "battle":
        run_battle(args.level, args.seed)
    elif args.command == "analyze":
        run_analysis(args.levels, args.battles, args.seed, args.plot)
    elif args.command == "serve":
        serve(args.host, args.port)


if __name__ == "__main__":
    main()
