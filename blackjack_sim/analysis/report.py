"""Results table formatting and the command-line entry point.

    format_results_table(rows)  — aligned two-column text table
    print_results(sim)          — print a finished simulator's table
    parse_overrides(pairs)      — ["shoe.decks=2", ...] → {"shoe.decks": "2", ...}
    main(argv)                  — ``blackjack-sim`` console script

Usage:
    blackjack-sim --set player.strategy=hilo --set player.max_games=5000 --seed 1
    blackjack-sim --seed 7 --html trajectory.html
    python -m blackjack_sim.analysis.report --list-strategies
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from blackjack_sim.engine.config import CONFIG_KEYS, SimulatorConfig
from blackjack_sim.engine.simulator import Simulator
from blackjack_sim.engine.strategies import STRATEGIES

logger = logging.getLogger(__name__)


# ─── Formatting ───────────────────────────────────────────────────────────────


def format_results_table(rows: Sequence[tuple[str, object]]) -> str:
    """Render (label, value) rows as an aligned two-column table.

    Examples:
        >>> print(format_results_table([("Games", 3), ("Dealer busts", 1)]))
        Games         3
        Dealer busts  1
    """
    if not rows:
        return ""
    width = max(len(label) for label, _ in rows)
    return "\n".join(f"{label:<{width}}  {value}" for label, value in rows)


def print_results(sim: Simulator) -> str:
    """Print the results table of a finished run and return it."""
    table = format_results_table(sim.results())
    print("=" * 56)
    print(f"Blackjack Simulation: {sim.player.strategy.label}")
    print("=" * 56)
    print(table)
    print()
    return table


def parse_overrides(pairs: Sequence[str]) -> dict[str, str]:
    """Split ``key=value`` strings into a mapping.

    Raises:
        ValueError: If an item has no '=' or an empty key.

    Examples:
        >>> parse_overrides(["shoe.decks=2", "player.strategy=hilo"])
        {'shoe.decks': '2', 'player.strategy': 'hilo'}
    """
    overrides: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        overrides[key] = value.strip()
    return overrides


# ─── Entry point ──────────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blackjack-sim",
        description="Simulate a single-player blackjack session and print the results.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help=f"Override a setting; keys: {', '.join(CONFIG_KEYS)}",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the shoe shuffle.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default WARNING).",
    )
    parser.add_argument(
        "--list-strategies",
        action="store_true",
        help="List the available strategies and exit.",
    )
    parser.add_argument(
        "--bankroll-report",
        action="store_true",
        help="Also print outcome statistics, projections and drawdown.",
    )
    parser.add_argument(
        "--html",
        metavar="PATH",
        default=None,
        help="Save the bankroll trajectory as an interactive HTML chart.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_strategies:
        for identifier, cls in STRATEGIES.items():
            print(f"{identifier:<18}{cls.label}: {cls.description}")
        return 0

    try:
        config = SimulatorConfig.from_mapping(parse_overrides(args.overrides))
        sim = Simulator(config, seed=args.seed)
    except ValueError as exc:
        parser.error(str(exc))

    sim.play()
    print_results(sim)

    if args.bankroll_report:
        _print_bankroll_report(sim)
    if args.html:
        _save_trajectory_html(sim, args.html)
    return 0


def _print_bankroll_report(sim: Simulator) -> None:
    from blackjack_sim.analysis.bankroll import (
        compute_drawdown,
        compute_horizon_projections,
        compute_outcome_stats,
        print_bankroll_report,
        required_bankroll,
    )

    if sim.games == 0:
        logger.warning("No games were played; skipping the bankroll report.")
        return

    stats = compute_outcome_stats(sim.outcomes)
    reqs = (
        [required_bankroll(stats.mean, stats.std, sp) for sp in (0.90, 0.95, 0.99)]
        if stats.mean > 0
        else []
    )
    print_bankroll_report(
        stats,
        reqs,
        compute_horizon_projections(stats.mean, stats.std),
        compute_drawdown(sim.history),
        label=sim.player.strategy.label,
    )



def _save_trajectory_html(sim: Simulator, path: str) -> None:
    from blackjack_sim.analysis.plotly_lookup import build_trajectory_figure, save_lookup_html

    save_lookup_html(build_trajectory_figure({sim.player.strategy.label: sim.history}), path)
    logger.info("Saved bankroll trajectory to %s", path)

if __name__ == "__main__":
    raise SystemExit(main())
