"""Basic strategy charts and bankroll plots.

One public data-builder returns NumPy matrices that can be used
programmatically or passed to the plot helpers:

    build_basic_strategy_data(strategy)  — (hard, soft, pairs) action matrices

Three public plot functions render matplotlib figures:

    plot_basic_strategy_chart(hard, soft, pairs, ...)  — 1×3 chart figure
    plot_bankroll_trajectory(history, ...)             — bankroll after each game
    plot_strategy_comparison(histories, ...)           — several trajectories overlaid

Matrix convention:
    Columns : dealer upcard, UPCARDS order ['2'..'10', 'A']
    Rows    : hard totals 5–20, soft totals 13–20, pair ranks '2'..'10', 'A'
    Values  : ACTION_CODES (0=STAND, 1=HIT, 2=DOUBLE, 3=SPLIT)
"""

from __future__ import annotations

from typing import Mapping

import matplotlib
import matplotlib.colors
import matplotlib.figure
import matplotlib.patches
import matplotlib.pyplot as plt
import numpy as np

from blackjack_sim.engine.cards import UPCARDS
from blackjack_sim.engine.hand import Hand
from blackjack_sim.engine.strategies import Action, Basic, Strategy

# ─── Constants ────────────────────────────────────────────────────────────────

HARD_TOTALS: list[int] = list(range(5, 21))
SOFT_TOTALS: list[int] = list(range(13, 21))
PAIR_RANKS: list[str] = ['2', '3', '4', '5', '6', '7', '8', '9', '10', 'A']

ACTION_CODES: dict[Action, float] = {
    Action.STAND: 0.0,
    Action.HIT: 1.0,
    Action.DOUBLE: 2.0,
    Action.SPLIT: 3.0,
}
_ACTION_LETTERS: dict[float, str] = {0.0: "S", 1.0: "H", 2.0: "D", 3.0: "P"}
_ACTION_COLORS: list[str] = ["#d62728", "#2ca02c", "#1f77b4", "#9467bd"]


# ─── Colormap ─────────────────────────────────────────────────────────────────


def _make_action_cmap() -> matplotlib.colors.ListedColormap:
    """Red=STAND, Green=HIT, Blue=DOUBLE, Purple=SPLIT."""
    return matplotlib.colors.ListedColormap(_ACTION_COLORS)


_ACTION_CMAP: matplotlib.colors.ListedColormap = _make_action_cmap()


# ─── Data builders ────────────────────────────────────────────────────────────


def _two_card_hand(cards: list[str]) -> Hand:
    hand = Hand()
    for card in cards:
        hand.add_card(card)
    return hand


def _hard_cards(total: int) -> list[str]:
    """Two non-ace cards summing to *total* (5–20)."""
    high = min(10, total - 2)
    return [str(high), str(total - high)]


def build_basic_strategy_data(
    strategy: Strategy | None = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return (hard, soft, pairs) action matrices for a two-card starting hand.

    Each cell asks the strategy what to do with doubling allowed; splitting is
    allowed only in the pairs matrix.

    Args:
        strategy: The strategy to chart; defaults to Basic().

    Returns:
        (hard, soft, pairs) float64 matrices of shape (16, 10), (8, 10), (10, 10).
    """
    strategy = strategy if strategy is not None else Basic()

    hard = np.empty((len(HARD_TOTALS), len(UPCARDS)))
    soft = np.empty((len(SOFT_TOTALS), len(UPCARDS)))
    pairs = np.empty((len(PAIR_RANKS), len(UPCARDS)))

    for c, upcard in enumerate(UPCARDS):
        for r, total in enumerate(HARD_TOTALS):
            hand = _two_card_hand(_hard_cards(total))
            hard[r, c] = ACTION_CODES[strategy.act(hand, upcard, True, False)]

        for r, total in enumerate(SOFT_TOTALS):
            hand = _two_card_hand(['A', str(total - 11)])
            soft[r, c] = ACTION_CODES[strategy.act(hand, upcard, True, False)]

        for r, rank in enumerate(PAIR_RANKS):
            hand = _two_card_hand([rank, rank])
            pairs[r, c] = ACTION_CODES[strategy.act(hand, upcard, True, True)]

    return hard, soft, pairs


# ─── Rendering helper ─────────────────────────────────────────────────────────


def _render_panel(
    ax: matplotlib.axes.Axes,
    data: np.ndarray,
    row_labels: list[str],
) -> matplotlib.image.AxesImage:
    """Render one chart panel onto *ax* with an action letter in every cell.

    The caller sets title, xlabel, and ylabel.
    """
    im = ax.imshow(data, cmap=_ACTION_CMAP, vmin=-0.5, vmax=3.5, aspect="auto")

    ax.set_xticks(range(len(UPCARDS)))
    ax.set_xticklabels(UPCARDS, fontsize=9)
    ax.set_yticks(range(len(row_labels)))
    ax.set_yticklabels(row_labels, fontsize=9)

    for r in range(data.shape[0]):
        for c in range(data.shape[1]):
            ax.text(
                c,
                r,
                _ACTION_LETTERS[float(data[r, c])],
                ha="center",
                va="center",
                fontsize=8,
                color="white",
                fontweight="bold",
            )

    return im


def _finish(fig: matplotlib.figure.Figure, show: bool, save_path: str | None) -> None:
    plt.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()


# ─── Public plot functions ────────────────────────────────────────────────────


def plot_basic_strategy_chart(
    hard_data: np.ndarray,
    soft_data: np.ndarray,
    pair_data: np.ndarray,
    title: str = "Basic Strategy",
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot the hard, soft and pair tables side by side.

    Args:
        hard_data: (16, 10) action codes for hard totals 5–20.
        soft_data: (8, 10) action codes for soft totals 13–20.
        pair_data: (10, 10) action codes for pairs.
        title:     Figure suptitle.
        show:      If True, call plt.show() after rendering.
        save_path: If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    fig, (ax_hard, ax_soft, ax_pairs) = plt.subplots(1, 3, figsize=(15, 6))
    fig.suptitle(title, fontsize=13, fontweight="bold")

    _render_panel(ax_hard, hard_data, [str(t) for t in HARD_TOTALS])
    _render_panel(ax_soft, soft_data, [f"A,{t - 11}" for t in SOFT_TOTALS])
    _render_panel(ax_pairs, pair_data, [f"{r},{r}" for r in PAIR_RANKS])

    for ax, name in ((ax_hard, "Hard totals"), (ax_soft, "Soft totals"), (ax_pairs, "Pairs")):
        ax.set_title(name, fontsize=10)
        ax.set_xlabel("Dealer upcard", fontsize=9)
    ax_hard.set_ylabel("Player hand", fontsize=9)

    handles = [
        matplotlib.patches.Patch(color=color, label=label)
        for color, label in zip(_ACTION_COLORS, ("Stand", "Hit", "Double", "Split"))
    ]
    fig.legend(handles=handles, loc="lower center", ncol=4, fontsize=9)

    _finish(fig, show, save_path)
    return fig


def plot_bankroll_trajectory(
    history: np.ndarray,
    title: str = "Bankroll trajectory",
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot the bankroll after each game with the starting bankroll as a reference line.

    Args:
        history: Simulator.history (starting bankroll followed by one entry per game).
    """
    history = np.asarray(history, dtype=np.float64)
    fig, ax = plt.subplots(figsize=(10, 5))

    ax.plot(np.arange(len(history)), history, color="#1f77b4", linewidth=1.2)
    if len(history):
        ax.axhline(history[0], color="grey", linestyle="--", linewidth=0.8, label="Start")
        ax.legend(fontsize=9)

    ax.set_title(title, fontsize=12, fontweight="bold")
    ax.set_xlabel("Game", fontsize=9)
    ax.set_ylabel("Bankroll", fontsize=9)
    ax.grid(alpha=0.3)

    _finish(fig, show, save_path)
    return fig


def plot_strategy_comparison(
    histories: Mapping[str, np.ndarray],
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Overlay the bankroll trajectories of several runs.

    Args:
        histories: Label -> Simulator.history, e.g. one entry per strategy.

    Returns:
        matplotlib.figure.Figure with one line per entry.
    """
    fig, ax = plt.subplots(figsize=(10, 5))
    fig.suptitle("Strategy Comparison", fontsize=13, fontweight="bold")

    for label, history in histories.items():
        ax.plot(np.arange(len(history)), history, linewidth=1.0, label=label)

    ax.set_xlabel("Game", fontsize=9)
    ax.set_ylabel("Bankroll", fontsize=9)
    ax.grid(alpha=0.3)
    if histories:
        ax.legend(fontsize=9)

    _finish(fig, show, save_path)
    return fig


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from blackjack_sim.engine.config import SimulatorConfig
    from blackjack_sim.engine.simulator import Simulator
    from blackjack_sim.engine.strategies import STRATEGIES

    n_games = int(sys.argv[1]) if len(sys.argv) > 1 else 1000

    print("Generating basic strategy chart …")
    plot_basic_strategy_chart(*build_basic_strategy_data(), show=False, save_path="basic_strategy.png")

    print(f"Running every strategy for up to {n_games:,} games …")
    histories = {}
    for identifier in STRATEGIES:
        sim = Simulator(SimulatorConfig(strategy=identifier, max_games=n_games), seed=7)
        sim.play()
        histories[identifier] = sim.history
    plot_strategy_comparison(histories, show=False, save_path="strategy_comparison.png")
    print("Saved: basic_strategy.png, strategy_comparison.png")
