"""Interactive Plotly strategy lookup and bankroll figures.

Three public functions:

    build_strategy_lookup_figure(strategy)
        — Interactive hard/soft/pairs heatmaps of a strategy's two-card decisions.
    build_trajectory_figure(histories)
        — Bankroll after each game, one line per run.
    save_lookup_html(fig, path)
        — Export any figure to a self-contained HTML file.

Hover over any chart cell to see the hand, the dealer upcard and the action.
Figures open in a browser via ``fig.show()`` or embed in the Streamlit app.
"""

from __future__ import annotations

from typing import Mapping

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from blackjack_sim.analysis.heat_maps import (
    HARD_TOTALS,
    PAIR_RANKS,
    SOFT_TOTALS,
    build_basic_strategy_data,
)
from blackjack_sim.engine.cards import UPCARDS
from blackjack_sim.engine.strategies import Strategy

# ─── Constants ────────────────────────────────────────────────────────────────

_ACTION_NAMES: dict[float, str] = {0.0: "STAND", 1.0: "HIT", 2.0: "DOUBLE", 3.0: "SPLIT"}

# Four flat bands over z in [0, 3]: STAND, HIT, DOUBLE, SPLIT.
_ACTION_COLORSCALE: list[list] = [
    [0.0, "#d62728"],
    [0.125, "#d62728"],
    [0.125, "#2ca02c"],
    [0.5, "#2ca02c"],
    [0.5, "#1f77b4"],
    [0.875, "#1f77b4"],
    [0.875, "#9467bd"],
    [1.0, "#9467bd"],
]


# ─── Hover text builder ───────────────────────────────────────────────────────


def _build_hover(data: np.ndarray, row_labels: list[str], kind: str) -> list[list[str]]:
    """Return hover strings (one per cell) naming hand, upcard and action.

    Args:
        data:       Action-code matrix (rows = player hands, cols = UPCARDS).
        row_labels: Display label for each row.
        kind:       'Hard', 'Soft' or 'Pair'.
    """
    rows: list[list[str]] = []
    for r, label in enumerate(row_labels):
        row: list[str] = []
        for c, upcard in enumerate(UPCARDS):
            lines = [
                f"Hand: <b>{label}</b> ({kind})",
                f"Dealer: {upcard}",
                f"Action: <b>{_ACTION_NAMES[float(data[r, c])]}</b>",
            ]
            row.append("<br>".join(lines))
        rows.append(row)
    return rows


# ─── Trace builder ─────────────────────────────────────────────────────────────


def _make_heatmap_trace(
    data: np.ndarray,
    row_labels: list[str],
    hover_text: list[list[str]],
    *,
    name: str,
    showscale: bool = False,
) -> go.Heatmap:
    return go.Heatmap(
        z=data.tolist(),
        x=list(UPCARDS),
        y=row_labels,
        colorscale=_ACTION_COLORSCALE,
        zmin=0.0,
        zmax=3.0,
        text=hover_text,
        hovertemplate="%{text}<extra></extra>",
        showscale=showscale,
        colorbar={
            "title": "Action",
            "tickvals": [0.375, 1.125, 1.875, 2.625],
            "ticktext": ["STAND", "HIT", "DOUBLE", "SPLIT"],
        },
        name=name,
    )


# ─── Public figure builders ───────────────────────────────────────────────────


def build_strategy_lookup_figure(strategy: Strategy | None = None) -> go.Figure:
    """Build an interactive chart of a strategy's two-card decisions.

    Args:
        strategy: Strategy to chart; defaults to Basic.

    Returns:
        go.Figure with three heatmap traces (hard, soft, pairs) in a 1×3 layout.
    """
    hard, soft, pairs = build_basic_strategy_data(strategy)
    panels = [
        (hard, [str(t) for t in HARD_TOTALS], "Hard"),
        (soft, [f"A,{t - 11}" for t in SOFT_TOTALS], "Soft"),
        (pairs, [f"{r},{r}" for r in PAIR_RANKS], "Pair"),
    ]

    fig = make_subplots(
        rows=1,
        cols=3,
        subplot_titles=["Hard totals", "Soft totals", "Pairs"],
        horizontal_spacing=0.08,
    )
    for col, (data, labels, kind) in enumerate(panels, start=1):
        fig.add_trace(
            _make_heatmap_trace(
                data,
                labels,
                _build_hover(data, labels, kind),
                name=kind,
                showscale=col == 3,
            ),
            row=1,
            col=col,
        )

    label = strategy.label if strategy is not None else "Basic strategy"
    fig.update_layout(
        title_text=f"Strategy Lookup: {label}",
        title_font_size=15,
        height=560,
        width=1100,
    )
    fig.update_yaxes(title_text="Player hand", col=1)
    fig.update_yaxes(autorange="reversed")
    fig.update_xaxes(title_text="Dealer upcard", type="category")
    return fig


def build_trajectory_figure(histories: Mapping[str, np.ndarray]) -> go.Figure:
    """Bankroll after each game for one or more runs.

    Args:
        histories: Label -> Simulator.history.

    Returns:
        go.Figure with one line trace per entry.
    """
    fig = go.Figure()
    for label, history in histories.items():
        history = np.asarray(history, dtype=np.float64)
        fig.add_trace(
            go.Scatter(
                x=np.arange(len(history)),
                y=history,
                mode="lines",
                name=label,
                hovertemplate="Game %{x}<br>Bankroll %{y:,.2f}<extra>" + label + "</extra>",
            )
        )

    fig.update_layout(
        title_text="Bankroll Trajectory",
        title_font_size=15,
        xaxis_title="Game",
        yaxis_title="Bankroll",
        height=420,
    )
    return fig


# ─── HTML export ───────────────────────────────────────────────────────────────


def save_lookup_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to a self-contained HTML file.

    Plotly JS is loaded from the CDN so the file itself remains compact.
    """
    fig.write_html(path, include_plotlyjs="cdn")


# ─── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    from blackjack_sim.engine.config import SimulatorConfig
    from blackjack_sim.engine.simulator import Simulator

    print("Building interactive lookup figures …")
    save_lookup_html(build_strategy_lookup_figure(), "strategy_lookup.html")

    sim = Simulator(SimulatorConfig(), seed=1)
    sim.play()
    save_lookup_html(build_trajectory_figure({"basic": sim.history}), "trajectory.html")
    print("Saved: strategy_lookup.html, trajectory.html")
