"""Blackjack Simulator — Streamlit Dashboard.

Four-tab interactive dashboard for configuring and inspecting simulation runs:
  Tab 1 — Results             (results table + bankroll trajectory)
  Tab 2 — Strategy Chart      (matplotlib basic-strategy chart)
  Tab 3 — Interactive Lookup  (Plotly, hover for hand / upcard / action)
  Tab 4 — Bankroll Analysis   (outcome stats, risk of ruin, projections, drawdown)

Run:
    streamlit run app.py
"""

from __future__ import annotations

import contextlib
import io

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import pandas as pd
import streamlit as st

from blackjack_sim.engine.config import ConfigurationError, SimulatorConfig
from blackjack_sim.engine.strategies import STRATEGIES

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Blackjack Simulator",
    page_icon="🃏",
    layout="wide",
)

# ─── Cached runs ──────────────────────────────────────────────────────────────


@st.cache_resource
def _run_simulation(settings: tuple[tuple[str, object], ...], seed: int):
    """Play one run and cache the finished simulator (keyed on settings + seed)."""
    from blackjack_sim.engine.simulator import Simulator

    sim = Simulator(SimulatorConfig.from_mapping(dict(settings)), seed=seed)
    sim.play()
    return sim


@st.cache_resource
def _run_all_strategies(settings: tuple[tuple[str, object], ...], seed: int):
    """Replay the same settings under every registered strategy."""
    histories = {}
    for identifier in STRATEGIES:
        overrides = dict(settings)
        overrides["player.strategy"] = identifier
        histories[STRATEGIES[identifier].label] = _run_simulation(
            tuple(sorted(overrides.items())), seed
        ).history
    return histories


# ─── Sidebar controls ─────────────────────────────────────────────────────────

defaults = SimulatorConfig()

with st.sidebar:
    st.title("🃏 Blackjack Simulator")
    st.markdown("---")

    strategy = st.selectbox(
        "Strategy",
        options=list(STRATEGIES),
        format_func=lambda key: STRATEGIES[key].label,
        index=list(STRATEGIES).index(defaults.strategy),
    )
    st.caption(STRATEGIES[strategy].description)

    decks = st.slider("Decks", min_value=1, max_value=8, value=defaults.decks)
    penetration = st.slider(
        "Penetration", min_value=0.25, max_value=1.0, value=defaults.penetration, step=0.05
    )
    bet_min = st.number_input("Min. bet", min_value=1, value=int(defaults.bet_min), step=5)
    bet_max = st.number_input("Max. bet", min_value=1, value=int(defaults.bet_max), step=50)
    bankroll = st.number_input("Bankroll", min_value=1, value=int(defaults.bankroll), step=100)
    spread = st.number_input("Bet spread", min_value=1, value=int(defaults.spread), step=1)
    max_games = st.slider(
        "Max. games", min_value=100, max_value=20_000, value=defaults.max_games, step=100
    )
    max_hands = st.slider(
        "Max. hands per game", min_value=1, max_value=8, value=defaults.max_hands_per_game
    )
    payout = st.selectbox(
        "Blackjack payout",
        options=[1.5, 1.2, 1.0],
        format_func=lambda v: {1.5: "3:2", 1.2: "6:5", 1.0: "1:1"}[v],
    )
    hit_soft_17 = st.checkbox("Dealer hits soft 17", value=defaults.hit_soft_17)
    seed = st.number_input("Seed", min_value=0, value=42, step=1)

    st.markdown("---")
    compare = st.button("Compare all strategies", type="primary")

settings = {
    "shoe.decks": decks,
    "shoe.penetration": penetration,
    "game.bet_min": bet_min,
    "game.bet_max": bet_max,
    "game.max_hands_per_game": max_hands,
    "game.blackjack_payout": payout,
    "player.strategy": strategy,
    "player.bankroll": bankroll,
    "player.spread": spread,
    "player.max_games": max_games,
    "dealer.hit_soft_17": hit_soft_17,
}
settings_key = tuple(sorted(settings.items()))

try:
    SimulatorConfig.from_mapping(settings).validate()
except ConfigurationError as exc:
    st.error(f"Invalid settings: {exc}")
    st.stop()

with st.spinner(f"Simulating up to {max_games:,} games …"):
    sim = _run_simulation(settings_key, int(seed))

# ─── Tabs ─────────────────────────────────────────────────────────────────────

tab1, tab2, tab3, tab4 = st.tabs(
    [
        "Results",
        "Strategy Chart",
        "Interactive Lookup",
        "Bankroll Analysis",
    ]
)

# ── Tab 1: Results ────────────────────────────────────────────────────────────

with tab1:
    from blackjack_sim.analysis.heat_maps import plot_strategy_comparison
    from blackjack_sim.analysis.plotly_lookup import build_trajectory_figure

    st.header("Results")
    col1, col2, col3 = st.columns(3)
    col1.metric("Games", f"{sim.games:,}")
    col2.metric(
        "Bankroll",
        f"{sim.player.bankroll:,.2f}",
        delta=f"{sim.player.bankroll - sim.player.starting_bankroll:+,.2f}",
    )
    col3.metric("Shuffles", sim.shoe.shuffles)

    results_df = pd.DataFrame(
        [(label, str(value)) for label, value in sim.results()],
        columns=["Metric", "Value"],
    )
    st.dataframe(results_df, use_container_width=True, hide_index=True)

    st.markdown("---")
    st.subheader("Bankroll Trajectory")
    st.plotly_chart(
        build_trajectory_figure({STRATEGIES[strategy].label: sim.history}),
        use_container_width=True,
    )

    if compare:
        st.subheader("All Strategies (same settings and seed)")
        with st.spinner("Running every strategy …"):
            histories = _run_all_strategies(settings_key, int(seed))
        st.plotly_chart(build_trajectory_figure(histories), use_container_width=True)
        st.pyplot(plot_strategy_comparison(histories, show=False))

# ── Tab 2: Strategy Chart ─────────────────────────────────────────────────────

with tab2:
    from blackjack_sim.analysis.heat_maps import (
        build_basic_strategy_data,
        plot_basic_strategy_chart,
    )

    st.header("Basic Strategy Chart")
    st.caption(
        "Rows = player hand | Cols = dealer upcard | "
        "Red = STAND, Green = HIT, Blue = DOUBLE, Purple = SPLIT"
    )
    fig_chart = plot_basic_strategy_chart(*build_basic_strategy_data(), show=False)
    st.pyplot(fig_chart)

# ── Tab 3: Interactive Lookup ─────────────────────────────────────────────────

with tab3:
    from blackjack_sim.analysis.plotly_lookup import build_strategy_lookup_figure

    st.header("Interactive Strategy Lookup")
    st.caption("Hover over any cell to see the hand, the dealer upcard and the action.")
    st.plotly_chart(build_strategy_lookup_figure(), use_container_width=True)

# ── Tab 4: Bankroll Analysis ──────────────────────────────────────────────────

with tab4:
    from blackjack_sim.analysis.heat_maps import plot_bankroll_trajectory
    from blackjack_sim.analysis.bankroll import (
        compute_drawdown,
        compute_drawdown_stats,
        compute_horizon_projections,
        compute_outcome_stats,
        print_bankroll_report,
        required_bankroll,
        risk_of_ruin,
    )

    st.header("Bankroll Analysis")

    if sim.games == 0:
        st.info("No games were played with these settings.")
    else:
        st.caption(
            "Per-game net outcomes from the run above. "
            "Risk-of-ruin and horizon projections computed via CLT."
        )
        os_ = compute_outcome_stats(sim.outcomes)

        st.subheader("Distribution Statistics")
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Mean / game", f"{os_.mean:+.2f}")
        col2.metric("Std dev", f"{os_.std:.2f}")
        col3.metric("Skewness", f"{os_.skewness:.3f}")
        col4.metric("Kurtosis", f"{os_.kurtosis:.3f}")

        pct_df = pd.DataFrame(
            {"Percentile": list(os_.percentiles.keys()), "Value": list(os_.percentiles.values())}
        )
        st.dataframe(pct_df, use_container_width=True, hide_index=True)

        st.markdown("---")
        st.subheader("Risk of Ruin")
        ror_rows = []
        for multiple in (10, 25, 50, 100):
            br = multiple * sim.bet_min
            ror = risk_of_ruin(br, os_.mean, os_.std)
            ror_rows.append({"Bankroll": f"{br:,.0f}", "P(ruin)": f"{ror:.4f}"})
        st.dataframe(pd.DataFrame(ror_rows), use_container_width=True, hide_index=True)

        st.markdown("---")
        st.subheader("Horizon Projections (CLT)")
        proj = compute_horizon_projections(os_.mean, os_.std)
        proj_rows = [
            {
                "Games": p.n_games,
                "Expected Profit": f"{p.expected_profit:+.2f}",
                "CI Low": f"{p.ci_low:+.2f}",
                "CI High": f"{p.ci_high:+.2f}",
                "P(profit > 0)": f"{p.prob_positive:.3f}",
            }
            for p in proj
        ]
        st.dataframe(pd.DataFrame(proj_rows), use_container_width=True, hide_index=True)

        st.markdown("---")
        st.subheader("Drawdown")
        st.pyplot(
            plot_bankroll_trajectory(sim.history, title="Observed bankroll trajectory", show=False)
        )
        observed = compute_drawdown(sim.history)
        boot = compute_drawdown_stats(sim.outcomes, n_trajectories=200, trajectory_length=500)
        col1, col2, col3 = st.columns(3)
        col1.metric("Observed max drawdown", f"{observed.mean_max_drawdown:,.2f}")
        col2.metric("Bootstrap median", f"{boot.median_max_drawdown:,.2f}")
        col3.metric("Bootstrap p95", f"{boot.p95_max_drawdown:,.2f}")

        st.markdown("---")
        st.subheader("Full Bankroll Report (stdout capture)")
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            # Only a positive edge gives a finite bankroll requirement.
            if os_.mean > 0:
                br_reqs = [required_bankroll(os_.mean, os_.std, sp) for sp in [0.90, 0.95, 0.99]]
            else:
                br_reqs = []
            print_bankroll_report(os_, br_reqs, proj, observed, label=STRATEGIES[strategy].label)
        st.code(buf.getvalue(), language=None)
