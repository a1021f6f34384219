"""Bankroll trajectory and per-game outcome analysis.

Provides:
- Distribution statistics of per-game net outcomes (mean, std, skewness,
  kurtosis, percentiles)
- Risk-of-ruin and required bankroll (classic gambler's ruin approximation)
- Horizon projections via CLT (expected profit + confidence intervals)
- Drawdown of the observed trajectory, and a bootstrap drawdown distribution

Inputs come straight from a finished run::

    sim.play()
    stats = compute_outcome_stats(sim.outcomes)
    dd = compute_drawdown(sim.history)

Usage (standalone report):
    python -m blackjack_sim.analysis.bankroll [games] [strategy]
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from scipy import stats

# ─── Dataclasses ──────────────────────────────────────────────────────────────


@dataclass
class OutcomeStats:
    """Descriptive statistics for per-game net outcomes.

    Attributes:
        mean:        Mean net result per game (money).
        std:         Sample standard deviation (0.0 for fewer than 2 games).
        variance:    std**2.
        skewness:    Fisher skewness (0.0 when undefined).
        kurtosis:    Excess kurtosis (0.0 when undefined).
        percentiles: Keys 'p1', 'p5', 'p25', 'p50', 'p75', 'p95', 'p99'.
        n_games:     Number of games in the sample.
    """

    mean: float
    std: float
    variance: float
    skewness: float
    kurtosis: float
    percentiles: dict[str, float]
    n_games: int


@dataclass
class BankrollRequirement:
    """Bankroll needed to survive at a target probability.

    Attributes:
        survival_prob:     Target probability of never going broke (e.g. 0.95).
        required_bankroll: Money needed at that survival probability.
        edge:              Mean outcome per game.
        std:               Per-game standard deviation.
        method:            Formula used.
    """

    survival_prob: float
    required_bankroll: float
    edge: float
    std: float
    method: str = "gambler_ruin_approx"


@dataclass
class HorizonProjection:
    """Expected profit and uncertainty after a number of games."""

    n_games: int
    expected_profit: float
    ci_low: float
    ci_high: float
    prob_positive: float


@dataclass
class DrawdownStats:
    """Peak-to-trough drawdown figures.

    For an observed trajectory all three figures are the single observed max
    drawdown and n_trajectories is 1.
    """

    mean_max_drawdown: float
    median_max_drawdown: float
    p95_max_drawdown: float
    n_trajectories: int


_PERCENTILES: tuple[int, ...] = (1, 5, 25, 50, 75, 95, 99)


# ─── Computation functions ────────────────────────────────────────────────────


def compute_outcome_stats(outcomes: np.ndarray) -> OutcomeStats:
    """Compute descriptive statistics for per-game net outcomes.

    Args:
        outcomes: 1-D array of per-game net results (Simulator.outcomes).

    Raises:
        ValueError: If no games were played.
    """
    arr = np.asarray(outcomes, dtype=np.float64)
    n = len(arr)
    if n == 0:
        raise ValueError("compute_outcome_stats() needs at least one game.")

    mean = float(np.mean(arr))
    std = float(np.std(arr, ddof=1)) if n > 1 else 0.0
    if std > 0:
        skewness = float(stats.skew(arr))
        kurt = float(stats.kurtosis(arr))
    else:
        skewness = kurt = 0.0

    pct_values = np.percentile(arr, _PERCENTILES)
    percentiles = {f"p{p}": float(v) for p, v in zip(_PERCENTILES, pct_values)}
    return OutcomeStats(
        mean=mean,
        std=std,
        variance=std**2,
        skewness=skewness,
        kurtosis=kurt,
        percentiles=percentiles,
        n_games=n,
    )


def risk_of_ruin(bankroll: float, edge: float, std: float) -> float:
    """Probability of ruin for a fixed bankroll, per-game edge and std.

    Uses the gambler's ruin approximation for a random walk:
        RoR = exp(-2 * edge * bankroll / variance)

    Returns 1.0 when edge <= 0 (ruin is certain eventually) and 0.0 when the
    walk has no variance and a positive edge.
    """
    if edge <= 0:
        return 1.0
    variance = std**2
    if variance == 0:
        return 0.0
    return float(math.exp(-2.0 * edge * bankroll / variance))


def required_bankroll(edge: float, std: float, survival_prob: float) -> BankrollRequirement:
    """Invert the ruin formula for a target survival probability.

        B = -variance * ln(1 - survival_prob) / (2 * edge)

    Raises:
        ValueError: If edge <= 0 (the formula gives an infinite bankroll).
    """
    if edge <= 0:
        raise ValueError(
            f"required_bankroll() requires a positive edge; got edge={edge:.6f}. "
            "With zero or negative edge the gambler's ruin formula gives infinite bankroll."
        )
    variance = std**2
    b = -variance * math.log(1.0 - survival_prob) / (2.0 * edge)
    return BankrollRequirement(
        survival_prob=survival_prob,
        required_bankroll=b,
        edge=edge,
        std=std,
    )


def compute_horizon_projections(
    edge: float,
    std: float,
    horizons: list[int] | None = None,
    confidence: float = 0.95,
) -> list[HorizonProjection]:
    """CLT-based profit projections at several game-count horizons.

    Cumulative profit after N games ~ Normal(N*edge, N*variance).

    Args:
        edge:       Mean outcome per game.
        std:        Per-game standard deviation.
        horizons:   Game counts to project; defaults to [100, 500, 1000, 5000, 10000].
        confidence: Confidence level for the interval.
    """
    if horizons is None:
        horizons = [100, 500, 1000, 5000, 10_000]

    z = stats.norm.ppf((1.0 + confidence) / 2.0)
    projections = []
    for n in horizons:
        expected = n * edge
        margin = z * std * math.sqrt(n)
        if std > 0:
            prob_pos = float(stats.norm.cdf(math.sqrt(n) * edge / std))
        else:
            prob_pos = 1.0 if edge > 0 else 0.0
        projections.append(
            HorizonProjection(
                n_games=n,
                expected_profit=expected,
                ci_low=expected - margin,
                ci_high=expected + margin,
                prob_positive=prob_pos,
            )
        )
    return projections


def max_drawdown(trajectory: np.ndarray) -> float:
    """Largest peak-to-trough fall of a bankroll trajectory.

    Examples:
        >>> max_drawdown(np.array([100.0, 120.0, 90.0, 110.0]))
        30.0
    """
    arr = np.asarray(trajectory, dtype=np.float64)
    if len(arr) == 0:
        return 0.0
    running_max = np.maximum.accumulate(arr)
    return float(np.max(running_max - arr))


def compute_drawdown(history: np.ndarray) -> DrawdownStats:
    """Drawdown of the observed bankroll trajectory (Simulator.history)."""
    dd = max_drawdown(history)
    return DrawdownStats(
        mean_max_drawdown=dd,
        median_max_drawdown=dd,
        p95_max_drawdown=dd,
        n_trajectories=1,
    )


def compute_drawdown_stats(
    outcomes: np.ndarray,
    n_trajectories: int = 1000,
    trajectory_length: int = 500,
    seed: int = 0,
) -> DrawdownStats:
    """Bootstrap-resample game outcomes and compute the max-drawdown distribution.

    Each trajectory samples (with replacement) from the observed outcomes and
    takes the max drawdown of its cumulative sum.

    Args:
        outcomes:          Observed per-game outcomes.
        n_trajectories:    Number of bootstrap trajectories.
        trajectory_length: Games per trajectory.
        seed:              Seed for the bootstrap Generator.
    """
    rng = np.random.default_rng(seed)
    max_drawdowns = np.empty(n_trajectories, dtype=np.float64)

    for i in range(n_trajectories):
        sample = rng.choice(outcomes, size=trajectory_length, replace=True)
        # Prepend 0 so a loss on the first game counts from the starting bankroll.
        max_drawdowns[i] = max_drawdown(np.concatenate(([0.0], np.cumsum(sample))))

    return DrawdownStats(
        mean_max_drawdown=float(np.mean(max_drawdowns)),
        median_max_drawdown=float(np.median(max_drawdowns)),
        p95_max_drawdown=float(np.percentile(max_drawdowns, 95)),
        n_trajectories=n_trajectories,
    )


# ─── Output functions ─────────────────────────────────────────────────────────


def print_bankroll_report(
    outcome_stats: OutcomeStats,
    bankroll_reqs: list[BankrollRequirement],
    projections: list[HorizonProjection],
    drawdown: DrawdownStats,
    *,
    label: str = "",
) -> str:
    """Format and print a full bankroll report.

    Returns:
        The formatted report string (also printed to stdout).
    """
    s = outcome_stats
    header = f"Bankroll Report{': ' + label if label else ''}"
    lines = [
        "=" * 70,
        header,
        "=" * 70,
        "",
        "── Outcome Distribution (per game) ─────────────────────────────────",
        f"  Games           : {s.n_games:>10,}",
        f"  Mean / game     : {s.mean:>+10.2f}",
        f"  Std deviation   : {s.std:>10.2f}",
        f"  Skewness        : {s.skewness:>10.4f}",
        f"  Excess kurtosis : {s.kurtosis:>10.4f}",
        "",
        "  Percentiles:",
        "    " + "  ".join(f"{k}={v:.2f}" for k, v in s.percentiles.items()),
        "",
        "── Bankroll Requirements ────────────────────────────────────────────",
    ]
    if bankroll_reqs:
        for req in bankroll_reqs:
            lines.append(
                f"  Survival {req.survival_prob * 100:.0f}%   : "
                f"{req.required_bankroll:>10.2f}  ({req.method})"
            )
    else:
        lines.append("  (Edge <= 0: bankroll requirements not applicable)")
    lines += [
        "",
        "── Horizon Projections (CLT, 95% CI) ───────────────────────────────",
        f"  {'Games':>8}  {'E[profit]':>10}  {'CI low':>10}  {'CI high':>10}  {'P(+)':>6}",
        f"  {'-' * 8}  {'-' * 10}  {'-' * 10}  {'-' * 10}  {'-' * 6}",
    ]
    for p in projections:
        lines.append(
            f"  {p.n_games:>8,}  {p.expected_profit:>+10.2f}  "
            f"{p.ci_low:>+10.2f}  {p.ci_high:>+10.2f}  {p.prob_positive:>5.1%}"
        )
    lines += [
        "",
        "── Drawdown ─────────────────────────────────────────────────────────",
        f"  Trajectories    : {drawdown.n_trajectories:,}",
        f"  Mean max DD     : {drawdown.mean_max_drawdown:.2f}",
        f"  Median max DD   : {drawdown.median_max_drawdown:.2f}",
        f"  p95 max DD      : {drawdown.p95_max_drawdown:.2f}",
        "",
    ]
    report = "\n".join(lines)
    print(report)
    return report


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from blackjack_sim.engine.config import SimulatorConfig
    from blackjack_sim.engine.simulator import Simulator

    n_games = int(sys.argv[1]) if len(sys.argv) > 1 else 10_000
    strategy = sys.argv[2] if len(sys.argv) > 2 else "basic"
    print(f"Blackjack bankroll analysis: {strategy}, up to {n_games:,} games\n")

    config = SimulatorConfig(strategy=strategy, max_games=n_games, bankroll=100_000)
    sim = Simulator(config, seed=42)
    sim.play()

    os_ = compute_outcome_stats(sim.outcomes)
    reqs = (
        [required_bankroll(os_.mean, os_.std, sp) for sp in (0.90, 0.95, 0.99)]
        if os_.mean > 0
        else []
    )
    print_bankroll_report(
        os_,
        reqs,
        compute_horizon_projections(os_.mean, os_.std),
        compute_drawdown(sim.history),
        label=strategy,
    )
