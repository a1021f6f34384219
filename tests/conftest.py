"""
Shared pytest fixtures for blackjack simulator tests.

Provides builders for known hands, stacked shoes and stacked simulators so
scenarios can be written as the exact sequence of cards dealt.
"""

from __future__ import annotations

import numpy as np
import pytest

from blackjack_sim.engine.cards import str_to_card
from blackjack_sim.engine.config import SimulatorConfig
from blackjack_sim.engine.hand import Hand
from blackjack_sim.engine.shoe import Shoe
from blackjack_sim.engine.simulator import Simulator
from blackjack_sim.engine.strategies import Basic, Strategy


def hand(*card_strs: str | int, bet: float = 0) -> Hand:
    """Build a Hand from loosely written ranks.

    Examples:
        >>> hand('t', 6).value
        16
        >>> hand('A', 'K').is_blackjack
        True
    """
    h = Hand(bet)
    for s in card_strs:
        h.add_card(str_to_card(s))
    return h


def stacked_shoe(*cards: str, decks: int = 1, strategy: Strategy | None = None) -> Shoe:
    """Return a freshly shuffled shoe whose next cards are *cards*, in order."""
    shoe = Shoe(decks, 0.75, strategy if strategy is not None else Basic(), rng=np.random.default_rng(0))
    shoe.stack(*cards)
    return shoe


def stacked_simulator(*cards: str, seed: int = 0, **config) -> Simulator:
    """Return a one-game Simulator whose shoe deals *cards* first.

    Deal order is player, dealer, player, dealer, then draws in play order.
    Keyword arguments override SimulatorConfig fields (max_games defaults to 1).
    """
    config.setdefault("max_games", 1)
    sim = Simulator(SimulatorConfig(**config), seed=seed)
    sim.shoe.stack(*cards)
    return sim


@pytest.fixture
def h():
    """Expose the hand() helper as a fixture for convenience."""
    return hand


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
