"""
Multi-deck shoe with penetration-based reshuffling.

The shoe is a front-dealt sequence of rank strings. A shuffle rebuilds all
decks*52 cards and applies one uniform permutation drawn from an injected
numpy Generator, so a seeded Generator reproduces the exact deal order.

Reshuffle rule:
    A shuffle is forced before a deal once the shoe is empty or fewer than
    decks * 52 * (1 - penetration) cards remain. This can happen between two
    cards of the same hand.
"""

from __future__ import annotations

import logging
from collections import Counter, deque

import numpy as np

from .cards import CARDS_PER_DECK, RANK_NAMES, SUITS_PER_DECK
from .strategies import Strategy

logger = logging.getLogger(__name__)


def build_cards(decks: int) -> list[str]:
    """Return an unshuffled list of decks * 52 cards, four of each rank per deck.

    Examples:
        >>> len(build_cards(2))
        104
        >>> build_cards(1).count('K')
        4
    """
    return [card for _ in range(decks) for card in RANK_NAMES for _ in range(SUITS_PER_DECK)]


class Shoe:
    """The card source for a simulation run."""

    def __init__(
        self,
        decks: int,
        penetration: float,
        strategy: Strategy,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.decks = decks
        self.penetration = penetration
        self.strategy = strategy
        self.shuffles = 0
        self._rng = rng if rng is not None else np.random.default_rng()
        self._cards: deque[str] = deque()

    @property
    def size(self) -> int:
        """Number of cards in a full shoe."""
        return self.decks * CARDS_PER_DECK

    def shuffle(self) -> None:
        """Rebuild and randomise the full shoe, then notify the strategy."""
        cards = build_cards(self.decks)
        order = self._rng.permutation(len(cards))
        self._cards = deque(cards[i] for i in order)
        self.shuffles += 1
        logger.debug("Shuffle #%d: %d cards", self.shuffles, len(self._cards))

        self.strategy.shuffle()

    def deal(self) -> str:
        """Remove and return the front card, shuffling first when required."""
        if self.shuffle_needed():
            self.shuffle()
        return self._cards.popleft()

    def remaining(self) -> int:
        return len(self._cards)

    def shuffle_needed(self) -> bool:
        if not self._cards:
            return True
        return self.remaining() < self.size * (1 - self.penetration)

    def stack(self, *cards: str) -> None:
        """Move specific cards to the front so they are dealt next, in order.

        Used for deterministic scenarios. The cards are taken out of the
        current shoe contents, so the shoe composition is unchanged. A shoe
        that needs a shuffle is shuffled first.

        Raises:
            ValueError: If a requested card is no longer in the shoe.
        """
        if self.shuffle_needed():
            self.shuffle()

        available = self.composition()
        for card, wanted in Counter(cards).items():
            if available.get(card, 0) < wanted:
                raise ValueError(f"Card {card!r} is not available in the shoe.")

        for card in cards:
            self._cards.remove(card)
        self._cards.extendleft(reversed(cards))

    def composition(self) -> dict[str, int]:
        """Return the count of each rank still in the shoe."""
        counts = dict.fromkeys(RANK_NAMES, 0)
        for card in self._cards:
            counts[card] += 1
        return counts

    def results(self) -> list[tuple[str, object]]:
        return [("Shuffles", self.shuffles)]
