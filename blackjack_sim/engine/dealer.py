"""
The dealer's fixed house algorithm.

    soft 17      → hit if hit_soft_17 else stand
    hard 17+     → stand
    below 17     → hit
"""

from __future__ import annotations

from .hand import Hand
from .shoe import Shoe


class Dealer:
    def __init__(self, hit_soft_17: bool) -> None:
        self.hit_soft_17 = hit_soft_17
        self.hand: Hand | None = None
        self.busts = 0
        self.blackjacks = 0

    def should_hit(self, hand: Hand) -> bool:
        """Return True if the house rules draw another card to *hand*."""
        if hand.value == 17 and hand.is_soft:
            return self.hit_soft_17
        return hand.value < 17

    def play(self, shoe: Shoe) -> None:
        """Draw to the current hand until it is done."""
        hand = self.hand
        while not hand.is_done:
            if self.should_hit(hand):
                hand.add_card(shoe.deal())
            else:
                hand.mark_done()

    def end_game(self) -> None:
        """Tally the finished hand and discard it."""
        if self.hand.is_busted:
            self.busts += 1
        if self.hand.is_blackjack:
            self.blackjacks += 1
        self.hand = None

    def results(self) -> list[tuple[str, object]]:
        return [
            ("Dealer blackjacks", self.blackjacks),
            ("Dealer busts", self.busts),
            ("Dealer hit on soft 17", "Yes" if self.hit_soft_17 else "No"),
        ]
