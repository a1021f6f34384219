"""
The player: bankroll, hands in play, the turn loop, and settlement.

Settlement order per hand (player's perspective):
    1. Bust                               → lose the bet
    2. Blackjack, dealer without one      → win bet * blackjack_payout
    3. Blackjack, dealer blackjack too    → push
    4. Dealer bust or higher total        → win the bet
    5. Lower total                        → lose the bet
    6. Equal totals                       → push

The bankroll only moves through _win() / _lose() during end_game().
"""

from __future__ import annotations

from .hand import Hand
from .shoe import Shoe
from .strategies import Action, Strategy


def format_count(value: float) -> str:
    """Render a counter, dropping a trailing .0 (split counts move in halves).

    Examples:
        >>> format_count(3.0)
        '3'
        >>> format_count(1.5)
        '1.5'
    """
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def format_percentage(value: float, total: float) -> str:
    """Return value as a percentage of total, or 'n/a' when total is zero.

    Examples:
        >>> format_percentage(5, 10)
        '50.00%'
        >>> format_percentage(0, 0)
        'n/a'
    """
    if not total:
        return "n/a"
    return f"{value * 100 / total:.2f}%"


class Player:
    def __init__(self, bankroll: float, strategy: Strategy) -> None:
        self.starting_bankroll = bankroll
        self._bankroll = bankroll
        self.strategy = strategy
        self.bet: float = 0
        self.hands: list[Hand] = []

        self.hands_played = 0
        self.wins = 0
        self.losses = 0
        self.pushes = 0
        self.doubles = 0
        self.splits = 0.0
        self.busts = 0
        self.blackjacks = 0
        self.last_outcome: float = 0

        # Bankroll after each settled game, and each game's net result.
        self.history: list[float] = [bankroll]
        self.outcomes: list[float] = []

    @property
    def bankroll(self) -> float:
        return self._bankroll

    # ── Betting ───────────────────────────────────────────────────────────────

    def stop(self) -> bool:
        return self.strategy.stop(self._bankroll)

    def place_bet(self) -> float:
        """Ask the strategy for the next wager and remember it as the initial bet."""
        self.bet = self.strategy.bet(self._bankroll, self.last_outcome)
        return self.bet

    def current_bet(self) -> float:
        """Total amount wagered across all hands of the current game."""
        return sum(hand.bet for hand in self.hands)

    def can_bet(self, amount: float) -> bool:
        return self._bankroll >= self.current_bet() + amount

    # ── Hands ─────────────────────────────────────────────────────────────────

    def add_hand(self, hand: Hand) -> None:
        self.hands.append(hand)

    def is_busted(self) -> bool:
        """True when every hand in play is busted."""
        return all(hand.is_busted for hand in self.hands)

    def is_done(self) -> bool:
        return all(hand.is_done for hand in self.hands)

    # ── Turn loop ─────────────────────────────────────────────────────────────

    def play(self, shoe: Shoe, max_hands: int, dealer_card: str) -> None:
        """Play every hand to completion.

        Splits append new hands while the list is being scanned, so the scan
        indexes into self.hands and re-reads its length on every step.

        Args:
            shoe:        The game shoe.
            max_hands:   Maximum number of hands allowed per game via splits.
            dealer_card: The dealer's upcard.
        """
        while not self.is_done():
            index = 0
            while index < len(self.hands):
                hand = self.hands[index]
                while not hand.is_done:
                    self._play_step(hand, shoe, max_hands, dealer_card)
                index += 1

    def _play_step(self, hand: Hand, shoe: Shoe, max_hands: int, dealer_card: str) -> None:
        can_split = (
            hand.is_splittable()
            and self.can_bet(self.bet)
            and len(self.hands) < max_hands
        )
        can_double = hand.is_doubleable() and self.can_bet(self.bet)

        action = self.strategy.act(hand, dealer_card, can_double, can_split)

        if action is Action.STAND:
            hand.mark_done()
        elif action is Action.DOUBLE:
            hand.double()
            hand.add_card(shoe.deal())
        elif action is Action.HIT:
            hand.add_card(shoe.deal())
        elif action is Action.SPLIT:
            card = hand.split()
            hand.add_card(shoe.deal())

            new_hand = Hand(self.bet)
            new_hand.split()
            new_hand.add_card(card)
            new_hand.add_card(shoe.deal())
            self.add_hand(new_hand)

    # ── Settlement ────────────────────────────────────────────────────────────

    def end_game(self, dealer_hand: Hand, blackjack_payout: float, shoe_remaining: int) -> None:
        """Settle every hand, feed all dealt cards to the strategy, and discard the hands.

        Args:
            dealer_hand:      The dealer's finished hand.
            blackjack_payout: Payout multiplier for a natural (e.g. 1.5 for 3:2).
            shoe_remaining:   Cards left in the shoe, passed to the counting hook.
        """
        self.last_outcome = 0

        for hand in self.hands:
            self.hands_played += 1

            if hand.is_doubled:
                self.doubles += 1

            # Both hands of a split register here.
            if hand.is_split:
                self.splits += 0.5

            if hand.is_busted:
                self.busts += 1
                self._lose(hand.bet)
            elif hand.is_blackjack:
                self.blackjacks += 1
                if not dealer_hand.is_blackjack:
                    self._win(hand.bet * blackjack_payout)
                else:
                    self.pushes += 1
            elif dealer_hand.is_busted or hand.value > dealer_hand.value:
                self._win(hand.bet)
            elif hand.value < dealer_hand.value:
                self._lose(hand.bet)
            else:
                self.pushes += 1

            for card in hand.cards:
                self.strategy.count(card, shoe_remaining)

        for card in dealer_hand.cards:
            self.strategy.count(card, shoe_remaining)

        self.history.append(self._bankroll)
        self.outcomes.append(self.last_outcome)
        self.hands = []

    def _win(self, amount: float) -> None:
        self.wins += 1
        self._bankroll += amount
        self.last_outcome += amount

    def _lose(self, amount: float) -> None:
        self.losses += 1
        self._bankroll -= amount
        self.last_outcome -= amount

    # ── Results ───────────────────────────────────────────────────────────────

    def results(self) -> list[tuple[str, object]]:
        def with_share(value: float, total: float) -> str:
            return f"{format_count(value)} ({format_percentage(value, total)})"

        def money_with_share(value: float) -> str:
            return f"{value:,.2f} ({format_percentage(value, self.starting_bankroll)})"

        played = self.hands_played
        return [
            ("Starting bankroll", f"{self.starting_bankroll:,.2f}"),
            ("Bankroll", money_with_share(self._bankroll)),
            ("Change", money_with_share(self._bankroll - self.starting_bankroll)),
            ("Hands", played),
            ("Wins", with_share(self.wins, played)),
            ("Losses", with_share(self.losses, played)),
            ("Pushes", with_share(self.pushes, played)),
            ("Doubles", with_share(self.doubles, played)),
            ("Splits", with_share(self.splits, played)),
            ("Blackjacks", with_share(self.blackjacks, played)),
            ("Busts", with_share(self.busts, played)),
        ] + self.strategy.results()
