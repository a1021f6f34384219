"""
Player strategies: bet sizing, play decisions, card counting, stop rule.

Strategy is the base policy (always stand, always bet the minimum, never
stop, no counting). Concrete variants override selectively:

    basic             Basic   — table-driven split/double/hit/stand decisions
    hilo              HiLo    — Basic play, Hi-Lo running + true count betting
    ace_five          AceFive — Basic play, Ace/Five count, spread at +2
    martingale        Martingale       — Basic play, double the last loss
    antimartingale50  AntiMartingale50 — Basic play, add half the last profit

One instance lives for a whole simulation run. It is shared by the Shoe,
which calls shuffle(), and the Player, which calls everything else.
"""

from __future__ import annotations

import math
from enum import Enum, auto
from typing import Callable

from .cards import RANK_ACE, normalize_face
from .hand import Hand


class Action(Enum):
    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()


def round_half_away(x: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Examples:
        >>> round_half_away(2.5)
        3
        >>> round_half_away(-2.5)
        -3
        >>> round_half_away(1.49)
        1
    """
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


# ─── Base strategy ────────────────────────────────────────────────────────────


class Strategy:
    """Base policy; every hook has a neutral default."""

    label: str = "Stand"
    description: str = "Always stand and bet the minimum."

    def __init__(
        self,
        bet_min: float = 1,
        bet_max: float | None = None,
        bet_spread: float = 1,
        starting_bankroll: float = 0,
    ) -> None:
        self.bet_min = bet_min
        self.bet_max = bet_max
        self.bet_spread = bet_spread
        self.starting_bankroll = starting_bankroll

        self.running_count = 0
        self.highest_count = 0
        self.lowest_count = 0
        self.bets_count_in = 0
        self.bets_count_out = 0

    def count(self, card: str, remaining: int) -> None:
        """Observe one dealt card once its game has been settled.

        Args:
            card:      The card that was dealt.
            remaining: Cards left in the shoe at settlement time.
        """
        self.highest_count = max(self.highest_count, self.running_count)
        self.lowest_count = min(self.lowest_count, self.running_count)

    def bet(self, bankroll: float, last_outcome: float) -> float:
        """Return the wager for the next game (clamped later by the simulator)."""
        return self.bet_min

    def shuffle(self) -> None:
        """Reset the running count; called by the shoe on every shuffle."""
        self.running_count = 0

    def act(self, hand: Hand, dealer_card: str, can_double: bool, can_split: bool) -> Action:
        return Action.STAND

    def stop(self, bankroll: float) -> bool:
        """Return True to end the run before the next game."""
        return False

    def results(self) -> list[tuple[str, object]]:
        return [("Strategy", self.label)]


# ─── Basic strategy tables ────────────────────────────────────────────────────

_ALL_UPCARDS: frozenset[str] = frozenset({'2', '3', '4', '5', '6', '7', '8', '9', '10', 'A'})
_SEVEN_UP: frozenset[str] = frozenset({'7', '8', '9', '10', 'A'})

# Pair rank -> dealer upcards to split against.
RULES_SPLIT: dict[str, frozenset[str]] = {
    'A': _ALL_UPCARDS,
    '2': frozenset({'2', '3', '4', '5', '6', '7'}),
    '3': frozenset({'2', '3', '4', '5', '6', '7'}),
    '4': frozenset({'5', '6'}),
    '5': frozenset(),
    '6': frozenset({'2', '3', '4', '5', '6'}),
    '7': frozenset({'2', '3', '4', '5', '6', '7'}),
    '8': _ALL_UPCARDS,
    '9': frozenset({'2', '3', '4', '5', '6', '8', '9'}),
    '10': frozenset(),
}

# Hand total -> dealer upcards to double against.
RULES_DOUBLE_HARD: dict[int, frozenset[str]] = {
    9: frozenset({'3', '4', '5', '6'}),
    10: frozenset({'2', '3', '4', '5', '6', '7', '8', '9'}),
    11: _ALL_UPCARDS,
}

RULES_DOUBLE_SOFT: dict[int, frozenset[str]] = {
    13: frozenset({'5', '6'}),
    14: frozenset({'5', '6'}),
    15: frozenset({'4', '5', '6'}),
    16: frozenset({'4', '5', '6'}),
    17: frozenset({'3', '4', '5', '6'}),
    18: frozenset({'2', '3', '4', '5', '6'}),
    19: frozenset({'6'}),
}

# Hand total -> dealer upcards to hit against. Totals not listed stand.
RULES_HIT_HARD: dict[int, frozenset[str]] = {
    **{total: _ALL_UPCARDS for total in range(4, 12)},
    12: frozenset({'2', '3', '7', '8', '9', '10', 'A'}),
    13: _SEVEN_UP,
    14: _SEVEN_UP,
    15: _SEVEN_UP,
    16: _SEVEN_UP,
}

# Soft 12 is A-A that could not be split.
RULES_HIT_SOFT: dict[int, frozenset[str]] = {
    **{total: _ALL_UPCARDS for total in range(12, 18)},
    18: frozenset({'9', '10', 'A'}),
}


class Basic(Strategy):
    """Basic strategy play while betting the minimum on each hand.

    Precedence: split (when allowed), double (when allowed), hit, stand.
    """

    label = "Basic strategy"
    description = "Basic strategy playing rules while betting the minimum on each hand."

    def act(self, hand: Hand, dealer_card: str, can_double: bool, can_split: bool) -> Action:
        dealer = normalize_face(dealer_card)

        if can_split and dealer in RULES_SPLIT.get(normalize_face(hand.upcard), ()):
            return Action.SPLIT

        if can_double and self.in_rules(hand, dealer, RULES_DOUBLE_HARD, RULES_DOUBLE_SOFT):
            return Action.DOUBLE

        if self.in_rules(hand, dealer, RULES_HIT_HARD, RULES_HIT_SOFT):
            return Action.HIT

        return Action.STAND

    @staticmethod
    def in_rules(
        hand: Hand,
        dealer: str,
        hard_rules: dict[int, frozenset[str]],
        soft_rules: dict[int, frozenset[str]],
    ) -> bool:
        """Return True if (hand total, dealer upcard) appears in the table for the hand type."""
        rules = soft_rules if hand.is_soft else hard_rules
        return dealer in rules.get(hand.value, ())


# ─── Counting strategies ──────────────────────────────────────────────────────


class HiLo(Basic):
    """Hi-Lo count; bet the minimum times twice the true count when positive.

    True count = running count / decks remaining, rounded half away from zero.
    """

    label = "Hi Lo"
    description = "Use a hi lo count and bet the minimum times twice the true count."

    LOW_CARDS: frozenset[str] = frozenset({'2', '3', '4', '5', '6'})
    HIGH_CARDS: frozenset[str] = frozenset({'10', 'J', 'Q', 'K', 'A'})

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.true_count = 0
        self.highest_true_count = 0
        self.lowest_true_count = 0

    def bet(self, bankroll: float, last_outcome: float) -> float:
        if self.true_count > 0:
            self.bets_count_in += 1
            return self.bet_min * 2 * self.true_count
        self.bets_count_out += 1
        return self.bet_min

    def count(self, card: str, remaining: int) -> None:
        if card in self.LOW_CARDS:
            self.running_count += 1
        elif card in self.HIGH_CARDS:
            self.running_count -= 1

        # An exhausted shoe has no deck fraction to normalise by.
        if remaining > 0:
            self.true_count = round_half_away(self.running_count / (remaining / 52))

        self.highest_true_count = max(self.highest_true_count, self.true_count)
        self.lowest_true_count = min(self.lowest_true_count, self.true_count)
        super().count(card, remaining)

    def results(self) -> list[tuple[str, object]]:
        return super().results() + [
            ("Bets in count", self.bets_count_in),
            ("Bets out of count", self.bets_count_out),
            ("Highest count", self.highest_count),
            ("Highest true count", self.highest_true_count),
            ("Lowest count", self.lowest_count),
            ("Lowest true count", self.lowest_true_count),
        ]


class AceFive(Basic):
    """Ace/Five count; bet the spread once the count reaches +2."""

    label = "Ace Five"
    description = "Use an ace five count and bet the spread once at +2."

    THRESHOLD: int = 2

    def bet(self, bankroll: float, last_outcome: float) -> float:
        if self.running_count < self.THRESHOLD:
            self.bets_count_out += 1
            return self.bet_min
        self.bets_count_in += 1
        return self.bet_min * self.bet_spread

    def count(self, card: str, remaining: int) -> None:
        if card == RANK_ACE:
            self.running_count -= 1
        elif card == '5':
            self.running_count += 1
        super().count(card, remaining)

    def results(self) -> list[tuple[str, object]]:
        return super().results() + [
            ("Bets in count", self.bets_count_in),
            ("Bets out of count", self.bets_count_out),
            ("Highest count", self.highest_count),
            ("Lowest count", self.lowest_count),
            ("Bet spread", self.bet_spread),
        ]


# ─── Progression strategies ───────────────────────────────────────────────────


class Martingale(Basic):
    label = "Martingale"
    description = "Bet double your last loss otherwise bet the minimum."

    def bet(self, bankroll: float, last_outcome: float) -> float:
        if last_outcome < 0:
            return last_outcome * -2
        return self.bet_min


class AntiMartingale50(Basic):
    label = "Anti-Martingale 50%"
    description = "Bet the minimum plus half of the last profit, otherwise bet the minimum."

    def bet(self, bankroll: float, last_outcome: float) -> float:
        if last_outcome > 0:
            return self.bet_min + last_outcome * 0.5
        return self.bet_min


# ─── Registry ─────────────────────────────────────────────────────────────────

STRATEGIES: dict[str, type[Strategy]] = {
    "basic": Basic,
    "hilo": HiLo,
    "ace_five": AceFive,
    "martingale": Martingale,
    "antimartingale50": AntiMartingale50,
}

StrategyFactory = Callable[..., Strategy]


def create_strategy(
    identifier: str,
    *,
    bet_min: float = 1,
    bet_max: float | None = None,
    bet_spread: float = 1,
    starting_bankroll: float = 0,
) -> Strategy:
    """Build a configured strategy from its registry identifier.

    Raises:
        KeyError: If the identifier is not registered.

    Examples:
        >>> create_strategy("hilo", bet_min=10).label
        'Hi Lo'
    """
    try:
        cls = STRATEGIES[identifier]
    except KeyError:
        known = ", ".join(sorted(STRATEGIES))
        raise KeyError(f"Unknown strategy {identifier!r}; expected one of: {known}") from None
    return cls(
        bet_min=bet_min,
        bet_max=bet_max,
        bet_spread=bet_spread,
        starting_bankroll=starting_bankroll,
    )
