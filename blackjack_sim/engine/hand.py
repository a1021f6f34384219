"""
Hand evaluation and the per-hand state machine.

Valuation rule:
    Every card is summed at face value with Ace = 11 and J/Q/K = 10.
    A hand holding an ace counted as 11 is SOFT. If a soft hand exceeds 21,
    aces are demoted to 1 one at a time until the total is <= 21 or no aces
    are left. The hand reads HARD only once its last ace has been demoted,
    so [A, A, 9] is a soft 21 and [A, 9, 5] is a hard 15.

A Hand is done (no more cards) once it is a blackjack, busted, doubled with
three cards, a split-ace hand holding two cards, or explicitly stood.
"""

from __future__ import annotations

from enum import Enum

from .cards import RANK_ACE, card_value, hand_to_str, is_valid_card


class HandType(Enum):
    HARD = 'hard'
    SOFT = 'soft'


class InvalidCardError(ValueError):
    """A card outside the 13 legal ranks was added to a hand."""


class InvalidStateError(RuntimeError):
    """A card was added to a hand that is already done."""


def evaluate(cards: list[str] | tuple[str, ...]) -> tuple[int, bool]:
    """Return (value, is_soft) for a sequence of cards.

    Examples:
        >>> evaluate(['A', '9'])
        (20, True)
        >>> evaluate(['A', 'A', '9'])   # one of two aces demoted
        (21, True)
        >>> evaluate(['A', '9', '5'])
        (15, False)
        >>> evaluate(['10', '10', '5'])
        (25, False)
    """
    value = 0
    num_aces = 0
    for card in cards:
        value += card_value(card)
        if card == RANK_ACE:
            num_aces += 1

    soft = num_aces > 0
    if value > 21 and soft:
        for demoted in range(1, num_aces + 1):
            value -= 10
            if demoted == num_aces:
                soft = False
            if value <= 21:
                break

    return value, soft


class Hand:
    """A player or dealer hand: its cards, bet, and derived valuation."""

    def __init__(self, bet: float = 0) -> None:
        self.bet = bet
        self._cards: list[str] = []
        self._value = 0
        self._type = HandType.HARD
        self._blackjack = False
        self._busted = False
        self._split = False
        self._doubled = False
        self._done = False

    # ── Card handling ─────────────────────────────────────────────────────────

    def add_card(self, card: str) -> None:
        """Append a card and re-evaluate.

        Raises:
            InvalidStateError: If the hand is already done.
            InvalidCardError: If the card is not a legal rank.
        """
        if self._done:
            raise InvalidStateError('Unable to add cards to a done hand.')
        if not is_valid_card(card):
            raise InvalidCardError(f'Invalid card added to hand: {card!r}')

        self._cards.append(card)
        self._evaluate()

    def _evaluate(self) -> None:
        self._value, soft = evaluate(self._cards)
        self._type = HandType.SOFT if soft else HandType.HARD

        num_cards = len(self._cards)
        self._blackjack = num_cards == 2 and self._value == 21 and not self._split
        self._busted = self._value > 21

        self._done = (
            self._blackjack
            or self._busted
            or (self._doubled and num_cards == 3)
            or (self._split and self.upcard == RANK_ACE and num_cards == 2)
        )

    # ── Player actions ────────────────────────────────────────────────────────

    def split(self) -> str | None:
        """Mark the hand as split and hand back its last card, if any.

        The caller deals a replacement card into this hand and seeds a new
        sibling hand with the returned card.
        """
        self._split = True
        if self._cards:
            return self._cards.pop()
        return None

    def double(self) -> None:
        self.bet *= 2
        self._doubled = True

    def mark_done(self) -> None:
        """Stand: no further cards may be added."""
        self._done = True

    def is_splittable(self) -> bool:
        return len(self._cards) == 2 and self._cards[0] == self._cards[1] and not self._done

    def is_doubleable(self) -> bool:
        return len(self._cards) == 2 and not self._done

    # ── Read-only state ───────────────────────────────────────────────────────

    @property
    def cards(self) -> tuple[str, ...]:
        return tuple(self._cards)

    @property
    def upcard(self) -> str | None:
        """The first card dealt to the hand, or None when empty."""
        return self._cards[0] if self._cards else None

    @property
    def value(self) -> int:
        return self._value

    @property
    def type(self) -> HandType:
        return self._type

    @property
    def is_soft(self) -> bool:
        return self._type is HandType.SOFT

    @property
    def is_blackjack(self) -> bool:
        return self._blackjack

    @property
    def is_busted(self) -> bool:
        return self._busted

    @property
    def is_split(self) -> bool:
        return self._split

    @property
    def is_doubled(self) -> bool:
        return self._doubled

    @property
    def is_done(self) -> bool:
        return self._done

    def __len__(self) -> int:
        return len(self._cards)

    def __str__(self) -> str:
        return f"{hand_to_str(self._cards)} ({self._value})"

    def __repr__(self) -> str:
        return f"Hand({hand_to_str(self._cards)!r}, value={self._value}, bet={self.bet})"
