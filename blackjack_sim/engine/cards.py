"""
Card constants, valuation, and human-readable I/O helpers.

Card encoding (rank string):
    '2'..'10', 'J', 'Q', 'K', 'A'

Suits never influence play, so a card is just its rank. Face cards keep their
own identity (a counting system may tell a 'K' from a '10') and only collapse
to '10' through normalize_face() when a lookup table needs it.
"""

from __future__ import annotations

RANK_NAMES: tuple[str, ...] = ('2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A')

# Point value per rank. Ace starts at its high value; Hand demotes it when needed.
RANK_VALUES: dict[str, int] = {
    '2': 2, '3': 3, '4': 4, '5': 5, '6': 6, '7': 7, '8': 8, '9': 9,
    '10': 10, 'J': 10, 'Q': 10, 'K': 10, 'A': 11,
}

RANK_ACE: str = 'A'
RANK_TEN: str = '10'
FACE_RANKS: frozenset[str] = frozenset({'J', 'Q', 'K'})
TEN_VALUE_RANKS: frozenset[str] = frozenset({RANK_TEN}) | FACE_RANKS

CARDS_PER_DECK: int = 52
SUITS_PER_DECK: int = 4

# Dealer upcards in chart order, faces already normalised.
UPCARDS: tuple[str, ...] = ('2', '3', '4', '5', '6', '7', '8', '9', '10', 'A')

_ALIASES: dict[str, str] = {'T': '10', '1': 'A', '11': 'A'}


def is_valid_card(card: object) -> bool:
    """Return True if *card* is one of the 13 legal ranks.

    Examples:
        >>> is_valid_card('K')
        True
        >>> is_valid_card('1')
        False
    """
    return isinstance(card, str) and card in RANK_VALUES


def card_value(card: str) -> int:
    """Return the point value of a card (Ace counts 11).

    Examples:
        >>> card_value('7')
        7
        >>> card_value('Q')
        10
        >>> card_value('A')
        11
    """
    return RANK_VALUES[card]


def normalize_face(card: str) -> str:
    """Collapse J/Q/K to '10'; every other rank is returned unchanged.

    Examples:
        >>> normalize_face('J')
        '10'
        >>> normalize_face('A')
        'A'
    """
    return RANK_TEN if card in FACE_RANKS else card


def str_to_card(s: str | int) -> str:
    """Parse a loosely written rank into its canonical card string.

    Accepts ints (2-10), lowercase letters, and 'T' for ten.

    Raises:
        ValueError: If the input does not name a rank.

    Examples:
        >>> str_to_card('t')
        '10'
        >>> str_to_card(9)
        '9'
        >>> str_to_card('k')
        'K'
    """
    token = str(s).strip().upper()
    token = _ALIASES.get(token, token)
    if token not in RANK_VALUES:
        raise ValueError(f"Unknown card rank: {s!r}")
    return token


def hand_to_str(cards: list[str] | tuple[str, ...]) -> str:
    """Join a sequence of cards for display.

    Examples:
        >>> hand_to_str(['A', 'K'])
        'A-K'
    """
    return '-'.join(cards)
