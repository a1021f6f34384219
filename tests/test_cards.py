"""Tests for blackjack_sim/engine/cards.py — rank constants, valuation, and string I/O."""

from __future__ import annotations

import pytest

from blackjack_sim.engine.cards import (
    FACE_RANKS,
    RANK_ACE,
    RANK_NAMES,
    RANK_VALUES,
    TEN_VALUE_RANKS,
    UPCARDS,
    card_value,
    hand_to_str,
    is_valid_card,
    normalize_face,
    str_to_card,
)


class TestRankConstants:
    def test_thirteen_ranks(self):
        assert len(RANK_NAMES) == 13
        assert set(RANK_NAMES) == set(RANK_VALUES)

    def test_ace_is_last_rank(self):
        assert RANK_NAMES[-1] == RANK_ACE

    def test_ten_value_ranks(self):
        assert TEN_VALUE_RANKS == {'10', 'J', 'Q', 'K'}
        assert all(RANK_VALUES[r] == 10 for r in TEN_VALUE_RANKS)

    def test_upcards_have_no_faces(self):
        assert len(UPCARDS) == 10
        assert not FACE_RANKS & set(UPCARDS)


class TestCardValue:
    def test_number_cards(self):
        for n in range(2, 11):
            assert card_value(str(n)) == n

    def test_faces_worth_ten(self):
        for face in ('J', 'Q', 'K'):
            assert card_value(face) == 10

    def test_ace_counts_eleven(self):
        assert card_value('A') == 11

    def test_unknown_card_raises(self):
        with pytest.raises(KeyError):
            card_value('Z')


class TestIsValidCard:
    @pytest.mark.parametrize("card", list(RANK_NAMES))
    def test_every_rank_valid(self, card):
        assert is_valid_card(card)

    @pytest.mark.parametrize("card", ['1', '11', 'T', 'a', '', 10, None])
    def test_invalid(self, card):
        assert not is_valid_card(card)


class TestNormalizeFace:
    def test_faces_collapse_to_ten(self):
        for face in ('J', 'Q', 'K'):
            assert normalize_face(face) == '10'

    def test_other_ranks_unchanged(self):
        for card in ('2', '9', '10', 'A'):
            assert normalize_face(card) == card


class TestStrToCard:
    def test_canonical_ranks(self):
        for card in RANK_NAMES:
            assert str_to_card(card) == card

    def test_lowercase(self):
        assert str_to_card('k') == 'K'
        assert str_to_card('a') == 'A'

    def test_ten_aliases(self):
        assert str_to_card('T') == '10'
        assert str_to_card('t') == '10'
        assert str_to_card(10) == '10'

    def test_ace_aliases(self):
        assert str_to_card('1') == 'A'
        assert str_to_card(11) == 'A'

    def test_int_input(self):
        assert str_to_card(7) == '7'

    def test_whitespace_stripped(self):
        assert str_to_card(' q ') == 'Q'

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="Unknown card rank"):
            str_to_card('X')
        with pytest.raises(ValueError):
            str_to_card(12)


class TestHandToStr:
    def test_join(self):
        assert hand_to_str(['10', '6']) == '10-6'

    def test_tuple(self):
        assert hand_to_str(('A', 'A', '9')) == 'A-A-9'

    def test_empty(self):
        assert hand_to_str([]) == ''
