"""Tests for blackjack_sim/engine/strategies.py — play tables, counting, bet sizing, registry."""

from __future__ import annotations

import pytest

from blackjack_sim.engine.strategies import (
    STRATEGIES,
    AceFive,
    Action,
    AntiMartingale50,
    Basic,
    HiLo,
    Martingale,
    Strategy,
    create_strategy,
    round_half_away,
)
from tests.conftest import hand


class TestRoundHalfAway:
    @pytest.mark.parametrize(
        "x, expected",
        [(2.5, 3), (-2.5, -3), (0.5, 1), (-0.5, -1), (1.49, 1), (-1.49, -1), (0.0, 0), (3.0, 3)],
    )
    def test_values(self, x, expected):
        assert round_half_away(x) == expected


# ─── Base strategy ────────────────────────────────────────────────────────────

class TestBaseStrategy:
    def test_defaults(self):
        s = Strategy(bet_min=5)
        assert s.bet(100, 0) == 5
        assert s.act(hand('10', '2'), '6', True, True) is Action.STAND
        assert s.stop(100) is False
        assert s.results() == [("Strategy", "Stand")]

    def test_count_tracks_extremes(self):
        s = Strategy()
        s.running_count = 3
        s.count('2', 52)
        s.running_count = -2
        s.count('2', 52)
        assert s.highest_count == 3
        assert s.lowest_count == -2

    def test_shuffle_resets_running_count(self):
        s = Strategy()
        s.running_count = 7
        s.shuffle()
        assert s.running_count == 0


# ─── Basic ────────────────────────────────────────────────────────────────────

class TestBasicAct:
    @pytest.fixture
    def basic(self) -> Basic:
        return Basic(bet_min=10)

    def test_hard_16_vs_10_hits(self, basic):
        assert basic.act(hand('10', '6'), '10', True, False) is Action.HIT

    def test_hard_16_vs_6_stands(self, basic):
        assert basic.act(hand('10', '6'), '6', True, False) is Action.STAND

    def test_face_upcard_normalised(self, basic):
        assert basic.act(hand('10', '6'), 'K', True, False) is Action.HIT

    def test_hard_12_vs_4_stands(self, basic):
        assert basic.act(hand('10', '2'), '4', True, False) is Action.STAND

    def test_hard_12_vs_3_hits(self, basic):
        assert basic.act(hand('10', '2'), '3', True, False) is Action.HIT

    def test_hard_11_doubles_when_allowed(self, basic):
        assert basic.act(hand('6', '5'), 'A', True, False) is Action.DOUBLE

    def test_hard_11_hits_when_double_not_allowed(self, basic):
        assert basic.act(hand('6', '5'), 'A', False, False) is Action.HIT

    def test_hard_9_vs_2_hits(self, basic):
        assert basic.act(hand('5', '4'), '2', True, False) is Action.HIT

    def test_soft_18_vs_9_hits(self, basic):
        assert basic.act(hand('A', '7'), '9', True, False) is Action.HIT

    def test_soft_18_vs_2_doubles(self, basic):
        assert basic.act(hand('A', '7'), '2', True, False) is Action.DOUBLE

    def test_soft_18_vs_2_stands_without_double(self, basic):
        assert basic.act(hand('A', '7'), '2', False, False) is Action.STAND

    def test_soft_19_vs_6_doubles(self, basic):
        assert basic.act(hand('A', '8'), '6', True, False) is Action.DOUBLE

    def test_hard_17_always_stands(self, basic):
        for upcard in ('2', '7', '10', 'A'):
            assert basic.act(hand('10', '7'), upcard, True, False) is Action.STAND

    def test_aces_always_split(self, basic):
        for upcard in ('2', '6', '10', 'A'):
            assert basic.act(hand('A', 'A'), upcard, True, True) is Action.SPLIT

    def test_eights_split_vs_face(self, basic):
        assert basic.act(hand('8', '8'), 'Q', True, True) is Action.SPLIT

    def test_nines_stand_vs_7(self, basic):
        assert basic.act(hand('9', '9'), '7', True, True) is Action.STAND

    def test_nines_split_vs_8(self, basic):
        assert basic.act(hand('9', '9'), '8', True, True) is Action.SPLIT

    def test_tens_never_split(self, basic):
        assert basic.act(hand('10', '10'), '6', True, True) is Action.STAND

    def test_fives_double_instead_of_split(self, basic):
        assert basic.act(hand('5', '5'), '9', True, True) is Action.DOUBLE

    def test_split_not_allowed_falls_through(self, basic):
        # 8-8 = hard 16 vs 10 → HIT when splitting is not possible.
        assert basic.act(hand('8', '8'), '10', True, False) is Action.HIT

    @pytest.mark.parametrize("upcard", ['4', '5', '6', '10'])
    def test_unsplittable_aces_hit_soft_12(self, basic, upcard):
        assert hand('A', 'A').is_soft
        assert basic.act(hand('A', 'A'), upcard, False, False) is Action.HIT

    def test_soft_21_with_two_aces_stands(self, basic):
        assert basic.act(hand('A', 'A', '9'), '10', False, False) is Action.STAND

    def test_three_card_hand(self, basic):
        assert basic.act(hand('2', '3', '6'), '5', False, False) is Action.HIT

    def test_deterministic(self, basic):
        h = hand('A', '6')
        actions = {basic.act(h, '3', True, False) for _ in range(20)}
        assert actions == {Action.DOUBLE}


# ─── HiLo ─────────────────────────────────────────────────────────────────────

class TestHiLo:
    def test_counts_low_and_high_cards(self):
        s = HiLo(bet_min=10)
        for card in ('2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A'):
            s.count(card, 520)
        assert s.running_count == 0
        assert s.highest_count == 5
        assert s.lowest_count == 0

    def test_true_count_per_deck_remaining(self):
        s = HiLo(bet_min=10)
        for card in ('2', '3', '4'):
            s.count(card, 52)
        assert s.running_count == 3
        assert s.true_count == 3

    def test_true_count_rounds_half_away(self):
        s = HiLo(bet_min=10)
        s.count('2', 104)  # 1 / 2 decks = 0.5 → 1
        assert s.true_count == 1

    def test_true_count_kept_when_shoe_exhausted(self):
        s = HiLo(bet_min=10)
        s.count('5', 52)
        s.count('5', 0)
        assert s.running_count == 2
        assert s.true_count == 1

    def test_bets_in_count(self):
        s = HiLo(bet_min=10)
        s.true_count = 3
        assert s.bet(1000, 0) == 60
        assert s.bets_count_in == 1

    def test_bets_minimum_out_of_count(self):
        s = HiLo(bet_min=10)
        s.true_count = 0
        assert s.bet(1000, 0) == 10
        assert s.bets_count_out == 1

    def test_true_count_extremes(self):
        s = HiLo(bet_min=10)
        for _ in range(3):
            s.count('K', 52)
        assert s.lowest_true_count == -3
        assert s.highest_true_count == 0

    def test_plays_basic(self):
        assert HiLo().act(hand('6', '5'), '6', True, False) is Action.DOUBLE

    def test_results_rows(self):
        labels = [label for label, _ in HiLo().results()]
        assert labels == [
            "Strategy",
            "Bets in count",
            "Bets out of count",
            "Highest count",
            "Highest true count",
            "Lowest count",
            "Lowest true count",
        ]


# ─── AceFive ──────────────────────────────────────────────────────────────────

class TestAceFive:
    def test_count(self):
        s = AceFive(bet_min=10, bet_spread=4)
        for card in ('5', '5', '5', 'A', 'K'):
            s.count(card, 100)
        assert s.running_count == 2

    def test_bets_spread_at_threshold(self):
        s = AceFive(bet_min=10, bet_spread=4)
        s.running_count = 2
        assert s.bet(1000, 0) == 40
        assert s.bets_count_in == 1

    def test_bets_minimum_below_threshold(self):
        s = AceFive(bet_min=10, bet_spread=4)
        s.running_count = 1
        assert s.bet(1000, 0) == 10
        assert s.bets_count_out == 1

    def test_results_include_spread(self):
        assert ("Bet spread", 4) in AceFive(bet_spread=4).results()


# ─── Progressions ─────────────────────────────────────────────────────────────

class TestProgressions:
    def test_martingale_doubles_last_loss(self):
        assert Martingale(bet_min=10).bet(1000, -20) == 40

    def test_martingale_minimum_after_win_or_push(self):
        s = Martingale(bet_min=10)
        assert s.bet(1000, 15) == 10
        assert s.bet(1000, 0) == 10

    def test_antimartingale_adds_half_of_profit(self):
        assert AntiMartingale50(bet_min=10).bet(1000, 20) == 20

    def test_antimartingale_minimum_after_loss(self):
        assert AntiMartingale50(bet_min=10).bet(1000, -10) == 10


# ─── Registry ─────────────────────────────────────────────────────────────────

class TestRegistry:
    def test_identifiers(self):
        assert set(STRATEGIES) == {"basic", "hilo", "ace_five", "martingale", "antimartingale50"}

    @pytest.mark.parametrize("identifier", list(STRATEGIES))
    def test_create_each(self, identifier):
        s = create_strategy(identifier, bet_min=10, bet_max=500, bet_spread=4, starting_bankroll=1000)
        assert isinstance(s, STRATEGIES[identifier])
        assert s.bet_min == 10
        assert s.bet_max == 500
        assert s.bet_spread == 4
        assert s.starting_bankroll == 1000
        assert s.results()[0] == ("Strategy", s.label)

    def test_unknown_identifier(self):
        with pytest.raises(KeyError, match="Unknown strategy"):
            create_strategy("card_sharp")
