"""Tests for blackjack_sim/analysis/report.py — results table and CLI entry point."""

from __future__ import annotations

import pytest

from blackjack_sim.analysis.report import format_results_table, main, parse_overrides, print_results
from blackjack_sim.engine.strategies import STRATEGIES
from tests.conftest import stacked_simulator


class TestFormatResultsTable:
    def test_aligned_columns(self):
        table = format_results_table([("Games", 3), ("Dealer busts", 1)])
        assert table.splitlines() == ["Games         3", "Dealer busts  1"]

    def test_empty(self):
        assert format_results_table([]) == ""

    def test_print_results(self, capsys):
        sim = stacked_simulator('10', '9', '6', '5', '4', '10')
        sim.play()
        table = print_results(sim)
        out = capsys.readouterr().out
        assert "Blackjack Simulation: Basic strategy" in out
        assert table in out
        assert "1,010.00 (101.00%)" in table


class TestParseOverrides:
    def test_pairs(self):
        assert parse_overrides(["shoe.decks=2", " player.strategy = hilo "]) == {
            "shoe.decks": "2",
            "player.strategy": "hilo",
        }

    def test_value_may_contain_equals(self):
        assert parse_overrides(["a=b=c"]) == {"a": "b=c"}

    @pytest.mark.parametrize("bad", ["shoe.decks", "=2"])
    def test_rejects(self, bad):
        with pytest.raises(ValueError, match="key=value"):
            parse_overrides([bad])


class TestMain:
    def test_list_strategies(self, capsys):
        assert main(["--list-strategies"]) == 0
        out = capsys.readouterr().out
        for identifier, cls in STRATEGIES.items():
            assert identifier in out
            assert cls.description in out

    def test_run(self, capsys):
        assert main(["--set", "player.max_games=5", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "Games" in out
        assert "Shuffles" in out

    def test_strategy_override(self, capsys):
        assert main(["--set", "player.strategy=ace_five", "--set", "player.max_games=3"]) == 0
        assert "Ace Five" in capsys.readouterr().out

    def test_unknown_key_exits_with_usage_error(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--set", "shoe.colour=red"])
        assert excinfo.value.code == 2
        assert "Unknown setting" in capsys.readouterr().err

    def test_invalid_value_exits_with_usage_error(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["--set", "shoe.decks=0"])
        assert excinfo.value.code == 2

    def test_bankroll_report(self, capsys):
        assert main(["--set", "player.max_games=50", "--seed", "3", "--bankroll-report"]) == 0
        out = capsys.readouterr().out
        assert "Bankroll Report: Basic strategy" in out
        assert "Horizon Projections" in out

    def test_html_export(self, tmp_path, capsys):
        path = tmp_path / "trajectory.html"
        assert main(["--set", "player.max_games=10", "--seed", "2", "--html", str(path)]) == 0
        content = path.read_text(encoding="utf-8")
        assert "Bankroll Trajectory" in content
        assert "Basic strategy" in content

    def test_list_strategies_uses_plain_separator(self, capsys):
        main(["--list-strategies"])
        first = capsys.readouterr().out.splitlines()[0]
        assert first.startswith("basic")
        assert "Basic strategy: " in first
        assert "—" not in first
