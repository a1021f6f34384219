"""
Blackjack simulation run: one shoe, one player, one dealer.

Game flow:
    BET → DEAL (player, dealer, player, dealer) → (no natural) PLAYER_ACTION
    → (player not fully busted) DEALER_ACTION → SETTLEMENT + COUNTING

The run continues while the player can afford the table minimum, the game cap
has not been reached, and the strategy does not ask to stop.

Randomness comes only from the numpy Generator built from ``seed`` in
reset(); the same seed and config replay the same run exactly.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from .config import ConfigurationError, SimulatorConfig
from .dealer import Dealer
from .hand import Hand
from .player import Player
from .shoe import Shoe
from .strategies import StrategyFactory, create_strategy

logger = logging.getLogger(__name__)


class Simulator:
    """Runs games under a SimulatorConfig and reports aggregate results.

    Args:
        config:           Settings for the run; defaults to SimulatorConfig().
        seed:             Seed for the shoe's numpy Generator. None draws
                          fresh entropy on every reset().
        strategy_factory: Builds the strategy from its identifier; defaults
                          to the built-in registry.

    Raises:
        ConfigurationError: If the config fails validation or the strategy
                            factory does not know the strategy identifier.
    """

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        *,
        seed: int | None = None,
        strategy_factory: StrategyFactory = create_strategy,
    ) -> None:
        self.config = config if config is not None else SimulatorConfig()
        self.seed = seed
        self.strategy_factory = strategy_factory
        self.reset()

    def reset(self) -> None:
        """Rebuild strategy, shoe, player and dealer from the config."""
        config = self.config.validate()

        try:
            strategy = self.strategy_factory(
                config.strategy,
                bet_min=config.bet_min,
                bet_max=config.bet_max,
                bet_spread=config.spread,
                starting_bankroll=config.bankroll,
            )
        except KeyError as exc:
            raise ConfigurationError(f"player.strategy: {exc.args[0]}") from exc

        self.shoe = Shoe(
            config.decks,
            config.penetration,
            strategy,
            rng=np.random.default_rng(self.seed),
        )
        self.player = Player(config.bankroll, strategy)
        self.dealer = Dealer(config.hit_soft_17)
        self.games = 0

    @property
    def bet_min(self) -> float:
        return self.config.bet_min

    @property
    def bet_max(self) -> float:
        return self.config.bet_max

    def play(self) -> None:
        """Play games until a stop condition is met."""
        config = self.config
        logger.info(
            "Starting run: strategy=%s bankroll=%s max_games=%d decks=%d",
            config.strategy, config.bankroll, config.max_games, config.decks,
        )

        while (
            self.player.can_bet(self.bet_min)
            and self.games < config.max_games
            and not self.player.stop()
        ):
            self.games += 1
            bet = self._init_bet()
            self._deal()

            player_hand = self.player.hands[0]
            dealer_hand = self.dealer.hand
            if not dealer_hand.is_blackjack and not player_hand.is_blackjack:
                self.player.play(self.shoe, config.max_hands_per_game, dealer_hand.upcard)
                if not self.player.is_busted():
                    self.dealer.play(self.shoe)

            self.player.end_game(dealer_hand, config.blackjack_payout, self.shoe.remaining())
            self.dealer.end_game()
            logger.debug(
                "Game %d: bet=%s outcome=%+.2f bankroll=%.2f",
                self.games, bet, self.player.last_outcome, self.player.bankroll,
            )

        logger.info(
            "Run finished after %d games: bankroll %.2f (started %.2f)",
            self.games, self.player.bankroll, config.bankroll,
        )

    def _init_bet(self) -> int:
        """Ask the player for a bet, then enforce the table limits and whole units."""
        bet = self.player.place_bet()
        bet = max(self.bet_min, min(bet, self.bet_max, self.player.bankroll))
        bet = math.floor(bet)
        self.player.bet = bet
        return bet

    def _deal(self) -> None:
        player_hand = Hand(self.player.bet)
        dealer_hand = Hand()

        for _ in range(2):
            player_hand.add_card(self.shoe.deal())
            dealer_hand.add_card(self.shoe.deal())

        self.player.add_hand(player_hand)
        self.dealer.hand = dealer_hand

    # ── Results ───────────────────────────────────────────────────────────────

    @property
    def history(self) -> np.ndarray:
        """Bankroll trajectory: the starting bankroll, then one entry per game."""
        return np.asarray(self.player.history, dtype=np.float64)

    @property
    def outcomes(self) -> np.ndarray:
        """Net result of each game played, in order."""
        return np.asarray(self.player.outcomes, dtype=np.float64)

    def results(self) -> list[tuple[str, object]]:
        return (
            [
                ("Games", self.games),
                ("Min. bet", self.bet_min),
                ("Max. bet", self.bet_max),
            ]
            + self.shoe.results()
            + self.player.results()
            + self.dealer.results()
        )
