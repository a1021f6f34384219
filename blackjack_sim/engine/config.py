"""
Simulation settings.

SimulatorConfig is the immutable record a run reads its rules from. Values
usually arrive as a flat mapping of dotted keys (as stored by whatever keeps
the settings), e.g.::

    {"shoe.decks": 6, "game.bet_min": 10, "player.strategy": "hilo"}

from_mapping() accepts that form, coerces string values, and validate()
rejects inconsistent settings before any component is built.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping


class ConfigurationError(ValueError):
    """Settings that cannot describe a playable simulation."""


# Dotted external key -> SimulatorConfig field name.
CONFIG_KEYS: dict[str, str] = {
    "shoe.decks": "decks",
    "shoe.penetration": "penetration",
    "game.bet_min": "bet_min",
    "game.bet_max": "bet_max",
    "game.max_hands_per_game": "max_hands_per_game",
    "game.blackjack_payout": "blackjack_payout",
    "player.strategy": "strategy",
    "player.bankroll": "bankroll",
    "player.spread": "spread",
    "player.max_games": "max_games",
    "dealer.hit_soft_17": "hit_soft_17",
}

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class SimulatorConfig:
    """Rules and limits for one simulation run.

    Attributes:
        decks:              Decks in the shoe (>= 1).
        penetration:        Fraction of the shoe dealt before a forced reshuffle, in (0, 1].
        bet_min:            Table minimum.
        bet_max:            Table maximum (>= bet_min).
        max_hands_per_game: Hands the player may hold at once through splits.
        blackjack_payout:   Natural payout multiplier (1.5 = 3:2).
        strategy:           Identifier handed to the strategy factory.
        bankroll:           Starting bankroll.
        spread:             Bet spread used by counting strategies.
        max_games:          Game cap for the run.
        hit_soft_17:        Whether the dealer draws on soft 17.
    """

    decks: int = 6
    penetration: float = 0.75
    bet_min: float = 10
    bet_max: float = 500
    max_hands_per_game: int = 4
    blackjack_payout: float = 1.5
    strategy: str = "basic"
    bankroll: float = 1000
    spread: float = 4
    max_games: int = 1000
    hit_soft_17: bool = False

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> SimulatorConfig:
        """Build a config from dotted keys (or plain field names).

        Missing keys keep their defaults.

        Raises:
            ConfigurationError: On unknown keys or values that cannot be coerced.
        """
        return cls().with_overrides(values)

    def with_overrides(self, values: Mapping[str, Any]) -> SimulatorConfig:
        """Return a copy with the given dotted keys (or field names) replaced."""
        field_types = {f.name: f.type for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, raw in values.items():
            name = CONFIG_KEYS.get(key, key)
            if name not in field_types:
                raise ConfigurationError(f"Unknown setting: {key!r}")
            changes[name] = _coerce(key, raw, field_types[name])
        return replace(self, **changes)

    def to_mapping(self) -> dict[str, Any]:
        """Return the settings keyed by their dotted names."""
        values = asdict(self)
        return {key: values[name] for key, name in CONFIG_KEYS.items()}

    def validate(self) -> SimulatorConfig:
        """Check the settings describe a playable run and return self.

        Raises:
            ConfigurationError: Describing the first offending setting.
        """
        if self.decks < 1:
            raise ConfigurationError(f"shoe.decks must be at least 1, got {self.decks}")
        if not 0 < self.penetration <= 1:
            raise ConfigurationError(
                f"shoe.penetration must be in (0, 1], got {self.penetration}"
            )
        if self.bet_min <= 0:
            raise ConfigurationError(f"game.bet_min must be positive, got {self.bet_min}")
        if self.bet_min > self.bet_max:
            raise ConfigurationError(
                f"game.bet_min ({self.bet_min}) exceeds game.bet_max ({self.bet_max})"
            )
        if self.max_hands_per_game < 1:
            raise ConfigurationError(
                f"game.max_hands_per_game must be at least 1, got {self.max_hands_per_game}"
            )
        if self.blackjack_payout <= 0:
            raise ConfigurationError(
                f"game.blackjack_payout must be positive, got {self.blackjack_payout}"
            )
        if not self.strategy:
            raise ConfigurationError("player.strategy must name a strategy")
        if self.bankroll <= 0:
            raise ConfigurationError(f"player.bankroll must be positive, got {self.bankroll}")
        if self.spread < 1:
            raise ConfigurationError(f"player.spread must be at least 1, got {self.spread}")
        if self.max_games < 1:
            raise ConfigurationError(f"player.max_games must be at least 1, got {self.max_games}")
        return self


def _coerce(key: str, raw: Any, type_name: str) -> Any:
    """Convert *raw* to the annotated field type ('int', 'float', 'str', 'bool')."""
    try:
        if type_name == "bool":
            if isinstance(raw, str):
                lowered = raw.strip().lower()
                if lowered in _TRUE_STRINGS:
                    return True
                if lowered in _FALSE_STRINGS:
                    return False
                raise ValueError(raw)
            return bool(raw)
        if type_name == "int":
            number = float(raw)
            if not number.is_integer():
                raise ValueError(raw)
            return int(number)
        if type_name == "float":
            return float(raw)
        return str(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid value for {key}: {raw!r}") from None
