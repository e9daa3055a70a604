"""Shared test fixtures for the turn engine tests."""

import random

import pytest

from monopoly_engine import GameConfig, Player, PlayerColor, TurnEngine, create_game
from monopoly_engine.player import PropertyOwnership


class ScriptedRandom(random.Random):
    """Random source whose dice come from a queue; shuffles stay seeded."""

    def __init__(self, seed=42):
        super().__init__(seed)
        self.rolls = []

    def queue(self, *dice):
        self.rolls.extend(dice)

    def randint(self, a, b):
        if self.rolls:
            return self.rolls.pop(0)
        return super().randint(a, b)


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def rng():
    return ScriptedRandom()


@pytest.fixture
def engine(game_config, rng):
    return TurnEngine(game_config, rng)


@pytest.fixture
def two_players():
    """Two test players."""
    return [Player(0, "Alice", PlayerColor.YELLOW), Player(1, "Bob", PlayerColor.RED)]


@pytest.fixture
def four_players():
    """Four test players."""
    return [
        Player(0, "Alice", PlayerColor.YELLOW),
        Player(1, "Bob", PlayerColor.RED),
        Player(2, "Charlie", PlayerColor.BLUE),
        Player(3, "Diana", PlayerColor.GREEN),
    ]


@pytest.fixture
def basic_game(game_config, two_players, rng):
    """Two-player game ready for Alice's first roll."""
    return create_game(game_config, two_players, rng=rng)


@pytest.fixture
def four_player_game(game_config, four_players, rng):
    return create_game(game_config, four_players, rng=rng)


@pytest.fixture
def assign():
    """Give tiles to a player directly, bypassing the buy flow."""

    def _assign(state, player_id, *positions, houses=0, mortgaged=False):
        player = state.get_player(player_id)
        for pos in positions:
            state.property_ownership[pos] = PropertyOwnership(player_id, houses, mortgaged)
            player.properties.add(pos)

    return _assign
