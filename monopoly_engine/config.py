"""
Game configuration settings.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """Configuration for a game."""

    starting_cash: int = 1500
    go_salary: int = 200
    jail_fine: int = 50
    mortgage_interest_rate: float = 0.10

    board_size: int = 40
    jail_position: int = 10

    max_jail_turns: int = 3
    max_consecutive_doubles: int = 3

    min_players: int = 2
    max_players: int = 8

    message_limit: int = 50
    toast_limit: int = 3

    seed: Optional[int] = None
