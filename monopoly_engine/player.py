"""
Player state and management.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set

from monopoly_engine.cards import DeckType


class PlayerColor(str, Enum):
    """Fixed token palette; every seat gets a distinct color."""

    YELLOW = "yellow"
    RED = "red"
    ORANGE = "orange"
    BLUE = "blue"
    GREEN = "green"
    PINK = "pink"
    PURPLE = "purple"
    CYAN = "cyan"


@dataclass(frozen=True)
class HeldCard:
    """A keep card in a player's hand, remembering the deck it came from."""

    card_id: int
    deck_type: DeckType
    text: str


class PlayerState:
    """Represents the complete state of a player in the game."""

    def __init__(
        self,
        player_id: int,
        name: str,
        starting_cash: int,
        color: PlayerColor = PlayerColor.YELLOW,
        is_ai: bool = False,
    ):
        self.player_id = player_id
        self.name = name
        self.color = color
        self.is_ai = is_ai
        self.cash = starting_cash
        self.position = 0
        self.in_jail = False
        self.jail_turns = 0
        self.held_cards: List[HeldCard] = []
        self.is_bankrupt = False
        self.properties: Set[int] = set()

    def copy(self) -> "PlayerState":
        """Return an independent copy (sets and lists are not shared)."""
        clone = PlayerState.__new__(PlayerState)
        clone.__dict__.update(self.__dict__)
        clone.held_cards = list(self.held_cards)
        clone.properties = set(self.properties)
        return clone

    def __repr__(self) -> str:
        return (
            f"PlayerState(id={self.player_id}, name='{self.name}', "
            f"cash={self.cash}, position={self.position}, bankrupt={self.is_bankrupt})"
        )


@dataclass
class PropertyOwnership:
    """Tracks ownership state of a property."""

    owner_id: Optional[int] = None
    houses: int = 0
    is_mortgaged: bool = False

    def is_owned(self) -> bool:
        """Check if property is owned by any player."""
        return self.owner_id is not None

    def has_hotel(self) -> bool:
        """Check if property has a hotel (represented as 5 houses)."""
        return self.houses == 5


@dataclass
class Player:
    """
    Roster entry supplied by the boundary before the game starts.
    Seat order is list order; ``player_id`` must equal the seat index.
    """

    player_id: int
    name: str
    color: PlayerColor = PlayerColor.YELLOW
    is_ai: bool = False
