"""
Board space definitions and types.

Spaces are the static tile catalogue. They are shared between every state of a
game and never mutated; ownership, houses and mortgages live in
``PropertyOwnership`` records on the game state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SpaceType(Enum):
    """Types of spaces on the board."""

    GO = "go"
    PROPERTY = "property"
    RAILROAD = "railroad"
    UTILITY = "utility"
    TAX = "tax"
    CHANCE = "chance"
    COMMUNITY_CHEST = "community_chest"
    JAIL = "jail"
    GO_TO_JAIL = "go_to_jail"
    FREE_PARKING = "free_parking"


OWNABLE_TYPES = (SpaceType.PROPERTY, SpaceType.RAILROAD, SpaceType.UTILITY)


@dataclass
class Space:
    """Base class for a board space."""

    name: str
    position: int
    space_type: SpaceType

    @property
    def is_ownable(self) -> bool:
        return self.space_type in OWNABLE_TYPES

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', position={self.position})"


@dataclass
class PropertySpace(Space):
    """
    A street that can be owned, built upon, and mortgaged.

    ``rent_levels`` is indexed by building level: 0 is the unimproved rent,
    1-4 are houses and 5 is a hotel.
    """

    price: int
    color_group: Optional[str]
    rent_levels: Tuple[int, ...]
    house_cost: int

    def __init__(
        self,
        name: str,
        position: int,
        price: int,
        color_group: Optional[str],
        rent_levels: Tuple[int, ...],
        house_cost: int,
    ):
        super().__init__(name, position, SpaceType.PROPERTY)
        self.price = price
        self.color_group = color_group
        self.rent_levels = tuple(rent_levels)
        self.house_cost = house_cost

    @property
    def rent(self) -> int:
        """Unimproved base rent."""
        return self.rent_levels[0] if self.rent_levels else 0


@dataclass
class RailroadSpace(Space):
    """A railroad. ``rent_levels[n - 1]`` is the rent when the owner holds n railroads."""

    price: int
    rent_levels: Tuple[int, ...]

    def __init__(
        self,
        name: str,
        position: int,
        price: int = 200,
        rent_levels: Tuple[int, ...] = (25, 50, 100, 200),
    ):
        super().__init__(name, position, SpaceType.RAILROAD)
        self.price = price
        self.rent_levels = tuple(rent_levels)


@dataclass
class UtilitySpace(Space):
    """A utility space (Electric Company or Water Works)."""

    price: int

    def __init__(self, name: str, position: int, price: int = 150):
        super().__init__(name, position, SpaceType.UTILITY)
        self.price = price


@dataclass
class TaxSpace(Space):
    """A tax space (Income Tax or Luxury Tax)."""

    amount: int

    def __init__(self, name: str, position: int, amount: int):
        super().__init__(name, position, SpaceType.TAX)
        self.amount = amount

