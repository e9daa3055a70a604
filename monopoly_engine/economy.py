"""
Economic rules: rent, mortgages, building eligibility and net worth.

Everything here is a pure function of the board catalogue, the ownership
records and the players passed in. Nothing is mutated.
"""

from typing import Dict, Iterable, NamedTuple, Optional

from monopoly_engine.board import Board
from monopoly_engine.player import PlayerState, PropertyOwnership
from monopoly_engine.spaces import PropertySpace, RailroadSpace, Space, UtilitySpace

HOTEL_LEVEL = 5

Ownership = Dict[int, PropertyOwnership]


class BuildCheck(NamedTuple):
    """Outcome of a build or sell eligibility check."""

    allowed: bool
    reason: Optional[str] = None


def can_pay(cash: int, amount: int) -> bool:
    return cash >= amount


def _count_owned(ownership: Ownership, positions: Iterable[int], owner_id: int) -> int:
    return sum(1 for pos in positions if ownership[pos].owner_id == owner_id)


def owns_color_group(board: Board, ownership: Ownership, owner_id: int, color_group: Optional[str]) -> bool:
    """Check if a player owns every property of a color group."""
    group = board.get_color_group(color_group)
    return bool(group) and all(ownership[pos].owner_id == owner_id for pos in group)


def get_property_rent(board: Board, ownership: Ownership, space: PropertySpace) -> int:
    """
    Rent for a street.

    With buildings the tabulated level for the current house count applies
    (5 = hotel). Without buildings, owning the whole color group doubles the
    base rent.
    """
    record = ownership[space.position]
    if record.houses > 0 and len(space.rent_levels) > record.houses:
        return space.rent_levels[record.houses]
    if owns_color_group(board, ownership, record.owner_id, space.color_group):
        return space.rent * 2
    return space.rent


def get_railroad_rent(board: Board, ownership: Ownership, space: RailroadSpace) -> int:
    owner_id = ownership[space.position].owner_id
    count = _count_owned(ownership, board.get_all_railroads(), owner_id)
    if space.rent_levels and len(space.rent_levels) >= count:
        return space.rent_levels[count - 1]
    return 25 * (2 ** (count - 1))


def get_utility_rent(board: Board, ownership: Ownership, space: UtilitySpace, dice_total: int) -> int:
    owner_id = ownership[space.position].owner_id
    count = _count_owned(ownership, board.get_all_utilities(), owner_id)
    multiplier = 10 if count == 2 else 4
    return dice_total * multiplier


def get_rent(board: Board, ownership: Ownership, position: int, dice_total: int) -> int:
    """
    Calculate the rent owed for landing on a space.

    Unowned, mortgaged and non-ownable spaces charge nothing.
    """
    record = ownership.get(position)
    if record is None or not record.is_owned() or record.is_mortgaged:
        return 0

    space = board.get_space(position)
    if isinstance(space, PropertySpace):
        return get_property_rent(board, ownership, space)
    if isinstance(space, RailroadSpace):
        return get_railroad_rent(board, ownership, space)
    if isinstance(space, UtilitySpace):
        return get_utility_rent(board, ownership, space, dice_total)
    return 0


def describe_rent(board: Board, ownership: Ownership, position: int, dice_total: int) -> str:
    """Human-readable explanation of how the rent on a space was derived."""
    space = board.get_space(position)
    record = ownership[position]
    if isinstance(space, PropertySpace):
        if record.has_hotel():
            return "Rent with hotel"
        if record.houses > 0:
            return f"Rent with {record.houses} house{'s' if record.houses > 1 else ''}"
        if owns_color_group(board, ownership, record.owner_id, space.color_group):
            return "Base rent doubled (full color group)"
        return "Base rent"
    if isinstance(space, RailroadSpace):
        count = _count_owned(ownership, board.get_all_railroads(), record.owner_id)
        return f"Railroad rent ({count} owned)"
    if isinstance(space, UtilitySpace):
        count = _count_owned(ownership, board.get_all_utilities(), record.owner_id)
        return f"Utility rent ({dice_total} x {10 if count == 2 else 4})"
    return ""


def get_price(space: Space) -> int:
    return getattr(space, "price", 0) or 0


def get_mortgage_value(space: Space) -> int:
    """Mortgage value is half the printed price, rounded down."""
    return get_price(space) // 2


def get_unmortgage_cost(space: Space, interest_rate: float = 0.10) -> int:
    """Mortgage value plus interest, rounded down."""
    return int(get_mortgage_value(space) * (1 + interest_rate))


def can_build_house(board: Board, ownership: Ownership, player: PlayerState, position: int) -> BuildCheck:
    """
    Check whether a player may add one building level to a street.

    Checks run in a fixed order and the first failure is reported:
    street type, ownership, mortgage, color group, hotel cap, funds,
    complete group, mortgages in the group, even building.
    """
    space = board.get_space(position)
    if not isinstance(space, PropertySpace):
        return BuildCheck(False, "Only streets can be built on.")

    record = ownership[position]
    if record.owner_id != player.player_id:
        return BuildCheck(False, "You do not own this property.")
    if record.is_mortgaged:
        return BuildCheck(False, "This property is mortgaged.")
    if not space.color_group or not space.house_cost:
        return BuildCheck(False, "This property has no color group.")
    if record.houses >= HOTEL_LEVEL:
        return BuildCheck(False, "Maximum reached (hotel).")
    if not can_pay(player.cash, space.house_cost):
        return BuildCheck(False, "Insufficient funds.")

    group = board.get_color_group(space.color_group)
    if not all(ownership[pos].owner_id == player.player_id for pos in group):
        return BuildCheck(False, "You need the complete color group.")
    if any(ownership[pos].is_mortgaged for pos in group):
        return BuildCheck(False, "A property in the group is mortgaged.")

    lowest = min(ownership[pos].houses for pos in group)
    if record.houses > lowest:
        return BuildCheck(False, "Build evenly: add to the other properties of the group first.")

    return BuildCheck(True)


def can_sell_house(board: Board, ownership: Ownership, player: PlayerState, position: int) -> BuildCheck:
    """
    Check whether a player may sell one building level back to the bank.
    Buildings must come down evenly: the street must hold the most buildings in its group.
    """
    space = board.get_space(position)
    if not isinstance(space, PropertySpace):
        return BuildCheck(False, "Only streets have buildings.")

    record = ownership[position]
    if record.owner_id != player.player_id:
        return BuildCheck(False, "You do not own this property.")
    if record.houses == 0:
        return BuildCheck(False, "There are no buildings to sell.")

    group = board.get_color_group(space.color_group) or [position]
    highest = max(ownership[pos].houses for pos in group)
    if record.houses < highest:
        return BuildCheck(False, "Sell evenly: remove from the other properties of the group first.")

    return BuildCheck(True)


def get_net_worth(board: Board, ownership: Ownership, player: PlayerState) -> int:
    """Cash plus what the player's holdings would raise if liquidated."""
    worth = player.cash
    for pos in player.properties:
        space = board.get_space(pos)
        record = ownership[pos]
        if not record.is_mortgaged:
            worth += get_mortgage_value(space)
        if isinstance(space, PropertySpace) and record.houses:
            worth += (record.houses * space.house_cost) // 2
    return worth
