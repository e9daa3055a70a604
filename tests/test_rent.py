"""
Tests for rent calculation on all property types, and rent collection on landing.
"""

from monopoly_engine.board import Board
from monopoly_engine.economy import get_rent
from monopoly_engine.game import TurnPhase
from monopoly_engine.rules import Action, ActionType
from monopoly_engine.spaces import RailroadSpace


def _rent(state, position, dice_total=7):
    return get_rent(state.board, state.property_ownership, position, dice_total)


def test_unowned_property_has_no_rent(basic_game):
    assert _rent(basic_game, 1) == 0


def test_basic_property_rent(basic_game, assign):
    """
    Test basic rent on unimproved property.
    Rule: 'The amount payable is shown on the Title Deed'
    """
    assign(basic_game, 0, 1)
    assert _rent(basic_game, 1) == 2


def test_monopoly_doubles_rent(basic_game, assign):
    """
    Rule: 'If all Sites within a colour-group are owned by a player, the rent
    payable is doubled on any Site of that group not yet built on.'
    """
    assign(basic_game, 0, 1, 3)
    assert _rent(basic_game, 1) == 4
    assert _rent(basic_game, 3) == 8


def test_rent_with_houses_and_hotel(basic_game, assign):
    assign(basic_game, 0, 1, 3)
    basic_game.property_ownership[1].houses = 1
    assert _rent(basic_game, 1) == 10

    basic_game.property_ownership[1].houses = 4
    assert _rent(basic_game, 1) == 160

    basic_game.property_ownership[1].houses = 5
    assert _rent(basic_game, 1) == 250


def test_mortgaged_property_has_no_rent(basic_game, assign):
    assign(basic_game, 0, 39, mortgaged=True)
    assert _rent(basic_game, 39) == 0


def test_railroad_rent_by_count(basic_game, assign):
    """Rent for railroads: 25, 50, 100, 200 for 1-4 owned."""
    assign(basic_game, 0, 5)
    assert _rent(basic_game, 5) == 25

    assign(basic_game, 0, 15)
    assert _rent(basic_game, 5) == 50

    assign(basic_game, 0, 25)
    assert _rent(basic_game, 5) == 100

    assign(basic_game, 0, 35)
    assert _rent(basic_game, 35) == 200


def test_railroad_rent_without_table_doubles_per_railroad(basic_game, assign):
    board = Board()
    board.spaces[5] = RailroadSpace("Reading Railroad", 5, rent_levels=())
    basic_game.board = board
    assign(basic_game, 0, 5, 15, 25)

    assert _rent(basic_game, 5) == 100


def test_utility_rent_uses_dice(basic_game, assign):
    assign(basic_game, 0, 12)
    assert _rent(basic_game, 12, dice_total=7) == 28

    assign(basic_game, 0, 28)
    assert _rent(basic_game, 12, dice_total=7) == 70


def test_landing_on_owned_property_asks_for_rent(engine, basic_game, assign):
    assign(basic_game, 1, 3)
    engine.rng.queue(1, 2)

    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))

    assert state.players[0].position == 3
    assert state.turn_phase == TurnPhase.RESOLVING_RENT
    assert state.rent_details.total_rent == 4
    assert state.rent_details.owner_name == "Bob"
    assert state.rent_details.calculation == "Base rent"


def test_pay_rent_transfers_cash(engine, basic_game, assign):
    assign(basic_game, 1, 3)
    engine.rng.queue(1, 2)
    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))

    state = engine.dispatch(state, Action(ActionType.PAY_RENT))

    assert state.players[0].cash == 1496
    assert state.players[1].cash == 1504
    assert state.rent_details is None
    assert state.turn_phase == TurnPhase.ENDED


def test_pay_rent_after_doubles_allows_another_roll(engine, basic_game, assign):
    assign(basic_game, 1, 6)
    engine.rng.queue(3, 3)
    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))
    assert state.turn_phase == TurnPhase.RESOLVING_RENT

    state = engine.dispatch(state, Action(ActionType.PAY_RENT))

    assert state.players[0].cash == 1494
    assert state.turn_phase == TurnPhase.ROLLING


def test_three_railroads_scenario(engine, basic_game, assign):
    assign(basic_game, 1, 5, 15, 25)
    engine.rng.queue(2, 3)

    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))

    railroad = state.board.get_space(5)
    assert state.rent_details.total_rent == railroad.rent_levels[2] == 100 == 25 * 4


def test_landing_on_mortgaged_property_charges_nothing(engine, basic_game, assign):
    assign(basic_game, 1, 3, mortgaged=True)
    engine.rng.queue(1, 2)

    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))

    assert state.turn_phase == TurnPhase.ENDED
    assert state.rent_details is None
    assert state.players[0].cash == 1500


def test_landing_on_own_property(engine, basic_game, assign):
    assign(basic_game, 0, 3)
    engine.rng.queue(1, 2)

    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))

    assert state.turn_phase == TurnPhase.ENDED
    assert state.rent_details is None


def test_utility_landing_uses_roll(engine, basic_game, assign):
    assign(basic_game, 1, 12)
    basic_game.players[0].position = 5
    engine.rng.queue(3, 4)

    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))

    assert state.players[0].position == 12
    assert state.rent_details.total_rent == 28
    assert state.rent_details.calculation == "Utility rent (7 x 4)"
