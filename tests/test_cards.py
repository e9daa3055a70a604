"""
Tests for Chance and Community Chest decks and card effects.
"""

import random

from monopoly_engine.cards import (
    CHANCE_CARDS,
    COMMUNITY_CHEST_CARDS,
    DeckType,
    draw_card,
    return_card,
    shuffle_deck,
)
from monopoly_engine.game import PendingDebt, TurnPhase
from monopoly_engine.rules import Action, ActionType

CHANCE_IDS = sorted(card.card_id for card in CHANCE_CARDS)


def _land_on_chance(engine, state, deck):
    """Roll Alice from GO onto the Chance space at 7 with ``deck`` on top."""
    state.chance_deck = list(deck)
    engine.rng.queue(3, 4)
    return engine.dispatch(state, Action(ActionType.ROLL_DICE))


def test_shuffle_contains_every_card_once():
    deck = shuffle_deck(DeckType.CHANCE, random.Random(1))
    assert sorted(deck) == CHANCE_IDS


def test_shuffle_is_deterministic_for_a_seed():
    first = shuffle_deck(DeckType.COMMUNITY_CHEST, random.Random(7))
    second = shuffle_deck(DeckType.COMMUNITY_CHEST, random.Random(7))
    assert first == second
    assert len(first) == len(COMMUNITY_CHEST_CARDS)


def test_drawn_card_goes_to_the_back():
    card, deck = draw_card([4, 9, 11], DeckType.CHANCE, random.Random(1))
    assert card.card_id == 4
    assert deck == [9, 11, 4]


def test_keep_card_leaves_the_deck():
    card, deck = draw_card([5, 9], DeckType.CHANCE, random.Random(1))
    assert card.is_keep
    assert deck == [9]


def test_empty_deck_is_rebuilt_without_held_cards():
    card, deck = draw_card([], DeckType.CHANCE, random.Random(1), held_ids={5})
    assert card is not None
    assert 5 not in deck
    assert len(deck) == len(CHANCE_CARDS) - 1


def test_return_card_goes_to_the_bottom():
    assert return_card([1, 2], 5) == [1, 2, 5]


def test_advance_to_go_pays_salary(engine, basic_game):
    state = _land_on_chance(engine, basic_game, [1, 2, 3])
    assert state.turn_phase == TurnPhase.CARD_DRAWN
    assert state.drawn_card.card.card_id == 1

    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    assert state.drawn_card is None
    assert state.players[0].position == 0
    assert state.players[0].cash == 1700
    assert state.turn_phase == TurnPhase.ENDED


def test_advance_forward_does_not_pay_salary(engine, basic_game):
    state = _land_on_chance(engine, basic_game, [2, 1])

    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    assert state.players[0].position == 31
    assert state.players[0].cash == 1500
    assert state.turn_phase == TurnPhase.BUY_DECISION


def test_go_to_jail_card(engine, basic_game):
    state = _land_on_chance(engine, basic_game, [7])

    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    alice = state.players[0]
    assert alice.in_jail
    assert alice.position == 10
    assert alice.cash == 1500
    assert state.turn_phase == TurnPhase.ENDED


def test_go_back_three_spaces_lands_on_tax(engine, basic_game):
    state = _land_on_chance(engine, basic_game, [6])

    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    assert state.players[0].position == 4
    assert state.players[0].cash == 1300
    assert state.turn_phase == TurnPhase.ENDED


def test_negative_money_card_becomes_debt_when_unaffordable(engine, basic_game):
    basic_game.players[0].cash = 10
    state = _land_on_chance(engine, basic_game, [9])

    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    assert state.turn_phase == TurnPhase.BANKRUPTCY_RESOLUTION
    assert state.pending_debt.amount == 15
    assert state.pending_debt.creditor_id is None
    assert state.players[0].cash == 10


def test_keep_card_is_held_and_deck_stays_closed(engine, basic_game):
    """Every Chance card is always either in the deck or in a player's hand."""
    state = _land_on_chance(engine, basic_game, [5] + [i for i in CHANCE_IDS if i != 5])
    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    alice = state.players[0]
    assert [held.card_id for held in alice.held_cards] == [5]
    assert alice.held_cards[0].deck_type == DeckType.CHANCE
    assert 5 not in state.chance_deck
    assert sorted(state.chance_deck + [h.card_id for h in alice.held_cards]) == CHANCE_IDS


def test_collect_from_every_player(engine, four_player_game):
    four_player_game.community_chest_deck = [106, 101]
    engine.rng.queue(1, 1)

    state = engine.dispatch(four_player_game, Action(ActionType.ROLL_DICE))
    assert state.players[0].position == 2
    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    assert state.players[0].cash == 1530
    assert [p.cash for p in state.players[1:]] == [1490, 1490, 1490]
    # Doubles were rolled, so the turn continues
    assert state.turn_phase == TurnPhase.ROLLING


def test_collect_from_all_skips_bankrupt_players(engine, four_player_game):
    four_player_game.players[3].is_bankrupt = True
    four_player_game.players[3].cash = 0
    four_player_game.community_chest_deck = [106]
    engine.rng.queue(1, 1)

    state = engine.dispatch(four_player_game, Action(ActionType.ROLL_DICE))
    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    assert state.players[0].cash == 1520
    assert state.players[3].cash == 0


def test_street_repairs(engine, basic_game, assign):
    assign(basic_game, 0, 1, 3, houses=2)
    assign(basic_game, 0, 37, 39, houses=5)
    basic_game.community_chest_deck = [113]
    engine.rng.queue(1, 1)

    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))
    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    # 4 houses at $40 and 2 hotels at $115
    assert state.players[0].cash == 1500 - 160 - 230
    assert state.turn_phase == TurnPhase.ROLLING


def test_repairs_without_buildings_cost_nothing(engine, basic_game):
    basic_game.community_chest_deck = [113]
    engine.rng.queue(1, 1)

    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))
    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    assert state.players[0].cash == 1500
    assert state.pending_debt is None


def test_card_leading_to_another_draw(engine, basic_game):
    """Going back three from Chance at 36 lands on Community Chest at 33."""
    basic_game.players[0].position = 29
    basic_game.chance_deck = [6]
    basic_game.community_chest_deck = [109]
    engine.rng.queue(3, 4)

    state = engine.dispatch(basic_game, Action(ActionType.ROLL_DICE))
    assert state.players[0].position == 36
    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))

    assert state.players[0].position == 33
    assert state.turn_phase == TurnPhase.CARD_DRAWN
    assert state.drawn_card.deck_type == DeckType.COMMUNITY_CHEST
    assert state.drawn_card.card.card_id == 109

    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))
    assert state.players[0].cash == 1520
    assert state.turn_phase == TurnPhase.ENDED


def _assert_chance_closed(state):
    """Deck plus cards in hand plus an unconfirmed keep card is the whole catalogue."""
    ids = list(state.chance_deck)
    ids += [h.card_id for p in state.players for h in p.held_cards if h.deck_type == DeckType.CHANCE]
    drawn = state.drawn_card
    if drawn is not None and drawn.deck_type == DeckType.CHANCE and drawn.card.is_keep:
        ids.append(drawn.card.card_id)
    assert sorted(ids) == CHANCE_IDS


def _draw_and_confirm(engine, state, player_index):
    """Put a seat on GO, roll onto Chance and apply whatever comes up."""
    state.current_player_index = player_index
    state.turn_phase = TurnPhase.ROLLING
    player = state.players[player_index]
    player.position = 0
    player.in_jail = False

    engine.rng.queue(3, 4)
    state = engine.dispatch(state, Action(ActionType.ROLL_DICE))
    assert state.turn_phase == TurnPhase.CARD_DRAWN
    _assert_chance_closed(state)

    state = engine.dispatch(state, Action(ActionType.CONFIRM_CARD))
    _assert_chance_closed(state)
    return state


def test_deck_stays_closed_over_many_draws(engine, basic_game):
    basic_game.chance_deck = [5] + [i for i in CHANCE_IDS if i != 5]
    _assert_chance_closed(basic_game)

    state = _draw_and_confirm(engine, basic_game, 0)
    assert [h.card_id for h in state.players[0].held_cards] == [5]

    # Bob cycles through the rest of the deck more than once
    for _ in range(25):
        state = _draw_and_confirm(engine, state, 1)
    assert state.players[1].held_cards == []

    state.current_player_index = 0
    state.turn_phase = TurnPhase.ROLLING
    state.players[0].in_jail = True
    state = engine.dispatch(state, Action(ActionType.USE_JAIL_CARD))
    assert state.players[0].held_cards == []
    assert state.chance_deck[-1] == 5
    _assert_chance_closed(state)

    state.chance_deck = [5] + [i for i in state.chance_deck if i != 5]
    state = _draw_and_confirm(engine, state, 0)
    assert [h.card_id for h in state.players[0].held_cards] == [5]

    state.turn_phase = TurnPhase.BANKRUPTCY_RESOLUTION
    state.players[0].cash = 0
    state.pending_debt = PendingDebt(0, None, 500, "Income Tax")
    state = engine.dispatch(state, Action(ActionType.DECLARE_BANKRUPTCY))
    assert state.players[0].is_bankrupt
    assert 5 in state.chance_deck
    _assert_chance_closed(state)
