"""
Turn engine: the reducer that applies one player action to a game state.

``TurnEngine.dispatch(state, action)`` never mutates ``state``. It works on a
clone and returns either

* the same ``state`` object, when the action is not legal right now
  (wrong phase, wrong status, missing or invalid target);
* the updated clone with ``version`` incremented, when the action was applied
  or was rejected with an explanation in the message log and toasts;
* a clone of ``state`` carrying ``ui_error``, when an unexpected fault
  occurred while applying it.
"""

import logging
import random
from enum import Enum
from typing import Any, Callable, Dict, Optional

from monopoly_engine.cards import CardKind, DeckType, DrawnCard, draw_card, return_card, shuffle_deck
from monopoly_engine.config import GameConfig
from monopoly_engine.debt import create_debt, declare_bankruptcy, pay_debt
from monopoly_engine.economy import (
    HOTEL_LEVEL,
    can_build_house,
    can_pay,
    can_sell_house,
    describe_rent,
    get_mortgage_value,
    get_price,
    get_rent,
    get_unmortgage_cost,
)
from monopoly_engine.game import GameState, GameStatus, RentDetails, TurnPhase, seat_players, validate_roster
from monopoly_engine.notifications import ToastType
from monopoly_engine.player import HeldCard, PlayerState
from monopoly_engine.spaces import SpaceType

logger = logging.getLogger(__name__)


class ActionType(str, Enum):
    """Types of actions a player can take."""

    SET_PLAYERS = "SET_PLAYERS"
    START_GAME = "START_GAME"
    ROLL_DICE = "ROLL_DICE"
    BUY_TILE = "BUY_TILE"
    PASS_BUY = "PASS_BUY"
    END_TURN = "END_TURN"
    PAY_JAIL_FINE = "PAY_JAIL_FINE"
    USE_JAIL_CARD = "USE_JAIL_CARD"
    BUILD_HOUSE = "BUILD_HOUSE"
    SELL_HOUSE = "SELL_HOUSE"
    MORTGAGE_TILE = "MORTGAGE_TILE"
    UNMORTGAGE_TILE = "UNMORTGAGE_TILE"
    PAY_DEBT = "PAY_DEBT"
    DECLARE_BANKRUPTCY = "DECLARE_BANKRUPTCY"
    PAY_RENT = "PAY_RENT"
    CONFIRM_CARD = "CONFIRM_CARD"
    CLEAR_TOAST = "CLEAR_TOAST"


class Action:
    """Represents a game action that can be taken."""

    def __init__(self, action_type: ActionType, **params: Any):
        self.action_type = action_type
        self.params = params

    def __repr__(self) -> str:
        return f"Action({self.action_type.value}, {self.params})"


# Phases in which the current player may manage their holdings.
BUILD_PHASES = frozenset({TurnPhase.ROLLING, TurnPhase.BUY_DECISION, TurnPhase.ENDED})
FUNDRAISING_PHASES = BUILD_PHASES | {TurnPhase.BANKRUPTCY_RESOLUTION}

SETUP_STATUSES = frozenset({GameStatus.SETUP, GameStatus.LOBBY})

Handler = Callable[[GameState, Action], bool]


class TurnEngine:
    """
    Applies actions to game states.

    Every handler receives a private draft of the state and returns True if
    the draft should become the next state, or False if the action is not
    legal in the current situation.
    """

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)

        self._handlers: Dict[ActionType, Handler] = {
            ActionType.SET_PLAYERS: self._set_players,
            ActionType.START_GAME: self._start_game,
            ActionType.ROLL_DICE: self._roll_dice,
            ActionType.BUY_TILE: self._buy_tile,
            ActionType.PASS_BUY: self._pass_buy,
            ActionType.END_TURN: self._end_turn,
            ActionType.PAY_JAIL_FINE: self._pay_jail_fine,
            ActionType.USE_JAIL_CARD: self._use_jail_card,
            ActionType.BUILD_HOUSE: self._build_house,
            ActionType.SELL_HOUSE: self._sell_house,
            ActionType.MORTGAGE_TILE: self._mortgage_tile,
            ActionType.UNMORTGAGE_TILE: self._unmortgage_tile,
            ActionType.PAY_DEBT: self._pay_debt,
            ActionType.DECLARE_BANKRUPTCY: self._declare_bankruptcy,
            ActionType.PAY_RENT: self._pay_rent,
            ActionType.CONFIRM_CARD: self._confirm_card,
            ActionType.CLEAR_TOAST: self._clear_toast,
        }
        missing = [action_type.value for action_type in ActionType if action_type not in self._handlers]
        if missing:
            raise RuntimeError(f"No handler registered for: {', '.join(missing)}")

    def new_game(self) -> GameState:
        """Create an empty game in SETUP, waiting for SET_PLAYERS."""
        return GameState(self.config)

    def dispatch(self, state: GameState, action: Action) -> GameState:
        """
        Apply one action and return the resulting state.

        Args:
            state: Current state; never modified
            action: Action to apply on behalf of the current player

        Returns:
            The next state, or ``state`` itself if the action was illegal
        """
        handler = self._handlers[action.action_type]
        draft = state.clone()
        draft.ui_error = None

        try:
            applied = handler(draft, action)
        except Exception as exc:
            logger.exception(f"Failed to apply {action!r} at version {state.version}")
            failed = state.clone()
            failed.ui_error = f"Internal error while applying {action.action_type.value}: {exc}"
            failed.version += 1
            return failed

        if not applied:
            logger.debug(f"Ignored {action!r} in phase {state.turn_phase.value}")
            return state

        draft.version += 1
        logger.debug(f"Applied {action!r}: version {draft.version}, phase {draft.turn_phase.value}")
        return draft

    # Helpers

    def _active_player(self, state: GameState) -> Optional[PlayerState]:
        """The player whose turn it is, or None if the game is not being played."""
        if state.game_status != GameStatus.PLAYING:
            return None
        player = state.get_current_player()
        if player is None or player.is_bankrupt:
            return None
        return player

    def _target_tile(self, state: GameState, action: Action) -> Optional[int]:
        tile_id = action.params.get("tile_id")
        if not isinstance(tile_id, int) or isinstance(tile_id, bool):
            return None
        if not 0 <= tile_id < len(state.board):
            return None
        return tile_id

    def _owned_target(self, state: GameState, action: Action, player: PlayerState) -> Optional[int]:
        """A tile id from the action that the player owns, or None."""
        tile_id = self._target_tile(state, action)
        if tile_id is None:
            return None
        record = state.property_ownership.get(tile_id)
        if record is None or record.owner_id != player.player_id:
            return None
        return tile_id

    # Setup

    def _set_players(self, state: GameState, action: Action) -> bool:
        if state.game_status not in SETUP_STATUSES:
            return False

        roster = action.params.get("players")
        error = validate_roster(state.config, roster)
        if error:
            state.ui_error = error
            return True

        seat_players(state, roster, self.rng)
        state.log(f"{len(state.players)} players ready to play.")
        logger.info(f"Seated {len(state.players)} players: {[p.name for p in state.players]}")
        return True

    def _start_game(self, state: GameState, action: Action) -> bool:
        if state.game_status not in SETUP_STATUSES:
            return False
        if not state.players:
            state.ui_error = "Cannot start: no players defined."
            return True

        state.game_status = GameStatus.PLAYING
        state.turn_phase = TurnPhase.ROLLING
        state.current_player_index = 0
        state.consecutive_doubles = 0
        state.rolled_doubles = False

        for deck_type in DeckType:
            if not state.get_deck(deck_type):
                state.set_deck(deck_type, shuffle_deck(deck_type, self.rng, exclude=state.held_card_ids(deck_type)))

        state.log(f"The game begins! {state.players[0].name} goes first.")
        logger.info(f"Game started with {len(state.players)} players")
        return True

    # Dice and movement

    def _roll_dice(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if player is None or state.turn_phase != TurnPhase.ROLLING:
            return False

        die1 = self.rng.randint(1, 6)
        die2 = self.rng.randint(1, 6)
        total = die1 + die2
        doubles = die1 == die2

        state.dice = (die1, die2)
        state.last_dice_total = total
        state.log(f"{player.name} rolled {die1} and {die2} ({total}){'. Doubles!' if doubles else '.'}")

        if player.in_jail:
            self._roll_in_jail(state, player, total, doubles)
            return True

        if doubles:
            state.consecutive_doubles += 1
            if state.consecutive_doubles >= state.config.max_consecutive_doubles:
                state.send_to_jail(player)
                state.log(f"{player.name} rolled doubles {state.config.max_consecutive_doubles} times and goes to jail.")
                state.notify(f"{player.name} goes to jail for speeding", ToastType.ERROR)
                state.turn_phase = TurnPhase.ENDED
                return True
            state.rolled_doubles = True
        else:
            state.consecutive_doubles = 0
            state.rolled_doubles = False

        self._move_player(state, player, total)
        return True

    def _roll_in_jail(self, state: GameState, player: PlayerState, total: int, doubles: bool) -> None:
        """
        A jailed player rolls for doubles.

        Doubles release the player and move them, without earning another
        roll. Otherwise the attempt is counted; on the last allowed attempt
        the fine is charged and the player moves by the roll, or, if the fine
        is unaffordable, they leave jail owing it to the bank without moving.
        """
        config = state.config

        if doubles:
            state.release_from_jail(player)
            state.consecutive_doubles = 0
            state.rolled_doubles = False
            state.log(f"{player.name} rolled doubles and leaves jail!")
            state.notify(f"{player.name} is out of jail", ToastType.SUCCESS)
            self._move_player(state, player, total)
            return

        player.jail_turns += 1
        if player.jail_turns < config.max_jail_turns:
            state.log(f"{player.name} stays in jail (attempt {player.jail_turns} of {config.max_jail_turns}).")
            state.turn_phase = TurnPhase.ENDED
            return

        state.release_from_jail(player)
        if can_pay(player.cash, config.jail_fine):
            player.cash -= config.jail_fine
            state.log(f"{player.name} paid ${config.jail_fine} after {config.max_jail_turns} attempts and leaves jail.")
            state.notify(f"{player.name} paid the ${config.jail_fine} fine", ToastType.INFO)
            self._move_player(state, player, total)
        else:
            create_debt(state, player, None, config.jail_fine, "Jail fine")

    def _move_player(self, state: GameState, player: PlayerState, steps: int) -> None:
        """Advance the player by ``steps`` and resolve the tile they land on."""
        size = len(state.board)
        old_position = player.position
        new_position = (old_position + steps) % size

        if steps > 0 and old_position + steps >= size:
            self._collect_salary(state, player)

        player.position = new_position
        state.log(f"{player.name} landed on {state.board.get_space(new_position).name}.")
        self._resolve_landing(state, player)

    def _collect_salary(self, state: GameState, player: PlayerState) -> None:
        salary = state.config.go_salary
        player.cash += salary
        state.log(f"{player.name} passed GO and collected ${salary}.")
        state.notify(f"{player.name} collected ${salary} for passing GO", ToastType.SUCCESS)

    def _resolve_landing(self, state: GameState, player: PlayerState) -> None:
        position = player.position
        space = state.board.get_space(position)

        if space.is_ownable:
            record = state.property_ownership[position]
            if not record.is_owned():
                state.turn_phase = TurnPhase.BUY_DECISION
                return
            if record.owner_id == player.player_id:
                state.resume_turn()
                return
            if record.is_mortgaged:
                state.log(f"{space.name} is mortgaged. No rent is due.")
                state.resume_turn()
                return

            owner = state.get_player(record.owner_id)
            rent = get_rent(state.board, state.property_ownership, position, state.last_dice_total)
            if rent > 0 and owner is not None and not owner.is_bankrupt:
                state.rent_details = RentDetails(
                    position=position,
                    tile_name=space.name,
                    owner_id=owner.player_id,
                    owner_name=owner.name,
                    base_rent=getattr(space, "rent", 0),
                    house_count=record.houses,
                    is_hotel=record.has_hotel(),
                    total_rent=rent,
                    calculation=describe_rent(
                        state.board, state.property_ownership, position, state.last_dice_total
                    ),
                )
                state.log(f"Rent due on {space.name}: ${rent}.")
                state.turn_phase = TurnPhase.RESOLVING_RENT
            else:
                state.resume_turn()
            return

        if space.space_type == SpaceType.TAX:
            create_debt(state, player, None, space.amount, space.name)
        elif space.space_type == SpaceType.GO_TO_JAIL:
            state.send_to_jail(player)
            state.log(f"{player.name} goes directly to jail.")
            state.notify(f"{player.name} goes to jail", ToastType.ERROR)
            state.turn_phase = TurnPhase.ENDED
        elif space.space_type == SpaceType.CHANCE:
            self._draw_card(state, player, DeckType.CHANCE)
        elif space.space_type == SpaceType.COMMUNITY_CHEST:
            self._draw_card(state, player, DeckType.COMMUNITY_CHEST)
        else:
            state.resume_turn()

    # Cards

    def _draw_card(self, state: GameState, player: PlayerState, deck_type: DeckType) -> None:
        card, deck = draw_card(state.get_deck(deck_type), deck_type, self.rng, state.held_card_ids(deck_type))
        state.set_deck(deck_type, deck)
        if card is None:
            state.resume_turn()
            return

        state.drawn_card = DrawnCard(deck_type, card)
        deck_name = "Chance" if deck_type == DeckType.CHANCE else "Community Chest"
        state.log(f"{player.name} drew a {deck_name} card.")
        state.turn_phase = TurnPhase.CARD_DRAWN

    def _apply_card(self, state: GameState, player: PlayerState, drawn: DrawnCard) -> None:
        """Carry out the effect printed on a drawn card."""
        card = drawn.card
        config = state.config
        state.log(f'"{card.text}"')

        if card.kind == CardKind.MONEY:
            if card.value >= 0:
                player.cash += card.value
                state.log(f"{player.name} collected ${card.value}.")
                state.notify(f"{player.name} collected ${card.value}", ToastType.SUCCESS)
                state.resume_turn()
            else:
                create_debt(state, player, None, -card.value, "Card")

        elif card.kind == CardKind.MOVE:
            target = card.value % len(state.board)
            if target < player.position and target != config.jail_position:
                self._collect_salary(state, player)
            player.position = target
            state.log(f"{player.name} advances to {state.board.get_space(target).name}.")
            self._resolve_landing(state, player)

        elif card.kind == CardKind.MOVE_REL:
            player.position = (player.position + card.value) % len(state.board)
            direction = "moves back" if card.value < 0 else "moves forward"
            state.log(
                f"{player.name} {direction} {abs(card.value)} spaces to "
                f"{state.board.get_space(player.position).name}."
            )
            self._resolve_landing(state, player)

        elif card.kind == CardKind.GOTO_JAIL:
            state.send_to_jail(player)
            state.log(f"{player.name} goes directly to jail.")
            state.notify(f"{player.name} goes to jail", ToastType.ERROR)
            state.turn_phase = TurnPhase.ENDED

        elif card.kind == CardKind.GET_OUT_JAIL:
            player.held_cards.append(HeldCard(card.card_id, drawn.deck_type, card.text))
            state.log(f'{player.name} keeps the "Get out of jail free" card.')
            state.notify(f"{player.name} has a get out of jail card", ToastType.SUCCESS)
            state.resume_turn()

        elif card.kind == CardKind.COLLECT_FROM_ALL:
            collected = 0
            for other in state.players:
                if other.player_id == player.player_id or other.is_bankrupt:
                    continue
                other.cash -= card.value
                collected += card.value
            player.cash += collected
            state.log(f"{player.name} collected ${card.value} from every player (total ${collected}).")
            state.notify(f"{player.name} collected ${collected}", ToastType.SUCCESS)
            state.resume_turn()

        elif card.kind == CardKind.REPAIRS:
            houses = 0
            hotels = 0
            for position in player.properties:
                level = state.property_ownership[position].houses
                if level == HOTEL_LEVEL:
                    hotels += 1
                else:
                    houses += level
            cost = houses * card.house_cost + hotels * card.hotel_cost
            if cost > 0:
                state.log(f"Repairs: {houses} houses and {hotels} hotels. Total due: ${cost}.")
                create_debt(state, player, None, cost, "Repairs")
            else:
                state.log(f"{player.name} has no buildings to repair.")
                state.resume_turn()

        else:
            # PAY_TO_ALL has no catalogue card
            state.resume_turn()

    def _confirm_card(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if player is None or state.turn_phase != TurnPhase.CARD_DRAWN or state.drawn_card is None:
            return False

        drawn = state.drawn_card
        state.drawn_card = None
        self._apply_card(state, player, drawn)
        return True

    # Buying and rent

    def _buy_tile(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if player is None or state.turn_phase != TurnPhase.BUY_DECISION:
            return False

        position = player.position
        record = state.property_ownership.get(position)
        if record is None or record.is_owned():
            return False

        space = state.board.get_space(position)
        price = get_price(space)
        if can_pay(player.cash, price):
            player.cash -= price
            record.owner_id = player.player_id
            player.properties.add(position)
            state.log(f"{player.name} bought {space.name} for ${price}.")
            state.notify(f"{player.name} bought {space.name}", ToastType.SUCCESS)
        else:
            state.log(f"{player.name} cannot afford {space.name}.")

        state.resume_turn()
        return True

    def _pass_buy(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if player is None or state.turn_phase != TurnPhase.BUY_DECISION:
            return False

        state.log(f"{player.name} decided not to buy {state.board.get_space(player.position).name}.")
        state.resume_turn()
        return True

    def _pay_rent(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        details = state.rent_details
        if player is None or state.turn_phase != TurnPhase.RESOLVING_RENT or details is None:
            return False

        state.rent_details = None
        create_debt(state, player, details.owner_id, details.total_rent, f"Rent on {details.tile_name}")
        return True

    # Jail

    def _pay_jail_fine(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if player is None or not player.in_jail or state.turn_phase != TurnPhase.ROLLING:
            return False

        fine = state.config.jail_fine
        if not can_pay(player.cash, fine):
            state.reject(player.name, f"Not enough cash to pay the ${fine} fine.")
            return True

        player.cash -= fine
        state.release_from_jail(player)
        state.log(f"{player.name} paid the ${fine} fine and leaves jail.")
        state.notify(f"{player.name} paid the fine", ToastType.SUCCESS)
        return True

    def _use_jail_card(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if (
            player is None
            or not player.in_jail
            or not player.held_cards
            or state.turn_phase != TurnPhase.ROLLING
        ):
            return False

        held = player.held_cards.pop(0)
        state.set_deck(held.deck_type, return_card(state.get_deck(held.deck_type), held.card_id))
        state.release_from_jail(player)
        state.log(f'{player.name} used the "Get out of jail free" card.')
        state.notify(f"{player.name} used a get out of jail card", ToastType.SUCCESS)
        return True

    # Property management

    def _build_house(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if player is None or state.turn_phase not in BUILD_PHASES or state.pending_debt is not None:
            return False
        tile_id = self._owned_target(state, action, player)
        if tile_id is None:
            return False

        check = can_build_house(state.board, state.property_ownership, player, tile_id)
        if not check.allowed:
            state.reject(player.name, check.reason)
            return True

        space = state.board.get_space(tile_id)
        record = state.property_ownership[tile_id]
        player.cash -= space.house_cost
        record.houses += 1
        building = "a hotel" if record.has_hotel() else f"house {record.houses}"
        state.log(f"{player.name} built {building} on {space.name} for ${space.house_cost}.")
        state.notify(f"Built on {space.name} (-${space.house_cost})", ToastType.SUCCESS)
        return True

    def _sell_house(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if player is None or state.turn_phase not in FUNDRAISING_PHASES:
            return False
        tile_id = self._owned_target(state, action, player)
        if tile_id is None:
            return False

        check = can_sell_house(state.board, state.property_ownership, player, tile_id)
        if not check.allowed:
            state.reject(player.name, check.reason)
            return True

        space = state.board.get_space(tile_id)
        record = state.property_ownership[tile_id]
        refund = space.house_cost // 2
        building = "a hotel" if record.has_hotel() else "a house"
        record.houses -= 1
        player.cash += refund
        state.log(f"{player.name} sold {building} on {space.name} for ${refund}.")
        state.notify(f"Sold on {space.name} (+${refund})", ToastType.INFO)
        return True

    def _mortgage_tile(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if player is None or state.turn_phase not in FUNDRAISING_PHASES:
            return False
        tile_id = self._owned_target(state, action, player)
        if tile_id is None:
            return False

        record = state.property_ownership[tile_id]
        if record.is_mortgaged:
            return False
        if record.houses > 0:
            state.reject(player.name, "Sell the buildings before mortgaging.")
            return True

        space = state.board.get_space(tile_id)
        value = get_mortgage_value(space)
        record.is_mortgaged = True
        player.cash += value
        state.log(f"{player.name} mortgaged {space.name} for ${value}.")
        state.notify(f"Mortgaged {space.name}: +${value}", ToastType.INFO)
        return True

    def _unmortgage_tile(self, state: GameState, action: Action) -> bool:
        player = self._active_player(state)
        if player is None or state.turn_phase not in BUILD_PHASES or state.pending_debt is not None:
            return False
        tile_id = self._owned_target(state, action, player)
        if tile_id is None:
            return False

        record = state.property_ownership[tile_id]
        if not record.is_mortgaged:
            return False

        space = state.board.get_space(tile_id)
        cost = get_unmortgage_cost(space, state.config.mortgage_interest_rate)
        if not can_pay(player.cash, cost):
            state.reject(player.name, f"Not enough cash to lift the mortgage (${cost}).")
            return True

        record.is_mortgaged = False
        player.cash -= cost
        state.log(f"{player.name} lifted the mortgage on {space.name} for ${cost}.")
        state.notify(f"Unmortgaged {space.name}: -${cost}", ToastType.SUCCESS)
        return True

    # Debt

    def _pay_debt(self, state: GameState, action: Action) -> bool:
        if self._active_player(state) is None or state.pending_debt is None:
            return False
        return pay_debt(state)

    def _declare_bankruptcy(self, state: GameState, action: Action) -> bool:
        if self._active_player(state) is None or state.pending_debt is None:
            return False
        return declare_bankruptcy(state)

    # Turn end

    def _end_turn(self, state: GameState, action: Action) -> bool:
        if state.game_status != GameStatus.PLAYING or not state.players:
            return False
        if state.turn_phase != TurnPhase.ENDED or state.pending_debt is not None:
            return False

        state.consecutive_doubles = 0
        state.rolled_doubles = False
        state.drawn_card = None
        state.rent_details = None

        active = state.get_active_players()
        if len(active) <= 1:
            state.game_status = GameStatus.GAME_OVER
            state.winner_id = active[0].player_id if active else None
            winner = active[0].name if active else "Nobody"
            state.log(f"{winner} wins the game!")
            logger.info(f"Game over, winner: {state.winner_id}")
            return True

        count = len(state.players)
        next_index = (state.current_player_index + 1) % count
        while state.players[next_index].is_bankrupt:
            next_index = (next_index + 1) % count

        state.current_player_index = next_index
        state.turn_phase = TurnPhase.ROLLING
        state.log(f"{state.players[next_index].name}'s turn.")
        return True

    # Notifications

    def _clear_toast(self, state: GameState, action: Action) -> bool:
        toast_id = action.params.get("toast_id")
        remaining = [toast for toast in state.toasts if toast.toast_id != toast_id]
        if len(remaining) == len(state.toasts):
            return False
        state.toasts = remaining
        return True
