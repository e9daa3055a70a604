"""
Game state container.

A ``GameState`` is a snapshot. The reducer in ``rules.py`` never edits the
snapshot it is given: it clones it, applies one action to the clone, and
returns the clone. The board catalogue and config are shared between
snapshots; everything that changes during play is copied.
"""

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from monopoly_engine.board import Board
from monopoly_engine.cards import DeckType, DrawnCard, shuffle_deck
from monopoly_engine.config import GameConfig
from monopoly_engine.notifications import Toast, ToastType, push_message, push_toast
from monopoly_engine.player import Player, PlayerColor, PlayerState, PropertyOwnership


class TurnPhase(str, Enum):
    """Where the current player is within their turn."""

    ROLLING = "rolling"
    BUY_DECISION = "buy_decision"
    RESOLVING_RENT = "resolving_rent"
    CARD_DRAWN = "card_drawn"
    BANKRUPTCY_RESOLUTION = "bankruptcy_resolution"
    ENDED = "ended"


class GameStatus(str, Enum):
    SETUP = "setup"
    LOBBY = "lobby"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class PendingDebt:
    """An obligation the debtor could not cover when it arose. Creditor None means the bank."""

    debtor_id: int
    creditor_id: Optional[int]
    amount: int
    reason: str


@dataclass(frozen=True)
class RentDetails:
    """Rent computed on landing, shown to the payer before they settle it."""

    position: int
    tile_name: str
    owner_id: int
    owner_name: str
    base_rent: int
    house_count: int
    is_hotel: bool
    total_rent: int
    calculation: str


class GameState:
    """
    Represents the complete state of a game.
    """

    def __init__(self, config: Optional[GameConfig] = None, board: Optional[Board] = None):
        self.config = config or GameConfig()
        self.board = board or Board()
        if len(self.board) != self.config.board_size:
            raise ValueError(f"Board has {len(self.board)} spaces, expected {self.config.board_size}")

        self.version = 0
        self.game_status = GameStatus.SETUP
        self.players: List[PlayerState] = []

        self.property_ownership: Dict[int, PropertyOwnership] = {
            pos: PropertyOwnership() for pos in self.board.get_ownable_positions()
        }

        self.current_player_index = 0
        self.turn_phase = TurnPhase.ROLLING
        self.dice: Tuple[int, int] = (1, 1)
        self.last_dice_total = 0
        self.consecutive_doubles = 0
        self.rolled_doubles = False

        self.chance_deck: List[int] = []
        self.community_chest_deck: List[int] = []

        self.pending_debt: Optional[PendingDebt] = None
        self.rent_details: Optional[RentDetails] = None
        self.drawn_card: Optional[DrawnCard] = None

        self.messages: List[str] = []
        self.toasts: List[Toast] = []
        self.next_toast_id = 1
        self.ui_error: Optional[str] = None
        self.winner_id: Optional[int] = None

    def clone(self) -> "GameState":
        """Copy everything mutable; share the board catalogue and config."""
        clone = GameState.__new__(GameState)
        clone.__dict__.update(self.__dict__)
        clone.players = [p.copy() for p in self.players]
        clone.property_ownership = {pos: replace(rec) for pos, rec in self.property_ownership.items()}
        clone.chance_deck = list(self.chance_deck)
        clone.community_chest_deck = list(self.community_chest_deck)
        clone.messages = list(self.messages)
        clone.toasts = list(self.toasts)
        return clone

    # Players

    def get_current_player(self) -> Optional[PlayerState]:
        """Get the player whose turn it is."""
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    def get_player(self, player_id: Optional[int]) -> Optional[PlayerState]:
        if player_id is None:
            return None
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def get_active_players(self) -> List[PlayerState]:
        """Get all non-bankrupt players."""
        return [p for p in self.players if not p.is_bankrupt]

    def send_to_jail(self, player: PlayerState) -> None:
        """Relocate a player to jail without passing GO; forfeits any extra roll."""
        player.position = self.config.jail_position
        player.in_jail = True
        player.jail_turns = 0
        self.consecutive_doubles = 0
        self.rolled_doubles = False

    def release_from_jail(self, player: PlayerState) -> None:
        player.in_jail = False
        player.jail_turns = 0

    # Turn flow

    def resume_turn(self) -> None:
        """Continue after an action chain: another roll if doubles are owed, otherwise the turn is over."""
        self.turn_phase = TurnPhase.ROLLING if self.rolled_doubles else TurnPhase.ENDED

    # Decks

    def get_deck(self, deck_type: DeckType) -> List[int]:
        return self.chance_deck if deck_type == DeckType.CHANCE else self.community_chest_deck

    def set_deck(self, deck_type: DeckType, deck: List[int]) -> None:
        if deck_type == DeckType.CHANCE:
            self.chance_deck = deck
        else:
            self.community_chest_deck = deck

    def held_card_ids(self, deck_type: DeckType) -> Set[int]:
        """Ids of keep cards from a deck currently in players' hands."""
        return {
            card.card_id
            for player in self.players
            for card in player.held_cards
            if card.deck_type == deck_type
        }

    # Notifications

    def log(self, message: str) -> None:
        push_message(self.messages, message, self.config.message_limit)

    def notify(self, message: str, toast_type: ToastType = ToastType.INFO) -> None:
        toast = Toast(self.next_toast_id, message, toast_type)
        self.next_toast_id += 1
        push_toast(self.toasts, toast, self.config.toast_limit)

    def reject(self, player_name: str, reason: str) -> None:
        """Report a rule violation without changing anything else."""
        self.log(f"{player_name}: {reason}")
        self.notify(reason, ToastType.ERROR)


def validate_roster(config: GameConfig, roster: Optional[Sequence[Player]]) -> Optional[str]:
    """Return a reason the roster is unusable, or None if it is valid."""
    if not roster:
        return "A list of players is required."
    if not config.min_players <= len(roster) <= config.max_players:
        return f"A game needs between {config.min_players} and {config.max_players} players."
    if [p.player_id for p in roster] != list(range(len(roster))):
        return "Player ids must match seat order."
    try:
        colors = [PlayerColor(p.color) for p in roster]
    except ValueError:
        return "Each player needs a color from the palette."
    if len(set(colors)) != len(colors):
        return "Each player needs a different color."
    return None


def seat_players(state: GameState, roster: Sequence[Player], rng: random.Random) -> None:
    """Replace the players on a state in setup, reset ownership and shuffle both decks."""
    config = state.config
    state.players = [
        PlayerState(p.player_id, p.name, config.starting_cash, color=PlayerColor(p.color), is_ai=p.is_ai)
        for p in roster
    ]
    state.property_ownership = {pos: PropertyOwnership() for pos in state.property_ownership}
    state.current_player_index = 0
    state.turn_phase = TurnPhase.ROLLING
    state.consecutive_doubles = 0
    state.rolled_doubles = False
    state.pending_debt = None
    state.rent_details = None
    state.drawn_card = None
    state.winner_id = None
    state.chance_deck = shuffle_deck(DeckType.CHANCE, rng)
    state.community_chest_deck = shuffle_deck(DeckType.COMMUNITY_CHEST, rng)
    state.toasts = []


def create_game(
    config: GameConfig,
    players: Sequence[Player],
    rng: Optional[random.Random] = None,
    board: Optional[Board] = None,
) -> GameState:
    """
    Create a game that is ready for the first roll.

    Args:
        config: Game configuration
        players: Roster in seat order (2-8 players)
        rng: Source for deck shuffles; defaults to one seeded from ``config.seed``
        board: Optional custom board; defaults to the standard one

    Returns:
        Initialized GameState in PLAYING status
    """
    error = validate_roster(config, players)
    if error:
        raise ValueError(error)

    state = GameState(config, board)
    seat_players(state, players, rng or random.Random(config.seed))
    state.game_status = GameStatus.PLAYING
    return state
