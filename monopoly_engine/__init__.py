"""
Monopoly Turn Engine

A deterministic, replayable state machine for a property-trading board game:
``TurnEngine.dispatch(state, action) -> state``.
"""

from .board import Board
from .config import GameConfig
from .exceptions import InvalidActionError, MonopolyError, NotHostError, NotYourTurnError
from .game import GameState, GameStatus, TurnPhase, create_game
from .player import Player, PlayerColor, PlayerState
from .rules import Action, ActionType, TurnEngine
from .session import GameSession, SessionRegistry, parse_action
from .snapshot import serialize_snapshot

__all__ = [
    "Action",
    "ActionType",
    "Board",
    "GameConfig",
    "GameSession",
    "GameState",
    "GameStatus",
    "InvalidActionError",
    "MonopolyError",
    "NotHostError",
    "NotYourTurnError",
    "Player",
    "PlayerColor",
    "PlayerState",
    "SessionRegistry",
    "TurnEngine",
    "TurnPhase",
    "create_game",
    "parse_action",
    "serialize_snapshot",
]
