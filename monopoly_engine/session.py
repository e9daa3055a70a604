"""
Dispatch boundary between a transport and the turn engine.

A ``GameSession`` owns the authoritative state of one game. Submissions are
applied one at a time behind an ``asyncio.Lock``, so concurrent messages for
the same game cannot interleave. Sessions share nothing with each other.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, Optional

from pydantic import ValidationError

from monopoly_engine.exceptions import InvalidActionError, NotHostError, NotYourTurnError
from monopoly_engine.game import GameState
from monopoly_engine.rules import Action, ActionType, TurnEngine
from monopoly_engine.schemas import ActionRequest
from monopoly_engine.settings import EngineSettings, apply_log_level, get_engine_settings
from monopoly_engine.snapshot import serialize_snapshot

logger = logging.getLogger(__name__)

# Actions the host issues before anyone has a turn.
HOST_ACTIONS = frozenset({ActionType.SET_PLAYERS, ActionType.START_GAME})

# Toasts are per-viewer housekeeping; anyone may dismiss one.
UNGATED_ACTIONS = frozenset({ActionType.CLEAR_TOAST})


def parse_action(message: Any) -> Action:
    """
    Turn an inbound envelope into an Action.

    Accepts an ``ActionRequest``, a dict, or a JSON string.

    Raises:
        InvalidActionError: If the envelope is malformed or names an unknown action
    """
    try:
        if isinstance(message, ActionRequest):
            request = message
        elif isinstance(message, (str, bytes)):
            request = ActionRequest.model_validate_json(message)
        else:
            request = ActionRequest.model_validate(message)
    except ValidationError as exc:
        raise InvalidActionError(f"Malformed action envelope: {exc}") from exc

    try:
        action_type = ActionType(request.action)
    except ValueError as exc:
        raise InvalidActionError(f"Unknown action: {request.action}") from exc

    params: Dict[str, Any] = {}
    payload = request.payload
    if payload is not None:
        if payload.tile_id is not None:
            params["tile_id"] = payload.tile_id
        if payload.toast_id is not None:
            params["toast_id"] = payload.toast_id
        if payload.players is not None:
            params["players"] = [entry.to_player() for entry in payload.players]
    return Action(action_type, **params)


class GameSession:
    """Serializes actions for one game and keeps its latest state."""

    def __init__(
        self,
        engine: Optional[TurnEngine] = None,
        state: Optional[GameState] = None,
        host_id: int = 0,
        session_id: Optional[str] = None,
    ):
        self.engine = engine or TurnEngine()
        self.state = state or self.engine.new_game()
        self.host_id = host_id
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._lock = asyncio.Lock()

    def _authorize(self, actor_id: int, action: Action) -> None:
        if action.action_type in UNGATED_ACTIONS:
            return
        if action.action_type in HOST_ACTIONS:
            if actor_id != self.host_id:
                raise NotHostError(f"Only the host (seat {self.host_id}) may {action.action_type.value}")
            return

        current = self.state.get_current_player()
        if current is not None and current.player_id != actor_id:
            raise NotYourTurnError(f"Seat {actor_id} acted during seat {current.player_id}'s turn")

    async def submit(self, actor_id: int, action: Action) -> GameState:
        """
        Apply an action on behalf of ``actor_id`` and return the new state.

        Raises:
            NotHostError: A setup action came from a seat other than the host
            NotYourTurnError: A turn action came from a seat that is not active
        """
        async with self._lock:
            try:
                self._authorize(actor_id, action)
            except (NotHostError, NotYourTurnError) as exc:
                logger.info(f"Session {self.session_id}: rejected {action!r} from seat {actor_id}: {exc}")
                raise

            previous = self.state
            self.state = self.engine.dispatch(previous, action)
            if self.state is previous:
                logger.debug(f"Session {self.session_id}: {action!r} from seat {actor_id} had no effect")
            return self.state

    async def submit_message(self, actor_id: int, message: Any) -> Dict[str, Any]:
        """Parse a raw envelope, apply it, and return the resulting snapshot."""
        action = parse_action(message)
        state = await self.submit(actor_id, action)
        return serialize_snapshot(state)

    def snapshot(self) -> Dict[str, Any]:
        return serialize_snapshot(self.state)


class SessionRegistry:
    """In-memory registry of running game sessions."""

    def __init__(self, engine_factory=None, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_engine_settings()
        apply_log_level(self.settings)
        self._sessions: Dict[str, GameSession] = {}
        self._engine_factory = engine_factory or self._default_engine
        self._lock = asyncio.Lock()

    def _default_engine(self) -> TurnEngine:
        return TurnEngine(self.settings.to_game_config())

    async def create_session(self, host_id: int = 0) -> GameSession:
        session = GameSession(engine=self._engine_factory(), host_id=host_id)
        async with self._lock:
            self._sessions[session.session_id] = session
        logger.info(f"Created session {session.session_id} (host seat {host_id})")
        return session

    async def get(self, session_id: str) -> Optional[GameSession]:
        return self._sessions.get(session_id)

    async def close(self, session_id: str) -> bool:
        async with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        logger.info(f"Closed session {session_id}")
        return True
