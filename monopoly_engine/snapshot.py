"""
Public snapshot serialization of GameState.

Produces a UI-friendly, JSON-ready view of the current game. Deck order is
hidden information: only deck sizes are exposed.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from monopoly_engine.economy import get_net_worth, get_price
from monopoly_engine.game import GameState
from monopoly_engine.schemas import GameSnapshot
from monopoly_engine.spaces import PropertySpace


def _serialize_tiles(game: GameState) -> List[Dict[str, Any]]:
    tiles: List[Dict[str, Any]] = []
    for space in game.board.spaces:
        entry: Dict[str, Any] = {
            "position": space.position,
            "name": space.name,
            "space_type": space.space_type.value,
        }
        if space.is_ownable:
            record = game.property_ownership[space.position]
            entry["price"] = get_price(space)
            entry["owner_id"] = record.owner_id
            entry["houses"] = record.houses
            entry["is_mortgaged"] = record.is_mortgaged
        if isinstance(space, PropertySpace):
            entry["color_group"] = space.color_group
        tiles.append(entry)
    return tiles


def serialize_snapshot(game: GameState) -> Dict[str, Any]:
    """Serialize a GameState into a public, stable JSON dict.

    The snapshot includes:
    - version, status, phase and current_player_id
    - players with public info (cash, net worth, position, jail, held cards)
    - every tile with its ownership record
    - deck sizes only
    - pending debt, rent details and drawn card, when present
    - message log, toasts and ui_error
    """
    players: List[Dict[str, Any]] = []
    for pstate in game.players:
        players.append(
            {
                "player_id": pstate.player_id,
                "name": pstate.name,
                "color": pstate.color.value,
                "is_ai": pstate.is_ai,
                "cash": pstate.cash,
                "net_worth": get_net_worth(game.board, game.property_ownership, pstate),
                "position": pstate.position,
                "in_jail": pstate.in_jail,
                "jail_turns": pstate.jail_turns,
                "held_cards": [
                    {"card_id": held.card_id, "deck_type": held.deck_type.value, "text": held.text}
                    for held in pstate.held_cards
                ],
                "is_bankrupt": pstate.is_bankrupt,
                "properties": sorted(pstate.properties),
            }
        )

    drawn = None
    if game.drawn_card is not None:
        card = game.drawn_card.card
        drawn = {
            "deck_type": game.drawn_card.deck_type.value,
            "card_id": card.card_id,
            "text": card.text,
            "kind": card.kind.value,
            "value": card.value,
        }

    current = game.get_current_player()
    snapshot: Dict[str, Any] = {
        "version": game.version,
        "game_status": game.game_status.value,
        "turn_phase": game.turn_phase.value,
        "current_player_id": current.player_id if current else None,
        "dice": list(game.dice),
        "last_dice_total": game.last_dice_total,
        "consecutive_doubles": game.consecutive_doubles,
        "rolled_doubles": game.rolled_doubles,
        "players": players,
        "tiles": _serialize_tiles(game),
        "decks": {
            "chance": len(game.chance_deck),
            "community_chest": len(game.community_chest_deck),
        },
        "pending_debt": asdict(game.pending_debt) if game.pending_debt else None,
        "rent_details": asdict(game.rent_details) if game.rent_details else None,
        "drawn_card": drawn,
        "messages": list(game.messages),
        "toasts": [
            {"toast_id": t.toast_id, "message": t.message, "toast_type": t.toast_type.value} for t in game.toasts
        ],
        "ui_error": game.ui_error,
        "winner_id": game.winner_id,
    }

    # Validate the shape before handing it to a transport
    return GameSnapshot.model_validate(snapshot).model_dump()
