from typing import List, Optional

from pydantic import BaseModel, Field

from monopoly_engine.player import Player, PlayerColor


class RosterEntry(BaseModel):
    player_id: int
    name: str
    color: PlayerColor
    is_ai: bool = False

    def to_player(self) -> Player:
        return Player(self.player_id, self.name, color=self.color, is_ai=self.is_ai)


class ActionPayload(BaseModel):
    tile_id: Optional[int] = None
    toast_id: Optional[int] = None
    players: Optional[List[RosterEntry]] = None


class ActionRequest(BaseModel):
    """Inbound action envelope as relayed by the transport."""

    action: str
    payload: Optional[ActionPayload] = None


class HeldCardView(BaseModel):
    card_id: int
    deck_type: str
    text: str


class PlayerView(BaseModel):
    player_id: int
    name: str
    color: str
    is_ai: bool
    cash: int
    net_worth: int
    position: int
    in_jail: bool
    jail_turns: int
    held_cards: List[HeldCardView] = Field(default_factory=list)
    is_bankrupt: bool
    properties: List[int] = Field(default_factory=list)


class TileView(BaseModel):
    position: int
    name: str
    space_type: str
    price: Optional[int] = None
    color_group: Optional[str] = None
    owner_id: Optional[int] = None
    houses: int = 0
    is_mortgaged: bool = False


class DeckView(BaseModel):
    chance: int
    community_chest: int


class PendingDebtView(BaseModel):
    debtor_id: int
    creditor_id: Optional[int] = None
    amount: int
    reason: str


class RentDetailsView(BaseModel):
    position: int
    tile_name: str
    owner_id: int
    owner_name: str
    base_rent: int
    house_count: int
    is_hotel: bool
    total_rent: int
    calculation: str


class DrawnCardView(BaseModel):
    deck_type: str
    card_id: int
    text: str
    kind: str
    value: int


class ToastView(BaseModel):
    toast_id: int
    message: str
    toast_type: str


class GameSnapshot(BaseModel):
    version: int
    game_status: str
    turn_phase: str
    current_player_id: Optional[int] = None
    dice: List[int]
    last_dice_total: int
    consecutive_doubles: int
    rolled_doubles: bool
    players: List[PlayerView]
    tiles: List[TileView]
    decks: DeckView
    pending_debt: Optional[PendingDebtView] = None
    rent_details: Optional[RentDetailsView] = None
    drawn_card: Optional[DrawnCardView] = None
    messages: List[str] = Field(default_factory=list)
    toasts: List[ToastView] = Field(default_factory=list)
    ui_error: Optional[str] = None
    winner_id: Optional[int] = None
