"""
Chance and Community Chest card system.

Decks are plain sequences of card ids kept on the game state and used as
circular queues: a drawn card goes to the back of its deck, except keep cards,
which stay out of circulation until their holder surrenders them.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Collection, Dict, List, Optional, Sequence, Tuple


class DeckType(str, Enum):
    """The two card decks."""

    CHANCE = "chance"
    COMMUNITY_CHEST = "community_chest"


class CardKind(str, Enum):
    """Types of card effects."""

    MOVE = "move"  # absolute position
    MOVE_REL = "move_rel"
    MONEY = "money"  # positive collects, negative pays the bank
    GOTO_JAIL = "goto_jail"
    GET_OUT_JAIL = "get_out_jail"
    COLLECT_FROM_ALL = "collect_from_all"
    PAY_TO_ALL = "pay_to_all"  # declared for completeness, no catalogue card uses it
    REPAIRS = "repairs"


@dataclass(frozen=True)
class Card:
    """An immutable catalogue entry."""

    card_id: int
    text: str
    kind: CardKind
    value: int = 0
    house_cost: int = 0
    hotel_cost: int = 0

    @property
    def is_keep(self) -> bool:
        return self.kind == CardKind.GET_OUT_JAIL


@dataclass(frozen=True)
class DrawnCard:
    """A card drawn this turn, waiting for the player to acknowledge it."""

    deck_type: DeckType
    card: Card


CHANCE_CARDS: Tuple[Card, ...] = (
    Card(1, "Advance to GO. Collect $200.", CardKind.MOVE, 0),
    Card(2, "Advance to Pacific Avenue.", CardKind.MOVE, 31),
    Card(3, "Take a trip to Reading Railroad.", CardKind.MOVE, 5),
    Card(4, "Bank pays you a dividend of $50.", CardKind.MONEY, 50),
    Card(5, "Get out of jail free. Keep this card.", CardKind.GET_OUT_JAIL),
    Card(6, "Go back 3 spaces.", CardKind.MOVE_REL, -3),
    Card(7, "Go directly to jail. Do not pass GO.", CardKind.GOTO_JAIL),
    Card(8, "Make general repairs on all your property.", CardKind.REPAIRS, house_cost=25, hotel_cost=100),
    Card(9, "Speeding fine. Pay $15.", CardKind.MONEY, -15),
    Card(10, "Advance to Indiana Avenue.", CardKind.MOVE, 23),
    Card(11, "You have won a prize. Collect $100.", CardKind.MONEY, 100),
    Card(12, "Advance to Atlantic Avenue.", CardKind.MOVE, 26),
)

COMMUNITY_CHEST_CARDS: Tuple[Card, ...] = (
    Card(101, "Advance to GO. Collect $200.", CardKind.MOVE, 0),
    Card(102, "Bank error in your favor. Collect $200.", CardKind.MONEY, 200),
    Card(103, "Pay hospital fees of $100.", CardKind.MONEY, -100),
    Card(104, "Pay your insurance premium of $50.", CardKind.MONEY, -50),
    Card(105, "Go directly to jail. Do not pass GO.", CardKind.GOTO_JAIL),
    Card(106, "It is your birthday. Collect $10 from every player.", CardKind.COLLECT_FROM_ALL, 10),
    Card(107, "You inherit $100.", CardKind.MONEY, 100),
    Card(108, "From sale of stock you get $50.", CardKind.MONEY, 50),
    Card(109, "Income tax refund. Collect $20.", CardKind.MONEY, 20),
    Card(110, "Receive a $25 consultancy fee.", CardKind.MONEY, 25),
    Card(111, "Get out of jail free. Keep this card.", CardKind.GET_OUT_JAIL),
    Card(112, "You have won second prize in a beauty contest. Collect $10.", CardKind.MONEY, 10),
    Card(113, "You are assessed for street repairs.", CardKind.REPAIRS, house_cost=40, hotel_cost=115),
    Card(114, "Life insurance matures. Collect $100.", CardKind.MONEY, 100),
    Card(115, "Pay school fees of $50.", CardKind.MONEY, -50),
    Card(116, "Holiday expenses. Pay $100.", CardKind.MONEY, -100),
)

_CATALOGS: Dict[DeckType, Tuple[Card, ...]] = {
    DeckType.CHANCE: CHANCE_CARDS,
    DeckType.COMMUNITY_CHEST: COMMUNITY_CHEST_CARDS,
}

_BY_ID: Dict[DeckType, Dict[int, Card]] = {
    deck_type: {card.card_id: card for card in cards} for deck_type, cards in _CATALOGS.items()
}


def get_catalog(deck_type: DeckType) -> Tuple[Card, ...]:
    return _CATALOGS[deck_type]


def get_card(deck_type: DeckType, card_id: int) -> Optional[Card]:
    """Resolve a card id against its deck's catalogue."""
    return _BY_ID[deck_type].get(card_id)


def shuffle_deck(deck_type: DeckType, rng: random.Random, exclude: Collection[int] = ()) -> List[int]:
    """
    Build a freshly shuffled deck of card ids.

    ``exclude`` lists ids that are out of circulation (keep cards held by players).
    """
    ids = [card.card_id for card in get_catalog(deck_type) if card.card_id not in exclude]
    rng.shuffle(ids)
    return ids


def draw_card(
    deck: Sequence[int],
    deck_type: DeckType,
    rng: random.Random,
    held_ids: Collection[int] = (),
) -> Tuple[Optional[Card], List[int]]:
    """
    Draw the top card of a deck.

    Returns the card and the deck that remains. An exhausted deck is reshuffled
    from the catalogue first. The drawn id goes to the back of the deck unless
    it is a keep card.
    """
    ids = list(deck) if deck else shuffle_deck(deck_type, rng, exclude=held_ids)
    if not ids:
        return None, ids

    card = get_card(deck_type, ids[0])
    if card is None:
        return None, ids

    remaining = ids[1:]
    if not card.is_keep:
        remaining.append(card.card_id)
    return card, remaining


def return_card(deck: Sequence[int], card_id: int) -> List[int]:
    """Put a surrendered keep card back at the bottom of its deck."""
    return [*deck, card_id]
