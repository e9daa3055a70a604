"""
Debt settlement and bankruptcy.

Every payment that can fail (rent, tax, fines, card charges) goes through
``create_debt``. A debt the debtor cannot cover is parked on the state as the
single ``pending_debt`` until it is paid or the debtor goes bankrupt.
"""

import logging
from typing import Optional

from monopoly_engine.cards import return_card
from monopoly_engine.economy import can_pay
from monopoly_engine.game import GameState, PendingDebt, TurnPhase
from monopoly_engine.notifications import ToastType
from monopoly_engine.player import PlayerState, PropertyOwnership

logger = logging.getLogger(__name__)


def _creditor_label(state: GameState, creditor_id: Optional[int]) -> str:
    creditor = state.get_player(creditor_id)
    return creditor.name if creditor else "the bank"


def _transfer(state: GameState, debtor: PlayerState, creditor_id: Optional[int], amount: int) -> None:
    debtor.cash -= amount
    creditor = state.get_player(creditor_id)
    if creditor is not None:
        creditor.cash += amount


def create_debt(
    state: GameState,
    debtor: PlayerState,
    creditor_id: Optional[int],
    amount: int,
    reason: str,
) -> None:
    """
    Charge ``amount`` to ``debtor``.

    If the debtor can pay, the money moves immediately and the turn resumes.
    Otherwise the debt is recorded and the game waits in
    BANKRUPTCY_RESOLUTION for the debtor to raise funds or give up.

    Args:
        state: Draft state being reduced
        debtor: Paying player (a player object of ``state``)
        creditor_id: Receiving player, or None for the bank
        amount: Amount owed
        reason: Short description shown to players
    """
    target = _creditor_label(state, creditor_id)

    if can_pay(debtor.cash, amount):
        _transfer(state, debtor, creditor_id, amount)
        state.log(f"{debtor.name} paid ${amount} to {target} ({reason}).")
        state.resume_turn()
        return

    state.pending_debt = PendingDebt(debtor.player_id, creditor_id, amount, reason)
    state.turn_phase = TurnPhase.BANKRUPTCY_RESOLUTION
    state.log(f"{debtor.name} owes ${amount} to {target} ({reason}) but only has ${debtor.cash}.")
    state.notify(f"{debtor.name} must raise ${amount - debtor.cash} or declare bankruptcy.", ToastType.ERROR)
    logger.debug(f"Pending debt: player {debtor.player_id} owes {amount} to {creditor_id} for {reason}")


def pay_debt(state: GameState) -> bool:
    """
    Settle the pending debt if the debtor can now afford it.

    Returns False when there is nothing to settle. An unaffordable
    attempt is rejected with an explanation and leaves the debt in place.
    """
    debt = state.pending_debt
    if debt is None:
        return False

    debtor = state.get_player(debt.debtor_id)
    if debtor is None:
        return False

    if not can_pay(debtor.cash, debt.amount):
        state.reject(debtor.name, f"Not enough cash to pay ${debt.amount}. Mortgage or sell to raise funds.")
        return True

    _transfer(state, debtor, debt.creditor_id, debt.amount)
    state.pending_debt = None
    state.log(f"{debtor.name} paid ${debt.amount} to {_creditor_label(state, debt.creditor_id)} ({debt.reason}).")
    state.notify(f"{debtor.name} settled the debt.", ToastType.SUCCESS)
    state.resume_turn()
    return True


def declare_bankruptcy(state: GameState) -> bool:
    """
    Liquidate the debtor of the pending debt.

    Against a player, every tile passes to the creditor with its mortgage
    flag intact and its buildings removed, and all remaining cash goes with
    it. Against the bank, tiles return to the bank clear of buildings and
    mortgages. Held keep cards go back to the bottom of their decks. The
    turn always ends.
    """
    debt = state.pending_debt
    if debt is None:
        return False

    debtor = state.get_player(debt.debtor_id)
    if debtor is None:
        return False

    creditor = state.get_player(debt.creditor_id)
    if creditor is not None and creditor.is_bankrupt:
        creditor = None

    for pos in sorted(debtor.properties):
        record = state.property_ownership[pos]
        if creditor is not None:
            state.property_ownership[pos] = PropertyOwnership(
                owner_id=creditor.player_id, houses=0, is_mortgaged=record.is_mortgaged
            )
            creditor.properties.add(pos)
        else:
            state.property_ownership[pos] = PropertyOwnership()

    if creditor is not None:
        creditor.cash += max(debtor.cash, 0)

    for held in debtor.held_cards:
        state.set_deck(held.deck_type, return_card(state.get_deck(held.deck_type), held.card_id))

    debtor.cash = 0
    debtor.properties = set()
    debtor.held_cards = []
    debtor.in_jail = False
    debtor.jail_turns = 0
    debtor.is_bankrupt = True

    state.pending_debt = None
    state.rent_details = None
    state.rolled_doubles = False
    state.consecutive_doubles = 0
    state.turn_phase = TurnPhase.ENDED

    target = creditor.name if creditor else "the bank"
    state.log(f"{debtor.name} is bankrupt. Assets go to {target}.")
    state.notify(f"{debtor.name} went bankrupt.", ToastType.ERROR)
    logger.info(f"Player {debtor.player_id} bankrupt to {creditor.player_id if creditor else 'bank'}")
    return True
