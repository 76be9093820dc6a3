"""Activated abilities.

An activated ability is written "cost: effect". Activation checks the
source, the ability index, the tap requirement and mana, then pays and
resolves. Every check happens before anything is paid, so a rejected
activation leaves the game exactly as it was.

Abilities are indexed among the card's activated abilities only; mana
abilities belong to the mana ledger and are not counted.
"""
from typing import TYPE_CHECKING

from ..mana import auto_tap_lands, available_mana, refresh_mana_pool, untapped_lands
from ..results import ActionResult
from ..types import PlayerKey, Zone
from .parser import activated_abilities
from .resolver import resolve_effect

if TYPE_CHECKING:
    from ..objects import CardInstance
    from ..state import GameState


def activate_ability(
    card: "CardInstance",
    index: int,
    owner: PlayerKey,
    state: "GameState",
) -> ActionResult:
    """
    Activate one of a permanent's activated abilities.

    A land paying for its own ability is never tapped for that mana.

    Args:
        card: The permanent with the ability
        index: Index into the card's activated abilities
        owner: The activating player
        state: The game state

    Returns:
        ActionResult with the effect message, or the rejection reason
    """
    if card.zone is not Zone.BATTLEFIELD or card.controller is not owner:
        return ActionResult.illegal("Card is not on your battlefield")

    abilities = activated_abilities(card)
    if index < 0 or index >= len(abilities):
        return ActionResult.illegal("Invalid ability")
    ability = abilities[index]

    if ability.requires_tap and card.tapped:
        return ActionResult.illegal("Card is already tapped")

    cost = ability.cost.mana_cost
    exclude = (card.instance_id,)
    pool = available_mana(state, owner, exclude=exclude)
    if cost.cmc > pool.total() or not pool.can_pay(cost):
        return ActionResult.illegal(f"Not enough mana! Need {cost.cmc}, have {pool.total()}")
    if len(untapped_lands(state, owner, exclude)) < cost.cmc:
        return ActionResult.illegal("Failed to pay mana cost")

    auto_tap_lands(state, owner, cost.cmc, exclude=exclude)
    if ability.requires_tap:
        card.tapped = True
        refresh_mana_pool(state, owner)

    state.log(f"{owner.display_name} activated {card.name}: {ability.text}")
    message = resolve_effect(ability.effect, card, owner, state)
    return ActionResult.ok(message or f"{card.name} activated ability")
