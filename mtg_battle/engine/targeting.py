"""MTG Battle - Targeting

Legal-target checks and the automatic target choices used when an effect
says "target creature" and no explicit target was given.

Hexproof creatures can only be targeted by their controller's effects.
Indestructible permanents are never chosen for "destroy".
"""
from typing import List, Optional, TYPE_CHECKING

from .keywords.static import get_registry
from .types import PlayerKey, Zone

if TYPE_CHECKING:
    from .effects.descriptors import Effect
    from .objects import CardInstance
    from .state import GameState


def can_target(card: "CardInstance", controller: PlayerKey) -> bool:
    """Check whether `controller`'s effect may target a permanent."""
    if card.zone is not Zone.BATTLEFIELD:
        return False
    return get_registry().can_be_targeted_by(card, controller)


def legal_targets(state: "GameState", controller: PlayerKey, effect: "Effect") -> List["CardInstance"]:
    """
    Permanents an effect may target.

    Harmful effects only look at the opponent's permanents; buffs only at
    the controller's own creatures.
    """
    from .types import EffectKind

    if effect.kind is EffectKind.BUFF:
        pool = state.creatures(controller)
    elif effect.target == "permanent":
        pool = state.battlefield_cards(controller.opponent)
    else:
        pool = state.creatures(controller.opponent)

    targets = [c for c in pool if can_target(c, controller)]
    if effect.kind is EffectKind.DESTROY:
        targets = [c for c in targets if not c.is_indestructible]
    return targets


def is_legal_target(state: "GameState", controller: PlayerKey, effect: "Effect",
                    card: "CardInstance") -> bool:
    return card in legal_targets(state, controller, effect)


def choose_target(state: "GameState", controller: PlayerKey,
                  effect: "Effect") -> Optional["CardInstance"]:
    """
    Pick a target for an effect automatically.

    Damage goes to the biggest creature it kills, buffs to the strongest
    own creature, destroy to the most expensive permanent.

    Returns:
        The chosen permanent, or None if nothing is targetable
    """
    from .types import EffectKind

    targets = legal_targets(state, controller, effect)
    if not targets:
        return None

    if effect.kind is EffectKind.DAMAGE:
        killable = [c for c in targets if (c.toughness or 0) <= effect.amount]
        pool = killable or targets
        return max(pool, key=lambda c: ((c.power or 0), c.cmc))
    if effect.kind is EffectKind.BUFF:
        return max(targets, key=lambda c: ((c.power or 0) + (c.toughness or 0), not c.tapped))
    return max(targets, key=lambda c: (c.cmc, c.power or 0))
