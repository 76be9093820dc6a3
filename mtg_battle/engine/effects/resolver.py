"""Effect resolution.

Applies one parsed Effect to the game. Each branch logs what happened and
returns the same message. CUSTOM effects are a documented rules gap: they
are logged at WARNING level and change nothing.
"""
from typing import Optional, TYPE_CHECKING

from ..sba import check_creature_deaths, check_game_over
from ..targeting import choose_target, is_legal_target
from ..types import EffectKind, PlayerKey, Zone
from ..zones import create_token, destroy_permanent, draw_cards
from .descriptors import Effect

if TYPE_CHECKING:
    from ..objects import CardInstance
    from ..state import GameState


def resolve_effect(
    effect: Effect,
    source: "CardInstance",
    owner: PlayerKey,
    state: "GameState",
    target: Optional["CardInstance"] = None,
) -> str:
    """
    Resolve an effect for its owner.

    Args:
        effect: The effect to apply
        source: The card the effect comes from
        owner: The player controlling the effect
        state: The game state
        target: Explicit target for "target creature" effects; chosen
            automatically when None

    Returns:
        Message describing the outcome
    """
    if state.game_over:
        return ""

    kind = effect.kind
    if kind is EffectKind.DAMAGE:
        return _resolve_damage(effect, source, owner, state, target)
    if kind is EffectKind.DESTROY:
        return _resolve_destroy(effect, source, owner, state, target)
    if kind is EffectKind.BUFF:
        return _resolve_buff(effect, source, owner, state, target)

    if kind is EffectKind.DRAW:
        drawn = draw_cards(state, owner, effect.amount)
        message = f"{owner.display_name} drew {drawn} card(s)"
    elif kind is EffectKind.GAIN_LIFE:
        state.player(owner).gain_life(effect.amount)
        message = f"{owner.display_name} gained {effect.amount} life"
    elif kind is EffectKind.CREATE_TOKEN:
        for _ in range(effect.amount):
            create_token(state, owner, effect.token_name, effect.power, effect.toughness)
        message = (f"{source.name} creates {effect.amount} {effect.power}/{effect.toughness} "
                   f"{effect.token_name} token(s)")
    else:
        message = f"{source.name}: unsupported ability ignored ({effect.text})"
        state.log(message, "warning")
        return message

    state.log(message)
    return message


def _pick(effect: Effect, owner: PlayerKey, state: "GameState",
          target: Optional["CardInstance"]) -> Optional["CardInstance"]:
    if target is not None and is_legal_target(state, owner, effect, target):
        return target
    return choose_target(state, owner, effect)


def _resolve_damage(effect, source, owner, state, target) -> str:
    if effect.target == "creature":
        creature = _pick(effect, owner, state, target)
        if creature is None:
            return _fizzle(state, f"{source.name} has no legal target")
        creature.toughness -= effect.amount
        message = f"{source.name} dealt {effect.amount} damage to {creature.name}"
        state.log(message)
        check_creature_deaths(state)
        return message

    opponent = owner.opponent
    state.player(opponent).lose_life(effect.amount)
    message = f"{source.name} dealt {effect.amount} damage to {opponent.display_name}"
    state.log(message)
    check_game_over(state)
    return message


def _resolve_destroy(effect, source, owner, state, target) -> str:
    victim = _pick(effect, owner, state, target)
    if victim is None:
        return _fizzle(state, f"{source.name} has no legal target to destroy")
    message = f"{source.name} targets {victim.name}"
    state.log(message)
    destroy_permanent(state, victim.instance_id)
    return message


def _resolve_buff(effect, source, owner, state, target) -> str:
    if effect.target == "self":
        creature = source if source.zone is Zone.BATTLEFIELD and source.is_creature else None
    else:
        creature = _pick(effect, owner, state, target)
    if creature is None:
        return _fizzle(state, f"{source.name} has no creature to pump")
    creature.power = (creature.power or 0) + effect.power
    creature.toughness = (creature.toughness or 0) + effect.toughness
    message = f"{creature.name} gets {effect.power:+d}/{effect.toughness:+d}"
    state.log(message)
    check_creature_deaths(state)
    return message


def _fizzle(state: "GameState", message: str) -> str:
    state.log(message)
    return message
