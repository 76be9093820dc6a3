"""Static keyword application and triggered abilities.

Keyword flags are applied once, when a permanent enters the battlefield,
and stay for as long as it remains there (zone changes clear them).
Enters-the-battlefield and attack triggers resolve immediately, in the
order they appear in the rules text.
"""
from typing import List, TYPE_CHECKING

from ..keywords.static import get_registry
from ..types import PlayerKey, TriggerEvent
from .parser import static_abilities, triggered_abilities
from .resolver import resolve_effect

if TYPE_CHECKING:
    from ..objects import CardInstance
    from ..state import GameState


def apply_static(card: "CardInstance", state: "GameState") -> List[str]:
    """
    Set keyword flags on a permanent from its rules text.

    Returns:
        Reminder messages, one per keyword applied
    """
    registry = get_registry()
    messages = []
    for ability in static_abilities(card):
        card.keywords.add(ability.keyword)
        reminder = registry.reminder_text(ability.keyword)
        messages.append(f"{card.name} has {ability.name}: {reminder}" if reminder else
                        f"{card.name} has {ability.name}")
    for message in messages:
        state.log(message, "debug")
    return messages


def _fire(card: "CardInstance", owner: PlayerKey, state: "GameState",
          event: TriggerEvent) -> List[str]:
    messages = []
    for ability in triggered_abilities(card, event):
        if state.game_over:
            break
        message = resolve_effect(ability.effect, card, owner, state)
        if message:
            messages.append(message)
    return messages


def trigger_etb(card: "CardInstance", owner: PlayerKey, state: "GameState") -> List[str]:
    """Resolve every enters-the-battlefield trigger on a card."""
    return _fire(card, owner, state, TriggerEvent.ENTERS_BATTLEFIELD)


def trigger_attack(card: "CardInstance", owner: PlayerKey, state: "GameState") -> List[str]:
    """Resolve every attack trigger on a card."""
    return _fire(card, owner, state, TriggerEvent.ATTACKS)
