"""MTG Battle - Turn/Phase State Machine

Each turn runs Beginning -> Main 1 -> Combat -> Main 2 -> End, then the
other player takes a turn starting at Beginning. The machine has no
terminal phase; the game ends only when the win-condition checker sets
the game-over flag.

Entering Beginning untaps the turn owner's permanents, clears summoning
sickness, resets the land counter, recomputes mana and draws a card
(except on the first turn of the game).
"""
from typing import List, Optional, TYPE_CHECKING

from .combat import resolve_combat
from .keywords.static import get_registry
from .mana import refresh_mana_pool
from .types import Keyword, Phase, PHASE_ORDER, PlayerKey
from .zones import draw_card

if TYPE_CHECKING:
    from .objects import CardInstance
    from .state import GameState


PHASE_SEQUENCE = PHASE_ORDER


def next_phase(phase: Phase) -> Optional[Phase]:
    """The phase after `phase` in the same turn, or None after End."""
    index = PHASE_SEQUENCE.index(phase)
    if index + 1 < len(PHASE_SEQUENCE):
        return PHASE_SEQUENCE[index + 1]
    return None


def begin_turn(state: "GameState") -> None:
    """Run the Beginning phase actions for the current turn owner."""
    key = state.turn_owner
    player = state.player(key)
    state.phase = Phase.BEGINNING

    for card in state.battlefield_cards(key):
        card.tapped = False
        card.summoning_sick = False
    player.lands_played_this_turn = 0
    refresh_mana_pool(state, key)
    state.log(f"--- Turn {state.turn_number}: {key.display_name} ---")

    if state.turn_number > 1:
        draw_card(state, key)


def end_turn(state: "GameState") -> None:
    """Pass the turn to the other player and start their Beginning phase."""
    state.combat.clear()
    state.turn_owner = state.turn_owner.opponent
    state.turn_number += 1
    begin_turn(state)


def advance_phase(state: "GameState") -> List[str]:
    """
    Move to the next phase.

    Leaving Combat resolves pending combat damage; leaving End ends the
    turn.

    Returns:
        Messages produced by combat damage, if any
    """
    if state.game_over:
        return []

    messages: List[str] = []
    if state.phase is Phase.COMBAT:
        messages = resolve_combat(state)
        if state.game_over:
            return messages

    following = next_phase(state.phase)
    if following is None:
        end_turn(state)
    else:
        state.phase = following
        state.log(f"{state.turn_owner.display_name} moved to {following.display_name}", "debug")
    return messages


# =============================================================================
# Timing
# =============================================================================

def timing_reason(card: "CardInstance", key: PlayerKey, state: "GameState") -> Optional[str]:
    """
    Check whether `key` may play `card` right now.

    Lands and sorcery-speed cards need the player's own main phase.
    Instants and Flash cards can be played in any phase.

    Returns:
        None if the timing is legal, otherwise the rejection reason
    """
    definition = card.definition
    if definition.is_instant or _has_flash(card):
        return None

    own_main = state.turn_owner is key and state.phase.is_main
    if own_main:
        return None
    if state.turn_owner is not key:
        return "Not your turn"
    if definition.is_land:
        return "Lands can only be played during your main phase"
    return "Can only be cast during your main phase"


def _has_flash(card: "CardInstance") -> bool:
    return Keyword.FLASH in get_registry().match(card.definition.text)
