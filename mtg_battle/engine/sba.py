"""MTG Battle - Win-Condition Checker

Runs after every life-total change and after forced draws. The first
loss condition found ends the game; once the game is over nothing here
changes state again.
"""
from typing import List, Optional, TYPE_CHECKING

from .state import GameResult
from .types import PlayerKey, Zone

if TYPE_CHECKING:
    from .state import GameState


def _finish(state: "GameState", winner: Optional[PlayerKey], reason: str) -> None:
    state.game_over = True
    state.result = GameResult(
        winner=winner,
        reason=reason,
        turns_played=state.turn_number,
        final_life={key.value: p.life for key, p in state.players.items()},
    )
    state.combat.clear()
    if winner is None:
        state.log(f"Game over: draw ({reason})")
    elif winner is PlayerKey.PLAYER:
        state.log(f"You win! ({reason})")
    else:
        state.log(f"AI wins! ({reason})")


def lose_game(state: "GameState", loser: PlayerKey, reason: str) -> bool:
    """
    End the game with `loser` losing.

    Returns:
        False if the game was already over (nothing changes)
    """
    if state.game_over:
        return False
    _finish(state, loser.opponent, reason)
    return True


def check_game_over(state: "GameState") -> bool:
    """
    Check life totals and end the game if a player is at 0 or less.

    Both players at 0 or less at the same time is a draw.

    Returns:
        True if the game is over
    """
    if state.game_over:
        return True

    dead = [key for key, player in state.players.items() if player.life <= 0]
    if not dead:
        return False
    if len(dead) == 2:
        _finish(state, None, "life")
    else:
        _finish(state, dead[0].opponent, "life")
    return True


def check_creature_deaths(state: "GameState") -> List[str]:
    """Destroy every creature on the battlefield with toughness 0 or less."""
    from .zones import destroy_permanent

    died = []
    for key in PlayerKey:
        for card in list(state.creatures(key)):
            if card.toughness is not None and card.toughness <= 0 and card.zone is Zone.BATTLEFIELD:
                name = card.name
                if destroy_permanent(state, card.instance_id):
                    died.append(name)
    return died


def end_in_draw(state: "GameState", reason: str) -> bool:
    """End the game with no winner (turn limit)."""
    if state.game_over:
        return False
    _finish(state, None, reason)
    return True
