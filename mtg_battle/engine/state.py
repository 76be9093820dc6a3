"""MTG Battle - Game State

The GameState is the single explicit state object for one game. Every
engine function receives it as a parameter; there is no module-level
game.

Cards are stored in an arena (instance id -> CardInstance) and each
PlayerState zone is a list of ids into that arena.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .combat import CombatState
from .objects import CardInstance
from .player import PlayerState
from .types import InstanceId, Phase, PlayerKey, Zone

logger = logging.getLogger("mtg_battle.engine")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class GameResult:
    """
    Result of a finished game.

    Attributes:
        winner: The winning seat, or None for a draw
        reason: How the game ended ("life", "decked", "concede", "turn_limit")
        turns_played: Turn number when the game ended
        final_life: Life totals keyed by seat value
    """
    winner: Optional[PlayerKey] = None
    reason: str = ""
    turns_played: int = 0
    final_life: Dict[str, int] = field(default_factory=dict)

    @property
    def loser(self) -> Optional[PlayerKey]:
        return self.winner.opponent if self.winner else None

    @property
    def is_draw(self) -> bool:
        return self.winner is None


@dataclass
class GameState:
    """
    Complete state of one game.

    Attributes:
        players: PlayerState per seat
        cards: Arena of every card instance in the game
        turn_number: Incremented on every turn-owner switch
        phase: Current phase
        turn_owner: Seat whose turn it is
        game_over: Set only by the win-condition checker
        result: Populated when game_over is set
        combat: Pending attackers and blocks for the current combat
        messages: Game log, in the order events happened
    """
    players: Dict[PlayerKey, PlayerState] = field(default_factory=dict)
    cards: Dict[InstanceId, CardInstance] = field(default_factory=dict)
    turn_number: int = 1
    phase: Phase = Phase.BEGINNING
    turn_owner: PlayerKey = PlayerKey.PLAYER
    game_over: bool = False
    result: Optional[GameResult] = None
    combat: CombatState = field(default_factory=CombatState)
    messages: List[str] = field(default_factory=list)
    _next_instance: int = 1

    @classmethod
    def new(cls, starting_life: int = 20,
            first_player: PlayerKey = PlayerKey.PLAYER) -> "GameState":
        """Create an empty two-player state."""
        players = {key: PlayerState(key=key, life=starting_life) for key in PlayerKey}
        return cls(players=players, turn_owner=first_player)

    # =========================================================================
    # ACCESS
    # =========================================================================

    def player(self, key: PlayerKey) -> PlayerState:
        return self.players[key]

    def card(self, instance_id: InstanceId) -> CardInstance:
        """
        Get a card instance from the arena.

        Raises:
            KeyError: If the id is not in the arena
        """
        return self.cards[instance_id]

    def find_card(self, instance_id: InstanceId) -> Optional[CardInstance]:
        return self.cards.get(instance_id)

    def cards_in(self, key: PlayerKey, zone: Zone) -> List[CardInstance]:
        """Instances in one of a player's zones, in zone order."""
        return [self.cards[i] for i in self.players[key].zone_list(zone)]

    def battlefield_cards(self, key: PlayerKey) -> List[CardInstance]:
        return self.cards_in(key, Zone.BATTLEFIELD)

    def creatures(self, key: PlayerKey) -> List[CardInstance]:
        return [c for c in self.battlefield_cards(key) if c.is_creature]

    def next_instance_id(self) -> InstanceId:
        """Allocate a unique instance id."""
        instance_id = f"c{self._next_instance}"
        self._next_instance += 1
        return instance_id

    # =========================================================================
    # LOGGING
    # =========================================================================

    def log(self, message: str, level: str = "info") -> None:
        """
        Record a game event.

        Args:
            message: The message shown in the game log
            level: Log level ("info", "debug", "warning", "error")
        """
        if level != "debug":
            self.messages.append(message)
        logger.log(
            _LOG_LEVELS.get(level, logging.INFO),
            "Turn %d [%s]: %s", self.turn_number, self.phase.value, message,
        )
